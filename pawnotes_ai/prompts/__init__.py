from .modes import (
    DEFAULT_ACTION,
    MODES,
    Mode,
    build_system_instruction,
    compose_prompt,
    get_mode,
)
from .options import ModeOptions, language_name

__all__ = [
    "DEFAULT_ACTION",
    "MODES",
    "Mode",
    "ModeOptions",
    "build_system_instruction",
    "compose_prompt",
    "get_mode",
    "language_name",
]
