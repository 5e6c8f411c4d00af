"""Per-mode option models.

The browser sends options as flat JSON fields in camelCase (``storyLength``,
``rapLength``); each model accepts either the camelCase alias or the Python
field name. Every option has a default so a bare ``{"prompt": ...}`` request is
always valid.
"""

from typing import Literal, Optional, Set

from pydantic import BaseModel, ConfigDict, Field

Length = Literal["short", "medium", "long"]
Complexity = Literal["simple", "medium", "complex"]
Intensity = Literal["mild", "medium", "spicy"]

LANGUAGE_NAMES = {
    "en": "English",
    "english": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "hi": "Hindi",
    "bn": "Bengali",
    "te": "Telugu",
    "mr": "Marathi",
    "ta": "Tamil",
    "ur": "Urdu",
    "gu": "Gujarati",
    "kn": "Kannada",
    "ml": "Malayalam",
    "pa": "Punjabi",
    "zh-cn": "Chinese",
    "zh": "Chinese",
    "ja": "Japanese",
    "ru": "Russian",
    "ar": "Arabic",
    "pt": "Portuguese",
    "it": "Italian",
}


def language_name(language: str) -> str:
    """Map a language code (``es``, ``zh-CN``) to its English name.

    Unknown values are passed through, so ``"Klingon"`` stays ``"Klingon"``.
    """
    cleaned = language.strip()
    return LANGUAGE_NAMES.get(cleaned.lower(), cleaned)


class ModeOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    language: str = Field("en", min_length=1, max_length=40)

    @property
    def language_label(self) -> str:
        return language_name(self.language)

    @classmethod
    def known_fields(cls) -> Set[str]:
        names = set()
        for name, info in cls.model_fields.items():
            names.add(name)
            if info.alias:
                names.add(info.alias)
        return names


class StoryOptions(ModeOptions):
    story_length: Length = Field("medium", alias="storyLength")
    tone: str = "whimsical"
    genre: str = "fantasy"
    style: str = "narrative"
    character: Optional[str] = None
    perspective: Literal["first-person", "second-person", "third-person"] = "third-person"
    pacing: Literal["slow", "balanced", "fast"] = "balanced"
    theme: Optional[str] = None
    setting: Optional[str] = None


class RapOptions(ModeOptions):
    theme: Optional[str] = None
    explicit: bool = False
    mood: str = "hype"
    flow: str = "smooth"
    tone: str = "confident"
    profanity: bool = False
    complexity: Complexity = "medium"
    rap_length: Length = Field("medium", alias="rapLength")
    cultural: Optional[str] = None


class GhostOptions(ModeOptions):
    tone: Literal["confident", "authoritative", "poetic", "professional", "casual"] = "confident"


class HaikuOptions(ModeOptions):
    style: Literal["traditional", "free"] = "traditional"


class HumanizeOptions(ModeOptions):
    tone: str = "friendly"
    complexity: Complexity = "simple"
    contractions: bool = True
    empathy: Literal["low", "medium", "high"] = "medium"
    humor: Literal["none", "light", "moderate"] = "none"
    output_length: Length = Field("medium", alias="outputLength")


class CharacterOptions(ModeOptions):
    character: str = Field("Sherlock Holmes", min_length=1, max_length=100)


class GamificationOptions(ModeOptions):
    game_style: Literal["quest", "mission", "challenge", "boss-battle"] = Field("quest", alias="gameStyle")


class MythologyOptions(ModeOptions):
    myth_style: Literal["greek", "norse", "egyptian", "hindu", "japanese", "celtic"] = Field(
        "greek", alias="mythStyle"
    )


class IntensityOptions(ModeOptions):
    intensity: Intensity = "mild"
