"""Mode registry: action tag -> (options model, system-instruction builder).

Builders are pure functions of their options, so the same (action, options)
pair always yields the same instruction text.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Type

from pydantic import ValidationError as PydanticValidationError

from ..errors import ValidationError
from .options import (
    CharacterOptions,
    GamificationOptions,
    GhostOptions,
    HaikuOptions,
    HumanizeOptions,
    IntensityOptions,
    ModeOptions,
    MythologyOptions,
    RapOptions,
    StoryOptions,
)

logger = logging.getLogger(__name__)

DEFAULT_ACTION = "chat"

_LENGTHS = {
    "short": "Keep it short: around 100 words.",
    "medium": "Aim for a medium length: around 250 words.",
    "long": "Make it long and detailed: around 500 words.",
}

_INTENSITY = {
    "mild": "Keep it gentle and good-natured.",
    "medium": "Be witty with a bit of bite.",
    "spicy": "Go bold and sharp, but stay clever rather than cruel.",
}

_SAFETY = "Never use slurs, hate speech, threats, or attack anyone for who they are."


@dataclass(frozen=True)
class Mode:
    name: str
    build: Callable[[Any], str]
    options_model: Type[ModeOptions] = ModeOptions
    requires_prompt: bool = True
    localized: bool = True

    def parse_options(self, raw: Mapping[str, Any]) -> ModeOptions:
        unknown = sorted(set(raw) - self.options_model.known_fields())
        if unknown:
            logger.warning(f"Ignoring unknown options for '{self.name}' mode: {', '.join(unknown)}")
        try:
            return self.options_model.model_validate(dict(raw))
        except PydanticValidationError as exc:
            raise ValidationError(describe_validation_error(exc)) from exc

    def system_instruction(self, options: ModeOptions) -> str:
        instruction = self.build(options)
        if self.localized and options.language_label != "English":
            instruction += f" Respond in {options.language_label}."
        return instruction


def describe_validation_error(exc: PydanticValidationError) -> str:
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error.get("loc", ())) or "request"
    return f"Invalid value for '{field}': {error.get('msg', 'invalid value')}"


MODES: Dict[str, Mode] = {}


def register(name: str, options_model: Type[ModeOptions] = ModeOptions, **kwargs):
    def decorator(build: Callable[[Any], str]) -> Callable[[Any], str]:
        MODES[name] = Mode(name=name, build=build, options_model=options_model, **kwargs)
        return build

    return decorator


def get_mode(action: Any) -> Mode:
    """Unknown or non-string actions fall back to the chat mode."""
    if isinstance(action, str) and action in MODES:
        return MODES[action]
    logger.info(f"Unknown action {action!r}, falling back to '{DEFAULT_ACTION}'")
    return MODES[DEFAULT_ACTION]


def build_system_instruction(action: Any, options: Mapping[str, Any]) -> str:
    mode = get_mode(action)
    return mode.system_instruction(mode.parse_options(options))


def compose_prompt(system_instruction: str, prompt: str) -> str:
    return f"{system_instruction}\n\nUser: {prompt}"


@register("chat", localized=False)
def chat(options: ModeOptions) -> str:
    return (
        "You are a helpful AI assistant for a note-taking app called PawNotes. "
        "Help users with their notes, provide suggestions, and be friendly and encouraging."
    )


@register("translate", localized=False)
def translate(options: ModeOptions) -> str:
    return (
        f"You are a professional translator. Translate the following text to {options.language_label}. "
        "Only return the translated text, nothing else."
    )


@register("sticker", localized=False)
def sticker(options: ModeOptions) -> str:
    return (
        "You are a creative assistant that suggests fun animated stickers based on text. "
        "Respond with a single emoji that would make a good sticker for the given text. "
        "Only return the emoji, nothing else."
    )


@register("zodiac", localized=False)
def zodiac(options: ModeOptions) -> str:
    return (
        "You are a fun zodiac advisor for note-taking. Based on the zodiac sign provided, "
        "give a quirky and humorous advice about how to write notes today. Be creative and entertaining!"
    )


@register("story", StoryOptions, localized=False)
def story(options: StoryOptions) -> str:
    parts = [
        "You are a creative storyteller. Create an engaging, imaginative story based on the words "
        "and scenario provided. Make it interesting and fun to read.",
        f"Genre: {options.genre}. Tone: {options.tone}. Style: {options.style}.",
        f"Tell it in the {options.perspective} perspective with {options.pacing} pacing.",
    ]
    if options.character:
        parts.append(f"The main character is {options.character}.")
    if options.theme:
        parts.append(f"Explore the theme of {options.theme}.")
    if options.setting:
        parts.append(f"Set the story in {options.setting}.")
    parts.append(_LENGTHS[options.story_length])
    return " ".join(parts)


@register("rap", RapOptions)
def rap(options: RapOptions) -> str:
    parts = [
        "You are a skilled rap lyricist. Transform the user's notes into original rap lyrics "
        "with verses and a catchy hook.",
        f"Mood: {options.mood}. Flow: {options.flow}. Tone: {options.tone}.",
    ]
    if options.complexity == "simple":
        parts.append("Use simple, punchy rhymes.")
    elif options.complexity == "complex":
        parts.append("Use multisyllabic rhymes, internal rhymes and wordplay.")
    else:
        parts.append("Mix straightforward rhymes with some clever wordplay.")
    if options.theme:
        parts.append(f"Center the lyrics on the theme of {options.theme}.")
    if options.cultural:
        parts.append(f"Draw on {options.cultural} cultural references and style.")
    if options.explicit or options.profanity:
        parts.append("Mild profanity is allowed where it fits the flow. " + _SAFETY)
    else:
        parts.append("Keep the lyrics clean: no profanity.")
    parts.append(_LENGTHS[options.rap_length])
    return " ".join(parts)


@register("ghost", GhostOptions)
def ghost(options: GhostOptions) -> str:
    voices = {
        "confident": "confident and self-assured",
        "authoritative": "authoritative and expert",
        "poetic": "poetic and lyrical",
        "professional": "polished and professional",
        "casual": "relaxed and conversational",
    }
    return (
        "You are a ghost editor. Rewrite the user's notes so they read as "
        f"{voices[options.tone]}, keeping the original meaning and all key facts. "
        "Only return the rewritten text."
    )


@register("haiku", HaikuOptions)
def haiku(options: HaikuOptions) -> str:
    if options.style == "free":
        form = "a free-style haiku of three short lines, without strict syllable counting"
    else:
        form = "a traditional haiku with a 5-7-5 syllable structure and a seasonal reference"
    return f"You are a haiku poet. Transform the user's thoughts into {form}. Only return the haiku."


@register("humanize", HumanizeOptions)
def humanize(options: HumanizeOptions) -> str:
    parts = [
        "You rewrite text so it sounds natural and human, as if written by a thoughtful person "
        "rather than a machine. Keep the original meaning.",
        f"Tone: {options.tone}. Vocabulary complexity: {options.complexity}.",
        f"Show {options.empathy} empathy.",
    ]
    parts.append("Use contractions." if options.contractions else "Avoid contractions.")
    if options.humor != "none":
        parts.append(f"Add {options.humor} humor where it fits.")
    parts.append(_LENGTHS[options.output_length])
    parts.append("Only return the rewritten text.")
    return " ".join(parts)


@register("character", CharacterOptions)
def character(options: CharacterOptions) -> str:
    return (
        f"You are {options.character}. Rewrite the user's text entirely from your perspective, "
        "using your distinctive voice, vocabulary and mannerisms while keeping the original information."
    )


@register("gamification", GamificationOptions)
def gamification(options: GamificationOptions) -> str:
    framing = {
        "quest": "an epic quest with objectives, rewards and experience points",
        "mission": "a secret mission briefing with objectives and a countdown",
        "challenge": "a series of timed challenges with points and achievements",
        "boss-battle": "a boss battle where each task weakens the boss",
    }
    return (
        "You are a game master. Transform the user's boring text or to-do list into "
        f"{framing[options.game_style]}. Keep every real task recognizable."
    )


@register("mythology", MythologyOptions)
def mythology(options: MythologyOptions) -> str:
    return (
        f"You are a bard of {options.myth_style.capitalize()} mythology. Reimagine the user's text "
        "as an epic mythological tale with gods, heroes and omens, keeping its core events."
    )


@register("roast", IntensityOptions)
def roast(options: IntensityOptions) -> str:
    return (
        "You are a stand-up comedian doing a roast. Playfully roast the user's note or idea. "
        f"{_INTENSITY[options.intensity]} {_SAFETY}"
    )


@register("unfiltered")
def unfiltered(options: ModeOptions) -> str:
    return (
        "You are a brutally honest friend. Give your raw, unfiltered opinion of the user's note: "
        f"no sugar-coating, no corporate politeness, just candid feedback. {_SAFETY}"
    )


@register("confession")
def confession(options: ModeOptions) -> str:
    return (
        "You turn ordinary notes into dramatic, humorous confessions, as if the writer were "
        "admitting a guilty secret. Keep it light-hearted and fun."
    )


@register("anarchy")
def anarchy(options: ModeOptions) -> str:
    return (
        "You are a chaotic, rule-breaking creative writer. Rewrite the user's text with wild, "
        "unexpected twists, absurd humor and rebellious energy, ignoring conventional structure. "
        f"{_SAFETY}"
    )


@register("toxic", IntensityOptions)
def toxic(options: IntensityOptions) -> str:
    return (
        "You play an over-the-top, sarcastic critic in the style of a reality-TV judge. "
        f"Dramatically tear apart the user's note for comic effect. {_INTENSITY[options.intensity]} {_SAFETY}"
    )


@register("compliment", requires_prompt=False, localized=False)
def compliment(options: ModeOptions) -> str:
    return (
        "You are a philosophical poet who generates deeply thoughtful, poetic, and surprisingly "
        "profound compliments about mundane things. Create beautiful, artistic observations that "
        "find meaning in the ordinary."
    )


@register("summary", localized=False)
def summary(options: ModeOptions) -> str:
    return (
        "You are a helpful assistant that creates concise, meaningful summaries. Provide a summary "
        "in 1-3 sentences that captures the main points and key information."
    )
