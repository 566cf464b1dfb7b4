"""
Option Catalogs — the selectable durations, voices, and visual styles.

Each option carries a ``restricted`` flag; restricted options are only
available on the Pro tier and are consulted during request validation.
"""

from __future__ import annotations

import random
from dataclasses import dataclass


@dataclass(frozen=True)
class OptionItem:
    """A selectable catalog entry.

    Attributes:
        label: Human-readable name shown to the user.
        value: Value sent through the pipeline.
        restricted: True if the option requires the Pro tier.
    """

    label: str
    value: str
    restricted: bool = False


CUSTOM_VOICE = "custom_voice"

DURATION_OPTIONS: tuple[OptionItem, ...] = (
    OptionItem("30 Seconds", "30 seconds"),
    OptionItem("1 Minute", "1 minute"),
    OptionItem("2 Minutes", "2 minutes"),
    OptionItem("4 Minutes", "4 minutes", restricted=True),
    OptionItem("10 Minutes", "10 minutes", restricted=True),
    OptionItem("30 Minutes", "30 minutes", restricted=True),
)

VOICE_OPTIONS: tuple[OptionItem, ...] = (
    # Native Gemini voices
    OptionItem("Fenrir (Gemini - Deep Male)", "Fenrir"),
    OptionItem("Puck (Gemini - Energetic Male)", "Puck"),
    OptionItem("Kore (Gemini - Calm Female)", "Kore"),
    OptionItem("Charon (Gemini - Authoritative Male)", "Charon"),
    OptionItem("Zephyr (Gemini - Friendly Female)", "Zephyr"),
    # ElevenLabs-style names, mapped onto native voices
    OptionItem("Adam (ElevenLabs Style - Deep Narrative)", "eleven_adam", restricted=True),
    OptionItem("Rachel (ElevenLabs Style - Clear & Calm)", "eleven_rachel", restricted=True),
    OptionItem("Antoni (ElevenLabs Style - Well Rounded)", "eleven_antoni", restricted=True),
    OptionItem("Bella (ElevenLabs Style - Soft & Friendly)", "eleven_bella", restricted=True),
    OptionItem("Josh (ElevenLabs Style - Deep & Resonant)", "eleven_josh", restricted=True),
    OptionItem("Custom Voice Name", CUSTOM_VOICE, restricted=True),
)

VISUAL_STYLE_OPTIONS: tuple[OptionItem, ...] = (
    OptionItem(
        "Cinematic (High Quality)",
        "Cinematic, dramatic lighting, high production value, 4k, movie feel",
        restricted=True,
    ),
    OptionItem(
        "Documentary (Realistic)",
        "Realistic, documentary style, natural lighting, handheld camera feel",
    ),
    OptionItem(
        "Animated (3D/2D)",
        "3D animation style, vibrant colors, smooth rendering, Pixar-like",
    ),
    OptionItem(
        "Fast-Paced (Social)",
        "High energy, bright lighting, trendy social media aesthetic, dynamic movement",
    ),
    OptionItem(
        "Cyberpunk (Futuristic)",
        "Cyberpunk, neon lights, futuristic, dark atmosphere, high tech",
        restricted=True,
    ),
    OptionItem(
        "Minimalist (Clean)",
        "Minimalist, clean lines, soft lighting, uncluttered composition",
    ),
)

# Branded voice name → provider-native voice name
VOICE_MAPPING: dict[str, str] = {
    "eleven_adam": "Charon",
    "eleven_rachel": "Kore",
    "eleven_antoni": "Fenrir",
    "eleven_bella": "Zephyr",
    "eleven_josh": "Fenrir",
}

SAMPLE_TOPICS: tuple[str, ...] = (
    "The secret history of coffee in 60 seconds",
    "Why time moves faster as you get older",
    "Top 5 productivity hacks used by billionaires",
    "A day in the life of a cyberpunk detective in 2077",
    "How to travel the world on a $0 budget",
    "The psychology behind why we doom scroll",
    "3 coding tips that will double your salary",
    "The most dangerous roads in the world",
    "What if the internet stopped working for a day?",
    "Meditation guide for people who hate meditating",
)


def find_option(options: tuple[OptionItem, ...], value: str) -> OptionItem | None:
    """Look up a catalog entry by value. Unknown values return None."""
    for option in options:
        if option.value == value:
            return option
    return None


def is_restricted(options: tuple[OptionItem, ...], value: str) -> bool:
    option = find_option(options, value)
    return option is not None and option.restricted


def resolve_voice(voice_name: str) -> str:
    """Map a branded voice name to the provider's native voice.

    Names missing from the lookup table (including native names) pass
    through unchanged.
    """
    return VOICE_MAPPING.get(voice_name, voice_name)


def default_visual_style() -> str:
    """First unrestricted style, so free accounts are not locked out by default."""
    for option in VISUAL_STYLE_OPTIONS:
        if not option.restricted:
            return option.value
    return VISUAL_STYLE_OPTIONS[0].value


def random_topic(rng: random.Random | None = None) -> str:
    """Pick a sample topic ("surprise me")."""
    return (rng or random).choice(SAMPLE_TOPICS)
