"""
Domain Value Objects — immutable, self-validating types.

Value objects represent concepts defined by their attributes rather than
a unique identity. They are always immutable and validate their own invariants.
"""

from __future__ import annotations

from enum import Enum


class ScriptMode(str, Enum):
    """Where the spoken script comes from."""

    AUTO = "auto"      # Generated from a topic
    CUSTOM = "custom"  # Supplied verbatim by the user


class AudioSource(str, Enum):
    """Where the voiceover comes from."""

    AI = "ai"
    FILE = "file"
    RECORD = "record"


class AccountTier(str, Enum):
    """Account plan of the user starting a run."""

    FREE = "free"
    PRO = "pro"

    @classmethod
    def from_str(cls, value: str) -> AccountTier:
        """Parse a tier string (case-insensitive)."""
        normalized = value.strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(
            f"Unsupported account tier '{value}'. "
            f"Supported: {', '.join(m.value for m in cls)}"
        )


class AspectRatio(str, Enum):
    """Output video aspect ratio."""

    SHORTS = "9:16"
    WIDESCREEN = "16:9"
    SQUARE = "1:1"

    @property
    def display_name(self) -> str:
        """Human-readable aspect ratio name."""
        return {
            AspectRatio.SHORTS: "Shorts (9:16)",
            AspectRatio.WIDESCREEN: "Widescreen (16:9)",
            AspectRatio.SQUARE: "Square (1:1)",
        }[self]

    @classmethod
    def from_str(cls, value: str) -> AspectRatio:
        """Parse an aspect ratio such as '9:16'."""
        normalized = value.strip()
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(
            f"Unsupported aspect ratio '{value}'. "
            f"Supported: {', '.join(m.value for m in cls)}"
        )


class PipelineStatus(str, Enum):
    """Lifecycle status of one pipeline run."""

    IDLE = "idle"
    GENERATING_SCRIPT = "generating_script"
    GENERATING_ASSETS = "generating_assets"
    COMPLETE = "complete"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (PipelineStatus.COMPLETE, PipelineStatus.ERROR)


class Stage(str, Enum):
    """A discrete unit of the pipeline."""

    SCRIPT = "script"
    AUDIO = "audio"
    THUMBNAIL = "thumbnail"
    VIDEO = "video"
