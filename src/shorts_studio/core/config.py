"""
Configuration — type-safe settings via Pydantic BaseSettings.

Loads from environment variables or .env file. Remote model settings live
in their own nested group for clean separation and validation.

Usage:
    settings = Settings()  # auto-loads from .env
    print(settings.gemini.video_model)
    api_key = settings.require_api_key()
"""

from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shorts_studio.domain.exceptions import ConfigurationError
from shorts_studio.domain.value_objects import AccountTier

API_KEY_ENV = "API_KEY"

MISSING_API_KEY_HELP = (
    f"API key missing. FIX STEPS: "
    f"1. Export {API_KEY_ENV} (or GEMINI_API_KEY) with your Gemini API key, "
    f"or add '{API_KEY_ENV}=...' to your .env file. "
    "2. Restart the command or server: settings are read once at startup."
)


class GeminiConfig(BaseSettings):
    """Gemini / Veo model configuration."""

    model_config = SettingsConfigDict(env_prefix="GEMINI_", extra="ignore")

    script_model: str = "gemini-3-flash-preview"
    speech_model: str = "gemini-2.5-flash-preview-tts"
    image_model: str = "gemini-2.5-flash-image"
    video_model: str = "veo-3.1-fast-generate-preview"
    video_resolution: str = "720p"
    poll_interval_seconds: float = 5.0
    speech_sample_rate: int = 24000
    download_timeout_seconds: float = 120.0

    @field_validator("poll_interval_seconds")
    @classmethod
    def validate_poll_interval(cls, v: float) -> float:
        if v < 0:
            raise ValueError("poll_interval_seconds must be >= 0")
        return v

    @field_validator("video_resolution")
    @classmethod
    def validate_resolution(cls, v: str) -> str:
        allowed = {"720p", "1080p"}
        if v not in allowed:
            raise ValueError(f"video_resolution must be one of {allowed}")
        return v


class Settings(BaseSettings):
    """Root application settings.

    Load order:
        1. Environment variables
        2. .env file (if present)
        3. Default values

    Usage:
        settings = Settings()
        settings = Settings(_env_file=".env.local")
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Credential
    api_key: str = Field(
        default="",
        validation_alias=AliasChoices(API_KEY_ENV, "GEMINI_API_KEY", "api_key"),
        repr=False,
    )

    # Paths
    output_dir: Path = Path("output")
    log_file: str = ""

    # Account plan used by the CLI (no real authentication)
    account_tier: AccountTier = AccountTier.FREE

    # Nested configs
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)

    def require_api_key(self) -> str:
        """Resolve the single API credential.

        Raises:
            ConfigurationError: If no key is configured.
        """
        key = self.api_key.strip()
        if not key:
            raise ConfigurationError(MISSING_API_KEY_HELP)
        return key

    def ensure_directories(self) -> None:
        """Create the output directory if it doesn't exist."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
