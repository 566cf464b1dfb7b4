"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from shorts_studio.core.config import GeminiConfig, Settings
from shorts_studio.domain.entities import (
    AudioArtifact,
    GenerationRequest,
    MediaAsset,
    ScriptArtifact,
    ThumbnailArtifact,
    VideoArtifact,
)
from shorts_studio.domain.ports import GenerativeGateway
from shorts_studio.domain.value_objects import AudioSource, ScriptMode


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        api_key="test-key",
        output_dir=tmp_path / "output",
        gemini=GeminiConfig(poll_interval_seconds=0),
        _env_file=None,
    )


@pytest.fixture
def cats_request() -> GenerationRequest:
    """Auto topic with free-tier options, AI voice, no extras."""
    return GenerationRequest(
        script_mode=ScriptMode.AUTO,
        topic="cats",
        duration="30 seconds",
        visual_style="Realistic, documentary style, natural lighting, handheld camera feel",
        audio_source=AudioSource.AI,
        voice="Kore",
        include_captions=False,
        include_thumbnail=False,
    )


@pytest.fixture
def sample_script() -> ScriptArtifact:
    return ScriptArtifact(
        title="Why Cats Rule the Internet",
        tags=("cats", "viral", "pets", "funny", "shorts"),
        visual_prompt="A ginger cat leaping across rooftops at golden hour",
        script="Cats have conquered the internet. Here is how.",
    )


@pytest.fixture
def fake_gateway(sample_script: ScriptArtifact) -> AsyncMock:
    """Gateway double whose stages all succeed."""
    gateway = AsyncMock(spec=GenerativeGateway)
    gateway.generate_script.return_value = sample_script
    gateway.synthesize_voice.return_value = AudioArtifact(
        media=MediaAsset(data=b"RIFF-voice", mime_type="audio/wav"),
        source=AudioSource.AI,
        voice_id="Kore",
    )
    gateway.generate_thumbnail.return_value = ThumbnailArtifact(
        media=MediaAsset(data=b"\x89PNG", mime_type="image/png")
    )

    async def _video(prompt, aspect_ratio, on_progress):
        on_progress("Rendering video (this may take 1-2 minutes)...")
        on_progress("Still rendering... Artificial Intelligence is painting pixels...")
        return VideoArtifact(
            media=MediaAsset(data=b"MP4", mime_type="video/mp4"),
            uri="https://files.example/video",
        )

    gateway.generate_video.side_effect = _video
    return gateway
