"""Tests for application use cases (with mocked gateway)."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from shorts_studio.application.use_cases import (
    ExportAssetsUseCase,
    GenerateScriptUseCase,
    GenerateVideoUseCase,
    ProduceAudioUseCase,
)
from shorts_studio.domain.entities import (
    AudioArtifact,
    GenerationRequest,
    MediaAsset,
    PipelineSnapshot,
    ScriptArtifact,
    VideoArtifact,
)
from shorts_studio.domain.exceptions import GenerationError
from shorts_studio.domain.value_objects import (
    AspectRatio,
    AudioSource,
    PipelineStatus,
    ScriptMode,
)


class TestGenerateScriptUseCase:
    """Tests for the script stage."""

    @pytest.mark.asyncio
    async def test_returns_gateway_script(
        self, fake_gateway: AsyncMock, cats_request: GenerationRequest, sample_script: ScriptArtifact
    ) -> None:
        script = await GenerateScriptUseCase(fake_gateway).execute(cats_request)

        assert script == sample_script
        fake_gateway.generate_script.assert_awaited_once_with(cats_request)

    @pytest.mark.asyncio
    async def test_custom_script_restored_verbatim(self, fake_gateway: AsyncMock) -> None:
        request = GenerationRequest(
            script_mode=ScriptMode.CUSTOM, custom_script="Exactly these words."
        )

        script = await GenerateScriptUseCase(fake_gateway).execute(request)

        assert script.script == "Exactly these words."
        assert script.title == "Why Cats Rule the Internet"

    @pytest.mark.asyncio
    async def test_unexpected_error_wrapped(
        self, fake_gateway: AsyncMock, cats_request: GenerationRequest
    ) -> None:
        fake_gateway.generate_script.side_effect = KeyError("boom")

        with pytest.raises(GenerationError, match="Script generation failed") as exc_info:
            await GenerateScriptUseCase(fake_gateway).execute(cats_request)
        assert exc_info.value.stage == "script"

    @pytest.mark.asyncio
    async def test_generation_error_passes_through(
        self, fake_gateway: AsyncMock, cats_request: GenerationRequest
    ) -> None:
        fake_gateway.generate_script.side_effect = GenerationError("No script generated")

        with pytest.raises(GenerationError, match="^No script generated$"):
            await GenerateScriptUseCase(fake_gateway).execute(cats_request)


class TestProduceAudioUseCase:
    """Tests for the three audio paths."""

    @pytest.mark.asyncio
    async def test_ai_voice(
        self, fake_gateway: AsyncMock, cats_request: GenerationRequest, sample_script: ScriptArtifact
    ) -> None:
        audio = await ProduceAudioUseCase(fake_gateway).execute(cats_request, sample_script)

        assert audio.source == AudioSource.AI
        fake_gateway.synthesize_voice.assert_awaited_once_with(sample_script.script, "Kore")

    @pytest.mark.asyncio
    async def test_uploaded_file_passes_through(
        self, fake_gateway: AsyncMock, cats_request: GenerationRequest, sample_script: ScriptArtifact
    ) -> None:
        upload = MediaAsset(data=b"ID3-user-mp3", mime_type="audio/mpeg")
        request = replace(cats_request, audio_source=AudioSource.FILE, uploaded_audio=upload)

        audio = await ProduceAudioUseCase(fake_gateway).execute(request, sample_script)

        assert audio.media is upload
        assert audio.source == AudioSource.FILE
        fake_gateway.synthesize_voice.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_recorded_clip_passes_through(
        self, fake_gateway: AsyncMock, cats_request: GenerationRequest, sample_script: ScriptArtifact
    ) -> None:
        clip = MediaAsset(data=b"webm", mime_type="audio/webm")
        request = replace(cats_request, audio_source=AudioSource.RECORD, recorded_audio=clip)

        audio = await ProduceAudioUseCase(fake_gateway).execute(request, sample_script)

        assert audio.media is clip
        assert audio.source == AudioSource.RECORD
        fake_gateway.synthesize_voice.assert_not_awaited()


class TestGenerateVideoUseCase:
    """Tests for the video stage."""

    @pytest.mark.asyncio
    async def test_forwards_progress(self, fake_gateway: AsyncMock) -> None:
        messages: list[str] = []

        video = await GenerateVideoUseCase(fake_gateway).execute(
            "a prompt", AspectRatio.SQUARE, messages.append
        )

        assert video.uri == "https://files.example/video"
        assert len(messages) == 2

    @pytest.mark.asyncio
    async def test_unexpected_error_wrapped(self, fake_gateway: AsyncMock) -> None:
        fake_gateway.generate_video.side_effect = RuntimeError("socket closed")

        with pytest.raises(GenerationError, match="Video generation failed: socket closed"):
            await GenerateVideoUseCase(fake_gateway).execute(
                "a prompt", AspectRatio.SHORTS, lambda _: None
            )


class TestExportAssetsUseCase:
    """Tests for writing run artifacts to disk."""

    def test_writes_every_artifact(self, tmp_path: Path, sample_script: ScriptArtifact) -> None:
        snapshot = PipelineSnapshot(
            status=PipelineStatus.COMPLETE,
            progress_message="done",
            script=replace(sample_script, captions="Cats. Internet."),
            audio=AudioArtifact(
                media=MediaAsset(data=b"RIFF", mime_type="audio/wav"),
                source=AudioSource.AI,
                voice_id="Kore",
            ),
            video=VideoArtifact(media=MediaAsset(data=b"MP4", mime_type="video/mp4")),
        )

        summary = ExportAssetsUseCase(tmp_path).execute(snapshot, "run_1")

        assert summary.success
        assert summary.voice_id == "Kore"
        assert set(summary.files) == {"script", "captions", "audio", "video"}
        assert (tmp_path / "run_1" / "script.txt").read_text() == sample_script.script
        assert (tmp_path / "run_1" / "voiceover.wav").read_bytes() == b"RIFF"
        assert (tmp_path / "run_1" / "video.mp4").read_bytes() == b"MP4"

    def test_partial_run_keeps_script(self, tmp_path: Path, sample_script: ScriptArtifact) -> None:
        snapshot = PipelineSnapshot(
            status=PipelineStatus.ERROR, script=sample_script, error="Video generation failed"
        )

        summary = ExportAssetsUseCase(tmp_path).execute(snapshot, "run_2")

        assert not summary.success
        assert summary.error == "Video generation failed"
        assert list(summary.files) == ["script"]
        assert summary.title == sample_script.title
