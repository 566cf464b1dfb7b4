"""
Use Cases — application-level business operations.

Each use case represents a single, well-defined stage of the pipeline.
Use cases depend only on domain ports (interfaces), never on concrete
infrastructure implementations.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path

from shorts_studio.application.dto import RunSummary
from shorts_studio.domain.entities import (
    AudioArtifact,
    GenerationRequest,
    PipelineSnapshot,
    ScriptArtifact,
    ThumbnailArtifact,
    VideoArtifact,
)
from shorts_studio.domain.exceptions import GenerationError, PipelineError
from shorts_studio.domain.ports import GenerativeGateway, ProgressCallback
from shorts_studio.domain.value_objects import AspectRatio, AudioSource, Stage

log = logging.getLogger(__name__)


class GenerateScriptUseCase:
    """Generate the script, title, tags, and prompts.

    Flow: Request → Gateway → ScriptArtifact (custom script restored)
    """

    def __init__(self, gateway: GenerativeGateway) -> None:
        self._gateway = gateway

    async def execute(self, request: GenerationRequest) -> ScriptArtifact:
        """Generate the script artifact.

        Raises:
            PipelineError: Gateway failures pass through unchanged.
            GenerationError: On any unexpected failure.
        """
        try:
            script = await self._gateway.generate_script(request)
        except PipelineError:
            raise
        except Exception as e:
            raise GenerationError(
                f"Script generation failed: {e}", stage=Stage.SCRIPT.value, cause=e
            ) from e

        custom_script = request.effective_custom_script
        if custom_script and script.script != custom_script:
            log.info("✏️  Restoring the user's script verbatim")
            script = replace(script, script=custom_script)
        return script


class ProduceAudioUseCase:
    """Produce the voiceover through exactly one of three paths.

    Flow: uploaded file | recorded clip → pass-through, else Script → TTS
    """

    def __init__(self, gateway: GenerativeGateway) -> None:
        self._gateway = gateway

    async def execute(self, request: GenerationRequest, script: ScriptArtifact) -> AudioArtifact:
        if request.audio_source == AudioSource.FILE:
            if request.uploaded_audio is None:
                raise GenerationError("No uploaded voiceover", stage=Stage.AUDIO.value)
            log.info("📁 Using uploaded voiceover (%d bytes)", request.uploaded_audio.size)
            return AudioArtifact(media=request.uploaded_audio, source=AudioSource.FILE)

        if request.audio_source == AudioSource.RECORD:
            if request.recorded_audio is None:
                raise GenerationError("No recorded voiceover", stage=Stage.AUDIO.value)
            log.info("🎙️  Using recorded voiceover (%d bytes)", request.recorded_audio.size)
            return AudioArtifact(media=request.recorded_audio, source=AudioSource.RECORD)

        try:
            return await self._gateway.synthesize_voice(script.script, request.effective_voice)
        except PipelineError:
            raise
        except Exception as e:
            raise GenerationError(
                f"Voice synthesis failed: {e}", stage=Stage.AUDIO.value, cause=e
            ) from e


class GenerateThumbnailUseCase:
    """Generate the optional thumbnail image."""

    def __init__(self, gateway: GenerativeGateway) -> None:
        self._gateway = gateway

    async def execute(self, prompt: str) -> ThumbnailArtifact:
        try:
            return await self._gateway.generate_thumbnail(prompt)
        except PipelineError:
            raise
        except Exception as e:
            raise GenerationError(
                f"Thumbnail generation failed: {e}", stage=Stage.THUMBNAIL.value, cause=e
            ) from e


class GenerateVideoUseCase:
    """Render the final video (the long-running stage)."""

    def __init__(self, gateway: GenerativeGateway) -> None:
        self._gateway = gateway

    async def execute(
        self,
        prompt: str,
        aspect_ratio: AspectRatio,
        on_progress: ProgressCallback,
    ) -> VideoArtifact:
        try:
            return await self._gateway.generate_video(prompt, aspect_ratio, on_progress)
        except PipelineError:
            raise
        except Exception as e:
            raise GenerationError(
                f"Video generation failed: {e}", stage=Stage.VIDEO.value, cause=e
            ) from e


class ExportAssetsUseCase:
    """Write the artifacts of a finished run to a directory.

    Flow: PipelineSnapshot → files on disk → RunSummary
    """

    def __init__(self, output_dir: Path) -> None:
        self._output_dir = Path(output_dir)

    def execute(self, snapshot: PipelineSnapshot, run_id: str) -> RunSummary:
        """Save every produced artifact, partial runs included.

        Args:
            snapshot: Final (or partial) pipeline snapshot.
            run_id: Name of the sub-directory for this run.

        Returns:
            RunSummary listing the written files.
        """
        run_dir = self._output_dir / run_id
        files: dict[str, Path] = {}

        if snapshot.script is not None:
            files["script"] = self._write_text(run_dir / "script.txt", snapshot.script.script)
            if snapshot.script.captions:
                files["captions"] = self._write_text(
                    run_dir / "captions.txt", snapshot.script.captions
                )
        if snapshot.audio is not None:
            media = snapshot.audio.media
            files["audio"] = media.save(run_dir / f"voiceover{media.extension}")
        if snapshot.thumbnail is not None:
            media = snapshot.thumbnail.media
            files["thumbnail"] = media.save(run_dir / f"thumbnail{media.extension}")
        if snapshot.video is not None:
            media = snapshot.video.media
            files["video"] = media.save(run_dir / f"video{media.extension}")

        for name, path in files.items():
            log.info("💾 Saved %s: %s", name, path)

        return RunSummary.from_snapshot(snapshot, run_id=run_id, files=files)

    @staticmethod
    def _write_text(path: Path, text: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path
