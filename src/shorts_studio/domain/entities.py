"""
Domain Entities — core business objects of the generation pipeline.

The request, the artifacts each stage produces, and the run-scoped
PipelineState that aggregates them. PipelineState is the only mutable
object here; every change goes through its transition table.
"""

from __future__ import annotations

import base64
import mimetypes
from dataclasses import dataclass, field
from pathlib import Path

from shorts_studio.domain.catalogs import CUSTOM_VOICE
from shorts_studio.domain.exceptions import StateTransitionError
from shorts_studio.domain.value_objects import (
    AspectRatio,
    AudioSource,
    PipelineStatus,
    ScriptMode,
)

# Extensions for the MIME types the pipeline produces; others go through mimetypes
_KNOWN_EXTENSIONS = {
    "audio/wav": ".wav",
    "audio/mpeg": ".mp3",
    "audio/webm": ".webm",
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "video/mp4": ".mp4",
}

# Wire names of the structured script payload
FIELD_TITLE = "title"
FIELD_VISUAL_PROMPT = "visualPrompt"
FIELD_TAGS = "tags"
FIELD_SCRIPT = "script"
FIELD_CAPTIONS = "captions"
FIELD_THUMBNAIL_PROMPT = "thumbnailPrompt"


@dataclass(frozen=True)
class MediaAsset:
    """A locally resolvable media reference (in-memory bytes + MIME type).

    Attributes:
        data: Raw file bytes.
        mime_type: MIME type of the bytes, e.g. ``audio/wav``.
    """

    data: bytes = field(repr=False)
    mime_type: str

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def data_uri(self) -> str:
        """Inline ``data:`` URI for direct display."""
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"

    @property
    def extension(self) -> str:
        """File extension for the MIME type (``.bin`` if unknown)."""
        base_type = self.mime_type.split(";", 1)[0].strip()
        if base_type in _KNOWN_EXTENSIONS:
            return _KNOWN_EXTENSIONS[base_type]
        return mimetypes.guess_extension(base_type) or ".bin"

    def save(self, path: Path) -> Path:
        """Write the bytes to disk, creating parent directories."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.data)
        return path


@dataclass(frozen=True)
class GenerationRequest:
    """Immutable input bundle for one pipeline run.

    Attributes:
        script_mode: Generate from ``topic`` or use ``custom_script`` verbatim.
        topic: Topic text (auto mode).
        custom_script: User-supplied script (custom mode).
        duration: Target duration label, e.g. "30 seconds".
        visual_style: Visual-style descriptor passed to the models.
        aspect_ratio: Requested video aspect ratio.
        include_captions: Whether captions should be generated.
        include_thumbnail: Whether a thumbnail should be generated.
        audio_source: Which of the three audio paths runs.
        voice: Voice option value (AI audio source).
        custom_voice_name: Free-form voice name when ``voice`` is the custom option.
        uploaded_audio: Uploaded voiceover (file audio source).
        recorded_audio: Recorded voiceover (record audio source).
    """

    script_mode: ScriptMode = ScriptMode.AUTO
    topic: str = ""
    custom_script: str = ""
    duration: str = "30 seconds"
    visual_style: str = ""
    aspect_ratio: AspectRatio = AspectRatio.SHORTS
    include_captions: bool = False
    include_thumbnail: bool = False
    audio_source: AudioSource = AudioSource.AI
    voice: str = "Fenrir"
    custom_voice_name: str = ""
    uploaded_audio: MediaAsset | None = None
    recorded_audio: MediaAsset | None = None

    @property
    def effective_custom_script(self) -> str | None:
        """The custom script in custom mode, else None."""
        if self.script_mode == ScriptMode.CUSTOM:
            return self.custom_script
        return None

    @property
    def effective_topic(self) -> str:
        return self.topic if self.script_mode == ScriptMode.AUTO else ""

    @property
    def effective_voice(self) -> str:
        """Voice name actually sent to synthesis."""
        if self.voice == CUSTOM_VOICE:
            return self.custom_voice_name.strip()
        return self.voice

    def required_script_fields(self) -> list[str]:
        """Fields the structured script response must contain for this request."""
        required = [FIELD_TITLE, FIELD_VISUAL_PROMPT, FIELD_TAGS]
        if not self.effective_custom_script:
            required.append(FIELD_SCRIPT)
        if self.include_captions:
            required.append(FIELD_CAPTIONS)
        if self.include_thumbnail:
            required.append(FIELD_THUMBNAIL_PROMPT)
        return required


@dataclass(frozen=True)
class ScriptArtifact:
    """Output of the script stage.

    Attributes:
        title: Viral title for the video.
        tags: Tags in relevance order.
        visual_prompt: Prompt for the video model.
        script: Spoken script (generated, or the custom script verbatim).
        captions: Caption text, if requested.
        thumbnail_prompt: Prompt for the thumbnail model, if requested.
    """

    title: str
    tags: tuple[str, ...]
    visual_prompt: str
    script: str
    captions: str | None = None
    thumbnail_prompt: str | None = None


@dataclass(frozen=True)
class AudioArtifact:
    """Voiceover produced by exactly one of the three audio paths."""

    media: MediaAsset
    source: AudioSource
    voice_id: str = ""


@dataclass(frozen=True)
class ThumbnailArtifact:
    """Inline thumbnail image."""

    media: MediaAsset


@dataclass(frozen=True)
class VideoArtifact:
    """Final rendered video, downloaded locally.

    Attributes:
        media: Downloaded video bytes.
        uri: Remote result URI the bytes were fetched from.
    """

    media: MediaAsset
    uri: str = ""


@dataclass(frozen=True)
class PipelineSnapshot:
    """Read-only copy of a PipelineState handed to the presentation layer."""

    status: PipelineStatus
    progress_message: str = ""
    script: ScriptArtifact | None = None
    audio: AudioArtifact | None = None
    thumbnail: ThumbnailArtifact | None = None
    video: VideoArtifact | None = None
    error: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal


_TRANSITIONS: dict[PipelineStatus, frozenset[PipelineStatus]] = {
    PipelineStatus.IDLE: frozenset({PipelineStatus.GENERATING_SCRIPT}),
    PipelineStatus.GENERATING_SCRIPT: frozenset(
        {PipelineStatus.GENERATING_ASSETS, PipelineStatus.ERROR}
    ),
    PipelineStatus.GENERATING_ASSETS: frozenset(
        {PipelineStatus.COMPLETE, PipelineStatus.ERROR}
    ),
    PipelineStatus.COMPLETE: frozenset(),
    PipelineStatus.ERROR: frozenset(),
}


@dataclass
class PipelineState:
    """Mutable, run-scoped aggregate owned by the orchestrator.

    Created IDLE; changes only through ``transition`` and the ``merge_*``
    methods; frozen once COMPLETE or ERROR is reached.
    """

    status: PipelineStatus = PipelineStatus.IDLE
    progress_message: str = ""
    script: ScriptArtifact | None = None
    audio: AudioArtifact | None = None
    thumbnail: ThumbnailArtifact | None = None
    video: VideoArtifact | None = None
    error: str | None = None

    def transition(self, target: PipelineStatus, message: str | None = None) -> None:
        """Move to ``target`` if the transition table allows it.

        Raises:
            StateTransitionError: On an illegal transition.
        """
        if target not in _TRANSITIONS[self.status]:
            raise StateTransitionError(
                f"Illegal transition {self.status.value} -> {target.value}"
            )
        self.status = target
        if message is not None:
            self.progress_message = message

    def report(self, message: str) -> None:
        """Update the progress message of a running pipeline."""
        self._ensure_mutable()
        self.progress_message = message

    def merge_script(self, script: ScriptArtifact) -> None:
        self._ensure_mutable()
        self.script = script

    def merge_audio(self, audio: AudioArtifact) -> None:
        self._ensure_mutable()
        self.audio = audio

    def merge_thumbnail(self, thumbnail: ThumbnailArtifact) -> None:
        self._ensure_mutable()
        self.thumbnail = thumbnail

    def merge_video(self, video: VideoArtifact) -> None:
        self._ensure_mutable()
        self.video = video

    def fail(self, message: str) -> None:
        """Enter ERROR, keeping every artifact merged so far."""
        self.transition(PipelineStatus.ERROR)
        self.error = message

    def snapshot(self) -> PipelineSnapshot:
        return PipelineSnapshot(
            status=self.status,
            progress_message=self.progress_message,
            script=self.script,
            audio=self.audio,
            thumbnail=self.thumbnail,
            video=self.video,
            error=self.error,
        )

    def _ensure_mutable(self) -> None:
        if self.status.is_terminal:
            raise StateTransitionError(
                f"Pipeline state is final ({self.status.value}) and cannot change"
            )
