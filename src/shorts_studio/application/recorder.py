"""
Clip Recorder — captures a voiceover from a live microphone stream.

The recorder owns at most one CaptureStream at a time. The stream's
tracks are stopped exactly once: on ``stop()``, or when a new recording
replaces the current one.

The package ships no CaptureStream adapter: hosts that own a microphone
(a browser bridge, a sound-device loop) embed the recorder and pass the
finished clip on as ``GenerationRequest.recorded_audio``.

Usage:
    recorder = ClipRecorder()
    recorder.start(stream)
    recorder.append(chunk)
    clip = recorder.stop()
"""

from __future__ import annotations

import logging
import time

from shorts_studio.domain.entities import MediaAsset
from shorts_studio.domain.ports import CaptureStream

log = logging.getLogger(__name__)

DEFAULT_RECORDING_MIME = "audio/webm"


class ClipRecorder:
    """Session-scoped recorder for a single voiceover clip."""

    def __init__(self) -> None:
        self._stream: CaptureStream | None = None
        self._chunks: list[bytes] = []
        self._started_at: float | None = None
        self._clip: MediaAsset | None = None

    @property
    def is_recording(self) -> bool:
        return self._stream is not None

    @property
    def clip(self) -> MediaAsset | None:
        """Last finished recording, if any."""
        return self._clip

    @property
    def elapsed_seconds(self) -> int:
        if self._started_at is None:
            return 0
        return int(time.monotonic() - self._started_at)

    def start(self, stream: CaptureStream) -> None:
        """Begin a new recording, finishing (and releasing) any current one."""
        if self._stream is not None:
            log.info("🎙️  Restarting recording, releasing the previous stream")
            self.stop()
        self._stream = stream
        self._chunks = []
        self._clip = None
        self._started_at = time.monotonic()
        log.info("🎙️  Recording started (%s)", stream.mime_type or DEFAULT_RECORDING_MIME)

    def append(self, chunk: bytes) -> None:
        """Add a captured chunk. Empty chunks are ignored."""
        if self._stream is None:
            raise RuntimeError("Not recording")
        if chunk:
            self._chunks.append(bytes(chunk))

    def stop(self) -> MediaAsset | None:
        """Finish the recording and release the microphone.

        Returns:
            The recorded clip, or None if nothing was recording.
        """
        stream = self._stream
        if stream is None:
            return None

        self._stream = None
        try:
            self._clip = MediaAsset(
                data=b"".join(self._chunks),
                mime_type=stream.mime_type or DEFAULT_RECORDING_MIME,
            )
        finally:
            stream.stop_tracks()
            self._chunks = []

        log.info("🎙️  Recording stopped after %ds (%d bytes)", self.elapsed_seconds, self._clip.size)
        self._started_at = None
        return self._clip
