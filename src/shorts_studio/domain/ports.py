"""
Domain Ports — abstract interfaces for infrastructure dependencies.

Ports define the contracts that the domain layer requires from the outside world.
Infrastructure adapters implement these interfaces, enabling the Dependency
Inversion Principle: the domain depends on abstractions, not concretions.

This is the "Ports" half of the Hexagonal (Ports & Adapters) Architecture.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

from shorts_studio.domain.entities import (
    AudioArtifact,
    GenerationRequest,
    ScriptArtifact,
    ThumbnailArtifact,
    VideoArtifact,
)
from shorts_studio.domain.value_objects import AspectRatio

ProgressCallback = Callable[[str], None]

# ═══════════════════════════════════════════════════════════════
# Generation Ports
# ═══════════════════════════════════════════════════════════════


class GenerativeGateway(ABC):
    """Port for the remote generative-AI service.

    All operations are coroutines and share one credential resolution step.

    Implementations: GeminiGateway
    """

    @abstractmethod
    async def generate_script(self, request: GenerationRequest) -> ScriptArtifact:
        """Generate title, tags, visual prompt, and (optionally) script text.

        Args:
            request: The run's request; decides which fields are required.

        Returns:
            A ScriptArtifact. With a custom script, ``script`` is the input verbatim.
        """

    @abstractmethod
    async def synthesize_voice(self, text: str, voice_name: str) -> AudioArtifact:
        """Synthesize speech and wrap it in a playable container.

        Args:
            text: Text to speak.
            voice_name: Catalog or native voice name.

        Returns:
            An AudioArtifact holding WAV bytes.
        """

    @abstractmethod
    async def generate_thumbnail(self, prompt: str) -> ThumbnailArtifact:
        """Generate one inline thumbnail image."""

    @abstractmethod
    async def generate_video(
        self,
        prompt: str,
        aspect_ratio: AspectRatio,
        on_progress: ProgressCallback,
    ) -> VideoArtifact:
        """Submit a video job, poll it to completion, and download the result.

        Args:
            prompt: Visual prompt for the video model.
            aspect_ratio: Requested aspect ratio.
            on_progress: Receives human-readable status text while rendering.

        Returns:
            A VideoArtifact with the downloaded bytes.
        """


# ═══════════════════════════════════════════════════════════════
# Device Ports
# ═══════════════════════════════════════════════════════════════


class CaptureStream(ABC):
    """Port for a live microphone stream.

    Implementations are supplied by the host (browser bridge, sound device).
    """

    @property
    @abstractmethod
    def mime_type(self) -> str:
        """MIME type of the captured chunks."""

    @abstractmethod
    def stop_tracks(self) -> None:
        """Stop every track and release the device."""
