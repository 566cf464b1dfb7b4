"""
Gemini Adapter — GenerativeGateway implementation.

Talks to Google's generative API through the ``google-genai`` SDK:
structured script generation (Gemini), text-to-speech, inline image
generation, and Veo video generation as a submit-then-poll operation.
The finished video is downloaded with ``httpx``.
"""

from __future__ import annotations

import asyncio
import base64
import json
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from shorts_studio.core.wav import pcm_to_wav
from shorts_studio.domain.catalogs import resolve_voice
from shorts_studio.domain.entities import (
    FIELD_CAPTIONS,
    FIELD_SCRIPT,
    FIELD_TAGS,
    FIELD_THUMBNAIL_PROMPT,
    FIELD_TITLE,
    FIELD_VISUAL_PROMPT,
    AudioArtifact,
    GenerationRequest,
    MediaAsset,
    ScriptArtifact,
    ThumbnailArtifact,
    VideoArtifact,
)
from shorts_studio.domain.exceptions import GenerationError, TransportError
from shorts_studio.domain.ports import GenerativeGateway, ProgressCallback
from shorts_studio.domain.value_objects import AspectRatio, AudioSource, Stage

if TYPE_CHECKING:
    from shorts_studio.core.config import Settings

log = logging.getLogger(__name__)

PROGRESS_SUBMITTING = "Initializing generation request..."
PROGRESS_RENDERING = "Rendering video (this may take 1-2 minutes)..."
PROGRESS_STILL_RENDERING = "Still rendering... Artificial Intelligence is painting pixels..."
PROGRESS_DOWNLOADING = "Downloading final video..."

# Untyped download bodies are taken to be the video
_GENERIC_BINARY_TYPES = frozenset({"", "application/octet-stream", "binary/octet-stream"})


class ScriptPayload(BaseModel):
    """Parsed structured response of the script model."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str | None = None
    visual_prompt: str | None = Field(default=None, alias=FIELD_VISUAL_PROMPT)
    tags: list[str] | None = None
    script: str | None = None
    captions: str | None = None
    thumbnail_prompt: str | None = Field(default=None, alias=FIELD_THUMBNAIL_PROMPT)


def build_script_schema(request: GenerationRequest) -> types.Schema:
    """Response schema whose ``required`` list follows the request's options."""
    style = request.visual_style
    properties: dict[str, types.Schema] = {
        FIELD_TITLE: types.Schema(
            type=types.Type.STRING,
            description="A clickbait/viral title for the video",
        ),
        FIELD_VISUAL_PROMPT: types.Schema(
            type=types.Type.STRING,
            description=(
                "A detailed visual description for the video generation AI. "
                f"Style: {style}. Focus on movement, lighting, and subject."
            ),
        ),
        FIELD_TAGS: types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(type=types.Type.STRING),
            description="5 viral tags for YouTube/TikTok",
        ),
    }
    if not request.effective_custom_script:
        properties[FIELD_SCRIPT] = types.Schema(
            type=types.Type.STRING,
            description=f"The spoken script for the video. Target duration: {request.duration}.",
        )
    if request.include_captions:
        properties[FIELD_CAPTIONS] = types.Schema(
            type=types.Type.STRING,
            description="SRT style or list of captions/subtitles for the video overlay.",
        )
    if request.include_thumbnail:
        properties[FIELD_THUMBNAIL_PROMPT] = types.Schema(
            type=types.Type.STRING,
            description=(
                "A high-quality, descriptive prompt for generating a viral "
                f"YouTube thumbnail. Style: {style}."
            ),
        )

    return types.Schema(
        type=types.Type.OBJECT,
        properties=properties,
        required=request.required_script_fields(),
    )


def build_script_prompt(request: GenerationRequest) -> str:
    """Instruction text for the script model."""
    style = request.visual_style
    custom_script = request.effective_custom_script

    if custom_script:
        tasks = [
            "1. Generate a viral/clickbait title suitable for this script.",
            "2. Generate a detailed purely visual description for the video generation AI "
            "(no text overlays description) that strictly adheres to the requested visual style.",
            "3. Generate 5 viral tags.",
        ]
        if request.include_captions:
            tasks.append("4. Generate accurate captions for the provided script.")
        if request.include_thumbnail:
            tasks.append("5. Generate a prompt for a thumbnail image.")
        task_lines = "\n".join(tasks)
        return (
            "Analyze the following video script provided by the user:\n"
            f'"{custom_script}"\n\n'
            f'Visual Style: "{style}".\n\n'
            f"Tasks:\n{task_lines}\n\n"
            "Do NOT rewrite the script. The script field is omitted from the response schema."
        )

    extras = []
    if request.include_captions:
        extras.append("Include captions text.")
    if request.include_thumbnail:
        extras.append("Include a prompt for a thumbnail image.")
    return (
        f'Create a viral video plan for the topic: "{request.effective_topic}".\n'
        f"Target Video Length: {request.duration}.\n"
        f'Visual Style: "{style}".\n'
        "The video should be engaging, high-energy, and suitable for social media.\n"
        "Provide a script for the voiceover and a purely visual description for the "
        "video generation AI that strictly adheres to the requested visual style.\n"
        + "\n".join(extras)
    ).rstrip()


def parse_script_payload(text: str | None, request: GenerationRequest) -> ScriptArtifact:
    """Parse and post-validate the structured script response.

    Raises:
        GenerationError: If the payload is empty, not JSON, or misses a required field.
    """
    if not text:
        raise GenerationError("No script generated", stage=Stage.SCRIPT.value)

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise GenerationError(
            f"Script response is not valid JSON: {e}", stage=Stage.SCRIPT.value, cause=e
        ) from e
    if not isinstance(raw, dict):
        raise GenerationError("Script response is not a JSON object", stage=Stage.SCRIPT.value)

    try:
        payload = ScriptPayload.model_validate(raw)
    except PydanticValidationError as e:
        raise GenerationError(
            f"Script response has an unexpected shape: {e}", stage=Stage.SCRIPT.value, cause=e
        ) from e

    missing = [name for name in request.required_script_fields() if raw.get(name) is None]
    if missing:
        raise GenerationError(
            f"Script response is missing required fields: {', '.join(missing)}",
            stage=Stage.SCRIPT.value,
        )

    # The model is never trusted to reproduce user text
    custom_script = request.effective_custom_script
    script = custom_script if custom_script else payload.script or ""

    return ScriptArtifact(
        title=payload.title or "",
        tags=tuple(payload.tags or ()),
        visual_prompt=payload.visual_prompt or "",
        script=script,
        captions=payload.captions,
        thumbnail_prompt=payload.thumbnail_prompt,
    )


def _response_parts(response: Any) -> list[Any]:
    """Content parts of the first candidate (empty if absent)."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    content = getattr(candidates[0], "content", None)
    return list(getattr(content, "parts", None) or [])


def _inline_bytes(part: Any) -> tuple[bytes, str] | None:
    """Decoded inline payload of a part, with its MIME type."""
    inline = getattr(part, "inline_data", None)
    if inline is None or not inline.data:
        return None
    data = inline.data
    if isinstance(data, str):
        data = base64.b64decode(data)
    return data, inline.mime_type or ""


def _operation_error_message(error: Any) -> str:
    if isinstance(error, dict):
        return str(error.get("message") or error)
    return str(getattr(error, "message", None) or error)


class GeminiGateway(GenerativeGateway):
    """Gateway to Gemini (text, speech, image) and Veo (video).

    The API key is resolved once, before the SDK client is built; a missing
    key raises ConfigurationError before any network call.
    """

    def __init__(
        self,
        settings: Settings,
        client: genai.Client | None = None,
        http_client: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._settings = settings
        self._config = settings.gemini
        self._client = client
        self._http_client = http_client
        self._sleep = sleep
        self._api_key: str | None = None

    def _credential(self) -> str:
        if self._api_key is None:
            self._api_key = self._settings.require_api_key()
        return self._api_key

    def _genai(self) -> genai.Client:
        """Resolve the credential, then build (or reuse) the SDK client."""
        api_key = self._credential()
        if self._client is None:
            self._client = genai.Client(api_key=api_key)
        return self._client

    # ── Script ──

    async def generate_script(self, request: GenerationRequest) -> ScriptArtifact:
        client = self._genai()
        log.info("📝 Generating script with %s...", self._config.script_model)

        try:
            response = await client.aio.models.generate_content(
                model=self._config.script_model,
                contents=build_script_prompt(request),
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=build_script_schema(request),
                ),
            )
        except genai_errors.APIError as e:
            raise GenerationError(
                f"Script generation failed: {e}", stage=Stage.SCRIPT.value, cause=e
            ) from e

        artifact = parse_script_payload(response.text, request)
        log.info("✅ Script ready: '%s' (%d tags)", artifact.title, len(artifact.tags))
        return artifact

    # ── Speech ──

    async def synthesize_voice(self, text: str, voice_name: str) -> AudioArtifact:
        client = self._genai()
        voice_id = resolve_voice(voice_name)
        log.info("🔊 Synthesizing voice '%s' (native: %s)...", voice_name, voice_id)

        try:
            response = await client.aio.models.generate_content(
                model=self._config.speech_model,
                contents=[types.Content(role="user", parts=[types.Part.from_text(text=text)])],
                config=types.GenerateContentConfig(
                    response_modalities=["AUDIO"],
                    speech_config=types.SpeechConfig(
                        voice_config=types.VoiceConfig(
                            prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice_id),
                        ),
                    ),
                ),
            )
        except genai_errors.APIError as e:
            raise GenerationError(
                f"Voice synthesis failed: {e}", stage=Stage.AUDIO.value, cause=e
            ) from e

        parts = _response_parts(response)
        payload = _inline_bytes(parts[0]) if parts else None
        if payload is None:
            raise GenerationError("No audio generated", stage=Stage.AUDIO.value)

        pcm, _ = payload
        wav = pcm_to_wav(pcm, self._config.speech_sample_rate)
        log.info("✅ Voice generated: %d PCM bytes @ %d Hz", len(pcm), self._config.speech_sample_rate)
        return AudioArtifact(
            media=MediaAsset(data=wav, mime_type="audio/wav"),
            source=AudioSource.AI,
            voice_id=voice_id,
        )

    # ── Thumbnail ──

    async def generate_thumbnail(self, prompt: str) -> ThumbnailArtifact:
        client = self._genai()
        log.info("🖼️  Generating thumbnail with %s...", self._config.image_model)

        try:
            response = await client.aio.models.generate_content(
                model=self._config.image_model,
                contents=types.Content(role="user", parts=[types.Part.from_text(text=prompt)]),
            )
        except genai_errors.APIError as e:
            raise GenerationError(
                f"Thumbnail generation failed: {e}", stage=Stage.THUMBNAIL.value, cause=e
            ) from e

        # First inline image wins; interleaved text parts are ignored
        for part in _response_parts(response):
            payload = _inline_bytes(part)
            if payload is not None:
                data, mime_type = payload
                log.info("✅ Thumbnail generated (%d bytes)", len(data))
                return ThumbnailArtifact(
                    media=MediaAsset(data=data, mime_type=mime_type or "image/png")
                )

        raise GenerationError("No thumbnail generated", stage=Stage.THUMBNAIL.value)

    # ── Video ──

    async def generate_video(
        self,
        prompt: str,
        aspect_ratio: AspectRatio,
        on_progress: ProgressCallback,
    ) -> VideoArtifact:
        client = self._genai()
        on_progress(PROGRESS_SUBMITTING)
        log.info("🎬 Submitting video job (%s, %s)...", self._config.video_model, aspect_ratio.value)

        try:
            operation = await client.aio.models.generate_videos(
                model=self._config.video_model,
                prompt=prompt,
                config=types.GenerateVideosConfig(
                    number_of_videos=1,
                    resolution=self._config.video_resolution,
                    aspect_ratio=aspect_ratio.value,
                ),
            )

            on_progress(PROGRESS_RENDERING)
            polls = 0
            while not operation.done:
                await self._sleep(self._config.poll_interval_seconds)
                polls += 1
                on_progress(PROGRESS_STILL_RENDERING)
                log.info("   Polling video operation (#%d)...", polls)
                operation = await client.aio.operations.get(operation)
        except genai_errors.APIError as e:
            raise GenerationError(
                f"Video generation failed: {e}", stage=Stage.VIDEO.value, cause=e
            ) from e

        if operation.error:
            raise GenerationError(
                f"Video generation failed: {_operation_error_message(operation.error)}",
                stage=Stage.VIDEO.value,
            )

        uri = self._video_uri(operation)
        if not uri:
            raise GenerationError("No video URI in response", stage=Stage.VIDEO.value)

        on_progress(PROGRESS_DOWNLOADING)
        media = await self._download(uri)
        log.info("✅ Video downloaded (%d bytes)", media.size)
        return VideoArtifact(media=media, uri=uri)

    @staticmethod
    def _video_uri(operation: Any) -> str | None:
        response = getattr(operation, "response", None)
        videos = getattr(response, "generated_videos", None) or []
        if not videos:
            return None
        video = getattr(videos[0], "video", None)
        return getattr(video, "uri", None)

    async def _download(self, uri: str) -> MediaAsset:
        """Fetch the result bytes; the URI needs the API key as ``key`` parameter."""
        url = httpx.URL(uri).copy_merge_params({"key": self._credential()})
        try:
            if self._http_client is not None:
                response = await self._http_client.get(url, follow_redirects=True)
            else:
                async with httpx.AsyncClient(
                    timeout=self._config.download_timeout_seconds
                ) as http:
                    response = await http.get(url, follow_redirects=True)
        except httpx.HTTPError as e:
            raise TransportError(
                f"Failed to download video bytes: {e}", stage=Stage.VIDEO.value, cause=e
            ) from e

        if not response.is_success:
            raise TransportError(
                f"Failed to download video bytes (HTTP {response.status_code})",
                stage=Stage.VIDEO.value,
            )

        mime_type = response.headers.get("content-type", "").split(";", 1)[0].strip()
        if mime_type in _GENERIC_BINARY_TYPES:
            mime_type = "video/mp4"
        elif not mime_type.startswith("video/"):
            raise TransportError(
                f"Failed to download video bytes (unexpected content type {mime_type})",
                stage=Stage.VIDEO.value,
            )
        return MediaAsset(data=response.content, mime_type=mime_type)
