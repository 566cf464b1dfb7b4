"""
FastAPI Presentation Layer — REST API for the pipeline.

Provides HTTP endpoints to trigger a generation run and watch its
progress. The app serves one session: a single pipeline, one run at a
time (a second trigger while a run is in flight gets ``409``).

Usage:
    shorts-studio serve --port 8000
    POST http://localhost:8000/generate {"topic": "...", "duration": "30 seconds"}
    GET  http://localhost:8000/state
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
from datetime import datetime

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from shorts_studio.core.config import Settings
from shorts_studio.core.container import Container
from shorts_studio.core.logging import setup_logging
from shorts_studio.domain.catalogs import (
    DURATION_OPTIONS,
    VISUAL_STYLE_OPTIONS,
    VOICE_OPTIONS,
    OptionItem,
    default_visual_style,
)
from shorts_studio.domain.entities import GenerationRequest, MediaAsset, PipelineSnapshot
from shorts_studio.domain.exceptions import UpgradeRequiredError, ValidationError
from shorts_studio.domain.value_objects import AccountTier, AspectRatio, AudioSource, ScriptMode

log = logging.getLogger(__name__)


class GenerateBody(BaseModel):
    """Request body for the /generate endpoint."""

    script_mode: ScriptMode = ScriptMode.AUTO
    topic: str = ""
    custom_script: str = ""
    duration: str = DURATION_OPTIONS[0].value
    visual_style: str = Field(default_factory=default_visual_style)
    aspect_ratio: AspectRatio = AspectRatio.SHORTS
    include_captions: bool = False
    include_thumbnail: bool = False
    audio_source: AudioSource = AudioSource.AI
    voice: str = VOICE_OPTIONS[0].value
    custom_voice_name: str = ""
    audio_base64: str = ""
    audio_mime_type: str = "audio/mpeg"
    tier: AccountTier = AccountTier.FREE


class GenerateResponse(BaseModel):
    """Response body for the /generate endpoint."""

    run_id: str
    status: str
    success: bool
    progress_message: str = ""
    error: str | None = None
    title: str = ""
    tags: list[str] = Field(default_factory=list)
    script: str = ""
    captions: str | None = None
    voice_id: str = ""
    files: dict[str, str] = Field(default_factory=dict)


class StateResponse(BaseModel):
    """Snapshot of the current (or last) run, without media payloads."""

    status: str
    progress_message: str = ""
    error: str | None = None
    has_script: bool = False
    has_audio: bool = False
    has_thumbnail: bool = False
    has_video: bool = False
    title: str = ""


def _option_dicts(options: tuple[OptionItem, ...]) -> list[dict[str, object]]:
    return [
        {"label": o.label, "value": o.value, "restricted": o.restricted} for o in options
    ]


def _to_request(body: GenerateBody) -> GenerationRequest:
    """Map the HTTP body to a GenerationRequest.

    Raises:
        HTTPException: 400 if the audio payload is not valid base64.
    """
    media = None
    if body.audio_base64:
        try:
            data = base64.b64decode(body.audio_base64, validate=True)
        except (binascii.Error, ValueError) as e:
            raise HTTPException(status_code=400, detail=f"Invalid audio_base64: {e}") from e
        media = MediaAsset(data=data, mime_type=body.audio_mime_type)

    return GenerationRequest(
        script_mode=body.script_mode,
        topic=body.topic,
        custom_script=body.custom_script,
        duration=body.duration,
        visual_style=body.visual_style,
        aspect_ratio=body.aspect_ratio,
        include_captions=body.include_captions,
        include_thumbnail=body.include_thumbnail,
        audio_source=body.audio_source,
        voice=body.voice,
        custom_voice_name=body.custom_voice_name,
        uploaded_audio=media if body.audio_source == AudioSource.FILE else None,
        recorded_audio=media if body.audio_source == AudioSource.RECORD else None,
    )


def _state_response(snapshot: PipelineSnapshot) -> StateResponse:
    return StateResponse(
        status=snapshot.status.value,
        progress_message=snapshot.progress_message,
        error=snapshot.error,
        has_script=snapshot.script is not None,
        has_audio=snapshot.audio is not None,
        has_thumbnail=snapshot.thumbnail is not None,
        has_video=snapshot.video is not None,
        title=snapshot.script.title if snapshot.script else "",
    )


def create_app(container: Container | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        container: Optional pre-built container (defaults to one from Settings()).

    Returns:
        FastAPI application instance.
    """
    if container is None:
        settings = Settings()
        setup_logging(log_file=settings.log_file or None)
        container = Container(settings)

    pipeline = container.pipeline()
    exporter = container.exporter()
    run_lock = asyncio.Lock()

    app = FastAPI(
        title="Shorts Studio",
        description="Script, voiceover, thumbnail, and video generation API",
        version="1.0.0",
    )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy", "service": "shorts-studio"}

    @app.get("/catalogs")
    async def catalogs() -> dict[str, list[dict[str, object]]]:
        """Selectable options with their Pro restriction flags."""
        return {
            "durations": _option_dicts(DURATION_OPTIONS),
            "voices": _option_dicts(VOICE_OPTIONS),
            "visual_styles": _option_dicts(VISUAL_STYLE_OPTIONS),
        }

    @app.get("/state", response_model=StateResponse)
    async def state() -> StateResponse:
        """Progress of the in-flight (or last) run."""
        return _state_response(pipeline.state)

    @app.post("/generate", response_model=GenerateResponse)
    async def generate(body: GenerateBody) -> GenerateResponse:
        """Run the pipeline to completion and return the saved assets.

        Raises:
            HTTPException: 409 while another run is in flight, 402 when the
                tier does not allow the selection, 400 on invalid input.
        """
        if run_lock.locked():
            raise HTTPException(status_code=409, detail="A generation is already running")

        request = _to_request(body)

        async with run_lock:
            try:
                snapshot = await pipeline.run(request, body.tier)
            except UpgradeRequiredError as e:
                raise HTTPException(
                    status_code=402,
                    detail={"message": str(e), "options": e.options},
                ) from e
            except ValidationError as e:
                raise HTTPException(status_code=400, detail=str(e)) from e

        run_id = datetime.now().strftime("run_%Y%m%d_%H%M%S_%f")
        summary = await asyncio.to_thread(exporter.execute, snapshot, run_id)
        log.info("📦 Run %s finished: %s", run_id, summary.status.value)

        return GenerateResponse(
            run_id=summary.run_id,
            status=summary.status.value,
            success=summary.success,
            progress_message=summary.progress_message,
            error=summary.error,
            title=summary.title,
            tags=list(summary.tags),
            script=summary.script,
            captions=summary.captions,
            voice_id=summary.voice_id,
            files={name: str(path) for name, path in summary.files.items()},
        )

    return app
