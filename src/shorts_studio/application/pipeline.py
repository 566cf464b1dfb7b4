"""
Pipeline Orchestrator — sequences use cases into a complete run.

The orchestrator is the application-level coordinator that drives one
generation run. It manages:
  - Pre-flight validation and the tier gate
  - Stage sequencing (script → audio → thumbnail → video)
  - PipelineState transitions and snapshot publishing
  - Error capture into the terminal ERROR state
  - Timing instrumentation

Stages run strictly one after another; a failure aborts the remaining
stages and keeps every artifact merged so far.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from shorts_studio.application.use_cases import (
    GenerateScriptUseCase,
    GenerateThumbnailUseCase,
    GenerateVideoUseCase,
    ProduceAudioUseCase,
)
from shorts_studio.application.validation import validate_request
from shorts_studio.core.timer import StageTimer
from shorts_studio.domain.entities import GenerationRequest, PipelineSnapshot, PipelineState
from shorts_studio.domain.exceptions import PipelineError
from shorts_studio.domain.ports import GenerativeGateway
from shorts_studio.domain.value_objects import (
    AccountTier,
    AudioSource,
    PipelineStatus,
    ScriptMode,
)

log = logging.getLogger(__name__)

StateListener = Callable[[PipelineSnapshot], None]

MSG_SCRIPT_AUTO = "Analyzing trends & generating viral script..."
MSG_SCRIPT_CUSTOM = "Analyzing custom script & generating metadata..."
MSG_AUDIO_FILE = "Processing uploaded voiceover..."
MSG_AUDIO_RECORD = "Processing recorded voiceover..."
MSG_THUMBNAIL = "Generating Viral Thumbnail..."
MSG_VIDEO = "Initializing Veo Video Model..."
MSG_COMPLETE = "All assets generated successfully!"
MSG_UNEXPECTED = "An unexpected error occurred."


class GenerationPipeline:
    """Orchestrates one script → audio → thumbnail → video run at a time.

    The pipeline owns the PipelineState of the current run. Callers observe
    progress through ``on_update`` snapshots or the ``state`` property and
    never mutate the state themselves.
    """

    def __init__(self, gateway: GenerativeGateway) -> None:
        self._gateway = gateway
        self._state = PipelineState()
        self._listener: StateListener | None = None

    @property
    def state(self) -> PipelineSnapshot:
        """Snapshot of the current (or last) run."""
        return self._state.snapshot()

    async def run(
        self,
        request: GenerationRequest,
        tier: AccountTier = AccountTier.FREE,
        on_update: StateListener | None = None,
    ) -> PipelineSnapshot:
        """Execute one run to a terminal state.

        Args:
            request: Validated-on-entry generation request.
            tier: Effective account tier.
            on_update: Receives a snapshot after every state change.

        Returns:
            The terminal snapshot (COMPLETE or ERROR).

        Raises:
            ValidationError: If the request fails pre-flight checks.
            UpgradeRequiredError: If a free account selected Pro-only options.
        """
        validate_request(request, tier)

        log.info("=" * 60)
        log.info("🤖 SHORTS STUDIO — NEW RUN")
        log.info("📅 %s", datetime.now().strftime("%Y-%m-%d %H:%M:%S"))
        log.info("=" * 60)

        self._state = PipelineState()
        self._listener = on_update
        timer = StageTimer()

        try:
            await self._execute(request, timer)
        except PipelineError as e:
            log.error("❌ PIPELINE FAILED at stage '%s': %s", e.stage, e)
            self._state.fail(str(e) or MSG_UNEXPECTED)
            self._publish()
        except Exception as e:
            log.exception("❌ UNEXPECTED ERROR: %s", e)
            self._state.fail(str(e) or MSG_UNEXPECTED)
            self._publish()
        finally:
            timer.summary()
            self._listener = None

        return self._state.snapshot()

    async def _execute(self, request: GenerationRequest, timer: StageTimer) -> None:
        state = self._state

        # ── Stage 1: Script ──
        state.transition(
            PipelineStatus.GENERATING_SCRIPT,
            MSG_SCRIPT_AUTO if request.script_mode == ScriptMode.AUTO else MSG_SCRIPT_CUSTOM,
        )
        self._publish()
        with timer.stage("Script"):
            script = await GenerateScriptUseCase(self._gateway).execute(request)
        state.merge_script(script)
        state.transition(PipelineStatus.GENERATING_ASSETS)
        self._publish()

        # ── Stage 2: Audio ──
        self._report(self._audio_message(request))
        with timer.stage("Audio"):
            audio = await ProduceAudioUseCase(self._gateway).execute(request, script)
        state.merge_audio(audio)
        self._publish()

        # ── Stage 3: Thumbnail (optional) ──
        if request.include_thumbnail and script.thumbnail_prompt:
            self._report(MSG_THUMBNAIL)
            with timer.stage("Thumbnail"):
                thumbnail = await GenerateThumbnailUseCase(self._gateway).execute(
                    script.thumbnail_prompt
                )
            state.merge_thumbnail(thumbnail)
            self._publish()
        elif request.include_thumbnail:
            log.info("⏭️  No thumbnail prompt in the script, skipping thumbnail")

        # ── Stage 4: Video ──
        self._report(MSG_VIDEO)
        with timer.stage("Video"):
            video = await GenerateVideoUseCase(self._gateway).execute(
                script.visual_prompt, request.aspect_ratio, self._report
            )
        state.merge_video(video)

        state.transition(PipelineStatus.COMPLETE, MSG_COMPLETE)
        log.info("✅ RUN COMPLETE")
        self._publish()

    @staticmethod
    def _audio_message(request: GenerationRequest) -> str:
        if request.audio_source == AudioSource.FILE:
            return MSG_AUDIO_FILE
        if request.audio_source == AudioSource.RECORD:
            return MSG_AUDIO_RECORD
        return f"Synthesizing AI Voiceover ({request.effective_voice})..."

    def _report(self, message: str) -> None:
        self._state.report(message)
        self._publish()

    def _publish(self) -> None:
        """Hand a fresh snapshot to the listener (listener failures are non-fatal)."""
        if self._listener is None:
            return
        try:
            self._listener(self._state.snapshot())
        except Exception as e:
            log.warning("⚠️  State listener failed (non-fatal): %s", e)
