"""
Request Validation — pre-flight checks that gate the start of a run.

A request that fails here never reaches the gateway: no state transition
happens and no network call is made.
"""

from __future__ import annotations

import logging

from shorts_studio.domain.catalogs import (
    CUSTOM_VOICE,
    DURATION_OPTIONS,
    VISUAL_STYLE_OPTIONS,
    VOICE_OPTIONS,
    is_restricted,
)
from shorts_studio.domain.entities import GenerationRequest
from shorts_studio.domain.exceptions import UpgradeRequiredError, ValidationError
from shorts_studio.domain.value_objects import AccountTier, AudioSource, ScriptMode

log = logging.getLogger(__name__)


def restricted_selections(request: GenerationRequest) -> list[str]:
    """Values of the Pro-only options selected by the request.

    The voice only counts when the audio actually comes from AI synthesis.
    """
    selected: list[str] = []
    if request.audio_source == AudioSource.AI and (
        request.voice == CUSTOM_VOICE or is_restricted(VOICE_OPTIONS, request.voice)
    ):
        selected.append(request.voice)
    if is_restricted(VISUAL_STYLE_OPTIONS, request.visual_style):
        selected.append(request.visual_style)
    if is_restricted(DURATION_OPTIONS, request.duration):
        selected.append(request.duration)
    return selected


def validate_request(request: GenerationRequest, tier: AccountTier) -> None:
    """Check that a run may start.

    Args:
        request: The request to check.
        tier: Effective account tier of the caller.

    Raises:
        ValidationError: If required input is missing.
        UpgradeRequiredError: If a free account selected Pro-only options.
    """
    if request.script_mode == ScriptMode.AUTO and not request.topic.strip():
        raise ValidationError("A topic is required to generate a script")
    if request.script_mode == ScriptMode.CUSTOM and not request.custom_script.strip():
        raise ValidationError("A custom script is required in custom script mode")

    if request.audio_source == AudioSource.FILE and request.uploaded_audio is None:
        raise ValidationError("Upload a voiceover file or choose another audio source")
    if request.audio_source == AudioSource.RECORD and request.recorded_audio is None:
        raise ValidationError("Record a voiceover or choose another audio source")
    if (
        request.audio_source == AudioSource.AI
        and request.voice == CUSTOM_VOICE
        and not request.custom_voice_name.strip()
    ):
        raise ValidationError("Enter a custom voice name")

    if tier == AccountTier.FREE:
        restricted = restricted_selections(request)
        if restricted:
            log.info("🔒 Pro options selected on a free account: %s", ", ".join(restricted))
            raise UpgradeRequiredError(restricted)
