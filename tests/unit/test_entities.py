"""Tests for domain entities."""

from __future__ import annotations

from pathlib import Path

import pytest

from shorts_studio.domain.catalogs import CUSTOM_VOICE
from shorts_studio.domain.entities import (
    GenerationRequest,
    MediaAsset,
    PipelineState,
    ScriptArtifact,
)
from shorts_studio.domain.exceptions import StateTransitionError
from shorts_studio.domain.value_objects import PipelineStatus, ScriptMode


class TestGenerationRequest:
    """Tests for derived request properties."""

    def test_required_fields_base(self, cats_request: GenerationRequest) -> None:
        assert cats_request.required_script_fields() == [
            "title",
            "visualPrompt",
            "tags",
            "script",
        ]

    def test_required_fields_custom_script(self) -> None:
        request = GenerationRequest(script_mode=ScriptMode.CUSTOM, custom_script="My words.")
        assert "script" not in request.required_script_fields()

    def test_required_fields_with_extras(self) -> None:
        request = GenerationRequest(topic="x", include_captions=True, include_thumbnail=True)
        required = request.required_script_fields()
        assert "captions" in required
        assert "thumbnailPrompt" in required

    def test_captions_not_required_by_default(self, cats_request: GenerationRequest) -> None:
        assert "captions" not in cats_request.required_script_fields()

    def test_custom_script_ignored_in_auto_mode(self) -> None:
        request = GenerationRequest(topic="cats", custom_script="left over text")
        assert request.effective_custom_script is None
        assert request.effective_topic == "cats"

    def test_effective_voice_custom(self) -> None:
        request = GenerationRequest(voice=CUSTOM_VOICE, custom_voice_name="  Aoede ")
        assert request.effective_voice == "Aoede"

    def test_effective_voice_catalog(self) -> None:
        assert GenerationRequest(voice="eleven_adam").effective_voice == "eleven_adam"


class TestMediaAsset:
    """Tests for the in-memory media reference."""

    def test_data_uri(self) -> None:
        media = MediaAsset(data=b"abc", mime_type="image/png")
        assert media.data_uri == "data:image/png;base64,YWJj"

    def test_extension(self) -> None:
        assert MediaAsset(data=b"", mime_type="audio/wav").extension == ".wav"
        assert MediaAsset(data=b"", mime_type="video/mp4; codecs=avc1").extension == ".mp4"
        assert MediaAsset(data=b"", mime_type="application/x-unknown-thing").extension == ".bin"

    def test_save(self, tmp_path: Path) -> None:
        target = tmp_path / "nested" / "clip.wav"
        MediaAsset(data=b"123", mime_type="audio/wav").save(target)
        assert target.read_bytes() == b"123"


class TestPipelineState:
    """Tests for the pipeline state machine."""

    def _script(self) -> ScriptArtifact:
        return ScriptArtifact(title="t", tags=("a",), visual_prompt="v", script="s")

    def test_starts_idle(self) -> None:
        state = PipelineState()
        assert state.status == PipelineStatus.IDLE
        assert state.script is None and state.video is None and state.error is None

    def test_happy_path_transitions(self) -> None:
        state = PipelineState()
        state.transition(PipelineStatus.GENERATING_SCRIPT, "writing")
        state.merge_script(self._script())
        state.transition(PipelineStatus.GENERATING_ASSETS)
        state.transition(PipelineStatus.COMPLETE, "done")

        assert state.status == PipelineStatus.COMPLETE
        assert state.progress_message == "done"

    def test_cannot_skip_script_stage(self) -> None:
        state = PipelineState()
        with pytest.raises(StateTransitionError, match="Illegal transition"):
            state.transition(PipelineStatus.GENERATING_ASSETS)

    def test_error_unreachable_from_idle(self) -> None:
        with pytest.raises(StateTransitionError):
            PipelineState().fail("boom")

    def test_fail_keeps_artifacts(self) -> None:
        state = PipelineState()
        state.transition(PipelineStatus.GENERATING_SCRIPT)
        state.merge_script(self._script())
        state.transition(PipelineStatus.GENERATING_ASSETS)
        state.fail("video exploded")

        assert state.status == PipelineStatus.ERROR
        assert state.error == "video exploded"
        assert state.script is not None

    def test_terminal_state_is_frozen(self) -> None:
        state = PipelineState()
        state.transition(PipelineStatus.GENERATING_SCRIPT)
        state.fail("nope")

        with pytest.raises(StateTransitionError, match="final"):
            state.merge_script(self._script())
        with pytest.raises(StateTransitionError):
            state.report("still going?")
        with pytest.raises(StateTransitionError):
            state.transition(PipelineStatus.GENERATING_SCRIPT)

    def test_snapshot_is_a_copy(self) -> None:
        state = PipelineState()
        state.transition(PipelineStatus.GENERATING_SCRIPT, "writing")
        snapshot = state.snapshot()
        state.report("changed")

        assert snapshot.progress_message == "writing"
        assert not snapshot.is_terminal
        with pytest.raises(AttributeError):
            snapshot.status = PipelineStatus.COMPLETE  # type: ignore[misc]
