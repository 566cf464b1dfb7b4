"""
Data Transfer Objects — clean boundaries between layers.

DTOs carry the result of a run to the presentation layer without
exposing in-memory media payloads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from shorts_studio.domain.entities import PipelineSnapshot
from shorts_studio.domain.value_objects import PipelineStatus


@dataclass(frozen=True)
class RunSummary:
    """Presentation-friendly outcome of one run."""

    run_id: str
    status: PipelineStatus
    progress_message: str = ""
    error: str | None = None
    title: str = ""
    tags: tuple[str, ...] = ()
    script: str = ""
    captions: str | None = None
    voice_id: str = ""
    files: dict[str, Path] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.status == PipelineStatus.COMPLETE

    @classmethod
    def from_snapshot(
        cls,
        snapshot: PipelineSnapshot,
        run_id: str,
        files: dict[str, Path] | None = None,
    ) -> RunSummary:
        script = snapshot.script
        return cls(
            run_id=run_id,
            status=snapshot.status,
            progress_message=snapshot.progress_message,
            error=snapshot.error,
            title=script.title if script else "",
            tags=script.tags if script else (),
            script=script.script if script else "",
            captions=script.captions if script else None,
            voice_id=snapshot.audio.voice_id if snapshot.audio else "",
            files=dict(files or {}),
        )
