"""
Stage Timer — tracks elapsed time for each pipeline stage.

Provides timing instrumentation for a single run and logs a formatted
summary when the run reaches a terminal state.

Usage:
    timer = StageTimer()
    with timer.stage("Script"):
        await generate_script(...)
    timer.summary()
"""

from __future__ import annotations

import logging
import time
from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import dataclass, field

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class StageTiming:
    """Timing record for a single stage."""

    name: str
    elapsed_seconds: float
    succeeded: bool = True


@dataclass
class StageTimer:
    """Collects per-stage timings for one pipeline run."""

    _start: float = field(default_factory=time.monotonic, init=False, repr=False)
    stages: list[StageTiming] = field(default_factory=list, init=False)

    @contextmanager
    def stage(self, name: str) -> Generator[None, None, None]:
        """Time a stage; a stage that raises is recorded as failed.

        Args:
            name: Display name for the stage.
        """
        log.info("⏱️  Starting: %s", name)
        started = time.monotonic()
        succeeded = False
        try:
            yield
            succeeded = True
        finally:
            elapsed = time.monotonic() - started
            self.stages.append(StageTiming(name, elapsed, succeeded))
            if succeeded:
                log.info("⏱️  %s completed in %.1fs", name, elapsed)
            else:
                log.info("⏱️  %s failed after %.1fs", name, elapsed)

    def summary(self) -> float:
        """Log a formatted timing summary.

        Returns:
            Total elapsed time in seconds.
        """
        total = self.total_elapsed
        log.info("=" * 50)
        log.info("⏱️  TIMING SUMMARY")
        log.info("=" * 50)
        for s in self.stages:
            mark = "" if s.succeeded else "  (failed)"
            log.info("  %-35s %6.1fs%s", s.name, s.elapsed_seconds, mark)
        log.info("  %-35s %6.1fs", "TOTAL", total)
        log.info("=" * 50)
        return total

    @property
    def total_elapsed(self) -> float:
        """Total elapsed time since timer creation."""
        return time.monotonic() - self._start
