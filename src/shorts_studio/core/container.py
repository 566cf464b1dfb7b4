"""
Dependency Injection Container — wires ports to adapters.

A simple, explicit DI container that resolves domain ports to their
concrete infrastructure adapters based on application settings.

All wiring happens in one place; the container lives for one session
(CLI invocation or API process).

Usage:
    settings = Settings()
    container = Container(settings)
    pipeline = container.pipeline()
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shorts_studio.application.pipeline import GenerationPipeline
    from shorts_studio.application.use_cases import ExportAssetsUseCase
    from shorts_studio.core.config import Settings
    from shorts_studio.domain.ports import GenerativeGateway

log = logging.getLogger(__name__)


class Container:
    """Dependency injection container.

    Lazily creates and caches adapter instances. Each adapter is created
    only when first requested and reused for subsequent calls.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        log.info("🔌 DI Container initialized")

    @property
    def settings(self) -> Settings:
        return self._settings

    @lru_cache(maxsize=1)
    def gateway(self) -> GenerativeGateway:
        """Resolve GenerativeGateway → GeminiGateway."""
        from shorts_studio.infrastructure.adapters.gemini import GeminiGateway

        return GeminiGateway(self._settings)

    def pipeline(self) -> GenerationPipeline:
        """Build a pipeline bound to the shared gateway."""
        from shorts_studio.application.pipeline import GenerationPipeline

        return GenerationPipeline(self.gateway())

    def exporter(self) -> ExportAssetsUseCase:
        """Build the asset exporter for the configured output directory."""
        from shorts_studio.application.use_cases import ExportAssetsUseCase

        return ExportAssetsUseCase(self._settings.output_dir)
