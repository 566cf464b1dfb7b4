"""
Domain Exceptions — typed error hierarchy for the pipeline.

Each failure kind has its own exception type, enabling precise error
handling at the orchestration layer and at the presentation boundary.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base exception for all pipeline errors."""

    def __init__(self, message: str, stage: str = "", cause: Exception | None = None):
        self.stage = stage
        self.cause = cause
        super().__init__(message)


class ConfigurationError(PipelineError):
    """Raised when configuration (the API credential) is missing or invalid."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message, stage="configuration", cause=cause)


class ValidationError(PipelineError):
    """Raised when a request fails pre-flight checks. The run never starts."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message, stage="validation", cause=cause)


class UpgradeRequiredError(ValidationError):
    """Raised when a free account selects restricted options.

    Attributes:
        options: Values of the restricted options that triggered the refusal.
    """

    def __init__(self, options: list[str]):
        self.options = list(options)
        super().__init__(
            "Upgrade required: the selected options are only available on the Pro plan "
            f"({', '.join(self.options)})"
        )


class GenerationError(PipelineError):
    """Raised when a remote stage returns an unusable, empty, or error payload."""

    def __init__(self, message: str, stage: str = "generation", cause: Exception | None = None):
        super().__init__(message, stage=stage, cause=cause)


class TransportError(GenerationError):
    """Raised when a network transfer fails (e.g. the final video download)."""


class StateTransitionError(PipelineError):
    """Raised on an illegal pipeline state change (e.g. mutating a finished run)."""

    def __init__(self, message: str):
        super().__init__(message, stage="state")
