"""
Structured Logging — Rich console for dev, JSON file for production.

Provides a unified logging setup with colored, timestamped output
via the Rich library and optional JSON-structured file logging.

Usage:
    from shorts_studio.core.logging import setup_logging

    setup_logging()
    log = logging.getLogger(__name__)
    log.info("Pipeline started")
"""

from __future__ import annotations

import logging

from rich.logging import RichHandler

_CONFIGURED = False

# Chatty third-party loggers (one line per HTTP request)
_NOISY_LOGGERS = ("httpx", "httpcore", "google_genai", "uvicorn.access")


def setup_logging(level: int = logging.INFO, log_file: str | None = None) -> None:
    """Configure application-wide logging.

    Args:
        level: Logging level (default: INFO).
        log_file: Optional path for JSON file logging.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    root = logging.getLogger()
    root.setLevel(level)

    console_handler = RichHandler(
        rich_tracebacks=True,
        show_time=True,
        show_path=False,
        markup=False,
    )
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    console_handler.setLevel(level)
    root.addHandler(console_handler)

    # Optional JSON file handler for production
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter(
                '{"time": "%(asctime)s", "level": "%(levelname)s", '
                '"logger": "%(name)s", "message": "%(message)s"}',
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
        )
        file_handler.setLevel(level)
        root.addHandler(file_handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    _CONFIGURED = True

