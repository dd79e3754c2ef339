"""Logging configuration for the query understanding service."""

from __future__ import annotations

import logging
import os


def configure_logging(level: str | None = None) -> None:
    """Configure Python logging for the process.

    Query text is logged only at DEBUG level; INFO lines carry labels, counts and latency.
    """

    log_level = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    # dateparser logs every language detection attempt at INFO.
    logging.getLogger("dateparser").setLevel(logging.WARNING)
