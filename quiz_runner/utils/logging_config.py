"""Logging configuration helpers for the quiz runner."""

from __future__ import annotations

import logging
import os
from logging import Logger

_LOG_LEVEL_ENV = "QUIZ_RUNNER_LOG_LEVEL"


def configure_logging(level: str | None = None) -> Logger:
    """Configure basic logging for the application and return the package logger."""
    level_name = (level or os.getenv(_LOG_LEVEL_ENV) or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    return logging.getLogger("quiz_runner")
