"""Network configuration constants for the quiz runner."""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer, using %d", name, raw, default)
        return default


DEFAULT_HOST: str = os.getenv("QUIZ_RUNNER_HOST", "127.0.0.1")
DEFAULT_PORT: int = _env_int("QUIZ_RUNNER_PORT", 8000)
