"""Utilities for persisting event logs as JSON and reading them back."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from quiz_runner.core.event_log import EventLogDocument


class EventLogImportError(Exception):
    """Raised when a persisted event log cannot be parsed."""


def save_event_log_to_file(file_path: Path, document: EventLogDocument) -> None:
    """Persist the event log document to disk, creating parent folders."""

    file_path = file_path.resolve()
    file_path.parent.mkdir(parents=True, exist_ok=True)
    payload = document.model_dump(by_alias=True, mode="json")
    file_path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")


def load_event_log_from_file(file_path: Path) -> EventLogDocument:
    text = file_path.read_text(encoding="utf-8")
    try:
        return EventLogDocument.model_validate_json(text)
    except ValidationError as exc:
        raise EventLogImportError(f"Invalid event log in {file_path}: {exc}") from exc
