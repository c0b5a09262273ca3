"""Utilities for importing quiz definitions from JSON documents.

Document format (camelCase keys, snake_case also accepted):

    {
      "uid": "geography", "version": 1, "mode": "linear",
      "blockAnswerUpdatesFor": ["answeredCorrectly"],
      "minCorrectQuestions": 2,
      "sections": [
        {"id": 1, "title": "Capitals", "questions": [
          {"id": 1, "content": "Capital of France?", "mode": "select",
           "maxEntries": 1, "correctEntryMatch": {"id": [10]},
           "answers": [{"id": 10, "content": "Paris"},
                       {"id": 20, "content": "Lyon"}]},
          {"id": 2, "content": "Capital of Italy?", "mode": "input",
           "correctEntryMatch": {"content": ["^\\\\s*rom(e|a)\\\\s*$"]}}
        ]}
      ]
    }

The models here only check the document shape. Cross-references, duplicate
ids and pattern syntax are the compiler's job, so a definition that loads
can still be rejected by ``compile_quiz``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from quiz_runner.core.models import QuestionMode, QuestionStateStatus, QuizMode


class QuizImportError(Exception):
    """Raised when a quiz definition cannot be parsed."""


class _DefinitionModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class AnswerDefinition(_DefinitionModel):
    id: int
    content: str


class EntryMatchDefinition(_DefinitionModel):
    """Raw correct-entry rule: exactly one of ``id`` or ``content`` is expected."""

    id: list[int] | None = None
    content: list[str] | None = None


class QuestionDefinition(_DefinitionModel):
    id: int
    title: str | None = None
    content: str
    mode: QuestionMode
    optional: bool = False
    min_entries: int | None = Field(default=None, ge=0)
    max_entries: int | None = Field(default=None, ge=0)
    min_correct_entries: int | None = Field(default=None, ge=0)
    max_wrong_entries: int | None = Field(default=None, ge=0)
    correct_entry_match: EntryMatchDefinition | None = None
    answers: list[AnswerDefinition] | None = None


class SectionDefinition(_DefinitionModel):
    id: int
    title: str | None = None
    description: str | None = None
    questions: list[QuestionDefinition] = Field(default_factory=list)


class QuizDefinition(_DefinitionModel):
    uid: str
    version: int
    title: str | None = None
    description: str | None = None
    mode: QuizMode
    block_answer_updates_for: list[QuestionStateStatus] | None = None
    min_answered_questions: int | None = Field(default=None, ge=0)
    max_answered_questions: int | None = Field(default=None, ge=0)
    min_correct_questions: int | None = Field(default=None, ge=0)
    max_wrong_questions: int | None = Field(default=None, ge=0)
    sections: list[SectionDefinition] = Field(default_factory=list)


def load_quiz_from_file(file_path: Path) -> QuizDefinition:
    text = file_path.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise QuizImportError(f"Quiz file {file_path} is not valid JSON: {exc}") from exc
    return parse_quiz_definition(data)


def parse_quiz_definition(data: Any) -> QuizDefinition:
    """Validate an already-parsed JSON document into a ``QuizDefinition``."""
    try:
        return QuizDefinition.model_validate(data)
    except ValidationError as exc:
        raise QuizImportError(f"Invalid quiz definition: {exc}") from exc
