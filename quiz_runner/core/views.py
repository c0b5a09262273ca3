"""Immutable, serializable read views of a quiz session."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from quiz_runner.core.models import QuestionMode, QuizMode, QuizStatus


class AnswerViewStatus(str, Enum):
    PENDING = "pending"
    ANSWERED = "answered"
    ANSWERED_CORRECTLY = "answeredCorrectly"
    ANSWERED_WRONGLY = "answeredWrongly"


class QuestionViewStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "inProgress"
    ANSWERED = "answered"
    ANSWERED_CORRECTLY = "answeredCorrectly"
    ANSWERED_WRONGLY = "answeredWrongly"


class _ViewModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_dict(self) -> dict[str, object]:
        """Return the JSON-ready camelCase representation."""
        return self.model_dump(by_alias=True, mode="json")


class AnswerView(_ViewModel):
    id: int | None
    content: str
    status: AnswerViewStatus


class QuestionView(_ViewModel):
    id: int
    status: QuestionViewStatus
    title: str | None
    content: str
    content_html: str
    mode: QuestionMode
    optional: bool
    min_entries: int | None
    max_entries: int | None
    answers: tuple[AnswerView, ...]


class SectionView(_ViewModel):
    id: int
    title: str | None
    description: str | None
    questions: tuple[QuestionView, ...]


class QuizView(_ViewModel):
    uid: str
    version: int
    title: str | None
    description: str | None
    mode: QuizMode
    status: QuizStatus
    answered_questions: int
    correct_questions: int
    wrong_questions: int
    generation: int
    sections: tuple[SectionView, ...]
