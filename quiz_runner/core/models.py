"""Domain models for compiled quizzes and per-session scoring state."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
import re


class QuizMode(str, Enum):
    """How questions become available to the participant."""

    OPEN = "open"
    LINEAR = "linear"


class QuestionMode(str, Enum):
    SELECT = "select"
    INPUT = "input"


class QuestionStateStatus(str, Enum):
    """Derived status of a question that has submitted answers."""

    IN_PROGRESS = "inProgress"
    ANSWERED = "answered"
    ANSWERED_CORRECTLY = "answeredCorrectly"
    ANSWERED_WRONGLY = "answeredWrongly"


class AnswerStateStatus(str, Enum):
    ANSWERED = "answered"
    ANSWERED_CORRECTLY = "answeredCorrectly"
    ANSWERED_WRONGLY = "answeredWrongly"


class QuizStatus(str, Enum):
    IN_PROGRESS = "inProgress"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class IdEntryMatch:
    """Correct entries identified by answer id."""

    answer_ids: tuple[int, ...]

    def match_answer_id(self, answer_id: int) -> int | None:
        """Return the index of the rule satisfied by ``answer_id``."""
        try:
            return self.answer_ids.index(answer_id)
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class ContentEntryMatch:
    """Correct entries identified by case-insensitive patterns over content."""

    patterns: tuple[re.Pattern[str], ...]

    def match_content(self, content: str) -> int | None:
        """Return the index of the first pattern found in ``content``."""
        for index, pattern in enumerate(self.patterns):
            if pattern.search(content):
                return index
        return None


CompiledEntryMatch = IdEntryMatch | ContentEntryMatch


@dataclass(frozen=True, slots=True)
class Answer:
    id: int
    content: str


@dataclass(frozen=True, slots=True)
class Question:
    """A compiled question. Answers only exist for select-mode questions."""

    id: int
    title: str | None
    content: str
    mode: QuestionMode
    optional: bool
    min_entries: int | None
    max_entries: int | None
    min_correct_entries: int | None
    max_wrong_entries: int | None
    correct_entry_match: CompiledEntryMatch | None
    answer_ids: tuple[int, ...]
    answers: Mapping[int, Answer]


@dataclass(frozen=True, slots=True)
class Section:
    id: int
    title: str | None
    description: str | None
    question_ids: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class CompiledQuiz:
    """Validated, lookup-optimized quiz definition shared read-only by a session."""

    uid: str
    version: int
    title: str | None
    description: str | None
    mode: QuizMode
    block_answer_updates_for: frozenset[QuestionStateStatus]
    section_ids: tuple[int, ...]
    sections: Mapping[int, Section]
    question_ids: tuple[int, ...]
    questions: Mapping[int, Question]
    question_positions: Mapping[int, int]
    min_answered_questions: int | None = None
    max_answered_questions: int | None = None
    min_correct_questions: int | None = None
    max_wrong_questions: int | None = None

    def previous_question_id(self, question_id: int) -> int | None:
        """Return the id preceding ``question_id`` in flattened order."""
        position = self.question_positions.get(question_id)
        if not position:
            return None
        return self.question_ids[position - 1]


@dataclass(frozen=True, slots=True)
class AnswerState:
    """A single submitted entry and its classification."""

    answer_id: int | None
    content: str
    status: AnswerStateStatus
    matched_rule: int | None = None  # Set only for ANSWERED_CORRECTLY


@dataclass(frozen=True, slots=True)
class QuestionState:
    answer_states: tuple[AnswerState, ...]
    status: QuestionStateStatus
