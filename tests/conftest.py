from __future__ import annotations

from typing import Any

import pytest

from quiz_runner.core.quiz_importer import QuizDefinition, parse_quiz_definition
from quiz_runner.core.quiz_manager import QuizManager


def select_question(
    question_id: int,
    answers: list[tuple[int, str]],
    *,
    correct: list[int] | None = None,
    patterns: list[str] | None = None,
    **thresholds: Any,
) -> dict[str, Any]:
    """Build a raw select-mode question; keyword thresholds use camelCase keys."""

    question: dict[str, Any] = {
        "id": question_id,
        "content": f"Question {question_id}",
        "mode": "select",
        "answers": [{"id": answer_id, "content": content} for answer_id, content in answers],
        **thresholds,
    }
    if correct is not None:
        question["correctEntryMatch"] = {"id": correct}
    if patterns is not None:
        question["correctEntryMatch"] = {"content": patterns}
    return question


def input_question(
    question_id: int,
    *,
    patterns: list[str] | None = None,
    **thresholds: Any,
) -> dict[str, Any]:
    question: dict[str, Any] = {
        "id": question_id,
        "content": f"Question {question_id}",
        "mode": "input",
        **thresholds,
    }
    if patterns is not None:
        question["correctEntryMatch"] = {"content": patterns}
    return question


def build_quiz_document(
    sections: list[list[dict[str, Any]]],
    *,
    mode: str = "open",
    **settings: Any,
) -> dict[str, Any]:
    """Create a raw quiz document with one section per list of questions."""

    return {
        "uid": "test-quiz",
        "version": 1,
        "title": "Test quiz",
        "mode": mode,
        "sections": [
            {"id": index, "title": f"Section {index}", "questions": questions}
            for index, questions in enumerate(sections, start=1)
        ],
        **settings,
    }


def build_definition(sections: list[list[dict[str, Any]]], **kwargs: Any) -> QuizDefinition:
    return parse_quiz_definition(build_quiz_document(sections, **kwargs))


def build_capitals_document() -> dict[str, Any]:
    """A small mixed quiz used across the session and server tests."""

    return build_quiz_document(
        [
            [
                select_question(1, [(10, "Paris"), (20, "Lyon"), (30, "Nice")], correct=[10], maxEntries=1),
                select_question(2, [(40, "Rome"), (50, "Milan")], correct=[40]),
            ],
            [
                input_question(3, patterns=["^\\s*berlin\\s*$"]),
                input_question(4, optional=True),
            ],
        ],
    )


@pytest.fixture
def capitals_definition() -> QuizDefinition:
    return parse_quiz_definition(build_capitals_document())


@pytest.fixture
def capitals_manager(capitals_definition: QuizDefinition) -> QuizManager:
    return QuizManager.from_definition(capitals_definition)
