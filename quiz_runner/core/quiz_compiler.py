"""Compile validated quiz definitions into immutable, lookup-optimized quizzes."""

from __future__ import annotations

import logging
import re
from types import MappingProxyType

from quiz_runner.core.models import (
    Answer,
    CompiledEntryMatch,
    CompiledQuiz,
    ContentEntryMatch,
    IdEntryMatch,
    Question,
    Section,
)
from quiz_runner.core.quiz_importer import (
    EntryMatchDefinition,
    QuestionDefinition,
    QuizDefinition,
)

logger = logging.getLogger(__name__)


class QuizCompileError(Exception):
    """Base class for definitions that cannot be turned into a quiz."""

    kind = "compileError"


class DuplicateSectionIdError(QuizCompileError):
    kind = "duplicateSectionId"

    def __init__(self, section_id: int) -> None:
        super().__init__(f"Section id {section_id} is declared more than once.")
        self.section_id = section_id


class DuplicateQuestionIdError(QuizCompileError):
    kind = "duplicateQuestionId"

    def __init__(self, section_id: int, question_id: int) -> None:
        super().__init__(
            f"Question id {question_id} in section {section_id} is already used in this quiz."
        )
        self.section_id = section_id
        self.question_id = question_id


class DuplicateAnswerIdError(QuizCompileError):
    kind = "duplicateAnswerId"

    def __init__(self, question_id: int, answer_id: int) -> None:
        super().__init__(f"Answer id {answer_id} is declared more than once in question {question_id}.")
        self.question_id = question_id
        self.answer_id = answer_id


class PatternCompilationError(QuizCompileError):
    kind = "patternCompilationError"

    def __init__(self, question_id: int, pattern: str, reason: str) -> None:
        super().__init__(f"Invalid pattern {pattern!r} in question {question_id}: {reason}")
        self.question_id = question_id
        self.pattern = pattern


class MalformedEntryMatchError(QuizCompileError):
    kind = "malformedEntryMatch"

    def __init__(self, question_id: int) -> None:
        super().__init__(
            f"Correct entry rule of question {question_id} must declare exactly one of 'id' or 'content'."
        )
        self.question_id = question_id


def compile_quiz(definition: QuizDefinition) -> CompiledQuiz:
    """Validate ``definition`` and build the compiled quiz.

    Sections and questions keep their declaration order. Question ids must be
    unique across the whole quiz, not just within their section. No partial
    quiz is returned: the first problem found raises a ``QuizCompileError``.
    """
    section_ids: list[int] = []
    sections: dict[int, Section] = {}
    question_ids: list[int] = []
    questions: dict[int, Question] = {}

    for section in definition.sections:
        if section.id in sections:
            raise DuplicateSectionIdError(section.id)

        for question in section.questions:
            if question.id in questions:
                raise DuplicateQuestionIdError(section.id, question.id)
            questions[question.id] = _compile_question(question)
            question_ids.append(question.id)

        section_ids.append(section.id)
        sections[section.id] = Section(
            id=section.id,
            title=section.title,
            description=section.description,
            question_ids=tuple(question.id for question in section.questions),
        )

    quiz = CompiledQuiz(
        uid=definition.uid,
        version=definition.version,
        title=definition.title,
        description=definition.description,
        mode=definition.mode,
        block_answer_updates_for=frozenset(definition.block_answer_updates_for or ()),
        section_ids=tuple(section_ids),
        sections=MappingProxyType(sections),
        question_ids=tuple(question_ids),
        questions=MappingProxyType(questions),
        question_positions=MappingProxyType(
            {question_id: position for position, question_id in enumerate(question_ids)}
        ),
        min_answered_questions=definition.min_answered_questions,
        max_answered_questions=definition.max_answered_questions,
        min_correct_questions=definition.min_correct_questions,
        max_wrong_questions=definition.max_wrong_questions,
    )
    logger.info(
        "Compiled quiz %s v%s: %d section(s), %d question(s), mode=%s",
        quiz.uid,
        quiz.version,
        len(quiz.section_ids),
        len(quiz.question_ids),
        quiz.mode.value,
    )
    return quiz


def _compile_question(question: QuestionDefinition) -> Question:
    answer_ids: list[int] = []
    answers: dict[int, Answer] = {}
    for answer in question.answers or []:
        if answer.id in answers:
            raise DuplicateAnswerIdError(question.id, answer.id)
        answer_ids.append(answer.id)
        answers[answer.id] = Answer(id=answer.id, content=answer.content)

    entry_match = None
    if question.correct_entry_match is not None:
        entry_match = _compile_entry_match(question.id, question.correct_entry_match)

    return Question(
        id=question.id,
        title=question.title,
        content=question.content,
        mode=question.mode,
        optional=question.optional,
        min_entries=question.min_entries,
        max_entries=question.max_entries,
        min_correct_entries=question.min_correct_entries,
        max_wrong_entries=question.max_wrong_entries,
        correct_entry_match=entry_match,
        answer_ids=tuple(answer_ids),
        answers=MappingProxyType(answers),
    )


def _compile_entry_match(question_id: int, entry_match: EntryMatchDefinition) -> CompiledEntryMatch:
    if (entry_match.id is None) == (entry_match.content is None):
        raise MalformedEntryMatchError(question_id)

    if entry_match.id is not None:
        return IdEntryMatch(answer_ids=tuple(entry_match.id))

    patterns: list[re.Pattern[str]] = []
    for pattern in entry_match.content or []:
        try:
            patterns.append(re.compile(pattern, re.IGNORECASE))
        except re.error as exc:
            raise PatternCompilationError(question_id, pattern, str(exc)) from exc
    return ContentEntryMatch(patterns=tuple(patterns))
