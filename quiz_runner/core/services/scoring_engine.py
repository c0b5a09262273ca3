"""Service that applies answer events and derives question and quiz status."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from quiz_runner.constants.quiz_constants import DEFAULT_MIN_CORRECT_ENTRIES, DEFAULT_MIN_ENTRIES
from quiz_runner.core.event_log import ClearAnswers, Event, EventLog, InputAnswers, SelectAnswers
from quiz_runner.core.models import (
    AnswerState,
    AnswerStateStatus,
    CompiledQuiz,
    ContentEntryMatch,
    IdEntryMatch,
    Question,
    QuestionState,
    QuestionStateStatus,
    QuizMode,
    QuizStatus,
    Section,
)

logger = logging.getLogger(__name__)

_UNRESOLVED_STATUSES = frozenset(
    {QuestionStateStatus.IN_PROGRESS, QuestionStateStatus.ANSWERED_WRONGLY}
)


class QuizStateError(Exception):
    """Base class for operations rejected against the current session state."""

    kind = "stateError"


class SectionNotFoundError(QuizStateError):
    kind = "sectionNotFound"

    def __init__(self, section_id: int) -> None:
        super().__init__(f"Section {section_id} does not exist.")
        self.section_id = section_id


class QuestionNotFoundError(QuizStateError):
    kind = "questionNotFound"

    def __init__(self, question_id: int) -> None:
        super().__init__(f"Question {question_id} does not exist.")
        self.question_id = question_id


class AnswerNotFoundError(QuizStateError):
    kind = "answerNotFound"

    def __init__(self, question_id: int, answer_id: int) -> None:
        super().__init__(f"Question {question_id} has no answer {answer_id}.")
        self.question_id = question_id
        self.answer_id = answer_id


class QuestionNotAvailableError(QuizStateError):
    kind = "questionNotAvailable"

    def __init__(self, question_id: int) -> None:
        super().__init__(
            f"Question {question_id} is locked until the previous question is answered correctly."
        )
        self.question_id = question_id


class QuestionCanNotBeUpdatedError(QuizStateError):
    kind = "questionCanNotBeUpdated"

    def __init__(self, question_id: int, status: QuestionStateStatus) -> None:
        super().__init__(f"Question {question_id} can no longer be updated (status {status.value}).")
        self.question_id = question_id
        self.status = status


class QuizFinishedError(QuizStateError):
    kind = "quizFinished"

    def __init__(self, status: QuizStatus) -> None:
        super().__init__(f"Quiz is finished (status {status.value}); answers can no longer change.")
        self.status = status


class ScoringEngine:
    """Owns the scoring state and event log of one quiz session.

    Events are applied one at a time. An event is either fully applied (state
    replaced, log appended, generation advanced) or rejected with a
    ``QuizStateError`` and nothing changed.
    """

    def __init__(self, quiz: CompiledQuiz) -> None:
        self._quiz = quiz
        self._question_states: dict[int, QuestionState] = {}
        self._event_log = EventLog(quiz.uid, quiz.version)

    @property
    def quiz(self) -> CompiledQuiz:
        return self._quiz

    @property
    def event_log(self) -> EventLog:
        return self._event_log

    @property
    def generation(self) -> int:
        return self._event_log.generation

    @property
    def question_states(self) -> Mapping[int, QuestionState]:
        return MappingProxyType(self._question_states)

    def get_question_state(self, question_id: int) -> QuestionState | None:
        return self._question_states.get(question_id)

    # --- Event application ---

    def apply(self, event: Event) -> None:
        try:
            if isinstance(event, SelectAnswers):
                self._apply_select_answers(event)
            elif isinstance(event, InputAnswers):
                self._apply_input_answers(event)
            elif isinstance(event, ClearAnswers):
                self._apply_clear_answers(event)
            else:
                raise TypeError(f"Unsupported event type: {type(event).__name__}")
        except QuizStateError as exc:
            logger.info("Rejected %s for question %s: %s", event.event, event.question_id, exc.kind)
            raise

        self._event_log.push(event)

    def _apply_select_answers(self, event: SelectAnswers) -> None:
        question = self.find_question_for_update(event.question_id)
        answer_ids = _truncate(event.answer_ids, question.max_entries)
        answer_states = [_classify_selection(question, answer_id) for answer_id in answer_ids]
        self._question_states[question.id] = build_question_state(question, answer_states)

    def _apply_input_answers(self, event: InputAnswers) -> None:
        question = self.find_question_for_update(event.question_id)
        inputs = _truncate(event.inputs, question.max_entries)
        answer_states = [_classify_input(question, content) for content in inputs]
        self._question_states[question.id] = build_question_state(question, answer_states)

    def _apply_clear_answers(self, event: ClearAnswers) -> None:
        question = self.find_question_for_update(event.question_id)
        self._question_states.pop(question.id, None)

    # --- Lookups ---

    def find_section(self, section_id: int) -> Section:
        section = self._quiz.sections.get(section_id)
        if section is None:
            raise SectionNotFoundError(section_id)
        return section

    def find_question(self, question_id: int) -> Question:
        """Return the question if it exists and is currently available."""
        question = self._quiz.questions.get(question_id)
        if question is None:
            raise QuestionNotFoundError(question_id)

        if self._quiz.mode is QuizMode.LINEAR:
            previous_id = self._quiz.previous_question_id(question_id)
            if previous_id is not None:
                previous_state = self._question_states.get(previous_id)
                if (
                    previous_state is None
                    or previous_state.status is not QuestionStateStatus.ANSWERED_CORRECTLY
                ):
                    raise QuestionNotAvailableError(question_id)
        return question

    def find_question_for_update(self, question_id: int) -> Question:
        status = self.quiz_status()
        if status is not QuizStatus.IN_PROGRESS:
            raise QuizFinishedError(status)

        question = self.find_question(question_id)
        state = self._question_states.get(question_id)
        if state is not None and state.status in self._quiz.block_answer_updates_for:
            raise QuestionCanNotBeUpdatedError(question_id, state.status)
        return question

    # --- Aggregates ---

    def count_questions(self, *statuses: QuestionStateStatus) -> int:
        return sum(1 for state in self._question_states.values() if state.status in statuses)

    def answered_question_count(self) -> int:
        return self.count_questions(
            QuestionStateStatus.ANSWERED,
            QuestionStateStatus.ANSWERED_CORRECTLY,
            QuestionStateStatus.ANSWERED_WRONGLY,
        )

    def correct_question_count(self) -> int:
        return self.count_questions(QuestionStateStatus.ANSWERED_CORRECTLY)

    def wrong_question_count(self) -> int:
        return self.count_questions(QuestionStateStatus.ANSWERED_WRONGLY)

    def quiz_status(self) -> QuizStatus:
        """Derive the quiz status.

        Required questions must all be resolved before the global thresholds
        are looked at. Thresholds are then checked in a fixed order: the
        answered-count gate, the wrong-count failure, the correct-count and
        answered-count completions. Once the gates pass and nothing fails, the
        quiz is completed whether or not a completion threshold was reached.
        """
        quiz = self._quiz
        for question_id in quiz.question_ids:
            if quiz.questions[question_id].optional:
                continue
            state = self._question_states.get(question_id)
            if state is None or state.status in _UNRESOLVED_STATUSES:
                return QuizStatus.IN_PROGRESS

        answered = self.answered_question_count()
        if quiz.min_answered_questions is not None and answered < quiz.min_answered_questions:
            return QuizStatus.IN_PROGRESS
        if quiz.max_wrong_questions is not None and self.wrong_question_count() >= quiz.max_wrong_questions:
            return QuizStatus.FAILED
        if quiz.min_correct_questions is not None and self.correct_question_count() >= quiz.min_correct_questions:
            return QuizStatus.COMPLETED
        if quiz.max_answered_questions is not None and answered >= quiz.max_answered_questions:
            return QuizStatus.COMPLETED
        return QuizStatus.COMPLETED


def build_question_state(question: Question, answer_states: Iterable[AnswerState]) -> QuestionState:
    """Aggregate submitted entries into a question state.

    Correct entries are counted by distinct matched rule, so two submissions
    satisfying the same rule count once toward ``min_correct_entries``.
    """
    answer_states = tuple(answer_states)
    min_entries = question.min_entries if question.min_entries is not None else DEFAULT_MIN_ENTRIES
    if len(answer_states) < min_entries:
        return QuestionState(answer_states=answer_states, status=QuestionStateStatus.IN_PROGRESS)

    neutral_count = 0
    wrong_count = 0
    matched_rules: set[int] = set()
    for answer_state in answer_states:
        if answer_state.status is AnswerStateStatus.ANSWERED:
            neutral_count += 1
        elif answer_state.status is AnswerStateStatus.ANSWERED_WRONGLY:
            wrong_count += 1
        elif answer_state.matched_rule is not None:
            matched_rules.add(answer_state.matched_rule)

    min_correct = (
        question.min_correct_entries
        if question.min_correct_entries is not None
        else DEFAULT_MIN_CORRECT_ENTRIES
    )
    max_wrong = question.max_wrong_entries if question.max_wrong_entries is not None else len(answer_states)

    if matched_rules:
        if len(matched_rules) >= min_correct and wrong_count <= max_wrong:
            status = QuestionStateStatus.ANSWERED_CORRECTLY
        else:
            status = QuestionStateStatus.ANSWERED_WRONGLY
    elif neutral_count:
        status = QuestionStateStatus.ANSWERED
    else:
        status = QuestionStateStatus.IN_PROGRESS
    return QuestionState(answer_states=answer_states, status=status)


def _truncate(entries: tuple, max_entries: int | None) -> tuple:
    if max_entries is None:
        return entries
    return entries[:max_entries]


def _classify_selection(question: Question, answer_id: int) -> AnswerState:
    answer = question.answers.get(answer_id)
    if answer is None:
        raise AnswerNotFoundError(question.id, answer_id)

    entry_match = question.correct_entry_match
    if entry_match is None:
        return AnswerState(answer_id=answer_id, content=answer.content, status=AnswerStateStatus.ANSWERED)
    if isinstance(entry_match, IdEntryMatch):
        matched = entry_match.match_answer_id(answer_id)
    else:
        matched = entry_match.match_content(answer.content)
    return _verdict(answer_id, answer.content, matched)


def _classify_input(question: Question, content: str) -> AnswerState:
    entry_match = question.correct_entry_match
    if not isinstance(entry_match, ContentEntryMatch):
        # Id rules cannot judge free text.
        return AnswerState(answer_id=None, content=content, status=AnswerStateStatus.ANSWERED)
    return _verdict(None, content, entry_match.match_content(content))


def _verdict(answer_id: int | None, content: str, matched: int | None) -> AnswerState:
    if matched is None:
        return AnswerState(answer_id=answer_id, content=content, status=AnswerStateStatus.ANSWERED_WRONGLY)
    return AnswerState(
        answer_id=answer_id,
        content=content,
        status=AnswerStateStatus.ANSWERED_CORRECTLY,
        matched_rule=matched,
    )
