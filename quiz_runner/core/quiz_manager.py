"""Session facade tying compiler, scoring engine, event log and view cache together."""

from __future__ import annotations

import logging
from threading import Lock

from quiz_runner.core.event_log import (
    ClearAnswers,
    Event,
    EventLogDocument,
    InputAnswers,
    SelectAnswers,
)
from quiz_runner.core.models import CompiledQuiz, QuizStatus
from quiz_runner.core.quiz_compiler import compile_quiz
from quiz_runner.core.quiz_importer import QuizDefinition
from quiz_runner.core.services.scoring_engine import QuizStateError, ScoringEngine
from quiz_runner.core.services.view_cache import ViewCache, ViewKind
from quiz_runner.core.services.view_renderer import render_question, render_quiz, render_section
from quiz_runner.core.views import QuestionView, QuizView, SectionView

logger = logging.getLogger(__name__)


class ReplayError(Exception):
    """Raised when a persisted event log cannot be replayed onto a quiz."""


class QuizManager:
    """Facade for one quiz session: scoring engine, event log and view cache.

    A session is meant to be driven by one caller at a time; the lock only
    serializes callers that share it anyway, such as HTTP worker threads.
    """

    def __init__(self, quiz: CompiledQuiz) -> None:
        self._lock = Lock()
        self._engine = ScoringEngine(quiz)
        self._view_cache = ViewCache()

    @classmethod
    def from_definition(cls, definition: QuizDefinition) -> "QuizManager":
        return cls(compile_quiz(definition))

    @classmethod
    def replay(cls, definition: QuizDefinition, document: EventLogDocument) -> "QuizManager":
        """Rebuild a session by re-applying a persisted log to a fresh compile."""
        manager = cls.from_definition(definition)
        quiz = manager._engine.quiz
        if (document.uid, document.version) != (quiz.uid, quiz.version):
            raise ReplayError(
                f"Event log belongs to quiz {document.uid} v{document.version}, "
                f"not {quiz.uid} v{quiz.version}."
            )

        for position, event in enumerate(document.events):
            try:
                manager._engine.apply(event)
            except QuizStateError as exc:
                raise ReplayError(
                    f"Event #{position} ({event.event} on question {event.question_id}) "
                    f"was rejected during replay: {exc}"
                ) from exc

        logger.info("Replayed %d event(s) for quiz %s v%s", len(document.events), quiz.uid, quiz.version)
        return manager

    # --- Session info ---

    @property
    def quiz(self) -> CompiledQuiz:
        return self._engine.quiz

    def get_generation(self) -> int:
        with self._lock:
            return self._engine.generation

    def get_quiz_status(self) -> QuizStatus:
        with self._lock:
            return self._engine.quiz_status()

    def export_event_log(self) -> EventLogDocument:
        with self._lock:
            return self._engine.event_log.to_document()

    # --- Answer events ---

    def select_answers(self, question_id: int, answer_ids: list[int]) -> QuestionView:
        return self._apply_and_view(SelectAnswers(question_id=question_id, answer_ids=tuple(answer_ids)))

    def input_answers(self, question_id: int, inputs: list[str]) -> QuestionView:
        return self._apply_and_view(InputAnswers(question_id=question_id, inputs=tuple(inputs)))

    def clear_answers(self, question_id: int) -> QuestionView:
        return self._apply_and_view(ClearAnswers(question_id=question_id))

    def _apply_and_view(self, event: Event) -> QuestionView:
        with self._lock:
            self._engine.apply(event)
            return self._question_view(event.question_id)

    # --- Views ---

    def question_view(self, question_id: int) -> QuestionView:
        with self._lock:
            return self._question_view(question_id)

    def section_view(self, section_id: int) -> SectionView:
        with self._lock:
            section = self._engine.find_section(section_id)
            generation = self._engine.generation
            cached = self._view_cache.get(ViewKind.SECTION, section_id, generation)
            if cached is not None:
                return cached
            return self._view_cache.put(
                ViewKind.SECTION, section_id, generation, render_section(section, self._engine)
            )

    def quiz_view(self) -> QuizView:
        with self._lock:
            generation = self._engine.generation
            cached = self._view_cache.get(ViewKind.QUIZ, None, generation)
            if cached is not None:
                return cached
            return self._view_cache.put(ViewKind.QUIZ, None, generation, render_quiz(self._engine))

    def _question_view(self, question_id: int) -> QuestionView:
        question = self._engine.find_question(question_id)
        generation = self._engine.generation
        cached = self._view_cache.get(ViewKind.QUESTION, question_id, generation)
        if cached is not None:
            return cached
        view = render_question(question, self._engine.get_question_state(question_id))
        return self._view_cache.put(ViewKind.QUESTION, question_id, generation, view)
