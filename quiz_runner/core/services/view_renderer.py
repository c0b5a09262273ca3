"""Pure mapping from compiled quiz plus scoring state to read views."""

from __future__ import annotations

from quiz_runner.core.markdown_math_renderer import renderer
from quiz_runner.core.models import AnswerState, Question, QuestionMode, QuestionState, Section
from quiz_runner.core.services.scoring_engine import ScoringEngine
from quiz_runner.core.views import (
    AnswerView,
    AnswerViewStatus,
    QuestionView,
    QuestionViewStatus,
    QuizView,
    SectionView,
)


def render_question(question: Question, state: QuestionState | None) -> QuestionView:
    """Render one question.

    Select-mode answers follow the declared answer order, with answers that
    were not submitted shown as pending. Input-mode answers follow submission
    order and have no placeholders.
    """
    status = QuestionViewStatus.PENDING if state is None else QuestionViewStatus(state.status.value)

    if question.mode is QuestionMode.SELECT:
        submitted: dict[int, AnswerState] = {}
        if state is not None:
            for answer_state in state.answer_states:
                if answer_state.answer_id is not None:
                    submitted[answer_state.answer_id] = answer_state
        answers = tuple(
            AnswerView(
                id=answer_id,
                content=question.answers[answer_id].content,
                status=_answer_status(submitted.get(answer_id)),
            )
            for answer_id in question.answer_ids
        )
    else:
        answers = tuple(
            AnswerView(id=None, content=answer_state.content, status=_answer_status(answer_state))
            for answer_state in (state.answer_states if state is not None else ())
        )

    return QuestionView(
        id=question.id,
        status=status,
        title=question.title,
        content=question.content,
        content_html=renderer.render_fragment(question.content),
        mode=question.mode,
        optional=question.optional,
        min_entries=question.min_entries,
        max_entries=question.max_entries,
        answers=answers,
    )


def render_section(section: Section, engine: ScoringEngine) -> SectionView:
    questions = engine.quiz.questions
    return SectionView(
        id=section.id,
        title=section.title,
        description=section.description,
        questions=tuple(
            render_question(questions[question_id], engine.get_question_state(question_id))
            for question_id in section.question_ids
        ),
    )


def render_quiz(engine: ScoringEngine) -> QuizView:
    quiz = engine.quiz
    return QuizView(
        uid=quiz.uid,
        version=quiz.version,
        title=quiz.title,
        description=quiz.description,
        mode=quiz.mode,
        status=engine.quiz_status(),
        answered_questions=engine.answered_question_count(),
        correct_questions=engine.correct_question_count(),
        wrong_questions=engine.wrong_question_count(),
        generation=engine.generation,
        sections=tuple(render_section(quiz.sections[section_id], engine) for section_id in quiz.section_ids),
    )


def _answer_status(answer_state: AnswerState | None) -> AnswerViewStatus:
    if answer_state is None:
        return AnswerViewStatus.PENDING
    return AnswerViewStatus(answer_state.status.value)
