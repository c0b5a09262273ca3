from __future__ import annotations

import pytest

from quiz_runner.core.event_log import ClearAnswers, EventLogDocument, InputAnswers, SelectAnswers
from quiz_runner.core.models import QuizStatus
from quiz_runner.core.quiz_manager import QuizManager, ReplayError
from quiz_runner.core.services.scoring_engine import (
    AnswerNotFoundError,
    QuestionNotAvailableError,
    QuizFinishedError,
    SectionNotFoundError,
)
from quiz_runner.core.views import AnswerViewStatus, QuestionViewStatus

from tests.conftest import build_definition, input_question, select_question


def _play_some_events(manager: QuizManager) -> None:
    manager.select_answers(1, [20])
    manager.select_answers(1, [10, 20])
    manager.input_answers(3, ["  Berlin "])
    manager.clear_answers(3)
    manager.input_answers(3, ["berlin"])


def test_select_answers_returns_fresh_question_view(capitals_manager):
    view = capitals_manager.select_answers(1, [10, 20])

    assert view.status is QuestionViewStatus.ANSWERED_CORRECTLY
    assert [a.id for a in view.answers] == [10, 20, 30]
    assert [a.status for a in view.answers] == [
        AnswerViewStatus.ANSWERED_CORRECTLY,
        AnswerViewStatus.PENDING,
        AnswerViewStatus.PENDING,
    ], "maxEntries=1 keeps only the first selected answer"


def test_input_answers_render_in_submission_order(capitals_manager):
    view = capitals_manager.input_answers(4, ["second thought", "first thought"])
    assert [a.content for a in view.answers] == ["second thought", "first thought"]
    assert all(a.id is None for a in view.answers)
    assert view.status is QuestionViewStatus.ANSWERED


def test_clear_answers_reverts_to_pending(capitals_manager):
    capitals_manager.input_answers(3, ["berlin"])
    view = capitals_manager.clear_answers(3)
    assert view.status is QuestionViewStatus.PENDING
    assert view.answers == ()


def test_question_view_renders_markdown(capitals_manager):
    view = capitals_manager.question_view(2)
    assert view.content == "Question 2"
    assert view.content_html.strip() == "<p>Question 2</p>"


def test_generation_advances_only_on_accepted_events(capitals_manager):
    assert capitals_manager.get_generation() == 0
    capitals_manager.select_answers(2, [40])
    assert capitals_manager.get_generation() == 1

    with pytest.raises(AnswerNotFoundError):
        capitals_manager.select_answers(2, [99])
    assert capitals_manager.get_generation() == 1

    capitals_manager.quiz_view()
    capitals_manager.section_view(1)
    capitals_manager.question_view(1)
    assert capitals_manager.get_generation() == 1


def test_quiz_view_is_cached_until_next_event(capitals_manager):
    first = capitals_manager.quiz_view()
    second = capitals_manager.quiz_view()
    assert first is second
    assert first == second
    assert first.generation == 0

    capitals_manager.select_answers(1, [10])
    third = capitals_manager.quiz_view()
    assert third is not first
    assert third.generation == 1
    assert third.correct_questions == 1


def test_unrelated_question_view_is_not_reused_across_generations(capitals_manager):
    stale = capitals_manager.question_view(2)
    capitals_manager.select_answers(1, [10])
    fresh = capitals_manager.question_view(2)
    assert fresh is not stale
    assert fresh == stale


def test_section_view_tracks_state(capitals_manager):
    before = capitals_manager.section_view(1)
    assert [q.status for q in before.questions] == [QuestionViewStatus.PENDING] * 2

    capitals_manager.select_answers(2, [40])
    after = capitals_manager.section_view(1)
    assert [q.status for q in after.questions] == [
        QuestionViewStatus.PENDING,
        QuestionViewStatus.ANSWERED_CORRECTLY,
    ]

    with pytest.raises(SectionNotFoundError):
        capitals_manager.section_view(99)


def test_quiz_view_serializes_with_camel_case_keys(capitals_manager):
    capitals_manager.select_answers(1, [10])
    payload = capitals_manager.quiz_view().to_dict()

    assert payload["status"] == "inProgress"
    assert payload["answeredQuestions"] == 1
    question = payload["sections"][0]["questions"][0]
    assert question["contentHtml"].startswith("<p>")
    assert question["maxEntries"] == 1
    assert question["answers"][0] == {"id": 10, "content": "Paris", "status": "answeredCorrectly"}


def test_linear_question_view_requires_previous_correct_answer():
    manager = QuizManager.from_definition(
        build_definition(
            [[select_question(qid, [(1, "yes"), (2, "no")], correct=[1]) for qid in (1, 2, 3)]],
            mode="linear",
        )
    )
    with pytest.raises(QuestionNotAvailableError):
        manager.select_answers(2, [1])
    with pytest.raises(QuestionNotAvailableError):
        manager.question_view(2)

    manager.select_answers(1, [1])
    assert manager.select_answers(2, [1]).status is QuestionViewStatus.ANSWERED_CORRECTLY


def test_terminal_lock_leaves_state_unchanged(capitals_manager):
    capitals_manager.select_answers(1, [10])
    capitals_manager.select_answers(2, [40])
    capitals_manager.input_answers(3, ["berlin"])
    assert capitals_manager.get_quiz_status() is QuizStatus.COMPLETED
    snapshot = capitals_manager.quiz_view()

    with pytest.raises(QuizFinishedError):
        capitals_manager.select_answers(1, [20])
    with pytest.raises(QuizFinishedError):
        capitals_manager.input_answers(4, ["late"])
    with pytest.raises(QuizFinishedError):
        capitals_manager.clear_answers(3)

    assert capitals_manager.quiz_view() == snapshot
    assert capitals_manager.question_view(4).status is QuestionViewStatus.PENDING


def test_export_event_log_records_accepted_events_in_order(capitals_manager):
    _play_some_events(capitals_manager)
    with pytest.raises(AnswerNotFoundError):
        capitals_manager.select_answers(2, [99])

    document = capitals_manager.export_event_log()
    assert (document.uid, document.version) == ("test-quiz", 1)
    assert document.events == (
        SelectAnswers(question_id=1, answer_ids=(20,)),
        SelectAnswers(question_id=1, answer_ids=(10, 20)),
        InputAnswers(question_id=3, inputs=("  Berlin ",)),
        ClearAnswers(question_id=3),
        InputAnswers(question_id=3, inputs=("berlin",)),
    )


def test_replay_rebuilds_identical_state(capitals_definition, capitals_manager):
    _play_some_events(capitals_manager)
    replayed = QuizManager.replay(capitals_definition, capitals_manager.export_event_log())

    assert replayed.get_generation() == capitals_manager.get_generation()
    assert replayed.quiz_view() == capitals_manager.quiz_view()
    assert replayed.export_event_log() == capitals_manager.export_event_log()


def test_replay_rejects_foreign_log(capitals_definition):
    document = EventLogDocument(uid="test-quiz", version=2, events=())
    with pytest.raises(ReplayError):
        QuizManager.replay(capitals_definition, document)


def test_replay_aborts_on_rejected_event(capitals_definition):
    document = EventLogDocument(
        uid="test-quiz",
        version=1,
        events=(
            SelectAnswers(question_id=1, answer_ids=(10,)),
            SelectAnswers(question_id=2, answer_ids=(77,)),
            InputAnswers(question_id=3, inputs=("berlin",)),
        ),
    )
    with pytest.raises(ReplayError) as excinfo:
        QuizManager.replay(capitals_definition, document)
    assert isinstance(excinfo.value.__cause__, AnswerNotFoundError)


def test_sessions_are_independent(capitals_definition):
    first = QuizManager.from_definition(capitals_definition)
    second = QuizManager.from_definition(capitals_definition)
    first.select_answers(1, [10])
    assert second.get_generation() == 0
    assert second.question_view(1).status is QuestionViewStatus.PENDING


def test_select_mode_view_ignores_submission_order():
    manager = QuizManager.from_definition(
        build_definition([[select_question(1, [(1, "a"), (2, "b"), (3, "c")], correct=[3]), input_question(2)]])
    )
    view = manager.select_answers(1, [3, 1])
    assert [(a.id, a.status) for a in view.answers] == [
        (1, AnswerViewStatus.ANSWERED_WRONGLY),
        (2, AnswerViewStatus.PENDING),
        (3, AnswerViewStatus.ANSWERED_CORRECTLY),
    ]
