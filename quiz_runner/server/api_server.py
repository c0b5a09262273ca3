"""FastAPI server exposing one quiz session over HTTP."""

from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
import uvicorn

from quiz_runner.constants.about import APP_ABOUT_TEXT, APP_NAME, APP_VERSION
from quiz_runner.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from quiz_runner.core.quiz_manager import QuizManager
from quiz_runner.core.services.scoring_engine import (
    AnswerNotFoundError,
    QuestionNotFoundError,
    QuizStateError,
    SectionNotFoundError,
)

logger = logging.getLogger(__name__)


class _Payload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SelectAnswersPayload(_Payload):
    """Payload schema for selecting answers of a select-mode question."""

    answer_ids: list[int]


class InputAnswersPayload(_Payload):
    """Payload schema for free-text answers."""

    inputs: list[str]


def _get_quiz_manager_dependency(quiz_manager: QuizManager):
    def dependency() -> QuizManager:
        return quiz_manager

    return dependency


def _to_http_error(exc: QuizStateError) -> HTTPException:
    if isinstance(exc, (QuestionNotFoundError, SectionNotFoundError)):
        status_code = 404
    elif isinstance(exc, AnswerNotFoundError):
        status_code = 422
    else:
        status_code = 409
    return HTTPException(status_code=status_code, detail={"error": exc.kind, "message": str(exc)})


def create_api_app(quiz_manager: QuizManager) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz manager."""
    app = FastAPI(title=f"{APP_NAME} API", description=APP_ABOUT_TEXT, version=APP_VERSION)
    quiz_manager_dep = _get_quiz_manager_dependency(quiz_manager)

    @app.get("/quiz")
    def get_quiz(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        return manager.quiz_view().to_dict()

    @app.get("/sections/{section_id}")
    def get_section(section_id: int, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        try:
            return manager.section_view(section_id).to_dict()
        except QuizStateError as exc:
            raise _to_http_error(exc) from exc

    @app.get("/questions/{question_id}")
    def get_question(question_id: int, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        try:
            return manager.question_view(question_id).to_dict()
        except QuizStateError as exc:
            raise _to_http_error(exc) from exc

    @app.post("/questions/{question_id}/select")
    def select_answers(
        question_id: int,
        payload: SelectAnswersPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            return manager.select_answers(question_id, payload.answer_ids).to_dict()
        except QuizStateError as exc:
            raise _to_http_error(exc) from exc

    @app.post("/questions/{question_id}/input")
    def input_answers(
        question_id: int,
        payload: InputAnswersPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            return manager.input_answers(question_id, payload.inputs).to_dict()
        except QuizStateError as exc:
            raise _to_http_error(exc) from exc

    @app.post("/questions/{question_id}/clear")
    def clear_answers(question_id: int, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        try:
            return manager.clear_answers(question_id).to_dict()
        except QuizStateError as exc:
            raise _to_http_error(exc) from exc

    @app.get("/event-log")
    def get_event_log(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        return manager.export_event_log().model_dump(by_alias=True, mode="json")

    return app


def serve_api(
    quiz_manager: QuizManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> None:
    """Run the FastAPI server until it is interrupted."""
    app = create_api_app(quiz_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)
    logger.info("Serving quiz %s on http://%s:%d/", quiz_manager.quiz.uid, host, port)
    server.run()
