"""FastAPI server that exposes participant endpoints."""

from __future__ import annotations

from threading import Thread

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.responses import HTMLResponse
from pydantic import BaseModel
import uvicorn

from daily_quiz.constants.network_constants import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    PARTICIPANT_COOKIE,
    PARTICIPANT_COOKIE_MAX_AGE_SECONDS,
)
from daily_quiz.core.errors import InvalidInputError, NotReadyError, UnknownParticipantError
from daily_quiz.core.markdown_math_renderer import renderer
from daily_quiz.core.models import SessionView
from daily_quiz.core.quiz_manager import QuizManager
from daily_quiz.server.student_page import STUDENT_PAGE_HTML


class RegisterPayload(BaseModel):
    """Payload schema for participant registration."""

    name: str
    age: int | str
    village: str


class LoginPayload(BaseModel):
    code: str


class AnswerPayload(BaseModel):
    """Payload schema for a selected option."""

    option_id: str


def serialize_view(view: SessionView) -> dict[str, object]:
    """Convert a session projection into the JSON shape used by the student page."""
    question = renderer.render_question(view.current_question) if view.current_question else None
    feedback = None
    if view.feedback is not None:
        feedback = {
            "selected_option_id": view.feedback.selected_option_id,
            "is_correct": view.feedback.is_correct,
        }
    result = None
    if view.result is not None:
        result = {
            "score": view.result.score,
            "total_questions": view.result.total_questions,
            "percentage": view.result.percentage,
            "label": view.result.label,
        }
    return {
        "phase": view.phase.value,
        "quiz_id": view.quiz_id,
        "quiz_title": view.quiz_title,
        "current_question": question,
        "question_number": view.question_number,
        "total_questions": view.total_questions,
        "question_seconds_left": view.question_seconds_left,
        "global_seconds_left": view.global_seconds_left,
        "feedback": feedback,
        "submitted": view.submitted,
        "result": result,
        "submission_persisted": view.submission_persisted,
        "error_message": view.error_message,
        "online_count": view.online_count,
    }


def _get_quiz_manager_dependency(quiz_manager: QuizManager):
    def dependency() -> QuizManager:
        return quiz_manager

    return dependency


def create_api_app(quiz_manager: QuizManager) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz manager."""
    app = FastAPI(title="DailyQuiz API", version="0.1.0")
    quiz_manager_dep = _get_quiz_manager_dependency(quiz_manager)

    def current_participant(
        request: Request,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> str:
        participant_id = request.cookies.get(PARTICIPANT_COOKIE)
        if not participant_id or not manager.is_online(participant_id):
            raise HTTPException(status_code=401, detail="Please log in first.")
        return participant_id

    @app.get("/", response_class=HTMLResponse)
    def serve_student_page() -> str:
        return STUDENT_PAGE_HTML

    @app.post("/register", status_code=201)
    def register(
        payload: RegisterPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            participant = manager.register_participant(payload.name, payload.age, payload.village)
        except InvalidInputError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return {"code": participant.id, "name": participant.name}

    @app.post("/login")
    def login(
        payload: LoginPayload,
        response: Response,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            participant = manager.login(payload.code)
        except InvalidInputError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        response.set_cookie(
            key=PARTICIPANT_COOKIE,
            value=participant.id,
            max_age=PARTICIPANT_COOKIE_MAX_AGE_SECONDS,
            samesite="lax",
            httponly=True,
        )
        return {"code": participant.id, "name": participant.name}

    @app.post("/logout")
    def logout(
        request: Request,
        response: Response,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        participant_id = request.cookies.get(PARTICIPANT_COOKIE)
        if participant_id:
            manager.logout(participant_id)
        response.delete_cookie(PARTICIPANT_COOKIE)
        return {"logged_out": True}

    @app.get("/session")
    def get_session(
        participant_id: str = Depends(current_participant),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            view = manager.get_session_view(participant_id)
        except UnknownParticipantError as exc:
            raise HTTPException(status_code=401, detail=str(exc)) from exc
        payload = serialize_view(view)
        participant = manager.get_participant(participant_id)
        if participant is not None:
            payload["participant"] = {"code": participant.id, "name": participant.name}
        return payload

    @app.post("/answer")
    def submit_answer(
        payload: AnswerPayload,
        participant_id: str = Depends(current_participant),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            feedback = manager.select_option(participant_id, payload.option_id)
        except UnknownParticipantError as exc:
            raise HTTPException(status_code=401, detail=str(exc)) from exc
        except InvalidInputError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except NotReadyError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc

        if feedback is None:
            return {"accepted": False, "feedback": None}
        return {
            "accepted": True,
            "feedback": {
                "selected_option_id": feedback.selected_option_id,
                "is_correct": feedback.is_correct,
            },
        }

    @app.post("/submission/retry")
    def retry_submission(
        participant_id: str = Depends(current_participant),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            persisted = manager.retry_submission(participant_id)
        except UnknownParticipantError as exc:
            raise HTTPException(status_code=401, detail=str(exc)) from exc
        except NotReadyError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return {"persisted": persisted}

    return app


def start_api_server(
    quiz_manager: QuizManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(quiz_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="DailyQuizApiServer", daemon=True)
    thread.start()
    return thread
