"""
FastAPI transport for the game server (in-memory).
"""

from typing import Any, Dict, Optional, Union

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .errors import GameError
from .server import GameServer


class AnswerRequest(BaseModel):
    question_id: Union[str, int]
    answer: str


class GuessRequest(BaseModel):
    correct: bool


class SubmitRequest(BaseModel):
    revealed: Optional[Dict[str, Any]] = None
    new_character: Optional[Dict[str, Any]] = None
    new_question: Optional[Dict[str, Any]] = None


ERROR_STATUS = {
    "SESSION_NOT_FOUND": 404,
    "NO_ACTIVE_QUESTION": 409,
    "NO_ACTIVE_GUESS": 409,
    "UNKNOWN_ANSWER_LITERAL": 400,
    "EMPTY_KNOWLEDGE_BASE": 400,
    "INVALID_KNOWLEDGE_BASE": 400,
}


def create_app(server: Optional[GameServer] = None) -> FastAPI:
    app = FastAPI(title="Web of Knowledge")
    game = server or GameServer()
    app.state.server = game

    @app.exception_handler(GameError)
    async def _game_error_handler(_, exc: GameError):
        status = ERROR_STATUS.get(exc.code, 400)
        return JSONResponse(
            status_code=status,
            content={
                "error": {
                    "code": exc.code,
                    "message": exc.message,
                    "details": exc.details,
                }
            },
        )

    @app.post("/v1/sessions")
    def start_session():
        return game.start_session().to_dict()

    @app.get("/v1/sessions/{session_id}")
    def view(session_id: str):
        return game.view(session_id).to_dict()

    @app.delete("/v1/sessions/{session_id}")
    def end_session(session_id: str):
        game.end_session(session_id)
        return {"session_id": session_id, "ended": True}

    @app.get("/v1/sessions/{session_id}/beliefs")
    def beliefs(session_id: str):
        return {"beliefs": game.beliefs(session_id)}

    @app.post("/v1/sessions/{session_id}/answer")
    def answer(session_id: str, req: AnswerRequest):
        return game.answer(session_id, req.question_id, req.answer).to_dict()

    @app.post("/v1/sessions/{session_id}/guess")
    def resolve_guess(session_id: str, req: GuessRequest):
        return game.resolve_guess(session_id, req.correct).to_dict()

    @app.get("/v1/sessions/{session_id}/summary")
    def summary(session_id: str):
        return game.summary(session_id).to_dict()

    @app.post("/v1/sessions/{session_id}/submit")
    def submit(session_id: str, req: SubmitRequest):
        attempt = game.submit(
            session_id,
            revealed=req.revealed,
            new_character=req.new_character,
            new_question=req.new_question,
        )
        return attempt.to_dict()

    @app.get("/v1/sessions/{session_id}/audit")
    def audit_trace(session_id: str, since_event_id: Optional[str] = None):
        events = game.audit_trace(session_id, since_event_id=since_event_id)
        return {"events": [entry.to_dict() for entry in events]}

    return app
