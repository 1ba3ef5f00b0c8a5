"""
Engine error types.

Every error carries a stable ``code`` so transports can map it without
inspecting the message.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class GameError(Exception):
    code = "GAME_ERROR"

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        code: Optional[str] = None,
    ):
        super().__init__(message)
        if code is not None:
            self.code = code
        self.message = message
        self.details = details


class EmptyKnowledgeBase(GameError):
    """Raised when a knowledge base declares zero characters."""

    code = "EMPTY_KNOWLEDGE_BASE"


class InvalidKnowledgeBase(GameError):
    code = "INVALID_KNOWLEDGE_BASE"


class NoActiveQuestion(GameError):
    code = "NO_ACTIVE_QUESTION"


class NoActiveGuess(GameError):
    code = "NO_ACTIVE_GUESS"


class UnknownAnswerLiteral(GameError):
    """Raised for player answers outside yes/no/maybe. State is left untouched."""

    code = "UNKNOWN_ANSWER_LITERAL"


class SessionNotFound(GameError):
    code = "SESSION_NOT_FOUND"
