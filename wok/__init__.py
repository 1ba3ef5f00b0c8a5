"""
Web of Knowledge - adaptive twenty-questions deduction engine.

The engine keeps a normalized belief distribution over a fixed set of
characters, asks the question whose answer is expected to split that belief
most evenly, reweights characters by how well their recorded answers match
the player's, and guesses once one character is likely enough.

Design principles:
- Session state is an explicit value; the engine holds none of it
- "unknown" is a real answer category, not a missing value
- Randomness only breaks ties, and is injected
- Submission is a collaborator concern; the engine never waits on it
"""

from .config import EngineConfig
from .engine import GameEngine, normalize_answer
from .errors import (
    EmptyKnowledgeBase,
    GameError,
    InvalidKnowledgeBase,
    NoActiveGuess,
    NoActiveQuestion,
    SessionNotFound,
    UnknownAnswerLiteral,
)
from .knowledge import Answer, Character, KnowledgeBase, Question, load_knowledge
from .server import GameServer
from .state import GameView, Outcome, SessionState, TerminationReason
from .summary import SessionSummary, build_summary

__all__ = [
    "Answer",
    "Character",
    "EmptyKnowledgeBase",
    "EngineConfig",
    "GameEngine",
    "GameError",
    "GameServer",
    "GameView",
    "InvalidKnowledgeBase",
    "KnowledgeBase",
    "NoActiveGuess",
    "NoActiveQuestion",
    "Outcome",
    "Question",
    "SessionNotFound",
    "SessionState",
    "SessionSummary",
    "TerminationReason",
    "UnknownAnswerLiteral",
    "build_summary",
    "load_knowledge",
    "normalize_answer",
]
