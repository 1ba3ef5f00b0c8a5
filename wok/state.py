"""
Per-session game state and the records it accumulates.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .beliefs import Beliefs
from .knowledge import Answer, Character, KnowledgeBase, Question


class Outcome(str, Enum):
    WIN = "win"
    LOSS = "loss"


class TerminationReason(str, Enum):
    CORRECT_GUESS = "correct_guess"
    MAX_GUESSES = "max_guesses"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class AskedQuestion:
    question_id: str
    text: str
    answer: Answer

    def to_dict(self) -> Dict[str, Any]:
        return {
            "question_id": self.question_id,
            "text": self.text,
            "answer": self.answer.value,
        }


@dataclass(frozen=True)
class GuessRecord:
    character_id: str
    character_name: str
    probability: float
    correct: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "character_id": self.character_id,
            "character_name": self.character_name,
            "probability": self.probability,
            "correct": self.correct,
        }


@dataclass
class SessionState:
    session_id: str
    knowledge: KnowledgeBase
    beliefs: Beliefs
    asked: List[AskedQuestion] = field(default_factory=list)
    guesses: List[GuessRecord] = field(default_factory=list)
    current_question: Optional[Question] = None
    current_guess: Optional[Character] = None
    game_over: bool = False
    was_correct: Optional[bool] = None
    revealed_character_name: Optional[str] = None
    outcome: Optional[Outcome] = None
    termination_reason: Optional[TerminationReason] = None

    @property
    def question_count(self) -> int:
        return len(self.asked)

    @property
    def guess_count(self) -> int:
        return len(self.guesses)

    @property
    def asked_ids(self) -> List[str]:
        return [entry.question_id for entry in self.asked]

    @property
    def guessed_ids(self) -> List[str]:
        return [entry.character_id for entry in self.guesses]

    def has_unasked_questions(self) -> bool:
        return bool(set(self.knowledge.question_ids) - set(self.asked_ids))


@dataclass
class GameView:
    """What a UI needs after each engine step."""
    session_id: str
    current_question: Optional[Question]
    current_guess: Optional[Character]
    current_guess_probability: Optional[float]
    questions_asked: int
    max_questions: int
    guesses_made: int
    guesses_remaining: int
    outcome: Optional[Outcome]
    termination_reason: Optional[TerminationReason]
    revealed_character_name: Optional[str]

    @property
    def game_over(self) -> bool:
        return self.outcome is not None

    def to_dict(self) -> Dict[str, Any]:
        question = None
        if self.current_question is not None:
            question = {"id": self.current_question.id, "text": self.current_question.text}
        guess = None
        if self.current_guess is not None:
            guess = {
                "character_id": self.current_guess.id,
                "character_name": self.current_guess.name,
                "probability": self.current_guess_probability,
            }
        return {
            "session_id": self.session_id,
            "current_question": question,
            "current_guess": guess,
            "questions_asked": self.questions_asked,
            "max_questions": self.max_questions,
            "guesses_made": self.guesses_made,
            "guesses_remaining": self.guesses_remaining,
            "game_over": self.game_over,
            "outcome": self.outcome.value if self.outcome else None,
            "termination_reason": (
                self.termination_reason.value if self.termination_reason else None
            ),
            "revealed_character_name": self.revealed_character_name,
        }
