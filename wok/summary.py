"""
Session summary handed to a submission sink at the end of a game.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from .state import AskedQuestion, GuessRecord, SessionState


@dataclass(frozen=True)
class SessionSummary:
    session_id: str
    timestamp: str
    asked: List[AskedQuestion]
    guess_history: List[GuessRecord]
    game_over: bool
    correct: Optional[bool]
    outcome: Optional[str]
    termination_reason: Optional[str]
    final_guess: Optional[str]
    knowledge_snapshot: Dict[str, List[Dict[str, str]]]
    revealed: Dict[str, str] = field(default_factory=dict)
    suggestions: Dict[str, Dict[str, str]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "timestamp": self.timestamp,
            "asked": [entry.to_dict() for entry in self.asked],
            "guess_history": [entry.to_dict() for entry in self.guess_history],
            "game_over": self.game_over,
            "correct": self.correct,
            "outcome": self.outcome,
            "termination_reason": self.termination_reason,
            "final_guess": self.final_guess,
            "revealed": dict(self.revealed),
            "suggestions": {k: dict(v) for k, v in self.suggestions.items()},
            "knowledge_snapshot": self.knowledge_snapshot,
        }


def build_summary(
    state: SessionState,
    revealed: Optional[Mapping[str, Any]] = None,
    new_character: Optional[Mapping[str, Any]] = None,
    new_question: Optional[Mapping[str, Any]] = None,
    timestamp: Optional[datetime] = None,
) -> SessionSummary:
    """
    Assemble the record for a session.

    Can be called before the game ends; ``game_over`` tells the sink whether
    the outcome fields are final. Form fields with empty values are dropped.
    """
    ts = (timestamp or datetime.now(timezone.utc)).isoformat()
    return SessionSummary(
        session_id=state.session_id,
        timestamp=ts,
        asked=list(state.asked),
        guess_history=list(state.guesses),
        game_over=state.game_over,
        correct=state.was_correct,
        outcome=state.outcome.value if state.outcome else None,
        termination_reason=(
            state.termination_reason.value if state.termination_reason else None
        ),
        final_guess=state.revealed_character_name,
        knowledge_snapshot=state.knowledge.snapshot(),
        revealed=_form_data(revealed),
        suggestions={
            "new_character": _form_data(new_character),
            "new_question": _form_data(new_question),
        },
    )


def _form_data(form: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    if not form:
        return {}
    return {str(k): str(v) for k, v in form.items() if v is not None and v != ""}
