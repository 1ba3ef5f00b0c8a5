"""
Game engine.

Drives one session from first question to a terminal outcome. Every
operation takes the session's state, mutates it in place and returns it;
the engine keeps no per-session data of its own, so one engine can serve
any number of sessions.

Turn structure:
1. ``advance`` checks the stop condition and poses either the most
   informative unasked question or the most probable unguessed character.
2. The caller answers the question (``answer``) or rules on the guess
   (``resolve_guess``).
3. The engine updates beliefs and advances again, until an outcome is set.
"""

from __future__ import annotations

import uuid
from typing import Any, Optional, Union

import numpy as np

from . import beliefs as belief_ops
from .config import EngineConfig
from .errors import NoActiveGuess, NoActiveQuestion, UnknownAnswerLiteral
from .knowledge import PLAYER_ANSWERS, Answer, Character, KnowledgeBase
from .scoring import select_question
from .state import (
    AskedQuestion,
    GameView,
    GuessRecord,
    Outcome,
    SessionState,
    TerminationReason,
)


def normalize_answer(raw: Union[str, Answer]) -> Answer:
    """Map player input onto yes/no/maybe or raise UnknownAnswerLiteral."""
    if isinstance(raw, Answer):
        value = raw.value
    elif isinstance(raw, str):
        value = raw.strip().lower()
    else:
        value = None
    for answer in PLAYER_ANSWERS:
        if value == answer.value:
            return answer
    raise UnknownAnswerLiteral(
        f"Answer must be one of yes, no, maybe; got {raw!r}.",
        details={"answer": str(raw)},
    )


class GameEngine:
    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)

    # ---- lifecycle ----

    def start(
        self, knowledge: KnowledgeBase, session_id: Optional[str] = None
    ) -> SessionState:
        snapshot = knowledge.clone()
        state = SessionState(
            session_id=session_id or str(uuid.uuid4()),
            knowledge=snapshot,
            beliefs=belief_ops.initialise(snapshot.character_ids),
        )
        return self.advance(state)

    def should_stop(self, state: SessionState) -> bool:
        """True when the next turn must be a guess rather than a question."""
        cfg = self.config
        return (
            state.question_count >= cfg.max_questions
            or state.guess_count >= cfg.max_guesses
            or belief_ops.top_probability(state.beliefs) >= cfg.confidence_threshold
            or not state.has_unasked_questions()
        )

    def advance(self, state: SessionState) -> SessionState:
        """Pose the next prompt unless one is pending or the game is over."""
        if state.game_over:
            return state
        if state.current_question is not None or state.current_guess is not None:
            return state

        if not self.should_stop(state):
            question = select_question(
                state.knowledge,
                state.beliefs,
                set(state.asked_ids),
                self.config.baseline,
                rng=self.rng,
                tiebreak_scale=self.config.tiebreak_scale,
            )
            if question is not None:
                state.current_question = question
                return state

        guess = self.pick_guess(state)
        if guess is None:
            return self._conclude(state, None, TerminationReason.EXHAUSTED)
        state.current_guess = guess
        return state

    # ---- player input ----

    def answer(
        self, state: SessionState, question_id: Any, raw_answer: Union[str, Answer]
    ) -> SessionState:
        question = state.current_question
        if state.game_over or question is None:
            raise NoActiveQuestion("No question is awaiting an answer.")
        if str(question_id) != question.id:
            raise NoActiveQuestion(
                "Answer does not match the active question.",
                details={"active": question.id, "received": str(question_id)},
            )
        answer = normalize_answer(raw_answer)

        state.asked.append(
            AskedQuestion(question_id=question.id, text=question.text, answer=answer)
        )
        state.beliefs = belief_ops.apply_answer(
            state.beliefs,
            state.knowledge.characters,
            question.id,
            answer,
            self.config.update_floor,
        )
        state.current_question = None
        return self.advance(state)

    def resolve_guess(self, state: SessionState, correct: bool) -> SessionState:
        guess = state.current_guess
        if state.game_over or guess is None:
            raise NoActiveGuess("No guess is awaiting confirmation.")

        state.guesses.append(
            GuessRecord(
                character_id=guess.id,
                character_name=guess.name,
                probability=state.beliefs[guess.id],
                correct=bool(correct),
            )
        )
        state.current_guess = None
        if correct:
            return self._conclude(state, guess, TerminationReason.CORRECT_GUESS)

        state.beliefs = belief_ops.crush(state.beliefs, guess.id, self.config.miss_floor)
        if state.guess_count >= self.config.max_guesses:
            return self._conclude(state, None, TerminationReason.MAX_GUESSES)
        return self.advance(state)

    # ---- queries ----

    def pick_guess(self, state: SessionState) -> Optional[Character]:
        """Most probable character not yet guessed, earliest on ties."""
        attempted = set(state.guessed_ids)
        best: Optional[Character] = None
        best_probability = -1.0
        for character in state.knowledge.characters:
            if character.id in attempted:
                continue
            probability = state.beliefs[character.id]
            if probability > best_probability:
                best = character
                best_probability = probability
        return best

    def view(self, state: SessionState) -> GameView:
        guess = state.current_guess
        return GameView(
            session_id=state.session_id,
            current_question=state.current_question,
            current_guess=guess,
            current_guess_probability=state.beliefs[guess.id] if guess is not None else None,
            questions_asked=state.question_count,
            max_questions=self.config.max_questions,
            guesses_made=state.guess_count,
            guesses_remaining=max(self.config.max_guesses - state.guess_count, 0),
            outcome=state.outcome,
            termination_reason=state.termination_reason,
            revealed_character_name=state.revealed_character_name,
        )

    # ---- internals ----

    def _conclude(
        self,
        state: SessionState,
        character: Optional[Character],
        reason: TerminationReason,
    ) -> SessionState:
        state.game_over = True
        state.current_question = None
        state.current_guess = None
        state.was_correct = character is not None
        state.revealed_character_name = character.name if character else None
        state.outcome = Outcome.WIN if character else Outcome.LOSS
        state.termination_reason = reason
        return state
