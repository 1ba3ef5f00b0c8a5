"""
Game server (in-memory).

Keeps a registry of independent sessions on top of GameEngine, records an
audit trail of every transition and hands finished sessions to a submission
sink.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .config import EngineConfig
from .beliefs import entropy as belief_entropy
from .engine import GameEngine
from .errors import SessionNotFound
from .knowledge import KnowledgeBase, default_knowledge_path, load_knowledge
from .spi.submission_sink import SubmissionError, SubmissionReceipt, SubmissionSink
from .state import GameView, SessionState
from .summary import SessionSummary, build_summary


@dataclass
class AuditEntry:
    event_id: str
    ts: float
    verb: str
    payload: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id": self.event_id,
            "ts": self.ts,
            "verb": self.verb,
            "payload": self.payload,
        }


@dataclass
class SubmissionAttempt:
    ts: float
    accepted: bool
    reference: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ts": self.ts,
            "accepted": self.accepted,
            "reference": self.reference,
            "error": self.error,
        }


@dataclass
class ServerSession:
    state: SessionState
    audit: List[AuditEntry] = field(default_factory=list)
    submissions: List[SubmissionAttempt] = field(default_factory=list)


class GameServer:
    def __init__(
        self,
        knowledge: Optional[KnowledgeBase] = None,
        config: Optional[EngineConfig] = None,
        sink: Optional[SubmissionSink] = None,
        engine: Optional[GameEngine] = None,
    ) -> None:
        if knowledge is None:
            knowledge = load_knowledge(str(default_knowledge_path()))
        if engine is None:
            if config is None:
                config = EngineConfig.from_dict(knowledge.settings)
            engine = GameEngine(config)
        self.knowledge = knowledge
        self.engine = engine
        self.sink = sink
        self._sessions: Dict[str, ServerSession] = {}

    @property
    def config(self) -> EngineConfig:
        return self.engine.config

    def start_session(self, knowledge: Optional[KnowledgeBase] = None) -> GameView:
        kb = knowledge if knowledge is not None else self.knowledge
        state = self.engine.start(kb)
        session = ServerSession(state=state)
        self._sessions[state.session_id] = session
        self._append_audit(
            session,
            "START_SESSION",
            {
                "questions": len(kb.questions),
                "characters": len(kb.characters),
                "config": self.config.to_dict(),
            },
        )
        return self.engine.view(state)

    def answer(self, session_id: str, question_id: Any, answer: Any) -> GameView:
        session = self._get(session_id)
        self.engine.answer(session.state, question_id, answer)
        self._append_audit(
            session,
            "ANSWER",
            {
                "question_id": str(question_id),
                "answer": session.state.asked[-1].answer.value,
                "entropy": belief_entropy(session.state.beliefs),
            },
        )
        return self.engine.view(session.state)

    def resolve_guess(self, session_id: str, correct: bool) -> GameView:
        session = self._get(session_id)
        self.engine.resolve_guess(session.state, correct)
        record = session.state.guesses[-1]
        self._append_audit(session, "RESOLVE_GUESS", record.to_dict())
        return self.engine.view(session.state)

    def view(self, session_id: str) -> GameView:
        return self.engine.view(self._get(session_id).state)

    def beliefs(self, session_id: str) -> Dict[str, float]:
        return dict(self._get(session_id).state.beliefs)

    def summary(
        self,
        session_id: str,
        revealed: Optional[Mapping[str, Any]] = None,
        new_character: Optional[Mapping[str, Any]] = None,
        new_question: Optional[Mapping[str, Any]] = None,
    ) -> SessionSummary:
        return build_summary(
            self._get(session_id).state,
            revealed=revealed,
            new_character=new_character,
            new_question=new_question,
        )

    def submit(
        self,
        session_id: str,
        revealed: Optional[Mapping[str, Any]] = None,
        new_character: Optional[Mapping[str, Any]] = None,
        new_question: Optional[Mapping[str, Any]] = None,
    ) -> SubmissionAttempt:
        """
        Hand the session record to the configured sink.

        Sink failures are recorded on the session and returned, never raised;
        the game's outcome is unaffected either way.
        """
        session = self._get(session_id)
        summary = self.summary(session_id, revealed, new_character, new_question)
        if self.sink is None:
            attempt = SubmissionAttempt(
                ts=time.time(), accepted=False, error="no submission sink configured"
            )
        else:
            try:
                receipt: SubmissionReceipt = self.sink.submit(summary)
                attempt = SubmissionAttempt(
                    ts=time.time(), accepted=receipt.accepted, reference=receipt.reference
                )
            except SubmissionError as exc:
                attempt = SubmissionAttempt(ts=time.time(), accepted=False, error=str(exc))
        session.submissions.append(attempt)
        self._append_audit(session, "SUBMIT", attempt.to_dict())
        return attempt

    def audit_trace(self, session_id: str, since_event_id: Optional[str] = None) -> List[AuditEntry]:
        session = self._get(session_id)
        if since_event_id is None:
            return list(session.audit)
        for idx, entry in enumerate(session.audit):
            if entry.event_id == since_event_id:
                return list(session.audit[idx + 1 :])
        return list(session.audit)

    def end_session(self, session_id: str) -> None:
        self._get(session_id)
        del self._sessions[session_id]

    def _get(self, session_id: str) -> ServerSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound("Session not found.", details={"session_id": session_id})
        return session

    def _append_audit(self, session: ServerSession, verb: str, payload: Dict[str, Any]) -> str:
        event_id = str(uuid.uuid4())
        session.audit.append(
            AuditEntry(event_id=event_id, ts=time.time(), verb=verb, payload=payload)
        )
        return event_id
