import math

import pytest

from wok.config import EngineConfig
from wok.errors import NoActiveGuess, SessionNotFound
from wok.knowledge import KnowledgeBase
from wok.server import GameServer
from wok.sinks import InMemorySink
from wok.spi.submission_sink import SubmissionError


class FailingSink:
    def submit(self, summary):
        raise SubmissionError("relay unavailable")


def _kb():
    return KnowledgeBase.from_dict({
        "questions": [{"id": "q1", "text": "Is it real?"}, {"id": "q2", "text": "Is it old?"}],
        "characters": [
            {"id": "a", "name": "Alpha", "answers": {"q1": "yes", "q2": "yes"}},
            {"id": "b", "name": "Beta", "answers": {"q1": "no", "q2": "no"}},
        ],
    })


def _server(sink=None) -> GameServer:
    return GameServer(knowledge=_kb(), config=EngineConfig(tiebreak_scale=0.0), sink=sink)


def _win(server):
    view = server.start_session()
    session_id = view.session_id
    server.answer(session_id, "q1", "yes")
    server.resolve_guess(session_id, True)
    return session_id


def test_sessions_are_independent():
    server = _server()
    first = server.start_session().session_id
    second = server.start_session().session_id
    server.answer(first, "q1", "yes")
    assert server.view(first).current_guess.id == "a"
    assert server.view(second).current_question.id == "q1"
    assert server.beliefs(second) == {"a": 0.5, "b": 0.5}


def test_win_flow_and_summary():
    server = _server()
    session_id = _win(server)
    view = server.view(session_id)
    assert view.game_over
    assert view.revealed_character_name == "Alpha"

    summary = server.summary(
        session_id,
        revealed={"revealedName": "Alpha", "hint": ""},
        new_question={"text": "Does it fly?", "character-a": "no"},
    ).to_dict()
    assert summary["correct"] is True
    assert summary["outcome"] == "win"
    assert summary["final_guess"] == "Alpha"
    assert summary["asked"] == [{"question_id": "q1", "text": "Is it real?", "answer": "yes"}]
    assert summary["guess_history"][0]["character_name"] == "Alpha"
    assert summary["guess_history"][0]["correct"] is True
    assert summary["revealed"] == {"revealedName": "Alpha"}
    assert summary["suggestions"]["new_question"]["text"] == "Does it fly?"
    assert summary["suggestions"]["new_character"] == {}
    assert "answers" not in summary["knowledge_snapshot"]["characters"][0]


def test_submit_hands_record_to_sink():
    sink = InMemorySink()
    server = _server(sink)
    session_id = _win(server)
    attempt = server.submit(session_id)
    assert attempt.accepted is True
    assert attempt.reference == "memory:0"
    assert sink.records[0]["session_id"] == session_id


def test_submit_failure_recorded_without_touching_outcome():
    server = _server(FailingSink())
    session_id = _win(server)
    attempt = server.submit(session_id)
    assert attempt.accepted is False
    assert attempt.error == "relay unavailable"
    assert server.view(session_id).outcome.value == "win"


def test_submit_without_sink():
    server = _server()
    session_id = _win(server)
    assert server.submit(session_id).error == "no submission sink configured"


def test_audit_trace_records_transitions():
    server = _server()
    session_id = _win(server)
    verbs = [entry.verb for entry in server.audit_trace(session_id)]
    assert verbs == ["START_SESSION", "ANSWER", "RESOLVE_GUESS"]
    first = server.audit_trace(session_id)[0]
    rest = server.audit_trace(session_id, since_event_id=first.event_id)
    assert [entry.verb for entry in rest] == ["ANSWER", "RESOLVE_GUESS"]


def test_errors_propagate():
    server = _server()
    session_id = server.start_session().session_id
    with pytest.raises(NoActiveGuess):
        server.resolve_guess(session_id, True)
    with pytest.raises(SessionNotFound):
        server.view("missing")


def test_end_session():
    server = _server()
    session_id = server.start_session().session_id
    server.end_session(session_id)
    with pytest.raises(SessionNotFound):
        server.view(session_id)


def test_default_knowledge_and_settings():
    server = GameServer()
    assert len(server.knowledge.characters) == 12
    assert server.config.max_questions == 24
    view = server.start_session()
    assert view.current_question is not None


def test_answer_audit_carries_belief_entropy():
    server = _server()
    session_id = _win(server)
    answer_event = server.audit_trace(session_id)[1]
    assert answer_event.payload["question_id"] == "q1"
    assert answer_event.payload["answer"] == "yes"
    # beliefs after one yes are 5/6 and 1/6
    expected = -(5 / 6) * math.log2(5 / 6) - (1 / 6) * math.log2(1 / 6)
    assert answer_event.payload["entropy"] == pytest.approx(expected)
