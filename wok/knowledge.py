"""
Knowledge base model and YAML loader.

A knowledge file looks like::

    settings:            # optional, see EngineConfig
      max_questions: 24
    questions:
      - id: q1
        text: Is your character real?
    characters:
      - id: c1
        name: Ada Lovelace
        answers: {q1: "yes"}

Missing answers mean ``unknown``.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .errors import EmptyKnowledgeBase, InvalidKnowledgeBase


class Answer(str, Enum):
    YES = "yes"
    NO = "no"
    MAYBE = "maybe"
    UNKNOWN = "unknown"


# Answers a player may give. UNKNOWN is only ever an expected answer.
PLAYER_ANSWERS = (Answer.YES, Answer.NO, Answer.MAYBE)


@dataclass(frozen=True)
class Question:
    id: str
    text: str


@dataclass(frozen=True)
class Character:
    id: str
    name: str
    answers: Dict[str, Answer] = field(default_factory=dict)

    def expected(self, question_id: str) -> Answer:
        return self.answers.get(question_id, Answer.UNKNOWN)


@dataclass(frozen=True)
class KnowledgeBase:
    questions: List[Question]
    characters: List[Character]
    settings: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.characters:
            raise EmptyKnowledgeBase("Knowledge base contains no characters.")
        _require_unique("question", [q.id for q in self.questions])
        _require_unique("character", [c.id for c in self.characters])

    @property
    def question_ids(self) -> List[str]:
        return [q.id for q in self.questions]

    @property
    def character_ids(self) -> List[str]:
        return [c.id for c in self.characters]

    def question(self, question_id: str) -> Optional[Question]:
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def character(self, character_id: str) -> Optional[Character]:
        for character in self.characters:
            if character.id == character_id:
                return character
        return None

    def clone(self) -> "KnowledgeBase":
        """Independent copy for a single session."""
        return copy.deepcopy(self)

    def snapshot(self) -> Dict[str, List[Dict[str, str]]]:
        """Ids and labels only, without the answer tables."""
        return {
            "questions": [{"id": q.id, "text": q.text} for q in self.questions],
            "characters": [{"id": c.id, "name": c.name} for c in self.characters],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "KnowledgeBase":
        questions_raw = list(data.get("questions") or [])
        characters_raw = list(data.get("characters") or [])
        questions: List[Question] = []
        for item in questions_raw:
            try:
                questions.append(Question(id=str(item["id"]), text=str(item["text"])))
            except (KeyError, TypeError) as exc:
                raise InvalidKnowledgeBase(
                    "Question entries need 'id' and 'text'.",
                    details={"entry": item},
                ) from exc
        characters = [_parse_character(item) for item in characters_raw]
        settings = dict(data.get("settings") or {})
        return cls(questions=questions, characters=characters, settings=settings)


def load_knowledge(path: str) -> KnowledgeBase:
    data = _load_yaml(path)
    if not isinstance(data, dict):
        raise InvalidKnowledgeBase(
            "Knowledge file must contain a mapping.", details={"path": str(path)}
        )
    return KnowledgeBase.from_dict(data)


def default_knowledge_path() -> Path:
    return Path(__file__).parent / "data" / "knowledge.yaml"


def _parse_character(item: Mapping[str, Any]) -> Character:
    try:
        character_id = str(item["id"])
        name = str(item["name"])
    except (KeyError, TypeError) as exc:
        raise InvalidKnowledgeBase(
            "Character entries need 'id' and 'name'.", details={"entry": item}
        ) from exc
    raw_answers = item.get("answers") or {}
    if not isinstance(raw_answers, Mapping):
        raise InvalidKnowledgeBase(
            "Character answers must be a mapping of question id to answer.",
            details={"character_id": character_id},
        )
    answers: Dict[str, Answer] = {}
    for question_id, raw in raw_answers.items():
        answers[str(question_id)] = _parse_expected(raw, character_id, question_id)
    return Character(id=character_id, name=name, answers=answers)


def _parse_expected(raw: Any, character_id: str, question_id: Any) -> Answer:
    # YAML 1.1 reads bare yes/no as booleans.
    if isinstance(raw, bool):
        return Answer.YES if raw else Answer.NO
    if raw is None:
        return Answer.UNKNOWN
    try:
        return Answer(str(raw).strip().lower())
    except ValueError as exc:
        raise InvalidKnowledgeBase(
            f"Unrecognised expected answer '{raw}'.",
            details={"character_id": character_id, "question_id": str(question_id)},
        ) from exc


def _require_unique(kind: str, ids: List[str]) -> None:
    duplicates = sorted({i for i in ids if ids.count(i) > 1})
    if duplicates:
        raise InvalidKnowledgeBase(
            f"Duplicate {kind} ids.", details={"duplicates": duplicates}
        )


def _load_yaml(path: str) -> Dict:
    try:
        return yaml.safe_load(Path(path).read_text())
    except yaml.YAMLError as exc:
        raise InvalidKnowledgeBase(
            "Knowledge file is not valid YAML.",
            details={"path": str(path), "error": str(exc)},
        ) from exc
