"""
Belief distribution over characters.

Beliefs are a plain ``{character_id: probability}`` mapping. Every helper
returns a fresh mapping; callers swap it into session state.
"""

from __future__ import annotations

import math
from typing import Dict, Iterable, Mapping

from .errors import EmptyKnowledgeBase
from .knowledge import Answer, Character

Beliefs = Dict[str, float]

# player answer -> expected answer -> multiplier
COMPATIBILITY: Dict[Answer, Dict[Answer, float]] = {
    Answer.YES: {
        Answer.YES: 1.25,
        Answer.NO: 0.25,
        Answer.MAYBE: 0.70,
        Answer.UNKNOWN: 0.75,
    },
    Answer.NO: {
        Answer.YES: 0.35,
        Answer.NO: 1.20,
        Answer.MAYBE: 0.70,
        Answer.UNKNOWN: 0.75,
    },
    Answer.MAYBE: {
        Answer.YES: 0.85,
        Answer.NO: 0.85,
        Answer.MAYBE: 1.10,
        Answer.UNKNOWN: 0.80,
    },
}


def initialise(character_ids: Iterable[str]) -> Beliefs:
    ids = list(character_ids)
    if not ids:
        raise EmptyKnowledgeBase("Cannot initialise beliefs without characters.")
    initial = 1.0 / len(ids)
    return {cid: initial for cid in ids}


def renormalise(beliefs: Mapping[str, float]) -> Beliefs:
    """Scale to unit mass; falls back to uniform if the mass has collapsed."""
    total = sum(beliefs.values())
    if not math.isfinite(total) or total <= 0.0:
        return initialise(beliefs.keys())
    return {cid: value / total for cid, value in beliefs.items()}


def multiplier(player: Answer, expected: Answer) -> float:
    return COMPATIBILITY[player][expected]


def apply_answer(
    beliefs: Mapping[str, float],
    characters: Iterable[Character],
    question_id: str,
    player: Answer,
    floor: float,
) -> Beliefs:
    updated: Beliefs = {}
    for character in characters:
        current = beliefs[character.id]
        factor = multiplier(player, character.expected(question_id))
        updated[character.id] = max(current * factor, floor)
    return renormalise(updated)


def crush(beliefs: Mapping[str, float], character_id: str, floor: float) -> Beliefs:
    """Drop a rejected guess to ``floor`` and renormalise the rest."""
    updated = dict(beliefs)
    updated[character_id] = floor
    return renormalise(updated)


def top_probability(beliefs: Mapping[str, float]) -> float:
    return max(beliefs.values()) if beliefs else 0.0


def entropy(beliefs: Mapping[str, float]) -> float:
    """Shannon entropy (bits) of the belief distribution itself."""
    return -sum(p * math.log2(p) for p in beliefs.values() if p > 0.0)
