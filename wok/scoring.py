"""
Question scoring by expected information gain.

A question's score is the base-2 entropy of the answer distribution it is
predicted to produce under the current beliefs. The random tie-break is kept
apart from the entropy computation so the latter stays deterministic.
"""

from __future__ import annotations

import math
from typing import Collection, Dict, Iterable, List, Mapping, Optional, Tuple

import numpy as np

from .knowledge import Answer, Character, KnowledgeBase, Question

AnswerDistribution = Dict[Answer, float]

BUCKETS = (Answer.YES, Answer.NO, Answer.MAYBE, Answer.UNKNOWN)


def answer_distribution(
    beliefs: Mapping[str, float],
    characters: Iterable[Character],
    question_id: str,
    baseline: float,
) -> AnswerDistribution:
    buckets: AnswerDistribution = {answer: baseline for answer in BUCKETS}
    for character in characters:
        buckets[character.expected(question_id)] += beliefs[character.id]
    total = sum(buckets.values())
    return {answer: value / total for answer, value in buckets.items()}


def distribution_entropy(distribution: Mapping[Answer, float]) -> float:
    return -sum(p * math.log2(p) for p in distribution.values() if p > 0.0)


def score_questions(
    knowledge: KnowledgeBase,
    beliefs: Mapping[str, float],
    asked: Collection[str],
    baseline: float,
) -> List[Tuple[Question, float]]:
    """Deterministic entropy scores for every unasked question, in order."""
    scores: List[Tuple[Question, float]] = []
    for question in knowledge.questions:
        if question.id in asked:
            continue
        distribution = answer_distribution(
            beliefs, knowledge.characters, question.id, baseline
        )
        scores.append((question, distribution_entropy(distribution)))
    return scores


def select_question(
    knowledge: KnowledgeBase,
    beliefs: Mapping[str, float],
    asked: Collection[str],
    baseline: float,
    rng: Optional[np.random.Generator] = None,
    tiebreak_scale: float = 0.0,
) -> Optional[Question]:
    """Highest scoring unasked question, or None when all have been asked."""
    best: Optional[Question] = None
    best_score = -math.inf
    for question, score in score_questions(knowledge, beliefs, asked, baseline):
        if rng is not None and tiebreak_scale > 0.0:
            score += float(rng.random()) * tiebreak_scale
        if score > best_score:
            best_score = score
            best = question
    return best
