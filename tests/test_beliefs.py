import math

import pytest

from wok import beliefs
from wok.errors import EmptyKnowledgeBase
from wok.knowledge import Answer, Character

FLOOR = 0.005


def _characters():
    return [
        Character(id="a", name="A", answers={"q": Answer.YES}),
        Character(id="b", name="B", answers={"q": Answer.NO}),
        Character(id="c", name="C", answers={"q": Answer.MAYBE}),
        Character(id="d", name="D"),
    ]


def test_initialise_uniform():
    dist = beliefs.initialise(["a", "b", "c", "d"])
    assert dist == {"a": 0.25, "b": 0.25, "c": 0.25, "d": 0.25}


def test_initialise_empty_raises():
    with pytest.raises(EmptyKnowledgeBase):
        beliefs.initialise([])


def test_compatibility_table_values():
    assert beliefs.multiplier(Answer.YES, Answer.YES) == 1.25
    assert beliefs.multiplier(Answer.YES, Answer.NO) == 0.25
    assert beliefs.multiplier(Answer.NO, Answer.YES) == 0.35
    assert beliefs.multiplier(Answer.NO, Answer.NO) == 1.20
    assert beliefs.multiplier(Answer.MAYBE, Answer.MAYBE) == 1.10
    assert beliefs.multiplier(Answer.MAYBE, Answer.UNKNOWN) == 0.80
    assert beliefs.multiplier(Answer.YES, Answer.UNKNOWN) == 0.75
    assert beliefs.multiplier(Answer.NO, Answer.UNKNOWN) == 0.75


def test_apply_answer_reweights_and_normalises():
    start = beliefs.initialise(["a", "b", "c", "d"])
    updated = beliefs.apply_answer(start, _characters(), "q", Answer.YES, FLOOR)
    raw = {"a": 0.25 * 1.25, "b": 0.25 * 0.25, "c": 0.25 * 0.70, "d": 0.25 * 0.75}
    total = sum(raw.values())
    for cid, value in raw.items():
        assert updated[cid] == pytest.approx(value / total)
    assert math.isclose(sum(updated.values()), 1.0, abs_tol=1e-9)


def test_apply_answer_is_deterministic():
    start = beliefs.initialise(["a", "b", "c", "d"])
    first = beliefs.apply_answer(start, _characters(), "q", Answer.MAYBE, FLOOR)
    second = beliefs.apply_answer(start, _characters(), "q", Answer.MAYBE, FLOOR)
    assert first == second


def test_apply_answer_does_not_mutate_input():
    start = beliefs.initialise(["a", "b", "c", "d"])
    beliefs.apply_answer(start, _characters(), "q", Answer.NO, FLOOR)
    assert start == {"a": 0.25, "b": 0.25, "c": 0.25, "d": 0.25}


def test_floor_prevents_elimination():
    dist = {"a": 0.999, "b": 0.001}
    chars = [
        Character(id="a", name="A", answers={"q": Answer.YES}),
        Character(id="b", name="B", answers={"q": Answer.NO}),
    ]
    for _ in range(50):
        dist = beliefs.apply_answer(dist, chars, "q", Answer.YES, FLOOR)
    # b is floored before each renormalisation, a grows by at most 1.25
    assert dist["b"] >= FLOOR / (1.25 + FLOOR)
    assert math.isclose(sum(dist.values()), 1.0, abs_tol=1e-9)


def test_crush_sets_floor_and_renormalises():
    dist = {"a": 0.5, "b": 0.3, "c": 0.2}
    crushed = beliefs.crush(dist, "a", 0.0025)
    total = 0.0025 + 0.3 + 0.2
    assert crushed["a"] == pytest.approx(0.0025 / total)
    assert crushed["b"] == pytest.approx(0.3 / total)
    assert math.isclose(sum(crushed.values()), 1.0, abs_tol=1e-9)


def test_crush_single_character_returns_to_one():
    assert beliefs.crush({"a": 1.0}, "a", 0.0025) == {"a": 1.0}


def test_renormalise_resets_collapsed_mass():
    assert beliefs.renormalise({"a": 0.0, "b": 0.0}) == {"a": 0.5, "b": 0.5}
    assert beliefs.renormalise({"a": float("nan"), "b": 1.0}) == {"a": 0.5, "b": 0.5}


def test_top_probability_and_entropy():
    dist = {"a": 0.5, "b": 0.25, "c": 0.25}
    assert beliefs.top_probability(dist) == 0.5
    assert beliefs.entropy(dist) == pytest.approx(1.5)
