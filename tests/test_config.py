import pytest

from wok.config import EngineConfig
from wok.knowledge import KnowledgeBase
from wok.server import GameServer


def test_defaults():
    config = EngineConfig()
    assert config.max_questions == 24
    assert config.max_guesses == 3
    assert config.confidence_threshold == 0.62
    assert config.update_floor == pytest.approx(0.005)
    assert config.miss_floor == pytest.approx(0.0025)


def test_from_dict_overrides():
    config = EngineConfig.from_dict({"max_guesses": 5, "seed": 11})
    assert config.max_guesses == 5
    assert config.seed == 11


def test_from_dict_none_gives_defaults():
    assert EngineConfig.from_dict(None) == EngineConfig()


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(ValueError, match="max_turns"):
        EngineConfig.from_dict({"max_turns": 4})


@pytest.mark.parametrize(
    "settings",
    [
        {"max_guesses": 0},
        {"max_questions": -1},
        {"confidence_threshold": 0.0},
        {"confidence_threshold": 1.5},
        {"baseline": 0.0},
        {"tiebreak_scale": -0.1},
        {"max_questions": "24"},
        {"max_guesses": 2.5},
        {"confidence_threshold": "high"},
        {"baseline": True},
        {"seed": "7"},
    ],
)
def test_out_of_range_values_rejected(settings):
    with pytest.raises(ValueError):
        EngineConfig.from_dict(settings)


def test_integral_floats_accepted_for_thresholds():
    config = EngineConfig.from_dict({"confidence_threshold": 1, "baseline": 1})
    assert config.update_floor == pytest.approx(0.1)


def test_server_rejects_mistyped_knowledge_settings():
    kb = KnowledgeBase.from_dict({
        "settings": {"max_questions": "24"},
        "characters": [{"id": "a", "name": "Alpha"}],
    })
    with pytest.raises(ValueError, match="max_questions"):
        GameServer(knowledge=kb)
