"""
Engine configuration.
"""

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping, Optional


@dataclass
class EngineConfig:
    """Tunables for question selection, guessing and belief updates."""
    max_questions: int = 24
    max_guesses: int = 3
    confidence_threshold: float = 0.62
    baseline: float = 0.05  # bucket seed for scoring; floors derive from it
    tiebreak_scale: float = 0.05  # 0 disables the random tie-break
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        for name in ("max_questions", "max_guesses"):
            _require_type(name, getattr(self, name), (int,))
        for name in ("confidence_threshold", "baseline", "tiebreak_scale"):
            _require_type(name, getattr(self, name), (int, float))
        if self.seed is not None:
            _require_type("seed", self.seed, (int,))
        if self.max_questions < 0:
            raise ValueError("max_questions must be >= 0")
        if self.max_guesses < 1:
            raise ValueError("max_guesses must be >= 1")
        if not 0.0 < self.confidence_threshold <= 1.0:
            raise ValueError("confidence_threshold must be in (0, 1]")
        if self.baseline <= 0.0:
            raise ValueError("baseline must be > 0")
        if self.tiebreak_scale < 0.0:
            raise ValueError("tiebreak_scale must be >= 0")

    @property
    def update_floor(self) -> float:
        """Lowest probability an answer update can leave behind."""
        return self.baseline * 0.1

    @property
    def miss_floor(self) -> float:
        """Probability assigned to a character after a rejected guess."""
        return self.baseline * 0.05

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "EngineConfig":
        data = dict(data or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown engine settings: {', '.join(unknown)}")
        return cls(**data)


def _require_type(name: str, value: Any, types: tuple) -> None:
    # bool is an int subclass; YAML yes/no would otherwise slip through
    if isinstance(value, bool) or not isinstance(value, types):
        raise ValueError(f"{name} must be a number, got {value!r}")
