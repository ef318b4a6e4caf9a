from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping

from .errors import OptionsError


# every spelling a host may use for an option, mapped to the field name
_ALIASES: Dict[str, str] = {
    "laplace_alpha": "laplace_alpha",
    "laplaceAlpha": "laplace_alpha",
    "laplace": "laplace_alpha",
    "recency_decay_rate": "recency_decay_rate",
    "recencyDecayRate": "recency_decay_rate",
    "lambda": "recency_decay_rate",
    "expected_vs_winrate_blend": "expected_vs_winrate_blend",
    "expectedVsWinrateBlend": "expected_vs_winrate_blend",
    "alpha": "expected_vs_winrate_blend",
    "exploration_probability": "exploration_probability",
    "explorationProbability": "exploration_probability",
    "epsilon": "exploration_probability",
    "transition_model_min_history": "transition_model_min_history",
    "transitionModelMinHistory": "transition_model_min_history",
    "useTransitionIfEnough": "transition_model_min_history",
}

_CAMEL = {
    "laplace_alpha": "laplaceAlpha",
    "recency_decay_rate": "recencyDecayRate",
    "expected_vs_winrate_blend": "expectedVsWinrateBlend",
    "exploration_probability": "explorationProbability",
    "transition_model_min_history": "transitionModelMinHistory",
}


def _check_real(name: str, value: Any, lo: float, hi: float = math.inf) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise OptionsError(f"{name} must be a number, got {type(value).__name__}")
    if not math.isfinite(value):
        raise OptionsError(f"{name} must be finite, got {value}")
    if value < lo or value > hi:
        if hi == math.inf:
            raise OptionsError(f"{name} must be >= {lo}, got {value}")
        raise OptionsError(f"{name} must be in [{lo}, {hi}], got {value}")


@dataclass(frozen=True)
class Options:
    """Tuning knobs for the recommender.

    Values are validated once, here; out-of-range values are rejected with
    OptionsError rather than clamped. Algorithms downstream assume a valid
    Options and never check again.
    """

    laplace_alpha: float = 1.0
    recency_decay_rate: float = 0.25  # per day
    expected_vs_winrate_blend: float = 0.7
    exploration_probability: float = 0.05
    transition_model_min_history: int = 3

    def __post_init__(self) -> None:
        _check_real("laplace_alpha", self.laplace_alpha, 0.0)
        _check_real("recency_decay_rate", self.recency_decay_rate, 0.0)
        _check_real("expected_vs_winrate_blend", self.expected_vs_winrate_blend, 0.0, 1.0)
        _check_real("exploration_probability", self.exploration_probability, 0.0, 1.0)
        n = self.transition_model_min_history
        if isinstance(n, bool) or not isinstance(n, int):
            raise OptionsError(f"transition_model_min_history must be an integer, got {n!r}")
        if n < 0:
            raise OptionsError(f"transition_model_min_history must be >= 0, got {n}")

    @staticmethod
    def _translate(d: Mapping[str, Any]) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for key, value in d.items():
            if key not in _ALIASES:
                raise OptionsError(f"unknown option: {key!r}")
            # later spellings of the same field win
            out[_ALIASES[key]] = value
        return out

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> "Options":
        return Options(**Options._translate(d))

    def merged(self, overrides: Mapping[str, Any]) -> "Options":
        if not overrides:
            return self
        return dataclasses.replace(self, **Options._translate(overrides))

    def to_dict(self) -> Dict[str, Any]:
        return {_CAMEL[f.name]: getattr(self, f.name) for f in dataclasses.fields(self)}


def default_options() -> Options:
    return Options()
