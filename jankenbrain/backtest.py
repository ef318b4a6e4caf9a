"""
Replay a play log to rank Options combinations.

At step i the recommender only sees records[:i] (with the clock frozen at
records[i].timestamp) and its pick is scored against records[i].hand as if
that were the opponent's next move. The average over all steps is the score
of a configuration.
"""
from __future__ import annotations

import itertools
import json
import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from .core import recommend
from .options import Options
from .records import Record, parse_records
from .utils import payoff

logger = logging.getLogger(__name__)

DEFAULT_GRID: Dict[str, List[Any]] = {
    "recency_decay_rate": [0.01, 0.05, 0.1, 0.25, 0.5],
    "expected_vs_winrate_blend": [0.2, 0.5, 0.7, 0.9],
    "exploration_probability": [0.0, 0.02, 0.05],
    "laplace_alpha": [1.0],
    "transition_model_min_history": [3],
}


@dataclass
class SweepResult:
    options: Options
    score: float
    steps: int

    def to_dict(self) -> Dict[str, Any]:
        return {"options": self.options.to_dict(), "score": self.score, "steps": self.steps}


def _evaluate(records: Sequence[Record], options: Options, rng: random.Random) -> Tuple[float, int]:
    total = 0.0
    n = 0
    for i in range(1, len(records)):
        nxt = records[i]
        if nxt.hand is None:
            continue
        rec = recommend(records[:i], options, rng=rng, now_ms=nxt.timestamp)
        total += payoff(rec.hand, nxt.hand)
        n += 1
    return (total / n if n else 0.0), n


def evaluate_config(records: Sequence[Record], options: Options, rng: random.Random) -> float:
    score, _ = _evaluate(records, options, rng)
    return score


def expand_grid(grid: Mapping[str, Sequence[Any]]) -> List[Options]:
    keys = list(grid)
    return [Options.from_dict(dict(zip(keys, combo))) for combo in itertools.product(*(grid[k] for k in keys))]


def sweep(
    records: Sequence[Record],
    grid: Mapping[str, Sequence[Any]] = DEFAULT_GRID,
    seed: int = 0,
) -> List[SweepResult]:
    results: List[SweepResult] = []
    for opts in expand_grid(grid):
        # same seed per config so exploration noise is comparable across rows
        score, steps = _evaluate(records, opts, random.Random(seed))
        results.append(SweepResult(options=opts, score=score, steps=steps))
    results.sort(key=lambda r: r.score, reverse=True)
    logger.info("swept %d configurations over %d records", len(results), len(records))
    return results


def load_records(path: str) -> List[Record]:
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    return parse_records(raw or [])
