from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

import numpy as np

from .options import Options
from .records import Record

MS_PER_DAY = 1000 * 60 * 60 * 24


@dataclass
class CountTables:
    raw: np.ndarray  # 3, plays per hand
    weighted: np.ndarray  # 3, recency-weighted plays per hand
    transition: np.ndarray  # 3x3 (prev->next)

    def to_dict(self) -> Dict[str, list]:
        return {
            "raw": self.raw.tolist(),
            "weighted": self.weighted.tolist(),
            "transition": self.transition.tolist(),
        }


def age_weight(timestamp: int, now_ms: int, decay_rate: float) -> float:
    """exp(-decay_rate * age_in_days); future timestamps count as age 0."""
    days = max(0.0, (now_ms - timestamp) / MS_PER_DAY)
    return math.exp(-decay_rate * days)


def compute_counts(history: Sequence[Record], options: Options, now_ms: int) -> CountTables:
    """Laplace-smoothed counts over ``history``, which must be time-ordered.

    Every cell starts at ``options.laplace_alpha``. Records with an unknown
    hand add nothing and break the transition chain on both sides.
    """
    a = float(options.laplace_alpha)
    raw = np.full(3, a, dtype=np.float64)
    weighted = np.full(3, a, dtype=np.float64)
    transition = np.full((3, 3), a, dtype=np.float64)

    prev: Optional[int] = None
    for r in history:
        if r.hand is None:
            prev = None
            continue
        i = r.hand.index
        raw[i] += 1.0
        weighted[i] += age_weight(r.timestamp, now_ms, options.recency_decay_rate)
        if prev is not None:
            transition[prev, i] += 1.0
        prev = i
    return CountTables(raw=raw, weighted=weighted, transition=transition)
