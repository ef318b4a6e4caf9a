from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Protocol, Sequence, Tuple

import numpy as np

from .experts import Estimator, select_estimator
from .options import Options
from .records import Record, current_time_ms
from .stats import HistoryStatistics, compute_history_statistics
from .utils import (
    HANDS,
    MAX_SCORE,
    PAYOFF,
    Distribution,
    Hand,
    Outcome,
)

logger = logging.getLogger(__name__)

# scores closer than this are treated as equal when breaking ties
TIE_TOLERANCE = 1e-9

EXPLORE = "explore"
EXPLOIT = "exploit"


class RandomSource(Protocol):
    def random(self) -> float:
        """Uniform draw in [0, 1)."""


Clock = Callable[[], int]


@dataclass(frozen=True)
class Recommendation:
    hand: Hand
    mode: str  # "explore" | "exploit"
    opponent_distribution: Distribution
    expected_score_per_hand: Dict[Hand, float]
    win_rate_score_per_hand: Dict[Hand, float]
    combined_score_per_hand: Dict[Hand, float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hand": self.hand.value,
            "rationale": {
                "mode": self.mode,
                "opponentDistribution": self.opponent_distribution.to_dict(),
                "expectedScorePerHand": {h.value: v for h, v in self.expected_score_per_hand.items()},
                "winRateScorePerHand": {h.value: v for h, v in self.win_rate_score_per_hand.items()},
                "combinedScorePerHand": {h.value: v for h, v in self.combined_score_per_hand.items()},
            },
        }


# ---------------------- Scoring ----------------------
def expected_scores(dist: Distribution) -> np.ndarray:
    # Payoff matrix A[i, j] = score of playing i against j; EV = A @ p
    return PAYOFF @ dist.probs


def play_and_win_counts(history: Sequence[Record]) -> Tuple[np.ndarray, np.ndarray]:
    plays = np.zeros(3, dtype=np.float64)
    wins = np.zeros(3, dtype=np.float64)
    for r in history:
        if r.hand is None:
            continue
        plays[r.hand.index] += 1.0
        if r.result is Outcome.WIN:
            wins[r.hand.index] += 1.0
    return plays, wins


def _rates(plays: np.ndarray, wins: np.ndarray) -> np.ndarray:
    # 0 for hands never played
    return np.divide(wins, plays, out=np.zeros(3, dtype=np.float64), where=plays > 0)


def win_rates(history: Sequence[Record]) -> np.ndarray:
    return _rates(*play_and_win_counts(history))


def combined_scores(expected: np.ndarray, win_rate_score: np.ndarray, blend: float) -> np.ndarray:
    return blend * expected + (1.0 - blend) * win_rate_score


def _prefers(i: int, j: int, combined: np.ndarray, expected: np.ndarray, plays: np.ndarray) -> bool:
    """True if hand i should replace hand j as the current best."""
    for scores in (combined, expected):
        if abs(scores[i] - scores[j]) > TIE_TOLERANCE:
            return bool(scores[i] > scores[j])
    if plays[i] != plays[j]:
        return bool(plays[i] > plays[j])
    # equal on everything: keep the earlier hand in canonical order
    return False


def best_hand(combined: np.ndarray, expected: np.ndarray, plays: np.ndarray) -> Hand:
    best = 0
    for i in range(1, 3):
        if _prefers(i, best, combined, expected, plays):
            best = i
    return HANDS[best]


# ---------------------- Selector / exploration ----------------------
def _resolve(rng: Optional[RandomSource], now_ms: Optional[int]) -> Tuple[RandomSource, int]:
    return (rng if rng is not None else random.Random()), (now_ms if now_ms is not None else current_time_ms())


def _opponent_distribution(
    history: Sequence[Record], options: Options, rng: RandomSource, now_ms: int
) -> Tuple[Distribution, Estimator, bool]:
    est = select_estimator(history, options)
    dist = est.estimate(history, options, now_ms)
    if rng.random() < options.exploration_probability:
        logger.debug("opponent-side exploration: uniform distribution")
        return Distribution.uniform(), est, True
    return dist, est, False


def estimate_opponent_distribution(
    history: Sequence[Record],
    options: Optional[Options] = None,
    *,
    rng: Optional[RandomSource] = None,
    now_ms: Optional[int] = None,
) -> Distribution:
    options = options or Options()
    rng, now_ms = _resolve(rng, now_ms)
    dist, _, _ = _opponent_distribution(history, options, rng, now_ms)
    return dist


def recommend_from_distribution(
    history: Sequence[Record],
    dist: Distribution,
    options: Optional[Options] = None,
    *,
    rng: Optional[RandomSource] = None,
) -> Recommendation:
    """Score every own hand against ``dist`` and pick one.

    The combined score blends the expected payoff with the observed win rate
    (scaled to the win score). Ties fall back to expected payoff, then play
    count, then canonical order. With probability ``exploration_probability``
    the pick is replaced by a uniformly random hand.
    """
    options = options or Options()
    if rng is None:
        rng = random.Random()

    expected = expected_scores(dist)
    plays, wins = play_and_win_counts(history)
    wr_score = _rates(plays, wins) * MAX_SCORE
    combined = combined_scores(expected, wr_score, options.expected_vs_winrate_blend)

    if rng.random() < options.exploration_probability:
        idx = min(int(rng.random() * 3), 2)
        hand, mode = HANDS[idx], EXPLORE
    else:
        hand, mode = best_hand(combined, expected, plays), EXPLOIT
    logger.debug("recommend %s (%s) combined=%s", hand.value, mode, combined.tolist())

    return Recommendation(
        hand=hand,
        mode=mode,
        opponent_distribution=dist,
        expected_score_per_hand={h: float(expected[h.index]) for h in HANDS},
        win_rate_score_per_hand={h: float(wr_score[h.index]) for h in HANDS},
        combined_score_per_hand={h: float(combined[h.index]) for h in HANDS},
    )


def recommend(
    history: Sequence[Record],
    options: Optional[Options] = None,
    *,
    rng: Optional[RandomSource] = None,
    now_ms: Optional[int] = None,
) -> Recommendation:
    options = options or Options()
    rng, now_ms = _resolve(rng, now_ms)
    dist, _, _ = _opponent_distribution(history, options, rng, now_ms)
    return recommend_from_distribution(history, dist, options, rng=rng)


class JankenBrain:
    """
    Recommender for a personal rock-paper-scissors log.

    - Predicts the opponent's next hand from Laplace-smoothed counts
      (recency-weighted early on, first-order transitions once history is long enough)
    - Scores own hands by expected payoff blended with observed win rate
    - Epsilon exploration at both the distribution and the hand-selection stage

    Holds no history. The random source and clock are injected so a brain can
    be made fully deterministic.
    """

    def __init__(
        self,
        options: Optional[Options] = None,
        random_seed: Optional[int] = None,
        rng: Optional[RandomSource] = None,
        clock: Optional[Clock] = None,
    ):
        self.options = options or Options()
        self.rng: RandomSource = rng if rng is not None else random.Random(random_seed)
        self.clock: Clock = clock or current_time_ms

    def _opts(self, overrides: Optional[Dict[str, Any]]) -> Options:
        return self.options.merged(overrides) if overrides else self.options

    # ---------------------- Public API ----------------------
    def recommend(self, history: Sequence[Record], overrides: Optional[Dict[str, Any]] = None) -> Recommendation:
        return recommend(history, self._opts(overrides), rng=self.rng, now_ms=self.clock())

    def predict(
        self, history: Sequence[Record], overrides: Optional[Dict[str, Any]] = None
    ) -> Tuple[Distribution, Dict[str, Any]]:
        opts = self._opts(overrides)
        dist, est, explored = _opponent_distribution(history, opts, self.rng, self.clock())
        meta = {
            "estimator": est.name,
            "explored": explored,
            "history_length": len(history),
        }
        return dist, meta

    def statistics(self, history: Sequence[Record]) -> HistoryStatistics:
        return compute_history_statistics(history)
