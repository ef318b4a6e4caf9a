from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Dict, Iterator

import numpy as np


class Hand(Enum):
    ROCK = "rock"
    SCISSORS = "scissors"
    PAPER = "paper"

    @property
    def index(self) -> int:
        return _HAND_INDEX[self]

    def beats(self, other: "Hand") -> bool:
        # indices: 0=Rock,1=Scissors,2=Paper; each hand beats the next one
        return (self.index + 1) % 3 == other.index


class Outcome(Enum):
    WIN = "win"
    DRAW = "draw"
    LOSS = "loss"


# Canonical order, also the last step of every tie-break
HANDS = [Hand.ROCK, Hand.SCISSORS, Hand.PAPER]
_HAND_INDEX = {h: i for i, h in enumerate(HANDS)}

SCORE_TABLE: Dict[Outcome, int] = {
    Outcome.WIN: 40,
    Outcome.DRAW: 20,
    Outcome.LOSS: 10,
}
MAX_SCORE = max(SCORE_TABLE.values())
EXPECTED_BASELINE = sum(SCORE_TABLE.values()) / len(SCORE_TABLE)


def outcome_of(own: Hand, opp: Hand) -> Outcome:
    if own is opp:
        return Outcome.DRAW
    return Outcome.WIN if own.beats(opp) else Outcome.LOSS


def payoff(own: Hand, opp: Hand) -> int:
    return SCORE_TABLE[outcome_of(own, opp)]


# PAYOFF[i, j] = score of playing HANDS[i] against HANDS[j]
PAYOFF = np.array(
    [[payoff(own, opp) for opp in HANDS] for own in HANDS],
    dtype=np.float64,
)


def uniform() -> np.ndarray:
    return np.full(3, 1.0 / 3.0, dtype=np.float64)


def normalize(p: np.ndarray) -> np.ndarray:
    p = np.asarray(p, dtype=np.float64)
    s = float(np.sum(p))
    if s <= 0 or not np.isfinite(s):
        return uniform()
    return p / s


class Distribution(Mapping):
    """Read-only probability map ``Hand -> float`` backed by a length-3 vector
    in canonical hand order."""

    __slots__ = ("_p",)

    def __init__(self, probs: np.ndarray):
        p = np.array(probs, dtype=np.float64)
        p.setflags(write=False)
        self._p = p

    @classmethod
    def uniform(cls) -> "Distribution":
        return cls(uniform())

    @property
    def probs(self) -> np.ndarray:
        return self._p

    def __getitem__(self, hand: Hand) -> float:
        return float(self._p[hand.index])

    def __iter__(self) -> Iterator[Hand]:
        return iter(HANDS)

    def __len__(self) -> int:
        return 3

    def __repr__(self) -> str:
        inner = ", ".join(f"{h.value}={self[h]:.4f}" for h in HANDS)
        return f"Distribution({inner})"

    def to_dict(self) -> Dict[str, float]:
        return {h.value: float(self._p[h.index]) for h in HANDS}
