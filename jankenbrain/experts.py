from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Dict, Sequence

from .counting import CountTables, compute_counts
from .options import Options
from .records import Record
from .utils import Distribution, normalize

logger = logging.getLogger(__name__)


class Estimator(ABC):
    """Turns a play history into a distribution over the opponent's next hand.

    Subclasses only read the count table they need; ``estimate`` recomputes
    the tables from the full history on every call.
    """

    name: str = ""

    def estimate(self, history: Sequence[Record], options: Options, now_ms: int) -> Distribution:
        tables = compute_counts(history, options, now_ms)
        return self.from_tables(tables, history)

    @abstractmethod
    def from_tables(self, tables: CountTables, history: Sequence[Record]) -> Distribution:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class FrequencyEstimator(Estimator):
    """Laplace-smoothed marginal frequency of hands."""

    name = "frequency"

    def from_tables(self, tables: CountTables, history: Sequence[Record]) -> Distribution:
        return Distribution(normalize(tables.raw))


class RecencyEstimator(Estimator):
    """Marginal frequency with each play weighted by exp(-rate * age_days)."""

    name = "recency"

    def from_tables(self, tables: CountTables, history: Sequence[Record]) -> Distribution:
        return Distribution(normalize(tables.weighted))


class TransitionEstimator(Estimator):
    """p(next | last) from the first-order transition matrix; if there is no
    usable last hand, same as FrequencyEstimator."""

    name = "transition"

    def from_tables(self, tables: CountTables, history: Sequence[Record]) -> Distribution:
        last = history[-1].hand if history else None
        if last is None:
            return FREQUENCY.from_tables(tables, history)
        return Distribution(normalize(tables.transition[last.index]))


FREQUENCY = FrequencyEstimator()
RECENCY = RecencyEstimator()
TRANSITION = TransitionEstimator()

ESTIMATORS: Dict[str, Estimator] = {e.name: e for e in (FREQUENCY, RECENCY, TRANSITION)}


def get_estimator(name: str) -> Estimator:
    try:
        return ESTIMATORS[name]
    except KeyError:
        raise KeyError(f"unknown estimator {name!r}; expected one of {sorted(ESTIMATORS)}") from None


def select_estimator(history: Sequence[Record], options: Options) -> Estimator:
    if len(history) >= options.transition_model_min_history:
        est: Estimator = TRANSITION
    else:
        est = RECENCY
    logger.debug("history=%d min=%d -> %s", len(history), options.transition_model_min_history, est.name)
    return est
