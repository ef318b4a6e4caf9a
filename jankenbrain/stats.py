"""Display aggregates over a play log: per-date and cumulative average score,
plus a per-hand summary. Nothing here feeds the recommender."""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from .records import Record, sort_records
from .utils import EXPECTED_BASELINE, HANDS, SCORE_TABLE, Hand, Outcome


@dataclass
class DateAverage:
    date: str
    average: float
    count: int


@dataclass
class CumulativePoint:
    date: str
    cumulative_average: float
    date_average: float


@dataclass
class HandAggregate:
    count: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0

    @property
    def total_score(self) -> int:
        return (
            self.wins * SCORE_TABLE[Outcome.WIN]
            + self.draws * SCORE_TABLE[Outcome.DRAW]
            + self.losses * SCORE_TABLE[Outcome.LOSS]
        )

    @property
    def average_score(self) -> float:
        return self.total_score / self.count if self.count else 0.0

    @property
    def win_rate(self) -> float:
        return self.wins / self.count if self.count else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "wins": self.wins,
            "draws": self.draws,
            "losses": self.losses,
            "average_score": self.average_score,
            "win_rate": self.win_rate,
        }


@dataclass
class HistoryStatistics:
    per_date_average: List[DateAverage] = field(default_factory=list)
    cumulative_average: List[CumulativePoint] = field(default_factory=list)
    per_hand_aggregate: Dict[Hand, HandAggregate] = field(default_factory=dict)
    expected_baseline: float = EXPECTED_BASELINE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "per_date_average": [
                {"date": d.date, "average": d.average, "count": d.count} for d in self.per_date_average
            ],
            "cumulative_average": [
                {"date": c.date, "cumulative_average": c.cumulative_average, "date_average": c.date_average}
                for c in self.cumulative_average
            ],
            "per_hand_aggregate": {h.value: a.to_dict() for h, a in self.per_hand_aggregate.items()},
            "expected_baseline": self.expected_baseline,
        }


def compute_history_statistics(history: Sequence[Record]) -> HistoryStatistics:
    """Aggregate ``history`` for display.

    Records without a recognized result carry no score and are left out
    entirely. Records without a recognized hand still count toward the date
    averages but not toward the per-hand summary.
    """
    daily_sum: Dict[str, float] = defaultdict(float)
    daily_count: Dict[str, int] = defaultdict(int)
    per_hand = {h: HandAggregate() for h in HANDS}

    for r in sort_records(history):
        if r.result is None:
            continue
        daily_sum[r.calendar_date] += SCORE_TABLE[r.result]
        daily_count[r.calendar_date] += 1
        if r.hand is None:
            continue
        agg = per_hand[r.hand]
        agg.count += 1
        if r.result is Outcome.WIN:
            agg.wins += 1
        elif r.result is Outcome.DRAW:
            agg.draws += 1
        else:
            agg.losses += 1

    per_date: List[DateAverage] = []
    cumulative: List[CumulativePoint] = []
    run_sum, run_count = 0.0, 0
    # ISO dates sort chronologically as strings
    for d in sorted(daily_sum):
        day_avg = daily_sum[d] / daily_count[d]
        run_sum += daily_sum[d]
        run_count += daily_count[d]
        per_date.append(DateAverage(date=d, average=day_avg, count=daily_count[d]))
        cumulative.append(CumulativePoint(date=d, cumulative_average=run_sum / run_count, date_average=day_avg))

    return HistoryStatistics(
        per_date_average=per_date,
        cumulative_average=cumulative,
        per_hand_aggregate=per_hand,
    )
