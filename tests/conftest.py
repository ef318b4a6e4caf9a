from typing import Iterable, Optional

import pytest

from jankenbrain import Hand, Options, Outcome, Record
from jankenbrain.records import date_of

NOW_MS = 1_700_000_000_000  # 2023-11-14T22:13:20Z
DAY_MS = 24 * 60 * 60 * 1000


class SequenceRandom:
    """Replays a fixed list of floats; repeats the last one when exhausted."""

    def __init__(self, values: Iterable[float]):
        self.values = list(values)
        self.calls = 0

    def random(self) -> float:
        i = min(self.calls, len(self.values) - 1)
        self.calls += 1
        return self.values[i]


def make_record(hand: Optional[Hand], result: Optional[Outcome] = Outcome.WIN, days_ago: float = 0.0, date: Optional[str] = None) -> Record:
    ts = int(NOW_MS - days_ago * DAY_MS)
    return Record(hand=hand, result=result, timestamp=ts, calendar_date=date or date_of(ts))


@pytest.fixture
def now_ms():
    return NOW_MS


@pytest.fixture
def record():
    return make_record


@pytest.fixture
def seq_rng():
    return SequenceRandom


@pytest.fixture
def exploit_rng():
    # never below any exploration probability < 0.999
    return SequenceRandom([0.999])


@pytest.fixture
def no_explore():
    return Options(exploration_probability=0.0)


@pytest.fixture
def rock_streak():
    # Ten Rock wins, one day apart, oldest first
    return [make_record(Hand.ROCK, Outcome.WIN, days_ago=9 - i) for i in range(10)]
