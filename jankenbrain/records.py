"""
Play records and normalization of loosely-typed input.

Storage layers hand us dicts in whatever shape they were saved with: emoji
hands, Japanese or English names, ``createdAt`` as ms or as an ISO string.
``parse_record`` maps all of those onto a ``Record``; anything unrecognized
becomes ``None`` and is skipped by the counting code.
"""
from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .errors import RecordError
from .utils import Hand, Outcome

logger = logging.getLogger(__name__)

_HAND_ALIASES: Dict[str, Hand] = {
    "rock": Hand.ROCK,
    "scissors": Hand.SCISSORS,
    "paper": Hand.PAPER,
    "✊": Hand.ROCK,
    "✌️": Hand.SCISSORS,
    "✌": Hand.SCISSORS,
    "✋": Hand.PAPER,
    "グー": Hand.ROCK,
    "ぐー": Hand.ROCK,
    "チョキ": Hand.SCISSORS,
    "ちょき": Hand.SCISSORS,
    "パー": Hand.PAPER,
    "ぱー": Hand.PAPER,
    "gu": Hand.ROCK,
    "choki": Hand.SCISSORS,
    "pa": Hand.PAPER,
}

_RESULT_ALIASES: Dict[str, Outcome] = {
    "win": Outcome.WIN,
    "won": Outcome.WIN,
    "draw": Outcome.DRAW,
    "tie": Outcome.DRAW,
    "loss": Outcome.LOSS,
    "lose": Outcome.LOSS,
    "lost": Outcome.LOSS,
    "勝ち": Outcome.WIN,
    "あいこ": Outcome.DRAW,
    "引き分け": Outcome.DRAW,
    "負け": Outcome.LOSS,
}

# fallback scan: longer aliases first; ASCII aliases must be a whole word,
# so "space" is not read as "pa"
_HAND_BY_LENGTH = sorted(_HAND_ALIASES.items(), key=lambda kv: -len(kv[0]))
_RESULT_BY_LENGTH = sorted(_RESULT_ALIASES.items(), key=lambda kv: -len(kv[0]))
_WORD = re.compile(r"[a-z]+")


def current_time_ms() -> int:
    return int(time.time() * 1000)


def date_of(timestamp_ms: int) -> str:
    try:
        dt = datetime.fromtimestamp(timestamp_ms / 1000.0, tz=timezone.utc)
    except (ValueError, OverflowError, OSError) as e:
        raise RecordError(f"timestamp out of range: {timestamp_ms!r}") from e
    return dt.strftime("%Y-%m-%d")


@dataclass(frozen=True)
class Record:
    hand: Optional[Hand]
    result: Optional[Outcome]
    timestamp: int  # ms since epoch
    calendar_date: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hand": self.hand.value if self.hand is not None else None,
            "result": self.result.value if self.result is not None else None,
            "timestamp": self.timestamp,
            "calendar_date": self.calendar_date,
        }


def _match(raw: Any, table: Dict[str, Any], by_length) -> Optional[Any]:
    if raw is None:
        return None
    if isinstance(raw, (Hand, Outcome)):
        return raw
    s = str(raw).strip()
    if not s:
        return None
    key = s.lower()
    if s in table:
        return table[s]
    if key in table:
        return table[key]
    words = set(_WORD.findall(key))
    for alias, value in by_length:
        a = alias.lower()
        if a in words if a.isascii() else a in key:
            return value
    return None


def parse_hand(raw: Any) -> Optional[Hand]:
    return _match(raw, _HAND_ALIASES, _HAND_BY_LENGTH)


def parse_result(raw: Any) -> Optional[Outcome]:
    return _match(raw, _RESULT_ALIASES, _RESULT_BY_LENGTH)


def _checked_ms(value: float, raw: Any, now_ms: int) -> int:
    try:
        ms = int(value)
        date_of(ms)
    except (ValueError, OverflowError, RecordError):
        logger.warning("Out-of-range timestamp %r, using current time", raw)
        return now_ms
    return ms


def parse_timestamp(raw: Any, now_ms: int) -> int:
    if raw is None or isinstance(raw, bool):
        return now_ms
    if isinstance(raw, (int, float)):
        return _checked_ms(raw, raw, now_ms)
    s = str(raw).strip()
    if not s:
        return now_ms
    try:
        value = float(s)
    except ValueError:
        pass
    else:
        return _checked_ms(value, raw, now_ms)
    try:
        dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
    except ValueError:
        logger.warning("Unparseable timestamp %r, using current time", raw)
        return now_ms
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


def parse_record(raw: Mapping[str, Any], now_ms: Optional[int] = None) -> Record:
    if isinstance(raw, Record):
        return raw
    if not isinstance(raw, Mapping):
        raise RecordError(f"record must be a mapping, got {type(raw).__name__}")
    if now_ms is None:
        now_ms = current_time_ms()

    hand = parse_hand(raw.get("hand"))
    if hand is None:
        logger.warning("Unrecognized hand %r; record will be skipped by counting", raw.get("hand"))
    result = parse_result(raw.get("result"))

    ts_raw = raw.get("timestamp")
    if ts_raw is None:
        ts_raw = raw.get("createdAt", raw.get("created_at"))
    timestamp = parse_timestamp(ts_raw, now_ms)

    date = raw.get("calendar_date") or raw.get("date")
    calendar_date = str(date) if date else date_of(timestamp)
    return Record(hand=hand, result=result, timestamp=timestamp, calendar_date=calendar_date)


def sort_records(records: Iterable[Record]) -> List[Record]:
    return sorted(records, key=lambda r: r.timestamp)


def parse_records(raws: Iterable[Mapping[str, Any]], now_ms: Optional[int] = None) -> List[Record]:
    if now_ms is None:
        now_ms = current_time_ms()
    return sort_records(parse_record(r, now_ms) for r in raws)
