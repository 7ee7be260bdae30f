# loadpredict/core/time_slice.py

"""
TimeSlice: timestamp -> (weekday, interval_start, interval_end) 좌표 변환.

역할:
- epoch 초 단위 timestamp를 요일(1~7) + 하루 안의 구간(초 단위)으로 변환한다.
- 구간을 ±N 칸 이동(shift)할 때 자정/주 경계를 넘어가는 경우를 올바르게 처리한다.

Weekday convention
------------------
저장된 데이터와 동일한 규칙을 쓴다: 1 = Sunday ... 7 = Saturday, 모두 UTC 기준.
1970-01-01 (epoch day 0) 은 목요일이므로 EPOCH_WEEKDAY = 5.
이 상수가 바뀌면 과거 데이터 조회 결과가 전부 어긋나므로 테스트로 고정해 둔다.
"""

from __future__ import annotations

import enum
import numbers
from dataclasses import dataclass
from typing import Iterator, Union

from loadpredict.core.errors import InvalidIntervalError, InvalidTimestampError

SECONDS_PER_DAY = 86400
DAYS_PER_WEEK = 7

# 1 = Sunday, ..., 7 = Saturday. 1970-01-01 was a Thursday.
EPOCH_WEEKDAY = 5

WEEKDAY_NAMES = {
    1: "Sunday",
    2: "Monday",
    3: "Tuesday",
    4: "Wednesday",
    5: "Thursday",
    6: "Friday",
    7: "Saturday",
}


class Interval(int, enum.Enum):
    """Bucket width in seconds."""

    FIVE_MINUTES = 300
    FIFTEEN_MINUTES = 900
    THIRTY_MINUTES = 1800
    HOURLY = 3600

    @property
    def seconds(self) -> int:
        return int(self.value)

    @property
    def slices_per_day(self) -> int:
        return SECONDS_PER_DAY // self.seconds

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def parse(cls, value: Union["Interval", str, int]) -> "Interval":
        """
        Interval 멤버, 이름("THIRTY_MINUTES"), 라벨("30m", "1h") 또는 초 단위 폭을 받아
        Interval 로 변환한다. 지원하지 않는 값이면 InvalidIntervalError.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise InvalidIntervalError(f"Unsupported interval: {value!r}")
        if isinstance(value, numbers.Integral):
            try:
                return cls(int(value))
            except ValueError:
                raise InvalidIntervalError(f"Unsupported interval width: {value}s") from None
        if isinstance(value, str):
            key = value.strip()
            if key.upper() in cls.__members__:
                return cls[key.upper()]
            for member, label in _LABELS.items():
                if key.lower() == label:
                    return member
            if key.isdigit():
                return cls.parse(int(key))
        raise InvalidIntervalError(f"Unsupported interval: {value!r}")


_LABELS = {
    Interval.FIVE_MINUTES: "5m",
    Interval.FIFTEEN_MINUTES: "15m",
    Interval.THIRTY_MINUTES: "30m",
    Interval.HOURLY: "1h",
}

for _member in Interval:
    if SECONDS_PER_DAY % _member.seconds != 0:
        raise InvalidIntervalError(f"{_member.name} does not divide a day evenly")


def normalize_weekday_offset(offset: int) -> int:
    """Map any 0-based day offset (negative included) into 0..6."""
    # Python's % is floored, so a positive modulus never yields a negative result.
    return offset % DAYS_PER_WEEK


def weekdays_before(weekday: int, days: int) -> Iterator[int]:
    """Yield the `days` weekdays preceding `weekday`, most recent first."""
    for i in range(1, days + 1):
        yield normalize_weekday_offset(weekday - 1 - i) + 1


def _validate_timestamp(timestamp) -> int:
    if isinstance(timestamp, bool) or not isinstance(timestamp, numbers.Integral):
        raise InvalidTimestampError(f"Timestamp must be integral epoch seconds, got {timestamp!r}")
    timestamp = int(timestamp)
    if timestamp < 0:
        raise InvalidTimestampError(f"Timestamp must not be negative, got {timestamp}")
    return timestamp


@dataclass(frozen=True)
class TimeSlice:
    weekday: int
    interval_start: int
    interval_end: int
    interval: Interval

    @classmethod
    def from_timestamp(cls, timestamp: int, interval: Union[Interval, str, int]) -> "TimeSlice":
        ts = _validate_timestamp(timestamp)
        iv = Interval.parse(interval)

        days, second_of_day = divmod(ts, SECONDS_PER_DAY)
        weekday = normalize_weekday_offset(days + EPOCH_WEEKDAY - 1) + 1
        start = second_of_day - second_of_day % iv.seconds
        return cls(weekday=weekday, interval_start=start, interval_end=start + iv.seconds, interval=iv)

    def shift(self, n: int) -> "TimeSlice":
        """
        n 구간만큼 이동한 새 TimeSlice 를 반환한다 (n 은 음수/큰 값 모두 허용).

        divmod 로 하루를 넘어간 일수(day_delta)를 구하고 요일에 반영한다.
        예: 일요일(1) 00:00 구간에서 -1 → 토요일(7) 23:xx 구간.
        """
        width = self.interval.seconds
        day_delta, start = divmod(self.interval_start + n * width, SECONDS_PER_DAY)
        weekday = normalize_weekday_offset(self.weekday - 1 + day_delta) + 1
        return TimeSlice(weekday=weekday, interval_start=start, interval_end=start + width, interval=self.interval)

    @property
    def weekday_name(self) -> str:
        return WEEKDAY_NAMES[self.weekday]

    def coordinates(self) -> tuple[int, int, int]:
        return self.weekday, self.interval_start, self.interval_end
