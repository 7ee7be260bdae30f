# loadpredict/core/predictor/prediction_engine.py

"""
PredictionEngine.

역할:
- timestamp + interval 로 TimeSlice 를 만들고, 비교 가능한 과거 구간을 데이터 소스에서 조회한다.
- 최근 N일(기본 3일) 같은 구간 평균의 중앙값과 직전 구간의 실제 평균을 섞어 예측값을 만든다.

동작 (predicted_load):
1) slice, slice_next = slice.shift(1), slice_past = slice.shift(-1)
2) 최근 history_days 일에 대해 load_averages 테이블에서 slice_next 구간의 평균을 구한다.
3) 그 값들의 중앙값(median)
4) raw_sensor 테이블에서 slice_past 구간의 평균(current)
5) (median + current) / 2

조회가 하나라도 실패하면 예측 전체가 QueryFailureError 로 실패한다 (부분 결과/0 반환 없음).
행이 하나도 없는 조회는 NO_DATA_SENTINEL(0.0)을 평균으로 쓰고 empty_queries 에 기록한다.
"""

from __future__ import annotations

import logging
import math
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from loadpredict.config.settings import Settings, get_settings
from loadpredict.core.errors import DataNotFoundError, PredictionError, QueryFailureError
from loadpredict.core.predictor.base import BaseLoadPredictor, IntervalLike
from loadpredict.core.predictor.data_sources import DataSource, LoadTable, get_data_source
from loadpredict.core.time_slice import TimeSlice, weekdays_before
from loadpredict.models.common import CurrentLoad, EmptyQuery, LoadPrediction, TimeSliceInfo

logger = logging.getLogger(__name__)

NO_DATA_SENTINEL = 0.0


def median(values: Sequence[float]) -> float:
    """True median: middle element for odd length, mean of the two middle ones for even."""
    if len(values) == 0:
        raise ValueError("median() of an empty sequence")
    return float(np.median(np.asarray(values, dtype=float)))


@dataclass(frozen=True)
class RangeQuery:
    table: LoadTable
    weekday: int
    interval_start: int
    interval_end: int
    count_column: int

    @classmethod
    def for_slice(cls, table: LoadTable, ts: TimeSlice, weekday: Optional[int] = None) -> "RangeQuery":
        return cls(
            table=table,
            weekday=ts.weekday if weekday is None else weekday,
            interval_start=ts.interval_start,
            interval_end=ts.interval_end,
            count_column=table.count_column,
        )


@dataclass
class LoadAccumulator:
    load: float = 0.0
    count: int = 0

    def add(self, row, count_column: int) -> None:
        load = float(row[0])
        if not math.isfinite(load):
            raise ValueError(f"non-finite load value: {row[0]!r}")
        self.load += load
        if count_column > 0:
            count = float(row[count_column - 1])
            if not math.isfinite(count):
                raise ValueError(f"non-finite count value: {row[count_column - 1]!r}")
            self.count += int(count)
        else:
            self.count += 1

    @property
    def empty(self) -> bool:
        return self.count == 0

    @property
    def average(self) -> float:
        if self.count == 0:
            return NO_DATA_SENTINEL
        return self.load / self.count


def _slice_info(ts: TimeSlice) -> TimeSliceInfo:
    return TimeSliceInfo(
        weekday=ts.weekday,
        weekday_name=ts.weekday_name,
        interval_start=ts.interval_start,
        interval_end=ts.interval_end,
    )


class PredictionEngine(BaseLoadPredictor):
    def __init__(
        self,
        data_source: DataSource,
        *,
        history_days: int = 3,
        max_workers: int = 4,
        query_timeout: Optional[float] = 5.0,
        strict_no_data: bool = False,
    ):
        if history_days < 1:
            raise ValueError("history_days 값은 1 이상이어야 함")
        if max_workers < 1:
            raise ValueError("max_workers 값은 1 이상이어야 함")

        self.data_source = data_source
        self.history_days = history_days
        self.max_workers = max_workers
        self.query_timeout = query_timeout
        self.strict_no_data = strict_no_data

    @classmethod
    def from_settings(
        cls,
        config: Optional[Settings] = None,
        data_source: Optional[DataSource] = None,
    ) -> "PredictionEngine":
        config = config or get_settings()
        return cls(
            data_source or get_data_source(config),
            history_days=config.HISTORY_DAYS,
            max_workers=config.QUERY_MAX_WORKERS,
            query_timeout=config.QUERY_TIMEOUT_SECONDS,
            strict_no_data=config.STRICT_NO_DATA,
        )

    # ------------------------------------------------------------------
    # 조회 / 집계
    # ------------------------------------------------------------------
    def _accumulate(self, query: RangeQuery) -> LoadAccumulator:
        try:
            rows = self.data_source.fetch_rows(
                query.table, query.weekday, query.interval_start, query.interval_end
            )
        except PredictionError:
            raise
        except Exception as exc:
            raise QueryFailureError(f"{query.table.value} 조회 실패: {exc}") from exc

        acc = LoadAccumulator()
        try:
            for row in rows:
                acc.add(row, query.count_column)
        except (TypeError, ValueError, IndexError) as exc:
            raise QueryFailureError(f"{query.table.value} 결과 행 형식 오류: {exc}") from exc

        logger.debug(
            "table=%s weekday=%d start=%d end=%d load=%s count=%d",
            query.table.value, query.weekday, query.interval_start, query.interval_end,
            acc.load, acc.count,
        )

        if acc.empty:
            if self.strict_no_data:
                raise DataNotFoundError(
                    f"{query.table.value}: weekday={query.weekday} "
                    f"[{query.interval_start}, {query.interval_end}) 데이터 없음"
                )
            logger.warning(
                "no rows in %s for weekday=%d [%d, %d), using %s",
                query.table.value, query.weekday, query.interval_start, query.interval_end,
                NO_DATA_SENTINEL,
            )
        return acc

    def _run_queries(self, queries: list[RangeQuery]) -> list[LoadAccumulator]:
        """Run queries (concurrently when allowed); results keep the order of `queries`."""
        if self.max_workers == 1 or len(queries) == 1:
            return [self._accumulate(q) for q in queries]

        pool = ThreadPoolExecutor(
            max_workers=min(self.max_workers, len(queries)),
            thread_name_prefix="load-query",
        )
        try:
            # 모든 조회가 같은 마감 시각을 공유한다.
            deadline = None if self.query_timeout is None else time.monotonic() + self.query_timeout
            futures = [pool.submit(self._accumulate, q) for q in queries]
            results = []
            for query, future in zip(queries, futures):
                remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
                try:
                    results.append(future.result(timeout=remaining))
                except FutureTimeoutError:
                    raise QueryFailureError(
                        f"{query.table.value} 조회 시간 초과 ({self.query_timeout}s)"
                    ) from None
            return results
        finally:
            pool.shutdown(wait=False, cancel_futures=True)

    def average_load(
        self,
        table: LoadTable,
        weekday: int,
        interval_start: int,
        interval_end: int,
        count_column: Optional[int] = None,
    ) -> float:
        """
        weekday / [interval_start, interval_end) 범위의 평균 부하.

        count_column > 0 이면 결과 행의 해당 컬럼(1-based)을 count 로 더하고,
        0 이면 행 하나당 count 1. None 이면 테이블 기본값을 쓴다.
        행이 없으면 NO_DATA_SENTINEL (strict 모드에서는 DataNotFoundError).
        """
        query = RangeQuery(
            table=table,
            weekday=weekday,
            interval_start=interval_start,
            interval_end=interval_end,
            count_column=table.count_column if count_column is None else count_column,
        )
        return self._accumulate(query).average

    # ------------------------------------------------------------------
    # Predictor 인터페이스 구현
    # ------------------------------------------------------------------
    def predict(self, timestamp: int, interval: IntervalLike) -> LoadPrediction:
        current_slice = TimeSlice.from_timestamp(timestamp, interval)
        slice_next = current_slice.shift(1)
        slice_past = current_slice.shift(-1)

        queries = [
            RangeQuery.for_slice(LoadTable.HISTORICAL, slice_next, weekday=past_day)
            for past_day in weekdays_before(slice_next.weekday, self.history_days)
        ]
        queries.append(RangeQuery.for_slice(LoadTable.RAW, slice_past))

        results = self._run_queries(queries)
        historical = [acc.average for acc in results[:-1]]
        current = results[-1].average
        mid = median(historical)

        return LoadPrediction(
            timestamp=int(timestamp),
            interval=current_slice.interval.label,
            slice=_slice_info(current_slice),
            target_slice=_slice_info(slice_next),
            historical_averages=historical,
            median=mid,
            current_load=current,
            value=(mid + current) / 2,
            empty_queries=[
                EmptyQuery(
                    table=q.table.value,
                    weekday=q.weekday,
                    interval_start=q.interval_start,
                    interval_end=q.interval_end,
                )
                for q, acc in zip(queries, results)
                if acc.empty
            ],
        )

    def predicted_load(self, timestamp: int, interval: IntervalLike) -> float:
        return self.predict(timestamp, interval).value

    def current(self, timestamp: int, interval: IntervalLike) -> CurrentLoad:
        current_slice = TimeSlice.from_timestamp(timestamp, interval)
        acc = self._accumulate(RangeQuery.for_slice(LoadTable.RAW, current_slice))
        return CurrentLoad(
            timestamp=int(timestamp),
            interval=current_slice.interval.label,
            slice=_slice_info(current_slice),
            value=acc.average,
            empty=acc.empty,
        )

    def current_load(self, timestamp: int, interval: IntervalLike) -> float:
        return self.current(timestamp, interval).value
