# tests/conftest.py

"""
pytest 설정 및 공통 fixture.
"""

import sys
from pathlib import Path

import pytest

# 프로젝트 루트를 PYTHONPATH에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from loadpredict.core.predictor.data_sources import DataSource, LoadTable  # noqa: E402


class InMemorySource(DataSource):
    """
    테스트용 데이터 소스.

    rows: {LoadTable: [(weekday, time_slice, *columns), ...]}
    """

    def __init__(self, rows=None):
        self.rows = rows or {}
        self.calls = []

    def fetch_rows(self, table, weekday, interval_start, interval_end):
        self.calls.append((table, weekday, interval_start, interval_end))
        return [
            tuple(r[2:])
            for r in self.rows.get(table, [])
            if r[0] == weekday and interval_start <= r[1] < interval_end
        ]

    def is_available(self):
        return True


# 2023-11-14 22:13:20 UTC, Tuesday (weekday 3)
TUESDAY_TS = 1_700_000_000


@pytest.fixture
def tuesday_ts():
    return TUESDAY_TS


@pytest.fixture
def sample_source():
    """
    30분 구간 기준 TUESDAY_TS 예측에 필요한 행.

    slice      : Tue [79200, 81000)
    slice_next : Tue [81000, 82800) -> 과거 요일 Mon(2), Sun(1), Sat(7)
    slice_past : Tue [77400, 79200)
    """
    return InMemorySource(
        {
            LoadTable.HISTORICAL: [
                (2, 81000, 8.0, 2),    # Mon -> 4.0
                (1, 81000, 12.0, 2),   # Sun -> 6.0
                (7, 81900, 5.0, 1),    # Sat -> 5.0
                (3, 81000, 100.0, 1),  # Tue itself, must not be used
                (2, 82800, 100.0, 1),  # outside the range
            ],
            LoadTable.RAW: [
                (3, 77400, 2.0),
                (3, 78000, 4.0),
                (3, 79100, 3.0),
                (3, 79200, 50.0),  # current slice, not the past one
            ],
        }
    )
