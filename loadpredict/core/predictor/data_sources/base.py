import enum
from abc import ABC, abstractmethod
from typing import Any, Sequence


class LoadTable(str, enum.Enum):
    """조회 대상 논리 테이블"""

    HISTORICAL = "load_averages"
    RAW = "raw_sensor"

    @property
    def count_column(self) -> int:
        """1-based position of the count column in a result row, 0 = one per row."""
        return 2 if self is LoadTable.HISTORICAL else 0


Row = Sequence[Any]


class DataSource(ABC):
    """시간 구간별 부하 샘플 조회 인터페이스"""

    @abstractmethod
    def fetch_rows(
        self,
        table: LoadTable,
        weekday: int,
        interval_start: int,
        interval_end: int,
    ) -> list[Row]:
        """
        weekday 가 같고 interval_start <= time_slice < interval_end 인 행을 반환한다.

        HISTORICAL: (total_load, event_count)
        RAW: (value,)
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """사용 가능 여부"""
        pass
