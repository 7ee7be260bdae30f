import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from .base import DataSource, LoadTable, Row
from loadpredict.core.errors import DataSourceError, QueryFailureError

logger = logging.getLogger(__name__)

_COLUMNS = {
    LoadTable.HISTORICAL: ["weekday", "time_slice", "total_load", "event_count"],
    LoadTable.RAW: ["weekday", "time_slice", "value"],
}


class CSVDataSource(DataSource):
    """CSV 파일(load_averages / raw_sensor 덤프)에서 부하 샘플을 읽어오는 데이터 소스."""

    def __init__(
        self,
        historical_path: str = "data/load_averages.csv",
        raw_path: str = "data/raw_sensor.csv",
    ):
        self.paths = {
            LoadTable.HISTORICAL: Path(historical_path),
            LoadTable.RAW: Path(raw_path),
        }
        self.frames: dict[LoadTable, Optional[pd.DataFrame]] = {
            table: self._load(table, path) for table, path in self.paths.items()
        }

    def _load(self, table: LoadTable, path: Path) -> Optional[pd.DataFrame]:
        if not path.exists():
            logger.warning("CSV 파일을 찾을 수 없음: %s", path)
            return None

        try:
            df = pd.read_csv(path)
        except Exception as exc:
            raise DataSourceError(f"CSV 읽기 실패 ({path}): {exc}") from exc

        missing = [c for c in _COLUMNS[table] if c not in df.columns]
        if missing:
            raise DataSourceError(f"{path}: 필수 컬럼 없음 {missing}")

        logger.info("CSV 로드 완료: %s (%d행)", path, len(df))
        return df

    def fetch_rows(
        self,
        table: LoadTable,
        weekday: int,
        interval_start: int,
        interval_end: int,
    ) -> list[Row]:
        df = self.frames[table]
        if df is None:
            raise QueryFailureError(f"{table.value} CSV 데이터가 로드되지 않음")

        mask = (
            (df["weekday"] == weekday)
            & (df["time_slice"] >= interval_start)
            & (df["time_slice"] < interval_end)
        )
        selected = df.loc[mask, _COLUMNS[table][2:]]
        return list(selected.itertuples(index=False, name=None))

    def is_available(self) -> bool:
        return all(df is not None for df in self.frames.values())
