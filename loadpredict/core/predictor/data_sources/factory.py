from typing import Optional

from .base import DataSource
from .csv_source import CSVDataSource
from .sql_source import SQLDataSource
from loadpredict.config.settings import Settings, get_settings
from loadpredict.core.errors import DataSourceError
from loadpredict.core.persistence_models import init_metadata


_data_source_instance: Optional[DataSource] = None


def _create_data_source(config: Settings) -> DataSource:
    backend = config.DATA_SOURCE_BACKEND

    if backend == "sql":
        source = SQLDataSource(connection_url=config.DATABASE_URL)
        init_metadata(source.engine, sync=config.DB_INIT_SCHEMA)
        return source
    if backend == "csv":
        return CSVDataSource(
            historical_path=config.HISTORICAL_CSV_PATH,
            raw_path=config.RAW_CSV_PATH,
        )

    raise DataSourceError(f"Unknown data source backend: {backend}")


def get_data_source(config: Optional[Settings] = None) -> DataSource:
    """글로벌 데이터 소스 인스턴스 반환"""
    global _data_source_instance

    if _data_source_instance is None:
        try:
            _data_source_instance = _create_data_source(config or get_settings())
        except DataSourceError:
            raise
        except Exception as exc:
            raise DataSourceError(f"failed to initialize data source: {exc}") from exc

    return _data_source_instance


def reset_data_source() -> None:
    """캐시된 인스턴스를 버린다 (설정 변경 후 / 테스트용)."""
    global _data_source_instance
    _data_source_instance = None
