# tests/test_data_sources.py

"""
data_sources (SQL / CSV / factory) 단위 테스트.
"""

import pandas as pd
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from loadpredict.config.settings import Settings
from loadpredict.core.errors import DataSourceError, QueryFailureError
from loadpredict.core.persistence_models import Base, LoadAverage, RawSensorReading
from loadpredict.core.predictor import PredictionEngine
from loadpredict.core.predictor.data_sources import (
    CSVDataSource,
    LoadTable,
    SQLDataSource,
    get_data_source,
    reset_data_source,
)
from loadpredict.core.predictor.data_sources.sql_source import build_mysql_url

HISTORICAL_ROWS = [
    # weekday, time_slice, total_load, event_count
    (2, 81000, 8.0, 2),
    (1, 81000, 12.0, 2),
    (7, 81900, 5.0, 1),
    (2, 82800, 100.0, 1),
]
RAW_ROWS = [
    # weekday, time_slice, value
    (3, 77400, 2.0),
    (3, 78000, 4.0),
    (3, 79100, 3.0),
]


@pytest.fixture
def sqlite_url(tmp_path):
    url = f"sqlite:///{tmp_path / 'load.db'}"
    engine = create_engine(url)
    Base.metadata.create_all(engine)
    with Session(engine) as session:
        session.add_all(
            [LoadAverage(weekday=w, time_slice=t, total_load=l, event_count=c) for w, t, l, c in HISTORICAL_ROWS]
        )
        session.add_all(
            [RawSensorReading(weekday=w, time_slice=t, value=v, house_id="h1") for w, t, v in RAW_ROWS]
        )
        session.commit()
    engine.dispose()
    return url


@pytest.fixture
def csv_paths(tmp_path):
    hist = tmp_path / "load_averages.csv"
    raw = tmp_path / "raw_sensor.csv"
    pd.DataFrame(HISTORICAL_ROWS, columns=["weekday", "time_slice", "total_load", "event_count"]).to_csv(hist, index=False)
    pd.DataFrame(RAW_ROWS, columns=["weekday", "time_slice", "value"]).to_csv(raw, index=False)
    return str(hist), str(raw)


@pytest.fixture(autouse=True)
def _reset_factory():
    reset_data_source()
    yield
    reset_data_source()


def test_sql_source_range_query(sqlite_url):
    source = SQLDataSource(connection_url=sqlite_url)

    rows = source.fetch_rows(LoadTable.HISTORICAL, 2, 81000, 82800)
    assert rows == [(8.0, 2)]

    raw = source.fetch_rows(LoadTable.RAW, 3, 77400, 79200)
    assert sorted(raw) == [(2.0,), (3.0,), (4.0,)]
    assert source.is_available() is True


def test_sql_source_missing_table_is_query_failure(tmp_path):
    source = SQLDataSource(connection_url=f"sqlite:///{tmp_path / 'empty.db'}")

    with pytest.raises(QueryFailureError):
        source.fetch_rows(LoadTable.RAW, 1, 0, 1800)


def test_csv_source_range_query(csv_paths):
    source = CSVDataSource(*csv_paths)

    assert source.fetch_rows(LoadTable.HISTORICAL, 7, 81000, 82800) == [(5.0, 1)]
    assert source.fetch_rows(LoadTable.RAW, 3, 79200, 81000) == []
    assert source.is_available() is True


def test_csv_source_missing_file_fails_on_query(tmp_path):
    source = CSVDataSource(str(tmp_path / "nope.csv"), str(tmp_path / "nope2.csv"))

    assert source.is_available() is False
    with pytest.raises(QueryFailureError):
        source.fetch_rows(LoadTable.RAW, 1, 0, 1800)


def test_csv_source_missing_columns(tmp_path):
    bad = tmp_path / "bad.csv"
    pd.DataFrame({"weekday": [1], "value": [1.0]}).to_csv(bad, index=False)

    with pytest.raises(DataSourceError):
        CSVDataSource(historical_path=str(bad), raw_path=str(bad))


@pytest.mark.parametrize("backend", ["sql", "csv"])
def test_sources_give_same_prediction(backend, sqlite_url, csv_paths, tuesday_ts):
    """SQL / CSV 어느 소스를 써도 예측값은 같아야 함: median(4, 6, 5)=5, current=3 -> 4."""
    source = SQLDataSource(connection_url=sqlite_url) if backend == "sql" else CSVDataSource(*csv_paths)
    engine = PredictionEngine(source)

    assert engine.predicted_load(tuesday_ts, "30m") == pytest.approx(4.0)


def test_factory_csv_backend(csv_paths):
    config = Settings(DATA_SOURCE_BACKEND="csv", HISTORICAL_CSV_PATH=csv_paths[0], RAW_CSV_PATH=csv_paths[1])

    source = get_data_source(config)

    assert isinstance(source, CSVDataSource)
    assert get_data_source() is source


def test_factory_sql_backend(sqlite_url):
    source = get_data_source(Settings(DATA_SOURCE_BACKEND="sql", DATABASE_URL=sqlite_url))

    assert isinstance(source, SQLDataSource)


def test_factory_sql_without_database_fails(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("MYSQL_DATABASE", raising=False)

    with pytest.raises(DataSourceError):
        get_data_source(Settings(DATA_SOURCE_BACKEND="sql", DATABASE_URL=None))


def test_build_mysql_url_escapes_credentials():
    url = build_mysql_url(host="db", port=3307, user="load user", password="p@ss", database="loads")

    assert url == "mysql+pymysql://load+user:p%40ss@db:3307/loads?charset=utf8mb4"


def test_csv_empty_value_fails_prediction(tmp_path, csv_paths, tuesday_ts):
    """빈 셀(NaN)이 있는 raw CSV 로는 nan 예측값 대신 QueryFailureError."""
    raw = tmp_path / "raw_with_gap.csv"
    raw.write_text("weekday,time_slice,value\n3,77400,\n3,78000,4.0\n")
    engine = PredictionEngine(CSVDataSource(csv_paths[0], str(raw)))

    with pytest.raises(QueryFailureError, match="non-finite"):
        engine.predicted_load(tuesday_ts, "30m")


def test_factory_init_schema_creates_tables(tmp_path):
    url = f"sqlite:///{tmp_path / 'fresh.db'}"

    source = get_data_source(Settings(DATA_SOURCE_BACKEND="sql", DATABASE_URL=url, DB_INIT_SCHEMA=True))

    assert source.fetch_rows(LoadTable.HISTORICAL, 1, 0, 1800) == []
    assert source.fetch_rows(LoadTable.RAW, 1, 0, 1800) == []


def test_factory_without_init_schema_leaves_database_untouched(tmp_path):
    url = f"sqlite:///{tmp_path / 'fresh.db'}"

    source = get_data_source(Settings(DATA_SOURCE_BACKEND="sql", DATABASE_URL=url))

    with pytest.raises(QueryFailureError):
        source.fetch_rows(LoadTable.RAW, 1, 0, 1800)
