import os
from typing import Optional
from urllib.parse import quote_plus

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .base import DataSource, LoadTable, Row
from loadpredict.core.errors import DataSourceError, QueryFailureError


_QUERIES = {
    LoadTable.HISTORICAL: text(
        """
        SELECT total_load, event_count
        FROM load_averages
        WHERE weekday = :weekday
          AND time_slice >= :interval_start
          AND time_slice < :interval_end
        """
    ),
    LoadTable.RAW: text(
        """
        SELECT value
        FROM raw_sensor
        WHERE weekday = :weekday
          AND time_slice >= :interval_start
          AND time_slice < :interval_end
        """
    ),
}


def build_mysql_url(
    *,
    host: Optional[str] = None,
    port: Optional[int] = None,
    user: Optional[str] = None,
    password: Optional[str] = None,
    database: Optional[str] = None,
) -> str:
    host = host or os.getenv("MYSQL_HOST", "localhost")
    port = port or int(os.getenv("MYSQL_PORT", "3306"))
    user = user or os.getenv("MYSQL_USER", "")
    password = password or os.getenv("MYSQL_PASSWORD", "")
    database = database or os.getenv("MYSQL_DATABASE", "")

    if not database:
        raise DataSourceError("MYSQL_DATABASE 환경 변수가 비어 있음")

    user_enc = quote_plus(user)
    password_enc = quote_plus(password)
    return f"mysql+pymysql://{user_enc}:{password_enc}@{host}:{port}/{database}?charset=utf8mb4"


class SQLDataSource(DataSource):
    """SQLAlchemy를 사용해 load_averages / raw_sensor 테이블을 조회한다."""

    def __init__(
        self,
        *,
        connection_url: Optional[str] = None,
        engine: Optional[Engine] = None,
        ssl_ca: Optional[str] = None,
    ) -> None:
        if engine is not None:
            self.engine = engine
            return

        url = connection_url or os.getenv("DATABASE_URL") or build_mysql_url()

        connect_args = {}
        ssl_ca = ssl_ca or os.getenv("MYSQL_SSL_CA", None)
        if ssl_ca:
            connect_args["ssl"] = {"ca": ssl_ca}

        try:
            self.engine = create_engine(
                url,
                pool_pre_ping=True,
                connect_args=connect_args,
            )
        except Exception as exc:
            raise DataSourceError(f"SQLAlchemy 엔진 생성 실패: {exc}") from exc

    def fetch_rows(
        self,
        table: LoadTable,
        weekday: int,
        interval_start: int,
        interval_end: int,
    ) -> list[Row]:
        params = {
            "weekday": weekday,
            "interval_start": interval_start,
            "interval_end": interval_end,
        }
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(_QUERIES[table], params).fetchall()
        except SQLAlchemyError as exc:
            raise QueryFailureError(f"{table.value} 조회 실패: {exc}") from exc

        return [tuple(row) for row in rows]

    def is_available(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            return False
