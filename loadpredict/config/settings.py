# loadpredict/config/settings.py
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # 일반
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # 데이터 소스
    DATA_SOURCE_BACKEND: Literal["sql", "csv"] = "sql"
    DATABASE_URL: Optional[str] = None
    HISTORICAL_CSV_PATH: str = "data/load_averages.csv"
    RAW_CSV_PATH: str = "data/raw_sensor.csv"

    # 예측
    HISTORY_DAYS: int = Field(3, ge=1, le=7)
    QUERY_MAX_WORKERS: int = Field(4, ge=1)
    QUERY_TIMEOUT_SECONDS: Optional[float] = 5.0  # None = 대기 제한 없음
    STRICT_NO_DATA: bool = False

    # 로컬/개발용: SQL 백엔드 생성 시 load_averages / raw_sensor 테이블을 만든다
    DB_INIT_SCHEMA: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


def get_settings() -> Settings:
    """환경 변수 / .env 를 다시 읽어 Settings 를 만든다."""
    return Settings()

