"""
Data Sources Package
요일/시간 구간별 부하 샘플 조회를 위한 추상화 레이어
"""

from .base import DataSource, LoadTable
from .csv_source import CSVDataSource
from .sql_source import SQLDataSource
from .factory import get_data_source, reset_data_source

__all__ = [
    "DataSource",
    "LoadTable",
    "CSVDataSource",
    "SQLDataSource",
    "get_data_source",
    "reset_data_source",
]
