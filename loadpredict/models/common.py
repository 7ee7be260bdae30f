# API 전체에서 공통으로 쓰이는 스키마 모아둔 곳

from typing import Literal
from pydantic import BaseModel, Field

TableName = Literal["load_averages", "raw_sensor"]


class TimeSliceInfo(BaseModel):
    weekday: int = Field(..., ge=1, le=7)
    weekday_name: str
    interval_start: int = Field(..., ge=0)
    interval_end: int = Field(..., gt=0)


class EmptyQuery(BaseModel):
    table: TableName
    weekday: int
    interval_start: int
    interval_end: int


class LoadPrediction(BaseModel):
    timestamp: int
    interval: str
    slice: TimeSliceInfo
    target_slice: TimeSliceInfo
    historical_averages: list[float]
    median: float
    current_load: float
    value: float
    empty_queries: list[EmptyQuery] = Field(default_factory=list)


class CurrentLoad(BaseModel):
    timestamp: int
    interval: str
    slice: TimeSliceInfo
    value: float
    empty: bool = False
