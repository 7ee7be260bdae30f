"""
/load 라우트.

역할:
- GET /load/predicted : 다음 구간의 예상 부하 (LoadPrediction)
- GET /load/current   : 현재 구간의 실제 평균 부하 (CurrentLoad)

PredictionEngine 이 올린 예외를 HTTP 상태 코드로 바꾸는 것 외에는 아무 로직도 없다.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from loadpredict.core.errors import (
    DataNotFoundError,
    InvalidIntervalError,
    InvalidTimestampError,
    PredictionError,
)
from loadpredict.core.predictor import PredictionEngine
from loadpredict.models.common import CurrentLoad, LoadPrediction

router = APIRouter()
logger = logging.getLogger(__name__)

# 지연 생성: 앱 시작 시 DB 연결을 만들지 않기 위함
_ENGINE: Optional[PredictionEngine] = None


def get_engine() -> PredictionEngine:
    """첫 사용 시 인스턴스 생성 (lazy init)."""
    global _ENGINE
    if _ENGINE is None:
        try:
            _ENGINE = PredictionEngine.from_settings()
        except PredictionError as exc:
            raise _to_http_error(exc) from exc
    return _ENGINE


def _to_http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, (InvalidIntervalError, InvalidTimestampError)):
        return HTTPException(status_code=422, detail=str(exc))
    if isinstance(exc, DataNotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    logger.exception("load query failed: %s", exc)
    return HTTPException(status_code=502, detail=str(exc))


@router.get("/predicted", response_model=LoadPrediction)
def predicted(
    timestamp: int = Query(..., description="epoch seconds (UTC)"),
    interval: str = Query("30m", description="5m | 15m | 30m | 1h"),
    engine: PredictionEngine = Depends(get_engine),
) -> LoadPrediction:
    try:
        return engine.predict(timestamp, interval)
    except (InvalidIntervalError, InvalidTimestampError, PredictionError) as exc:
        raise _to_http_error(exc) from exc


@router.get("/current", response_model=CurrentLoad)
def current(
    timestamp: int = Query(..., description="epoch seconds (UTC)"),
    interval: str = Query("30m", description="5m | 15m | 30m | 1h"),
    engine: PredictionEngine = Depends(get_engine),
) -> CurrentLoad:
    try:
        return engine.current(timestamp, interval)
    except (InvalidIntervalError, InvalidTimestampError, PredictionError) as exc:
        raise _to_http_error(exc) from exc
