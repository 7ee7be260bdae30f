# loadpredict/core/predictor/base.py

"""
Predictor interface definition.

역할:
- 부하 예측기가 동일한 호출 방식(predicted_load / current_load)을 갖도록 강제한다.
- /load 라우트 같은 상위 레이어는 어떤 predictor가 오더라도 동일한 방식으로 호출 가능하다.
"""

from abc import ABC, abstractmethod
from typing import Union

from loadpredict.core.time_slice import Interval

IntervalLike = Union[Interval, str, int]


class BaseLoadPredictor(ABC):
    """
    Base class for load predictors.

    모든 구현체는 timestamp(epoch 초)와 interval 을 받아 float 를 반환해야 한다.
    실패 시 0 같은 값을 돌려주지 않고 예외(PredictionError 계열)를 올린다.
    """

    @abstractmethod
    def predicted_load(self, timestamp: int, interval: IntervalLike) -> float:
        """Expected load for the slice after the one `timestamp` falls into."""
        ...

    @abstractmethod
    def current_load(self, timestamp: int, interval: IntervalLike) -> float:
        """Actual average load of the slice `timestamp` falls into."""
        ...
