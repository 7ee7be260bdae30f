from .base import BaseLoadPredictor
from .prediction_engine import NO_DATA_SENTINEL, PredictionEngine, median

__all__ = ["BaseLoadPredictor", "PredictionEngine", "NO_DATA_SENTINEL", "median"]
