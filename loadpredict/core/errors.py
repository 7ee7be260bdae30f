class InvalidIntervalError(ValueError):
    """Unknown interval or an interval that does not divide a day evenly."""
    pass


class InvalidTimestampError(ValueError):
    """Timestamp outside the supported domain (negative or non-integral)."""
    pass


class PredictionError(RuntimeError):
    """Generic prediction failure."""
    pass


class DataSourceError(PredictionError):
    """Errors related to data sources (SQL/CSV)."""
    pass


class QueryFailureError(DataSourceError):
    """Range query could not run or returned malformed rows. 예측 전체를 중단한다."""
    pass


class DataNotFoundError(DataSourceError):
    """Range query matched no rows (strict no-data mode only)."""
    pass
