"""Error kinds raised by the forecasting pipeline.

Startup errors are fatal to initialization. Everything raised during a single
prediction call is local to that call and leaves the ledger untouched.
"""

from __future__ import annotations


class ForecastError(Exception):
    """Base class for all pipeline errors."""


class StartupLoadFailed(ForecastError, RuntimeError):
    """Model, scaler config or history could not be loaded."""


class ModelNotLoaded(ForecastError):
    """Prediction requested before a model handle exists."""

    def __init__(self, message: str = "Model not loaded") -> None:
        super().__init__(message)


class EmptyHistory(ForecastError, LookupError):
    def __init__(self, message: str = "No history data") -> None:
        super().__init__(message)


class InsufficientHistory(ForecastError, ValueError):
    """Fewer rows available than the window (or tail) requires."""

    def __init__(self, required: int, available: int) -> None:
        self.required = int(required)
        self.available = int(available)
        super().__init__(
            f"Not enough history for window size {self.required} "
            f"(have {self.available} rows)"
        )


class InferenceFailure(ForecastError):
    """The model's predict call raised."""


class LedgerOrderError(ForecastError, ValueError):
    """Append would break date ordering or the fixed feature width."""


class PredictionInProgress(ForecastError):
    def __init__(self, message: str = "A prediction is already in progress") -> None:
        super().__init__(message)
