"""Single-step forecasting on top of an opaque sequence model.

The model is trained to predict a forward *log return* (5 trading days ahead,
see ``config.HORIZON_DAYS``). Accordingly, a prediction maps back to a price
via:

    predicted_price = close_t * exp(predicted_log_return)

The session loop nevertheless feeds each prediction back as the next calendar
day's close. That horizon mismatch is kept as-is: one scalar per call, appended
one calendar day later.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Optional

import numpy as np

from rolling_forecast.config import WINDOW_SIZE
from rolling_forecast.errors import EmptyHistory, InferenceFailure, ModelNotLoaded
from rolling_forecast.ledger import HistoryLedger
from rolling_forecast.logging_setup import get_logger
from rolling_forecast.scaler import ScalerConfig
from rolling_forecast.window import build_window

logger = get_logger(__name__)


@dataclass(frozen=True)
class PredictionResult:
    """Outcome of one prediction, folded into the ledger as a new row."""

    date: str
    price: float
    log_return: float
    base_close: float

    @property
    def return_pct(self) -> float:
        return self.log_return * 100.0

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        out["return_pct"] = self.return_pct
        return out


def log_return_to_price(last_close: float, log_return: float) -> float:
    """Map a log return back to a price relative to ``last_close``."""
    return float(last_close) * math.exp(float(log_return))


class ForecastEngine:
    """Owns the model handle and turns the ledger tail into a log return.

    ``model`` is anything exposing ``predict(X, verbose=0)`` with ``X`` of
    shape ``(1, window_size, F)`` (a Keras model in production).
    """

    def __init__(
        self,
        model: Any,
        scaler_config: Optional[ScalerConfig],
        window_size: int = WINDOW_SIZE,
    ) -> None:
        self.model = model
        self.scaler_config = scaler_config
        self.window_size = int(window_size)

    def predict_next_return(self, ledger: HistoryLedger) -> float:
        """Return the model's log return for the latest window.

        Read-only with respect to ``ledger``.
        """
        if self.model is None:
            raise ModelNotLoaded()
        if len(ledger) == 0:
            raise EmptyHistory()

        window = build_window(ledger, self.scaler_config, self.window_size)
        X = window.astype(np.float32)[np.newaxis, :, :]  # (1, T, F)
        try:
            preds = self.model.predict(X, verbose=0)
            log_r = float(np.asarray(preds).reshape(-1)[0])
        except Exception as exc:
            raise InferenceFailure(f"Model inference failed: {exc}") from exc
        finally:
            del X, window

        if not math.isfinite(log_r):
            raise InferenceFailure(f"Model returned a non-finite log return: {log_r}")
        logger.debug("Predicted log return %.6f from %d-row window", log_r, self.window_size)
        return log_r
