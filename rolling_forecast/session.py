"""Session object holding everything one forecasting demo needs.

A :class:`ForecastSession` replaces module-level globals (model, scaler,
history, status). It is built once, loaded once, and then drives repeated
"predict next" triggers. Several sessions can coexist, e.g. one per Streamlit
browser tab or one per test.

Lifecycle
- ``loading``: the three startup loads run concurrently; the trigger is off.
- ``ready``: all loads succeeded; the trigger is on.
- ``predicting``: one prediction is in flight; the trigger is off.
- ``error``: the last startup or prediction failed. After a failed
  prediction the trigger is back on; after a failed startup it stays off.
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

import pandas as pd

from rolling_forecast.config import FORECAST, SOURCES, SourcesConfig
from rolling_forecast.dates import next_calendar_day
from rolling_forecast.engine import ForecastEngine, PredictionResult, log_return_to_price
from rolling_forecast.errors import ModelNotLoaded, PredictionInProgress, StartupLoadFailed
from rolling_forecast.ledger import HistoryLedger, prediction_row
from rolling_forecast.logging_setup import get_logger
from rolling_forecast.scaler import ScalerConfig
from rolling_forecast.sources import load_history, load_scaler_config

logger = get_logger(__name__)


class SessionPhase(str, Enum):
    LOADING = "loading"
    READY = "ready"
    PREDICTING = "predicting"
    ERROR = "error"


@dataclass(frozen=True)
class SessionStatus:
    phase: SessionPhase
    message: str = ""
    trigger_enabled: bool = False

    @property
    def text(self) -> str:
        if self.phase == SessionPhase.ERROR:
            return f"error: {self.message}"
        if self.message:
            return self.message
        return self.phase.value

    def to_dict(self) -> dict[str, Any]:
        return {
            "phase": self.phase.value,
            "message": self.message,
            "text": self.text,
            "trigger_enabled": self.trigger_enabled,
        }


def _default_model_loader(source: str) -> Any:
    # Imported lazily: pulling in TensorFlow is slow and only needed here.
    from rolling_forecast.model import load_model

    return load_model(source)


def format_prediction_message(result: PredictionResult, horizon_days: int) -> str:
    return (
        f"Predicted {horizon_days}d return: {result.return_pct:.2f}% "
        f"→ price ≈ {result.price:.2f} on {result.date}"
    )


class ForecastSession:
    def __init__(
        self,
        *,
        window_size: int = FORECAST.window_size,
        horizon_days: int = FORECAST.horizon_days,
    ) -> None:
        self.window_size = int(window_size)
        self.horizon_days = int(horizon_days)
        self.model: Any = None
        self.scaler_config: Optional[ScalerConfig] = None
        self.ledger = HistoryLedger()
        self.last_result: Optional[PredictionResult] = None
        self._loaded = False
        self._status = SessionStatus(SessionPhase.LOADING, "Loading model, scaler & data…")
        self._predict_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_components(
        cls,
        model: Any,
        scaler_config: Optional[ScalerConfig],
        ledger: HistoryLedger,
        **kwargs: Any,
    ) -> "ForecastSession":
        """Build a ready session from already-loaded parts."""
        session = cls(**kwargs)
        session.model = model
        session.scaler_config = scaler_config
        session.ledger = ledger
        session._set_ready()
        return session

    def load(
        self,
        sources: SourcesConfig = SOURCES,
        *,
        model_loader: Optional[Callable[[str], Any]] = None,
        scaler_loader: Optional[Callable[[str], Optional[ScalerConfig]]] = None,
        history_loader: Optional[Callable[[str], HistoryLedger]] = None,
    ) -> "ForecastSession":
        """Run the three startup loads concurrently and wait for all of them.

        Nothing is installed on the session unless every load succeeds.
        Raises :class:`StartupLoadFailed` otherwise, leaving the status at
        ``error: <message>`` with the trigger disabled.
        """
        model_loader = model_loader or _default_model_loader
        scaler_loader = scaler_loader or (
            lambda src: load_scaler_config(src, timeout=sources.request_timeout)
        )
        history_loader = history_loader or (
            lambda src: load_history(src, timeout=sources.request_timeout)
        )

        self._loaded = False
        self._status = SessionStatus(SessionPhase.LOADING, "Loading model, scaler & data…")
        logger.info("Starting session load")

        with ThreadPoolExecutor(max_workers=3, thread_name_prefix="startup") as pool:
            futures = {
                "model": pool.submit(model_loader, sources.model_source),
                "scaler": pool.submit(scaler_loader, sources.scaler_source),
                "history": pool.submit(history_loader, sources.history_source),
            }
            results: dict[str, Any] = {}
            errors: list[str] = []
            for name, fut in futures.items():
                try:
                    results[name] = fut.result()
                except Exception as exc:
                    logger.error("Failed to load %s: %s", name, exc)
                    errors.append(f"Failed to load {name}: {exc}")

        if errors:
            message = "; ".join(errors)
            self._status = SessionStatus(SessionPhase.ERROR, message, trigger_enabled=False)
            raise StartupLoadFailed(message)

        self.model = results["model"]
        self.scaler_config = results["scaler"]
        self.ledger = results["history"]
        self._set_ready()
        logger.info("Session ready with %d history rows", len(self.ledger))
        return self

    def _set_ready(self) -> None:
        self._loaded = True
        self._status = SessionStatus(
            SessionPhase.READY, "Ready. Click “Predict Tomorrow”.", trigger_enabled=True
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def is_ready(self) -> bool:
        """True once startup completed; stays True across prediction errors."""
        return self._loaded

    @property
    def engine(self) -> ForecastEngine:
        return ForecastEngine(self.model, self.scaler_config, self.window_size)

    def chart_frame(self, tail: Optional[int] = None) -> pd.DataFrame:
        frame = self.ledger.to_frame()
        if tail is not None:
            frame = frame.tail(int(tail)).reset_index(drop=True)
        return frame

    # ------------------------------------------------------------------
    # Prediction
    # ------------------------------------------------------------------

    def predict_next(self) -> PredictionResult:
        """Predict the next close and append it to the ledger.

        Inference, price conversion and the append run under one lock, so a
        second trigger while one is in flight raises
        :class:`PredictionInProgress` instead of reading a half-updated
        ledger. The ledger is only touched after inference succeeded.
        """
        if not self._loaded:
            raise ModelNotLoaded()
        if not self._predict_lock.acquire(blocking=False):
            raise PredictionInProgress()

        self._status = SessionStatus(SessionPhase.PREDICTING, "Predicting…", trigger_enabled=False)
        try:
            log_r = self.engine.predict_next_return(self.ledger)

            last_row = self.ledger.last()
            price = log_return_to_price(last_row.close, log_r)
            next_date = next_calendar_day(last_row.date)

            self.ledger.append(prediction_row(last_row, next_date, price))

            result = PredictionResult(
                date=next_date,
                price=price,
                log_return=log_r,
                base_close=last_row.close,
            )
            self.last_result = result
            message = format_prediction_message(result, self.horizon_days)
            self._status = SessionStatus(SessionPhase.READY, message)
            logger.info(message)
            return result
        except Exception as exc:
            logger.error("Prediction error: %s", exc)
            self._status = SessionStatus(SessionPhase.ERROR, str(exc))
            raise
        finally:
            # Re-enable the trigger on both paths.
            self._status = SessionStatus(self._status.phase, self._status.message, trigger_enabled=True)
            self._predict_lock.release()
