"""Build the scaled model input window from the ledger tail."""

from __future__ import annotations

from typing import Optional

import numpy as np

from rolling_forecast.config import WINDOW_SIZE
from rolling_forecast.ledger import HistoryLedger
from rolling_forecast.scaler import ScalerConfig, scale_rows


def build_window(
    ledger: HistoryLedger,
    scaler_config: Optional[ScalerConfig],
    window_size: int = WINDOW_SIZE,
) -> np.ndarray:
    """Return the last ``window_size`` rows scaled, shape ``(window_size, F)``.

    Rows stay in chronological order (oldest first) and include any appended
    prediction rows. The model is sequence-sensitive, so the order matters.

    Raises :class:`~rolling_forecast.errors.InsufficientHistory` when the
    ledger is shorter than ``window_size``.
    """
    rows = ledger.tail(window_size)
    return scale_rows([r.features_raw for r in rows], scaler_config)
