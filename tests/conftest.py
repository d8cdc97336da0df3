"""Pytest configuration and shared fixtures.

Puts the project root on ``sys.path`` so ``import rolling_forecast`` and
``import api`` work when tests are run from the repository root or elsewhere.
"""

import os
import sys

import numpy as np
import pytest

# Project root = parent directory of this tests/ folder
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


class FakeModel:
    """Stands in for a Keras model: ``predict`` returns a constant log return."""

    def __init__(self, y: float = 0.0) -> None:
        self._y = float(y)
        self.calls = []

    def predict(self, X, verbose=0):  # noqa: N803
        self.calls.append(np.array(X, copy=True))
        batch = int(getattr(X, "shape", [1])[0])
        return np.full((batch, 1), self._y, dtype=np.float32)


def make_records(n: int, n_features: int = 3, start: str = "2024-01-01", close0: float = 100.0):
    """``n`` consecutive-day history records with distinguishable features."""
    from datetime import date, timedelta

    d0 = date.fromisoformat(start)
    records = []
    for i in range(n):
        records.append(
            {
                "date": (d0 + timedelta(days=i)).isoformat(),
                "close": close0 + i,
                "features_raw": [float(i * 10 + j) for j in range(n_features)],
            }
        )
    return records


@pytest.fixture
def fake_model():
    return FakeModel(0.0)


@pytest.fixture
def ledger_61():
    from rolling_forecast.ledger import HistoryLedger

    return HistoryLedger.from_records(make_records(61))
