"""Ordered history of real and predicted rows.

The ledger is loaded once at startup and only ever grows at the tail: each
successful prediction appends exactly one synthetic row. Rows are never
removed or reordered.

Synthetic rows copy ``features_raw`` verbatim from the row that produced the
prediction (see :data:`STALE_FEATURE_CARRYOVER`). Real features for a future
day cannot be computed here, so the next window repeats the last real feature
vector. ``is_prediction`` marks these rows so consumers can tell them apart.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Iterable, Iterator, Mapping, Optional

import pandas as pd

from rolling_forecast.errors import EmptyHistory, InsufficientHistory, LedgerOrderError

STALE_FEATURE_CARRYOVER = "stale_feature_carryover"


def _valid_close(close: float) -> bool:
    return math.isfinite(close) and close > 0


@dataclass(frozen=True)
class HistoryRow:
    date: str
    close: float
    features_raw: tuple
    is_prediction: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "date", str(self.date))
        object.__setattr__(self, "close", float(self.close))
        object.__setattr__(self, "features_raw", tuple(float(v) for v in self.features_raw))
        object.__setattr__(self, "is_prediction", bool(self.is_prediction))

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "HistoryRow":
        return cls(
            date=d["date"],
            close=d["close"],
            features_raw=d["features_raw"],
            is_prediction=d.get("is_prediction", d.get("isPrediction", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        out["features_raw"] = list(self.features_raw)
        return out


class HistoryLedger:
    """Append-at-tail sequence of :class:`HistoryRow`, sorted by ``date``."""

    def __init__(self, rows: Optional[Iterable[HistoryRow]] = None) -> None:
        self._rows: list[HistoryRow] = []
        for row in rows or ():
            self.append(row)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "HistoryLedger":
        """Build a ledger from raw history records.

        Records are sorted by plain string comparison of ``date``; ISO
        ``YYYY-MM-DD`` strings sort chronologically that way.
        """
        rows = [HistoryRow.from_dict(r) for r in records]
        rows.sort(key=lambda r: r.date)

        n_features = len(rows[0].features_raw) if rows else 0
        for i, row in enumerate(rows):
            if i > 0 and row.date == rows[i - 1].date:
                raise ValueError(f"Duplicate history date: {row.date}")
            if not _valid_close(row.close):
                raise ValueError(f"Invalid close {row.close} on {row.date}")
            if len(row.features_raw) != n_features:
                raise ValueError(
                    f"Row {row.date} has {len(row.features_raw)} features, expected {n_features}"
                )
        return cls(rows)

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[HistoryRow]:
        return iter(self._rows)

    @property
    def rows(self) -> tuple:
        return tuple(self._rows)

    @property
    def n_features(self) -> int:
        return len(self._rows[0].features_raw) if self._rows else 0

    def append(self, row: HistoryRow) -> None:
        """Insert ``row`` at the tail.

        Raises :class:`LedgerOrderError` if ``row.date`` is not strictly after
        the current last date, its feature width differs from the ledger's, or
        its close is not a finite positive number.
        """
        if not _valid_close(row.close):
            raise LedgerOrderError(f"Row {row.date} has invalid close {row.close}")
        if self._rows:
            last = self._rows[-1]
            if not row.date > last.date:
                raise LedgerOrderError(
                    f"Row date {row.date} is not after last ledger date {last.date}"
                )
            if len(row.features_raw) != self.n_features:
                raise LedgerOrderError(
                    f"Row {row.date} has {len(row.features_raw)} features, "
                    f"ledger has {self.n_features}"
                )
        self._rows.append(row)

    def last(self) -> HistoryRow:
        if not self._rows:
            raise EmptyHistory()
        return self._rows[-1]

    def tail(self, n: int) -> list[HistoryRow]:
        """Return the last ``n`` rows, oldest first."""
        n = int(n)
        if len(self._rows) < n:
            raise InsufficientHistory(required=n, available=len(self._rows))
        if n <= 0:
            return []
        return list(self._rows[-n:])

    def to_frame(self) -> pd.DataFrame:
        """``date``/``close``/``is_prediction`` columns for charts and the API."""
        return pd.DataFrame(
            {
                "date": [r.date for r in self._rows],
                "close": [r.close for r in self._rows],
                "is_prediction": [r.is_prediction for r in self._rows],
            },
            columns=["date", "close", "is_prediction"],
        )


def prediction_row(source: HistoryRow, date: str, price: float) -> HistoryRow:
    """Build the synthetic row appended after a prediction.

    ``features_raw`` is carried over unchanged from ``source``.
    """
    return HistoryRow(
        date=date,
        close=price,
        features_raw=source.features_raw,
        is_prediction=True,
    )
