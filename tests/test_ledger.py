import pytest

from rolling_forecast.errors import EmptyHistory, InsufficientHistory, LedgerOrderError
from rolling_forecast.ledger import (
    STALE_FEATURE_CARRYOVER,
    HistoryLedger,
    HistoryRow,
    prediction_row,
)

from tests.conftest import make_records


def test_from_records_sorts_by_date_string():
    records = make_records(5)
    shuffled = [records[3], records[0], records[4], records[2], records[1]]

    ledger = HistoryLedger.from_records(shuffled)

    assert [r.date for r in ledger] == [r["date"] for r in records]
    assert all(not r.is_prediction for r in ledger)
    assert ledger.n_features == 3


def test_from_records_rejects_duplicate_dates():
    records = make_records(3)
    records[2]["date"] = records[1]["date"]
    with pytest.raises(ValueError, match="Duplicate"):
        HistoryLedger.from_records(records)


def test_from_records_rejects_non_positive_close():
    records = make_records(3)
    records[1]["close"] = 0.0
    with pytest.raises(ValueError):
        HistoryLedger.from_records(records)


def test_from_records_rejects_ragged_features():
    records = make_records(3)
    records[2]["features_raw"] = [1.0]
    with pytest.raises(ValueError):
        HistoryLedger.from_records(records)


def test_last_and_tail_on_empty_ledger():
    ledger = HistoryLedger()
    with pytest.raises(EmptyHistory):
        ledger.last()
    with pytest.raises(InsufficientHistory):
        ledger.tail(1)


def test_tail_returns_oldest_first():
    ledger = HistoryLedger.from_records(make_records(10))
    tail = ledger.tail(3)
    assert [r.date for r in tail] == ["2024-01-08", "2024-01-09", "2024-01-10"]


def test_tail_longer_than_ledger_raises_with_counts():
    ledger = HistoryLedger.from_records(make_records(4))
    with pytest.raises(InsufficientHistory) as excinfo:
        ledger.tail(5)
    assert excinfo.value.required == 5
    assert excinfo.value.available == 4


def test_append_requires_strictly_later_date():
    ledger = HistoryLedger.from_records(make_records(2))
    last = ledger.last()

    with pytest.raises(LedgerOrderError):
        ledger.append(HistoryRow(date=last.date, close=1.0, features_raw=last.features_raw))
    with pytest.raises(LedgerOrderError):
        ledger.append(HistoryRow(date="2023-12-31", close=1.0, features_raw=last.features_raw))

    assert len(ledger) == 2


def test_append_rejects_wrong_feature_width():
    ledger = HistoryLedger.from_records(make_records(2))
    with pytest.raises(LedgerOrderError):
        ledger.append(HistoryRow(date="2024-02-01", close=1.0, features_raw=(1.0,)))


@pytest.mark.parametrize("close", [-3.0, 0.0, float("nan"), float("inf")])
def test_append_rejects_invalid_close(close):
    ledger = HistoryLedger.from_records(make_records(4))
    last = ledger.last()

    with pytest.raises(LedgerOrderError):
        ledger.append(HistoryRow(date="2024-01-05", close=close, features_raw=last.features_raw))

    assert len(ledger) == 4
    assert ledger.last() is last


def test_from_records_rejects_nan_close():
    records = make_records(3)
    records[2]["close"] = float("nan")
    with pytest.raises(ValueError):
        HistoryLedger.from_records(records)


def test_prediction_row_carries_features_over_verbatim():
    ledger = HistoryLedger.from_records(make_records(2))
    source = ledger.last()

    row = prediction_row(source, "2024-01-03", 123.0)
    ledger.append(row)

    assert STALE_FEATURE_CARRYOVER
    assert row.is_prediction is True
    assert row.features_raw == source.features_raw
    assert ledger.last() is row
    assert len(ledger) == 3


def test_history_row_dict_round_trip_accepts_camel_case_flag():
    row = HistoryRow.from_dict(
        {"date": "2024-01-01", "close": 10, "features_raw": [1, 2], "isPrediction": True}
    )
    assert row.is_prediction is True
    assert row.to_dict() == {
        "date": "2024-01-01",
        "close": 10.0,
        "features_raw": [1.0, 2.0],
        "is_prediction": True,
    }


def test_to_frame_columns():
    ledger = HistoryLedger.from_records(make_records(3))
    frame = ledger.to_frame()
    assert list(frame.columns) == ["date", "close", "is_prediction"]
    assert frame["close"].tolist() == [100.0, 101.0, 102.0]
    assert len(HistoryLedger().to_frame()) == 0
