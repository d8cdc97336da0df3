import altair as alt

from rolling_forecast.charts import build_price_chart, chart_data
from rolling_forecast.ledger import HistoryLedger, prediction_row

from tests.conftest import make_records


def _ledger_with_prediction() -> HistoryLedger:
    ledger = HistoryLedger.from_records(make_records(5))
    ledger.append(prediction_row(ledger.last(), "2024-01-06", 105.5))
    return ledger


def test_chart_data_labels_rows():
    df = chart_data(_ledger_with_prediction().to_frame())
    assert df["type"].tolist() == ["Historical"] * 5 + ["Prediction"]
    assert str(df["Date"].dtype).startswith("datetime64")


def test_build_price_chart_layers_line_and_prediction_points():
    chart = build_price_chart(_ledger_with_prediction().to_frame(), title="SPX")

    assert isinstance(chart, alt.LayerChart)
    spec = chart.to_dict()
    marks = [layer["mark"]["type"] for layer in spec["layer"]]
    assert marks == ["line", "point"]
    assert spec["title"] == "SPX"
