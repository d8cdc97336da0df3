"""Altair chart of the ledger: historical closes plus appended predictions."""

from __future__ import annotations

import altair as alt
import pandas as pd

from rolling_forecast.config import SERIES_LABEL


def chart_data(frame: pd.DataFrame) -> pd.DataFrame:
    """Add the columns the chart encodes (parsed date and a row type label)."""
    df = frame.copy()
    df["Date"] = pd.to_datetime(df["date"])
    df["type"] = df["is_prediction"].map({True: "Prediction", False: "Historical"})
    return df


def build_price_chart(frame: pd.DataFrame, title: str = SERIES_LABEL) -> alt.LayerChart:
    """Line over every close, with predicted rows highlighted as red points.

    ``frame`` is :meth:`HistoryLedger.to_frame` output (or a tail of it).
    """
    df = chart_data(frame)

    base = alt.Chart(df).encode(x=alt.X("Date:T", title="Date"))

    line = base.mark_line(strokeWidth=1.5).encode(
        y=alt.Y("close:Q", title="Close", scale=alt.Scale(zero=False)),
        tooltip=["date", "close"],
    )

    predictions = base.mark_point(color="red", size=80, filled=True, shape="diamond").encode(
        y="close:Q",
        tooltip=["date", "close"],
    ).transform_filter(
        alt.FieldEqualPredicate(field="type", equal="Prediction")
    )

    return (line + predictions).properties(title=title).interactive()
