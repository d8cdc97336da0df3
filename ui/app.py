import os
import sys

import streamlit as st

# Add the project root to the Python path to import rolling_forecast modules
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from rolling_forecast.charts import build_price_chart
from rolling_forecast.config import FORECAST, SOURCES
from rolling_forecast.errors import ForecastError, StartupLoadFailed
from rolling_forecast.logging_setup import setup_logging
from rolling_forecast.session import ForecastSession

st.set_page_config(layout="wide")

st.title("📈 Rolling Next-Step Forecast")
st.markdown(
    f"The model reads the last {FORECAST.window_size} scaled feature rows and predicts a "
    f"{FORECAST.horizon_days}-day log return. Each prediction is appended one calendar day "
    "later and feeds the next window."
)


def get_session() -> ForecastSession:
    """Return this browser session's ForecastSession, loading it on first use."""
    if "forecast_session" not in st.session_state:
        setup_logging()
        session = ForecastSession()
        with st.spinner("Loading model, scaler & data…"):
            try:
                session.load(SOURCES)
            except StartupLoadFailed:
                pass
        st.session_state["forecast_session"] = session
    return st.session_state["forecast_session"]


session = get_session()
status_box = st.empty()

if st.button("Predict Tomorrow", disabled=not session.status.trigger_enabled):
    with st.spinner("Predicting…"):
        try:
            session.predict_next()
        except (ForecastError, ValueError):
            pass

status_text = session.status.text
if status_text.startswith("error:"):
    status_box.error(status_text)
else:
    status_box.info(status_text)

# --- Visualization ---
if len(session.ledger) > 0:
    chart = build_price_chart(session.chart_frame(), title=FORECAST.series_label)
    st.altair_chart(chart, use_container_width=True)

    predicted = [r for r in session.ledger if r.is_prediction]
    if predicted:
        st.caption(
            f"{len(predicted)} predicted row(s). Their features repeat the last real row's "
            "features; they are placeholders, not recomputed values."
        )

# --- Instructions ---
st.sidebar.header("Sources")
st.sidebar.code(
    f"model:   {SOURCES.model_source}\n"
    f"scaler:  {SOURCES.scaler_source}\n"
    f"history: {SOURCES.history_source}"
)
st.sidebar.markdown("Run with: `streamlit run ui/app.py`")
