# rolling_forecast/config.py

import os
from dataclasses import dataclass, field

# --- Base paths ---
# Project root can be overridden if needed (e.g. for tests or deployment)
BASE_DIR = os.path.abspath(
    os.getenv("ROLLING_FORECAST_BASE_DIR", os.path.join(os.path.dirname(__file__), ".."))
)


# ---------------------------
# Structured configuration
# ---------------------------

@dataclass(frozen=True)
class SourcesConfig:
    """Where the three startup artifacts come from.

    Each source is either an http(s) URL or a filesystem path. Values can be
    overridden via environment variables:
    - ROLLING_FORECAST_MODEL_SOURCE
    - ROLLING_FORECAST_SCALER_SOURCE
    - ROLLING_FORECAST_HISTORY_SOURCE
    - ROLLING_FORECAST_REQUEST_TIMEOUT
    """

    model_source: str = field(
        default_factory=lambda: os.getenv(
            "ROLLING_FORECAST_MODEL_SOURCE", os.path.join(BASE_DIR, "models", "model.keras")
        )
    )
    scaler_source: str = field(
        default_factory=lambda: os.getenv(
            "ROLLING_FORECAST_SCALER_SOURCE",
            os.path.join(BASE_DIR, "models", "scaler_config_returns.json"),
        )
    )
    history_source: str = field(
        default_factory=lambda: os.getenv(
            "ROLLING_FORECAST_HISTORY_SOURCE",
            os.path.join(BASE_DIR, "data", "history_returns.json"),
        )
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.getenv("ROLLING_FORECAST_REQUEST_TIMEOUT", "30"))
    )


@dataclass(frozen=True)
class ForecastConfig:
    """Windowing and presentation settings shared by every prediction call.

    ``window_size`` must match the LOOKBACK the model was trained with.
    ``horizon_days`` is the model's training target (a 5-trading-day
    log-return); the loop itself advances one calendar day per prediction.
    """

    window_size: int = 60
    horizon_days: int = 5
    series_label: str = "SPX Close (historical + prediction)"


@dataclass(frozen=True)
class LoggingConfig:
    level: str = field(default_factory=lambda: os.getenv("ROLLING_FORECAST_LOG_LEVEL", "INFO"))
    log_file: str = field(
        default_factory=lambda: os.getenv(
            "ROLLING_FORECAST_LOG_FILE", os.path.join(BASE_DIR, "logs", "forecast.log")
        )
    )
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5


# Instantiate structured configs
SOURCES = SourcesConfig()
FORECAST = ForecastConfig()
LOGGING = LoggingConfig()


# ---------------------------
# Flat aliases
# ---------------------------

WINDOW_SIZE = FORECAST.window_size
HORIZON_DAYS = FORECAST.horizon_days
SERIES_LABEL = FORECAST.series_label

MODEL_SOURCE = SOURCES.model_source
SCALER_SOURCE = SOURCES.scaler_source
HISTORY_SOURCE = SOURCES.history_source
REQUEST_TIMEOUT = SOURCES.request_timeout
