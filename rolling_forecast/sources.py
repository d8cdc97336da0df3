"""Fetch the scaler config and history documents from a URL or a file."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import requests

from rolling_forecast.config import REQUEST_TIMEOUT
from rolling_forecast.ledger import HistoryLedger
from rolling_forecast.logging_setup import get_logger
from rolling_forecast.scaler import ScalerConfig

logger = get_logger(__name__)


def fetch_json(source: str | Path, timeout: float = REQUEST_TIMEOUT) -> Any:
    """Return the parsed JSON document at ``source``.

    http(s) sources must answer 2xx; anything else raises
    ``requests.HTTPError`` carrying the status code and reason.
    """
    if urlparse(str(source)).scheme in ("http", "https"):
        resp = requests.get(str(source), timeout=timeout)
        resp.raise_for_status()
        return resp.json()

    return json.loads(Path(source).read_text(encoding="utf-8"))


def load_scaler_config(source: str | Path, timeout: float = REQUEST_TIMEOUT) -> ScalerConfig | None:
    logger.info("Loading scaler: %s", source)
    config = ScalerConfig.from_dict(fetch_json(source, timeout=timeout))
    logger.info("Scaler loaded")
    return config


def load_history(source: str | Path, timeout: float = REQUEST_TIMEOUT) -> HistoryLedger:
    logger.info("Loading history: %s", source)
    records = fetch_json(source, timeout=timeout)
    if not isinstance(records, list):
        raise ValueError("History document must be a JSON array of rows")
    ledger = HistoryLedger.from_records(records)
    logger.info("History loaded. Rows: %d", len(ledger))
    return ledger
