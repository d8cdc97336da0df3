"""Logging setup for the forecaster entry points (API, UI, CLI)."""

from __future__ import annotations

import logging
import logging.handlers
import os

from rolling_forecast.config import LOGGING, LoggingConfig

ROOT_LOGGER_NAME = "rolling_forecast"


def setup_logging(config: LoggingConfig | None = None) -> logging.Logger:
    """Configure the package logger with a rotating file and console output.

    Safe to call more than once: existing handlers are replaced, which keeps
    Streamlit reruns from stacking duplicate handlers.
    """
    cfg = config or LOGGING
    level = getattr(logging, str(cfg.level).upper(), logging.INFO)

    os.makedirs(os.path.dirname(cfg.log_file) or ".", exist_ok=True)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    file_handler = logging.handlers.RotatingFileHandler(
        cfg.log_file,
        maxBytes=cfg.max_bytes,
        backupCount=cfg.backup_count,
    )
    file_handler.setLevel(level)

    # Console only shows WARNING and above.
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(formatter)
    console_handler.setFormatter(formatter)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)
    return logger


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Return a logger under the package namespace."""
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
