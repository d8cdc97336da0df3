import os
import tempfile
from pathlib import Path
from urllib.parse import urlparse

# Silence most TensorFlow C++ and Python-level logs (info/warning)
os.environ.setdefault("TF_CPP_MIN_LOG_LEVEL", "2")  # 0=all,1=filter INFO,2=filter WARNING,3=filter ERROR

import logging

import requests
import tensorflow as tf
from tensorflow import keras

# Reduce Python-level TF logging (e.g. retracing warnings)
tf.get_logger().setLevel(logging.ERROR)

from rolling_forecast.config import REQUEST_TIMEOUT
from rolling_forecast.logging_setup import get_logger

logger = get_logger(__name__)


def is_url(source: str) -> bool:
    return urlparse(str(source)).scheme in ("http", "https")


def _download_to(url: str, dest: Path, timeout: float) -> None:
    resp = requests.get(url, timeout=timeout)
    resp.raise_for_status()
    dest.write_bytes(resp.content)


def load_model(source: str | Path, *, timeout: float = REQUEST_TIMEOUT) -> keras.Model:
    """Load a serialized Keras model from a path or an http(s) URL.

    Remote artifacts are downloaded to a temporary file first because
    ``keras.models.load_model`` only reads from disk. The model is loaded
    uncompiled; inference does not need the optimizer state.
    """
    if not is_url(str(source)):
        logger.info("Loading model: %s", source)
        model = keras.models.load_model(str(source), compile=False)
        logger.info("Model loaded")
        return model

    suffix = Path(urlparse(str(source)).path).suffix or ".keras"
    logger.info("Downloading model: %s", source)
    with tempfile.TemporaryDirectory() as tmp:
        local_path = Path(tmp) / f"model{suffix}"
        _download_to(str(source), local_path, timeout)
        model = keras.models.load_model(str(local_path), compile=False)
    logger.info("Model loaded")
    return model
