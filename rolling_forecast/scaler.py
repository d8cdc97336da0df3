"""Per-feature StandardScaler applied at inference time.

The scaler is fitted offline (scikit-learn's ``StandardScaler``) and shipped as
JSON with the fitted attributes::

    {"mean_": [...], "scale_": [...]}

Applying it is a plain affine map, ``(x - mean_) / scale_``, done here with
numpy so inference does not need scikit-learn.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

import numpy as np

from rolling_forecast.logging_setup import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ScalerConfig:
    """Immutable ``mean``/``scale`` vectors, shared read-only by every window."""

    mean: tuple
    scale: tuple

    def __post_init__(self) -> None:
        # null entries fall back to the identity values for that feature
        mean = tuple(0.0 if v is None else float(v) for v in self.mean)
        scale = tuple(1.0 if v is None else float(v) for v in self.scale)
        if any(s == 0.0 for s in scale):
            raise ValueError("Scaler config has a zero entry in scale_")
        object.__setattr__(self, "mean", mean)
        object.__setattr__(self, "scale", scale)

    @property
    def n_features(self) -> int:
        return len(self.mean)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> Optional["ScalerConfig"]:
        """Build a config from the scaler JSON document.

        Accepts scikit-learn attribute names (``mean_``/``scale_``) as well as
        ``mean``/``std`` lists. Returns ``None`` when either vector is missing,
        which callers treat as "no scaling".
        """
        if not isinstance(data, Mapping):
            logger.warning("Scaler config is not a JSON object; features will not be scaled")
            return None

        mean = data.get("mean_", data.get("mean"))
        scale = data.get("scale_", data.get("std"))
        if mean is None or scale is None:
            logger.warning("Scaler config is missing mean_/scale_; features will not be scaled")
            return None
        return cls(mean=tuple(mean), scale=tuple(scale))

    def to_dict(self) -> dict:
        return {"mean_": list(self.mean), "scale_": list(self.scale)}


def _aligned(values: Sequence[float], n: int, fill: float) -> np.ndarray:
    """Return ``values`` truncated or padded with ``fill`` to length ``n``."""
    out = np.full(n, fill, dtype=np.float64)
    k = min(n, len(values))
    out[:k] = np.asarray(values[:k], dtype=np.float64)
    return out


def scale_features(raw: Sequence[float], config: Optional[ScalerConfig]) -> np.ndarray:
    """Scale one raw feature vector: ``out[i] = (raw[i] - mean[i]) / scale[i]``.

    Features past the end of the configured vectors use mean=0, scale=1, so a
    short config leaves them as-is instead of failing.
    """
    raw_arr = np.asarray(raw, dtype=np.float64)

    if config is None or not config.mean or not config.scale:
        # Identity fallback for an absent or malformed config.
        return raw_arr

    n = raw_arr.shape[0]
    mean = _aligned(config.mean, n, 0.0)
    scale = _aligned(config.scale, n, 1.0)
    return (raw_arr - mean) / scale


def scale_rows(rows: Sequence[Sequence[float]], config: Optional[ScalerConfig]) -> np.ndarray:
    """Scale a 2-D block of raw rows, returning shape ``(len(rows), F)``."""
    if len(rows) == 0:
        return np.empty((0, 0), dtype=np.float64)
    return np.stack([scale_features(r, config) for r in rows], axis=0)
