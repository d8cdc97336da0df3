"""Rolling next-step price forecasting from a pretrained sequence model."""

__version__ = "0.1.0"
