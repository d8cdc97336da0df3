"""Command-line entry point.

Loads a session and triggers ``--steps`` sequential predictions, each one
building on the previously appended row:

    python -m rolling_forecast --steps 3
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace

from rolling_forecast.config import SOURCES, LoggingConfig
from rolling_forecast.errors import ForecastError, StartupLoadFailed
from rolling_forecast.logging_setup import setup_logging
from rolling_forecast.session import ForecastSession


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Rolling next-step price forecast")
    parser.add_argument("--steps", type=int, default=1, help="Number of predictions to run (default: 1)")
    parser.add_argument("--model", default=None, help="Model path or URL (overrides config)")
    parser.add_argument("--scaler", default=None, help="Scaler JSON path or URL (overrides config)")
    parser.add_argument("--history", default=None, help="History JSON path or URL (overrides config)")
    return parser


def main(argv: list[str] | None = None, session: ForecastSession | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(LoggingConfig())

    sources = replace(
        SOURCES,
        model_source=args.model or SOURCES.model_source,
        scaler_source=args.scaler or SOURCES.scaler_source,
        history_source=args.history or SOURCES.history_source,
    )

    if session is None:
        session = ForecastSession()
        try:
            session.load(sources)
        except StartupLoadFailed:
            print(session.status.text, file=sys.stderr)
            return 1
    print(session.status.text)

    for _ in range(max(0, args.steps)):
        try:
            session.predict_next()
        except (ForecastError, ValueError):
            print(session.status.text, file=sys.stderr)
            return 2
        print(session.status.text)

    return 0


if __name__ == "__main__":
    sys.exit(main())
