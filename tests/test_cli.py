import logging
import math

import pytest

from rolling_forecast.__main__ import build_parser, main
from rolling_forecast.ledger import HistoryLedger
from rolling_forecast.session import ForecastSession

from tests.conftest import FakeModel, make_records


@pytest.fixture(autouse=True)
def _reset_package_logger():
    # main() installs handlers bound to the captured streams of each test.
    yield
    logging.getLogger("rolling_forecast").handlers = []


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.steps == 1
    assert args.model is None


def test_main_runs_sequential_steps(capsys, monkeypatch, tmp_path):
    monkeypatch.setenv("ROLLING_FORECAST_LOG_FILE", str(tmp_path / "cli.log"))
    ledger = HistoryLedger.from_records(make_records(61))
    session = ForecastSession.from_components(FakeModel(math.log(1.01)), None, ledger)

    rc = main(["--steps", "3"], session=session)

    assert rc == 0
    assert len(session.ledger) == 64
    lines = capsys.readouterr().out.strip().splitlines()
    assert lines[0].startswith("Ready.")
    assert len(lines) == 4
    assert lines[-1].endswith("on 2024-03-04")


def test_main_reports_prediction_error(capsys, monkeypatch, tmp_path):
    monkeypatch.setenv("ROLLING_FORECAST_LOG_FILE", str(tmp_path / "cli.log"))
    ledger = HistoryLedger.from_records(make_records(3))
    session = ForecastSession.from_components(FakeModel(0.0), None, ledger)

    rc = main(["--steps", "1"], session=session)

    assert rc == 2
    assert len(session.ledger) == 3
    err_lines = capsys.readouterr().err.strip().splitlines()
    assert err_lines[-1].startswith("error: Not enough history")
