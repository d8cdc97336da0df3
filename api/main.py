from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel

from rolling_forecast.config import SOURCES
from rolling_forecast.errors import (
    EmptyHistory,
    InsufficientHistory,
    ModelNotLoaded,
    PredictionInProgress,
    StartupLoadFailed,
)
from rolling_forecast.logging_setup import get_logger, setup_logging
from rolling_forecast.session import ForecastSession

logger = get_logger(__name__)


# Pydantic model for a single chart point
class HistoryPoint(BaseModel):
    date: str
    close: float
    is_prediction: bool


class StatusResponse(BaseModel):
    phase: str
    message: str
    text: str
    trigger_enabled: bool
    rows: int


class PredictionResponse(BaseModel):
    date: str
    price: float
    log_return: float
    return_pct: float
    base_close: float
    status: str


def create_app(session: Optional[ForecastSession] = None) -> FastAPI:
    """Build the API around ``session``.

    Without a session, one is created and loaded from ``SOURCES`` when the app
    starts. A failed load keeps the app up so ``/status`` can report it; the
    prediction endpoint then answers 503.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.session is None:
            setup_logging()
            app.state.session = ForecastSession()
            try:
                app.state.session.load(SOURCES)
            except StartupLoadFailed as e:
                logger.error("Startup failed: %s", e)
        yield

    app = FastAPI(
        title="Rolling Forecast API",
        description="Next-step price prediction from a pretrained sequence model.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.session = session

    def _session() -> ForecastSession:
        s = app.state.session
        if s is None:
            raise HTTPException(status_code=503, detail="Session not initialised")
        return s

    @app.get("/health", summary="Health check", response_description="API health status")
    async def health_check():
        """
        Checks the health of the API.
        """
        return {"status": "ok"}

    @app.get("/status", response_model=StatusResponse, summary="Session status")
    def status():
        s = _session()
        return StatusResponse(**s.status.to_dict(), rows=len(s.ledger))

    @app.get("/history", response_model=List[HistoryPoint], summary="Ledger tail for charting")
    def history(tail: Optional[int] = Query(default=None, ge=1)):
        rows = _session().ledger.rows
        if tail is not None:
            rows = rows[-tail:]
        return [
            HistoryPoint(date=r.date, close=r.close, is_prediction=r.is_prediction)
            for r in rows
        ]

    @app.post("/predict", response_model=PredictionResponse, summary="Predict the next close")
    def predict():
        """
        Runs one prediction on the latest window and appends it to the history.

        Concurrent calls are rejected with 409 while one is in flight.
        """
        s = _session()
        if not s.is_ready:
            raise HTTPException(status_code=503, detail=s.status.text)

        try:
            result = s.predict_next()
        except PredictionInProgress as e:
            raise HTTPException(status_code=409, detail=str(e))
        except (InsufficientHistory, EmptyHistory) as e:
            raise HTTPException(status_code=400, detail=str(e))
        except ModelNotLoaded as e:
            raise HTTPException(status_code=503, detail=str(e))
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Prediction failed: {str(e)}")

        return PredictionResponse(**result.to_dict(), status=s.status.text)

    return app


app = create_app()

# To run this API:
# uvicorn api.main:app --reload --port 8000
# Then access http://127.0.0.1:8000/docs for Swagger UI
