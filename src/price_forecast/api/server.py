"""FastAPI server exposing dual-model ensemble forecasts."""

from __future__ import annotations

import time
from datetime import datetime
from typing import Dict, List, Mapping, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from .. import __version__
from ..config import get_settings
from ..data.series import series_from_pairs
from ..data.sources import SeriesSource, SyntheticSeriesSource
from ..errors import CancelledError, TrainingDivergenceError
from ..models.factory import RegressorBuilder, default_builders, load_network_configs
from ..pipeline.evaluation import evaluate_holdout
from ..pipeline.orchestrator import PipelineConfig, load_pipeline_config, run_pipeline
from ..utils.logger import setup_logger

app = FastAPI(title="Dual-Model Price Forecast API", version=__version__)
logger = setup_logger("api")

# Swappable collaborators; tests and deployments replace these at startup.
series_source: SeriesSource = SyntheticSeriesSource()
regressor_builders: Optional[Mapping[str, RegressorBuilder]] = None
base_config: Optional[PipelineConfig] = None

metrics_state = {
    "forecast_requests": 0,
    "errors": 0,
    "last_latency_ms": 0.0,
}


class ForecastRequest(BaseModel):
    symbol: Optional[str] = None
    closes: Optional[List[float]] = None
    timestamps: Optional[List[datetime]] = None
    window_size: Optional[int] = Field(default=None, ge=1)
    epochs: Optional[int] = Field(default=None, ge=1)
    batch_size: Optional[int] = Field(default=None, ge=1)
    horizon: Optional[int] = Field(default=None, ge=1)
    parallel: Optional[bool] = None
    evaluate: bool = False


class ForecastResponse(BaseModel):
    symbol: Optional[str]
    generated_at: datetime
    window_size: int
    horizon: int
    scaling: Dict[str, float]
    per_model: Dict[str, List[float]]
    average: List[float]
    index: List[str]
    last_close: Optional[float] = None
    holdout_metrics: Optional[Dict[str, Dict[str, float]]] = None


def _builders() -> Mapping[str, RegressorBuilder]:
    if regressor_builders is not None:
        return regressor_builders
    settings = get_settings()
    lstm_config, cnn_config = load_network_configs(settings.pipeline_config_path)
    return default_builders(lstm_config, cnn_config, seed=settings.random_seed)


def _config(request: ForecastRequest) -> PipelineConfig:
    config = base_config or load_pipeline_config(get_settings().pipeline_config_path)
    return config.replace(
        window_size=request.window_size,
        epochs=request.epochs,
        batch_size=request.batch_size,
        horizon=request.horizon,
        parallel=request.parallel,
    )


def _series(request: ForecastRequest):
    if request.closes is not None:
        if request.timestamps is None:
            return request.closes
        if len(request.timestamps) != len(request.closes):
            raise HTTPException(status_code=400, detail="timestamps and closes must have the same length.")
        return series_from_pairs(zip(request.timestamps, request.closes))
    if request.symbol:
        try:
            return series_source.fetch(request.symbol)
        except FileNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
    raise HTTPException(status_code=400, detail="Provide either 'closes' or 'symbol'.")


@app.post("/forecast", response_model=ForecastResponse)
def create_forecast(request: ForecastRequest) -> ForecastResponse:
    metrics_state["forecast_requests"] += 1
    start_time = time.perf_counter()
    try:
        config = _config(request)
        series = _series(request)
    except ValueError as exc:
        metrics_state["errors"] += 1
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    builders = _builders()

    holdout_metrics = None
    try:
        ensemble = run_pipeline(series, config, builders=builders, symbol=request.symbol)
        if request.evaluate:
            holdout_metrics = evaluate_holdout(series, config, builders).metrics
    except TrainingDivergenceError as exc:
        metrics_state["errors"] += 1
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    except CancelledError as exc:
        metrics_state["errors"] += 1
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ValueError as exc:
        # InsufficientDataError and DegenerateSeriesError are ValueErrors too.
        metrics_state["errors"] += 1
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    metrics_state["last_latency_ms"] = (time.perf_counter() - start_time) * 1000
    logger.info(
        "Forecast served",
        extra={"symbol": request.symbol, "latency_ms": metrics_state["last_latency_ms"]},
    )
    return ForecastResponse(
        symbol=ensemble.symbol,
        generated_at=ensemble.generated_at,
        window_size=ensemble.window_size,
        horizon=ensemble.horizon,
        scaling=ensemble.scaling.to_dict(),
        per_model={variant: ensemble.values(variant) for variant in ensemble.variants},
        average=ensemble.average().tolist(),
        index=[str(label) for label in ensemble.forecast_index()],
        last_close=ensemble.last_close,
        holdout_metrics=holdout_metrics,
    )


@app.get("/metrics")
def metrics() -> dict:
    return {"metrics_state": dict(metrics_state)}


@app.get("/health")
def health() -> dict:
    return {"ok": True, "version": __version__}
