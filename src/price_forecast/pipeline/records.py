"""Flat JSON records of ensemble forecasts. Models themselves are never saved."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

import pandas as pd

from ..features.scaler import ScalingParameters
from ..forecasting.ensemble import EnsembleForecast, ForecastResult
from ..utils.logger import setup_logger
from ..utils.symbols import sanitize_symbol

logger = setup_logger("forecast_records")


def to_record(ensemble: EnsembleForecast) -> Dict[str, Any]:
    return {
        "symbol": ensemble.symbol,
        "generated_at": ensemble.generated_at.isoformat(),
        "window_size": ensemble.window_size,
        "horizon": ensemble.horizon,
        "scaling": ensemble.scaling.to_dict(),
        "per_model": {variant: list(result.values) for variant, result in ensemble.per_model.items()},
        "last_close": ensemble.last_close,
        "last_timestamp": ensemble.last_timestamp.isoformat() if ensemble.last_timestamp is not None else None,
        "step_seconds": ensemble.step.total_seconds() if ensemble.step is not None else None,
    }


def from_record(record: Dict[str, Any]) -> EnsembleForecast:
    scaling = ScalingParameters.from_dict(record["scaling"])
    per_model = {
        variant: ForecastResult(variant=variant, values=tuple(float(v) for v in values), scaling=scaling)
        for variant, values in record["per_model"].items()
    }
    last_timestamp = record.get("last_timestamp")
    step_seconds = record.get("step_seconds")
    return EnsembleForecast(
        per_model=per_model,
        window_size=int(record["window_size"]),
        horizon=int(record["horizon"]),
        generated_at=datetime.fromisoformat(record["generated_at"]),
        symbol=record.get("symbol"),
        last_timestamp=pd.Timestamp(last_timestamp) if last_timestamp else None,
        last_close=record.get("last_close"),
        step=pd.Timedelta(seconds=step_seconds) if step_seconds else None,
    )


def save_forecast_record(ensemble: EnsembleForecast, directory: str | Path) -> Path:
    """Write the record as ``<SYMBOL>_<timestamp>.json`` under ``directory``."""
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    label = sanitize_symbol(ensemble.symbol) if ensemble.symbol else "SERIES"
    path = out_dir / f"{label}_{ensemble.generated_at:%Y%m%d%H%M%S}.json"
    path.write_text(json.dumps(to_record(ensemble), indent=2), encoding="utf-8")
    logger.info("Saved forecast record", extra={"symbol": ensemble.symbol, "path": str(path)})
    return path


def load_forecast_record(path: str | Path) -> EnsembleForecast:
    return from_record(json.loads(Path(path).read_text(encoding="utf-8")))
