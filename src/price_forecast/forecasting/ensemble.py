"""Per-model forecast results and the ensemble handed back to callers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

from ..features.scaler import ScalingParameters
from ..models.regressor import TrainingOutcome

STRONG_MOVE_PCT = 3.0


@dataclass(frozen=True)
class ForecastResult:
    variant: str
    values: Tuple[float, ...]
    scaling: ScalingParameters

    @property
    def horizon(self) -> int:
        return len(self.values)


def outlook_band(change_pct: float, strong_move_pct: float = STRONG_MOVE_PCT) -> str:
    """Bucket a percentage change the way the results table colours it."""
    if change_pct > strong_move_pct:
        return "strong_up"
    if change_pct > 0:
        return "up"
    if change_pct > -strong_move_pct:
        return "down"
    return "strong_down"


@dataclass
class EnsembleForecast:
    """Forecasts from every model variant, all on the same scaling and horizon."""

    per_model: Dict[str, ForecastResult]
    window_size: int
    horizon: int
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    symbol: Optional[str] = None
    last_timestamp: Optional[pd.Timestamp] = None
    last_close: Optional[float] = None
    step: Optional[pd.Timedelta] = None
    training: Dict[str, TrainingOutcome] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.per_model:
            raise ValueError("An ensemble needs at least one model forecast.")
        lengths = {result.horizon for result in self.per_model.values()}
        if lengths != {self.horizon}:
            raise ValueError(f"All forecasts must have horizon {self.horizon}, got {sorted(lengths)}")

    @property
    def variants(self) -> List[str]:
        return list(self.per_model)

    @property
    def scaling(self) -> ScalingParameters:
        return next(iter(self.per_model.values())).scaling

    def values(self, variant: str) -> List[float]:
        return list(self.per_model[variant].values)

    def average(self) -> np.ndarray:
        stacked = np.array([result.values for result in self.per_model.values()], dtype=np.float64)
        return stacked.mean(axis=0)

    def forecast_index(self) -> pd.Index:
        """Future timestamps for a dated series, otherwise step numbers ``1..horizon``."""
        if self.last_timestamp is None or self.step is None:
            return pd.RangeIndex(1, self.horizon + 1, name="step")
        dates = [self.last_timestamp + self.step * h for h in range(1, self.horizon + 1)]
        return pd.DatetimeIndex(dates, name="date")

    def to_frame(self) -> pd.DataFrame:
        """Display table: one column per variant, the average, and its change vs. the last close."""
        frame = pd.DataFrame(
            {variant: list(result.values) for variant, result in self.per_model.items()},
            index=self.forecast_index(),
        )
        frame["average"] = self.average()
        if self.last_close:
            frame["change_pct"] = (frame["average"] - self.last_close) / self.last_close * 100
            frame["outlook"] = frame["change_pct"].map(outlook_band)
        return frame
