import sys
import threading
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT / "src") not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT / "src"))

from price_forecast.models.regressor import TrainingOutcome  # noqa: E402


class MeanWindowRegressor:
    """Predicts the mean of its input window; records how it was trained."""

    def __init__(self, losses: Optional[List[float]] = None, epoch_delay: float = 0.0) -> None:
        self.losses = losses
        self.epoch_delay = epoch_delay
        self.fit_calls: List[tuple] = []
        self.datasets: List[object] = []
        self.windows: List[List[float]] = []

    def fit(self, dataset, epochs, batch_size, on_epoch_end):
        self.fit_calls.append((len(dataset), epochs, batch_size))
        self.datasets.append(dataset)
        recorded = []
        for epoch in range(1, epochs + 1):
            if self.epoch_delay:
                threading.Event().wait(self.epoch_delay)
            loss = self.losses[epoch - 1] if self.losses else 1.0 / epoch
            metrics = {"loss": loss, "mae": loss / 2}
            recorded.append(metrics)
            on_epoch_end(epoch, metrics)
        return TrainingOutcome.from_epochs(recorded)

    def predict(self, window):
        self.windows.append(list(window))
        return float(np.mean(window))


class LastValueRegressor(MeanWindowRegressor):
    """Persistence model: tomorrow equals today."""

    def predict(self, window):
        self.windows.append(list(window))
        return float(window[-1])


class FailingRegressor(MeanWindowRegressor):
    def fit(self, dataset, epochs, batch_size, on_epoch_end):
        raise RuntimeError("fit exploded")


class RecordingSink:
    """Thread-safe progress sink keeping every event in arrival order."""

    def __init__(self) -> None:
        self.events: List[tuple] = []
        self._lock = threading.Lock()
        self.on_epoch_hook = None

    def on_epoch_end(self, variant: str, epoch: int, metrics: Dict[str, float]) -> None:
        with self._lock:
            self.events.append(("epoch", variant, epoch))
        if self.on_epoch_hook is not None:
            self.on_epoch_hook(variant, epoch, metrics)

    def on_forecast_step(self, variant: str, step: int, value: float) -> None:
        with self._lock:
            self.events.append(("forecast_step", variant, step))

    def of(self, kind: str, variant: str) -> List[int]:
        return [index for k, v, index in self.events if k == kind and v == variant]


@pytest.fixture
def fake_builders():
    created: Dict[str, List[MeanWindowRegressor]] = {"lstm": [], "cnn": []}

    def _lstm(window_size):
        regressor = MeanWindowRegressor()
        created["lstm"].append(regressor)
        return regressor

    def _cnn(window_size):
        regressor = LastValueRegressor()
        created["cnn"].append(regressor)
        return regressor

    return {"lstm": _lstm, "cnn": _cnn}, created


@pytest.fixture
def recording_sink():
    return RecordingSink()


@pytest.fixture
def trending_series():
    rng = np.random.default_rng(7)
    return list(100 + np.arange(80) * 0.5 + rng.normal(0, 0.2, size=80))
