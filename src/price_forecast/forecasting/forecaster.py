"""Iterative multi-step forecasting with a one-step regressor."""

from __future__ import annotations

from typing import Callable, List, Optional

import numpy as np

from ..cancellation import CancellationToken
from ..errors import InsufficientDataError
from ..features.scaler import ArrayLike, ScalingParameters, denormalize, normalize
from ..models.regressor import Regressor
from ..utils.logger import setup_logger
from .ensemble import ForecastResult

logger = setup_logger("forecaster")

StepCallback = Callable[[int, float], None]


def forecast(
    regressor: Regressor,
    raw_series: ArrayLike,
    window_size: int,
    scaling: ScalingParameters,
    horizon: int,
    *,
    variant: str = "model",
    on_step: Optional[StepCallback] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> ForecastResult:
    """
    Roll ``regressor`` forward ``horizon`` steps past the end of ``raw_series``.

    The window is seeded with the last ``window_size`` observations normalized
    with ``scaling``. Each normalized prediction is appended to the window (and
    the oldest value dropped) before the next step, so errors compound over the
    horizon. Predictions are never re-anchored to observed data.
    """
    if horizon < 1:
        raise ValueError(f"horizon must be positive, got {horizon}")
    if window_size < 1:
        raise ValueError(f"window_size must be positive, got {window_size}")
    values = np.asarray(raw_series, dtype=np.float64).ravel()
    if len(values) < window_size:
        raise InsufficientDataError(
            f"Need at least {window_size} observations to seed the forecast window, got {len(values)}"
        )

    window: List[float] = normalize(values[-window_size:], scaling).tolist()
    predictions: List[float] = []
    for step in range(1, horizon + 1):
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        predicted = float(regressor.predict(window))
        value = float(denormalize([predicted], scaling)[0])
        predictions.append(value)
        window = window[1:] + [predicted]
        if on_step is not None:
            if cancel_token is not None:
                cancel_token.raise_if_cancelled()
            on_step(step, value)

    logger.info(
        "Forecast produced",
        extra={"variant": variant, "horizon": horizon, "last_value": predictions[-1]},
    )
    return ForecastResult(variant=variant, values=tuple(predictions), scaling=scaling)
