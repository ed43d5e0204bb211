"""Held-out evaluation: score forecasts against observations the models never saw."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping

from ..cancellation import CancellationToken
from ..data.series import SeriesLike, as_price_series
from ..errors import InsufficientDataError
from ..forecasting.ensemble import EnsembleForecast
from ..models.factory import RegressorBuilder
from ..models.metrics import regression_metrics
from ..utils.logger import setup_logger
from .orchestrator import PipelineConfig, run_pipeline
from .progress import ProgressSink

logger = setup_logger("evaluation")

AVERAGE_KEY = "average"


@dataclass
class HoldoutEvaluation:
    holdout: int
    actual: list[float]
    forecast: EnsembleForecast
    metrics: Dict[str, Dict[str, float]]


def evaluate_holdout(
    series: SeriesLike,
    config: PipelineConfig | None = None,
    builders: Mapping[str, RegressorBuilder] | None = None,
    holdout: int | None = None,
    *,
    progress: ProgressSink | None = None,
    cancel_token: CancellationToken | None = None,
) -> HoldoutEvaluation:
    """
    Train on everything except the last ``holdout`` points and forecast them.

    Returns MAE, RMSE and MAPE (percent) per variant plus the stepwise average of
    all variants. The horizon is forced to ``holdout`` for this run.
    """
    config = config or PipelineConfig()
    if holdout is None:
        holdout = config.horizon
    if holdout < 1:
        raise ValueError(f"holdout must be positive, got {holdout}")
    prices = as_price_series(series)
    if len(prices) - holdout <= config.window_size:
        raise InsufficientDataError(
            f"Need more than {config.window_size + holdout} observations to hold out "
            f"{holdout} with window_size={config.window_size}, got {len(prices)}"
        )

    train, actual = prices.iloc[:-holdout], prices.iloc[-holdout:].to_numpy()
    ensemble = run_pipeline(
        train,
        config.replace(horizon=holdout),
        builders=builders,
        progress=progress,
        cancel_token=cancel_token,
    )
    metrics = {
        variant: regression_metrics(actual, list(result.values))
        for variant, result in ensemble.per_model.items()
    }
    metrics[AVERAGE_KEY] = regression_metrics(actual, ensemble.average())
    logger.info("Held-out evaluation complete", extra={"holdout": holdout, "metrics": metrics})
    return HoldoutEvaluation(holdout=holdout, actual=actual.tolist(), forecast=ensemble, metrics=metrics)
