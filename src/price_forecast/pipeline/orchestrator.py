"""End-to-end run: preprocess once, train and forecast every variant, assemble."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, fields
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

import numpy as np

from ..cancellation import CancellationToken
from ..config.settings import load_config_section
from ..data.series import SeriesLike, as_price_series, infer_step
from ..errors import CancelledError, ForecastPipelineError
from ..features.scaler import ScalingParameters, fit_scaler, normalize
from ..features.windows import DEFAULT_WINDOW_SIZE, WindowDataset, build_window_dataset
from ..forecasting.ensemble import EnsembleForecast, ForecastResult
from ..forecasting.forecaster import forecast
from ..models.factory import CNN_VARIANT, LSTM_VARIANT, RegressorBuilder, default_builders, select_builders
from ..models.regressor import TrainingOutcome, ensure_finite_outcome
from ..models.trainer import SequenceTrainer
from ..utils.logger import setup_logger
from .progress import LoggingProgressSink, ProgressSink

logger = setup_logger("pipeline")


@dataclass
class PipelineConfig:
    window_size: int = DEFAULT_WINDOW_SIZE
    epochs: int = 10
    batch_size: int = 32
    horizon: int = 5
    variants: Tuple[str, ...] = (LSTM_VARIANT, CNN_VARIANT)
    parallel: bool = False
    fail_on_divergence: bool = True

    def __post_init__(self) -> None:
        self.variants = tuple(self.variants)
        for name in ("window_size", "epochs", "batch_size", "horizon"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        if not self.variants:
            raise ValueError("At least one model variant is required.")
        if len(set(self.variants)) != len(self.variants):
            raise ValueError(f"Duplicate model variants: {self.variants}")

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "PipelineConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown pipeline option(s): {', '.join(sorted(unknown))}")
        return cls(**dict(data))

    def to_dict(self) -> Dict[str, object]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def replace(self, **overrides: object) -> "PipelineConfig":
        data = self.to_dict()
        data.update({key: value for key, value in overrides.items() if value is not None})
        return PipelineConfig.from_dict(data)


def load_pipeline_config(path: str | Path | None) -> PipelineConfig:
    """Build a PipelineConfig from the ``pipeline`` section of a YAML file."""
    return PipelineConfig.from_dict(load_config_section(path, "pipeline"))


class ForecastPipeline:
    """
    Orchestrates one forecast request for one series.

    Scaling parameters and the window dataset are computed once and shared by
    every variant, which keeps the per-model forecasts on a common scale. Any
    failure aborts the whole run; partial results are never returned.
    """

    def __init__(
        self,
        config: PipelineConfig | None = None,
        builders: Mapping[str, RegressorBuilder] | None = None,
        progress: ProgressSink | None = None,
    ) -> None:
        self.config = config or PipelineConfig()
        self.builders = select_builders(
            builders if builders is not None else default_builders(), self.config.variants
        )
        self.progress = progress or LoggingProgressSink(total_epochs=self.config.epochs)
        self.trainer = SequenceTrainer(epochs=self.config.epochs, batch_size=self.config.batch_size)

    def run(
        self,
        series: SeriesLike,
        *,
        symbol: str | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> EnsembleForecast:
        run_token = (cancel_token or CancellationToken()).child()
        try:
            run_token.raise_if_cancelled()
            prices = as_price_series(series)
            values = prices.to_numpy()
            scaling = fit_scaler(values)
            dataset = build_window_dataset(normalize(values, scaling), self.config.window_size)
            logger.info(
                "Preprocessed series",
                extra={
                    "symbol": symbol,
                    "observations": len(values),
                    "samples": len(dataset),
                    "scaling": scaling.to_dict(),
                },
            )

            if self.config.parallel and len(self.builders) > 1:
                outputs = self._run_parallel(values, dataset, scaling, run_token)
            else:
                outputs = {
                    variant: self._train_and_forecast(variant, builder, values, dataset, scaling, run_token)
                    for variant, builder in self.builders.items()
                }
        except CancelledError:
            logger.warning("Pipeline run cancelled", extra={"symbol": symbol})
            raise
        except ForecastPipelineError as exc:
            logger.error("Pipeline run failed", extra={"symbol": symbol, "error": str(exc)})
            raise

        ordered = {variant: outputs[variant] for variant in self.builders}
        last_timestamp = prices.index[-1] if infer_step(prices.index) is not None else None
        return EnsembleForecast(
            per_model={variant: result for variant, (result, _) in ordered.items()},
            training={variant: outcome for variant, (_, outcome) in ordered.items()},
            window_size=self.config.window_size,
            horizon=self.config.horizon,
            generated_at=datetime.now(timezone.utc),
            symbol=symbol,
            last_timestamp=last_timestamp,
            last_close=float(values[-1]),
            step=infer_step(prices.index),
        )

    def _train_and_forecast(
        self,
        variant: str,
        builder: RegressorBuilder,
        values: np.ndarray,
        dataset: WindowDataset,
        scaling: ScalingParameters,
        token: CancellationToken,
    ) -> Tuple[ForecastResult, TrainingOutcome]:
        token.raise_if_cancelled()
        regressor = builder(self.config.window_size)
        outcome = self.trainer.fit(
            regressor,
            dataset,
            lambda epoch, metrics: self.progress.on_epoch_end(variant, epoch, metrics),
            variant=variant,
            cancel_token=token,
        )
        if self.config.fail_on_divergence:
            ensure_finite_outcome(outcome, variant)
        result = forecast(
            regressor,
            values,
            self.config.window_size,
            scaling,
            self.config.horizon,
            variant=variant,
            on_step=lambda step, value: self.progress.on_forecast_step(variant, step, value),
            cancel_token=token,
        )
        return result, outcome

    def _run_parallel(
        self,
        values: np.ndarray,
        dataset: WindowDataset,
        scaling: ScalingParameters,
        token: CancellationToken,
    ) -> Dict[str, Tuple[ForecastResult, TrainingOutcome]]:
        outputs: Dict[str, Tuple[ForecastResult, TrainingOutcome]] = {}
        errors: List[BaseException] = []
        with ThreadPoolExecutor(max_workers=len(self.builders), thread_name_prefix="forecast-train") as pool:
            futures = {
                pool.submit(self._train_and_forecast, variant, builder, values, dataset, scaling, token): variant
                for variant, builder in self.builders.items()
            }
            for future in as_completed(futures):
                variant = futures[future]
                try:
                    outputs[variant] = future.result()
                except Exception as exc:
                    errors.append(exc)
                    token.cancel(reason=f"variant '{variant}' failed")
        if errors:
            raise _primary_error(errors)
        return outputs


def _primary_error(errors: List[BaseException]) -> BaseException:
    """The error that caused the abort, rather than the cancellations it triggered."""
    for error in errors:
        if not isinstance(error, CancelledError):
            return error
    return errors[0]


def run_pipeline(
    series: SeriesLike,
    config: PipelineConfig | None = None,
    *,
    builders: Mapping[str, RegressorBuilder] | None = None,
    progress: ProgressSink | None = None,
    symbol: Optional[str] = None,
    cancel_token: CancellationToken | None = None,
) -> EnsembleForecast:
    pipeline = ForecastPipeline(config=config, builders=builders, progress=progress)
    return pipeline.run(series, symbol=symbol, cancel_token=cancel_token)
