"""Exceptions raised by the forecasting pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models.regressor import TrainingOutcome


class ForecastPipelineError(Exception):
    """Base class for every error the pipeline surfaces to its caller."""


class DegenerateSeriesError(ForecastPipelineError, ValueError):
    """The series cannot be min-max scaled (empty, non-finite or constant)."""


class InsufficientDataError(ForecastPipelineError, ValueError):
    """The series is too short for the requested window."""


class TrainingDivergenceError(ForecastPipelineError):
    """A training run produced a non-finite loss or metric."""

    def __init__(self, variant: str, outcome: "TrainingOutcome") -> None:
        self.variant = variant
        self.outcome = outcome
        super().__init__(
            f"Training of '{variant}' diverged after {outcome.epochs_completed} epoch(s): "
            f"final loss {outcome.final_loss}"
        )


class CancelledError(ForecastPipelineError):
    """The run was abandoned through its cancellation token."""
