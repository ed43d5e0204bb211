"""Training loop driver shared by every regressor variant."""

from __future__ import annotations

from typing import Dict, Optional

from ..cancellation import CancellationToken
from ..errors import InsufficientDataError
from ..features.windows import WindowDataset
from ..utils.logger import setup_logger
from .regressor import EpochCallback, Regressor, TrainingOutcome

logger = setup_logger("trainer")


class SequenceTrainer:
    """
    Runs ``epochs`` ordered passes of a regressor over a window dataset.

    Mini-batches follow Keras semantics for every variant: ``batch_size`` examples
    per step, no shuffling, and the trailing partial batch is kept. The per-epoch
    callback is the only progress channel. Non-finite losses are returned as-is
    inside the outcome; deciding whether that is a failure is up to the caller.
    """

    def __init__(self, epochs: int = 10, batch_size: int = 32) -> None:
        if epochs < 1:
            raise ValueError(f"epochs must be positive, got {epochs}")
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self.epochs = epochs
        self.batch_size = batch_size

    def fit(
        self,
        regressor: Regressor,
        dataset: WindowDataset,
        on_epoch_end: Optional[EpochCallback] = None,
        *,
        variant: str = "model",
        cancel_token: Optional[CancellationToken] = None,
    ) -> TrainingOutcome:
        if dataset.is_empty:
            raise InsufficientDataError("Cannot train on an empty window dataset.")
        token = cancel_token or CancellationToken()
        token.raise_if_cancelled()

        def _on_epoch_end(epoch: int, metrics: Dict[str, float]) -> None:
            # Nothing may be reported once the run was cancelled, and training
            # stops right after the epoch during which cancellation arrived.
            token.raise_if_cancelled()
            logger.debug(
                "Epoch finished",
                extra={"variant": variant, "epoch": epoch, "metrics": metrics},
            )
            if on_epoch_end is not None:
                on_epoch_end(epoch, metrics)
            token.raise_if_cancelled()

        logger.info(
            "Training started",
            extra={
                "variant": variant,
                "samples": len(dataset),
                "window_size": dataset.window_size,
                "epochs": self.epochs,
                "batch_size": self.batch_size,
            },
        )
        outcome = regressor.fit(dataset, self.epochs, self.batch_size, _on_epoch_end)
        logger.info(
            "Training finished",
            extra={
                "variant": variant,
                "epochs_completed": outcome.epochs_completed,
                "final_loss": outcome.final_loss,
            },
        )
        return outcome
