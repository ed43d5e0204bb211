"""The sequence-regressor capability shared by every model variant."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Protocol, Sequence

from ..errors import TrainingDivergenceError
from ..features.windows import WindowDataset

EpochCallback = Callable[[int, Dict[str, float]], None]


@dataclass
class TrainingOutcome:
    """Per-epoch metric history of one fit call. Says nothing about convergence."""

    history: Dict[str, List[float]] = field(default_factory=dict)

    @classmethod
    def from_epochs(cls, epochs: Sequence[Mapping[str, float]]) -> "TrainingOutcome":
        history: Dict[str, List[float]] = {}
        for metrics in epochs:
            for name, value in metrics.items():
                history.setdefault(name, []).append(float(value))
        return cls(history=history)

    @property
    def losses(self) -> List[float]:
        return list(self.history.get("loss", []))

    @property
    def epochs_completed(self) -> int:
        return len(self.history.get("loss", []))

    @property
    def final_loss(self) -> Optional[float]:
        losses = self.history.get("loss")
        return losses[-1] if losses else None

    def final_metrics(self) -> Dict[str, float]:
        return {name: values[-1] for name, values in self.history.items() if values}

    def is_finite(self) -> bool:
        return all(math.isfinite(value) for values in self.history.values() for value in values)


class Regressor(Protocol):
    """Anything that can be fit from windows to a scalar and then predict one step."""

    def fit(
        self,
        dataset: WindowDataset,
        epochs: int,
        batch_size: int,
        on_epoch_end: EpochCallback,
    ) -> TrainingOutcome:
        ...

    def predict(self, window: Sequence[float]) -> float:
        ...


def ensure_finite_outcome(outcome: TrainingOutcome, variant: str) -> TrainingOutcome:
    """Divergence policy: raise if any recorded loss or metric is NaN or infinite."""
    if not outcome.is_finite():
        raise TrainingDivergenceError(variant, outcome)
    return outcome
