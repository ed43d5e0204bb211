"""Sliding-window supervised datasets over a normalized series."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Tuple

import numpy as np

from ..errors import InsufficientDataError
from ..utils.logger import setup_logger
from .scaler import ArrayLike

logger = setup_logger("window_dataset")

DEFAULT_WINDOW_SIZE = 60


@dataclass(frozen=True)
class WindowExample:
    inputs: np.ndarray
    target: float


@dataclass(frozen=True)
class WindowDataset:
    """
    Chronological ``(window, next value)`` pairs.

    The backing arrays are marked read-only so one dataset can be shared by
    several training workers at once.
    """

    inputs: np.ndarray
    targets: np.ndarray
    window_size: int

    def __post_init__(self) -> None:
        if self.inputs.ndim != 2 or self.inputs.shape[1] != self.window_size:
            raise ValueError(
                f"inputs must have shape (n, {self.window_size}), got {self.inputs.shape}"
            )
        if len(self.inputs) != len(self.targets):
            raise ValueError("inputs and targets must have the same number of rows.")
        self.inputs.setflags(write=False)
        self.targets.setflags(write=False)

    def __len__(self) -> int:
        return len(self.targets)

    def __getitem__(self, index: int) -> WindowExample:
        return WindowExample(inputs=self.inputs[index], target=float(self.targets[index]))

    def __iter__(self) -> Iterator[WindowExample]:
        for index in range(len(self)):
            yield self[index]

    @property
    def is_empty(self) -> bool:
        return len(self) == 0

    def as_model_inputs(self) -> Tuple[np.ndarray, np.ndarray]:
        """Return ``(X, y)`` shaped ``(n, window, 1)`` and ``(n, 1)`` as float32."""
        X = self.inputs.astype(np.float32).reshape(len(self), self.window_size, 1)
        y = self.targets.astype(np.float32).reshape(-1, 1)
        return X, y


def build_window_dataset(normalized: ArrayLike, window_size: int = DEFAULT_WINDOW_SIZE) -> WindowDataset:
    """Transform a normalized series into rolling window examples, oldest first."""
    if window_size < 1:
        raise ValueError(f"window_size must be positive, got {window_size}")
    values = np.asarray(normalized, dtype=np.float64).ravel()
    if len(values) <= window_size:
        raise InsufficientDataError(
            f"Need at least {window_size + 1} observations for window_size={window_size}, "
            f"got {len(values)}"
        )

    sequences = []
    labels = []
    for idx in range(window_size, len(values)):
        sequences.append(values[idx - window_size : idx])
        labels.append(values[idx])

    dataset = WindowDataset(
        inputs=np.asarray(sequences, dtype=np.float64),
        targets=np.asarray(labels, dtype=np.float64),
        window_size=window_size,
    )
    logger.info(
        "Generated supervised windows",
        extra={"window_size": window_size, "samples": len(dataset)},
    )
    return dataset
