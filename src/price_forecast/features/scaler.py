"""Stateless min-max scaling of a price series."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Sequence, Union

import numpy as np

from ..errors import DegenerateSeriesError

ArrayLike = Union[Sequence[float], np.ndarray]


@dataclass(frozen=True)
class ScalingParameters:
    minimum: float
    maximum: float

    @property
    def span(self) -> float:
        return self.maximum - self.minimum

    def to_dict(self) -> Dict[str, float]:
        return {"min": self.minimum, "max": self.maximum}

    @classmethod
    def from_dict(cls, data: Dict[str, float]) -> "ScalingParameters":
        params = cls(minimum=float(data["min"]), maximum=float(data["max"]))
        if not params.maximum > params.minimum:
            raise DegenerateSeriesError(f"Invalid scaling bounds: min={params.minimum}, max={params.maximum}")
        return params


def fit_scaler(values: ArrayLike) -> ScalingParameters:
    """
    Compute min/max bounds of ``values``.

    Raises:
        DegenerateSeriesError: the sequence is empty, holds non-finite values, or
            is constant. A constant series has no scale and is never patched up
            with a fallback range.
    """
    arr = np.asarray(values, dtype=np.float64).ravel()
    if arr.size == 0:
        raise DegenerateSeriesError("Cannot fit scaling parameters on an empty series.")
    if not np.all(np.isfinite(arr)):
        raise DegenerateSeriesError("Cannot fit scaling parameters on non-finite values.")
    minimum = float(arr.min())
    maximum = float(arr.max())
    if maximum == minimum:
        raise DegenerateSeriesError(f"Series is constant at {minimum}; min-max scaling is undefined.")
    return ScalingParameters(minimum=minimum, maximum=maximum)


def normalize(values: ArrayLike, params: ScalingParameters) -> np.ndarray:
    arr = np.asarray(values, dtype=np.float64)
    return (arr - params.minimum) / params.span


def denormalize(values: ArrayLike, params: ScalingParameters) -> np.ndarray:
    # Values outside [0, 1] extrapolate linearly; rollouts rely on that.
    arr = np.asarray(values, dtype=np.float64)
    return arr * params.span + params.minimum
