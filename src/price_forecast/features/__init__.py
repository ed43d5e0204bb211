"""Preprocessing: min-max scaling and sliding-window datasets."""

from .scaler import ScalingParameters, denormalize, fit_scaler, normalize
from .windows import DEFAULT_WINDOW_SIZE, WindowDataset, WindowExample, build_window_dataset

__all__ = [
    "ScalingParameters",
    "fit_scaler",
    "normalize",
    "denormalize",
    "DEFAULT_WINDOW_SIZE",
    "WindowExample",
    "WindowDataset",
    "build_window_dataset",
]
