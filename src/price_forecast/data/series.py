"""Helpers for turning caller input into a clean closing-price series."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Sequence, Tuple, Union

import numpy as np
import pandas as pd

SeriesLike = Union[pd.Series, Sequence[float], np.ndarray]


def series_from_pairs(pairs: Iterable[Tuple[datetime, float]]) -> pd.Series:
    """Build a price series from ``(timestamp, value)`` pairs."""
    rows = list(pairs)
    if not rows:
        return pd.Series([], dtype=np.float64, name="close")
    timestamps, values = zip(*rows)
    return as_price_series(pd.Series(values, index=pd.to_datetime(list(timestamps), utc=True)))


def as_price_series(data: SeriesLike) -> pd.Series:
    """
    Coerce ``data`` into a float64 series named ``close``.

    A ``DatetimeIndex`` is normalised to UTC and must be strictly increasing.
    Anything without a datetime index gets a positional index. Values must be
    finite; gaps are the caller's problem, not something to fill in here.
    """
    if isinstance(data, pd.Series):
        series = data.astype(np.float64).copy()
        if isinstance(series.index, pd.DatetimeIndex):
            series.index = _ensure_utc(series.index)
            if not series.index.is_monotonic_increasing or series.index.has_duplicates:
                raise ValueError("Series timestamps must be strictly increasing.")
        else:
            series = series.reset_index(drop=True)
    else:
        series = pd.Series(np.asarray(data, dtype=np.float64).ravel())

    if not np.all(np.isfinite(series.to_numpy())):
        raise ValueError("Series contains NaN or infinite values; clean it before forecasting.")
    series.name = "close"
    return series


def infer_step(index: pd.Index) -> pd.Timedelta | None:
    """Median spacing of a datetime index, or None for positional/short indexes."""
    if not isinstance(index, pd.DatetimeIndex) or len(index) < 2:
        return None
    # Timedelta arithmetic keeps this independent of the index resolution (ns, us, ...).
    return pd.Timedelta(index.to_series().diff().dropna().median())


def _ensure_datetime_index(df: pd.DataFrame) -> pd.DataFrame:
    if not isinstance(df.index, pd.DatetimeIndex):
        df = df.copy()
        df.index = pd.to_datetime(df.index, utc=True)
    else:
        df.index = _ensure_utc(df.index)
    return df


def _ensure_utc(index: pd.DatetimeIndex) -> pd.DatetimeIndex:
    return index.tz_convert("UTC") if index.tz else index.tz_localize("UTC")
