"""Series sources the pipeline can be pointed at.

Real market data acquisition lives outside this package. The sources here cover
offline demos (a deterministic synthetic generator) and local CSV exports.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

import numpy as np
import pandas as pd

from ..utils.logger import setup_logger
from ..utils.symbols import sanitize_symbol
from .series import _ensure_datetime_index, as_price_series

logger = setup_logger("data_sources")


class SeriesSource(Protocol):
    def fetch(self, symbol: str) -> pd.Series:
        """Return the daily closing-price series for ``symbol``."""
        ...


class SyntheticSeriesSource:
    """
    Deterministic daily closes derived from the symbol's characters.

    The same symbol always yields the same series, which keeps demos and API
    smoke tests reproducible without network access.
    """

    def __init__(self, days: int = 365, end: datetime | None = None) -> None:
        if days < 2:
            raise ValueError("days must be at least 2.")
        self.days = days
        self.end = end

    def fetch(self, symbol: str) -> pd.Series:
        safe_symbol = sanitize_symbol(symbol)
        symbol_hash = sum(ord(char) for char in safe_symbol)
        rng = np.random.default_rng(symbol_hash)

        end = pd.Timestamp(self.end or datetime.now(timezone.utc)).normalize()
        end = end.tz_convert("UTC") if end.tz else end.tz_localize("UTC")
        index = pd.date_range(end=end, periods=self.days + 1, freq="D")

        offsets = np.arange(self.days, -1, -1, dtype=np.float64)
        day_factor = (np.sin(offsets / 30) + np.cos(offsets / 65)) * 0.5
        volatility = (symbol_hash % 10) / 20 + 0.05
        base_price = (symbol_hash / 10) * (1 + day_factor * 0.4)
        noise = rng.uniform(-0.5, 0.5, size=len(index)) * base_price * volatility * 0.5
        closes = np.round(np.maximum(base_price + noise, 0.01), 2)

        logger.info(
            "Generated synthetic series",
            extra={"symbol": safe_symbol, "observations": len(closes)},
        )
        return as_price_series(pd.Series(closes, index=index))


class CsvSeriesSource:
    """Read ``<SYMBOL>.csv`` files holding ``date`` and ``close`` columns."""

    def __init__(self, directory: str | Path, date_column: str = "date", close_column: str = "close") -> None:
        self.directory = Path(directory)
        self.date_column = date_column
        self.close_column = close_column

    def path_for(self, symbol: str) -> Path:
        return self.directory / f"{sanitize_symbol(symbol)}.csv"

    def fetch(self, symbol: str) -> pd.Series:
        path = self.path_for(symbol)
        if not path.exists():
            raise FileNotFoundError(f"No CSV found for symbol {symbol}: {path}")
        df = pd.read_csv(path)
        missing = {self.date_column, self.close_column} - set(df.columns)
        if missing:
            raise ValueError(f"{path} is missing columns: {', '.join(sorted(missing))}")
        df = _ensure_datetime_index(df.set_index(self.date_column)).sort_index()
        df = df[~df.index.duplicated(keep="last")]
        logger.info("Loaded CSV series", extra={"symbol": symbol, "path": str(path), "rows": len(df)})
        return as_price_series(df[self.close_column])
