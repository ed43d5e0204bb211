"""Series coercion and demo series sources."""

from .series import as_price_series, infer_step, series_from_pairs
from .sources import CsvSeriesSource, SeriesSource, SyntheticSeriesSource

__all__ = [
    "as_price_series",
    "infer_step",
    "series_from_pairs",
    "SeriesSource",
    "SyntheticSeriesSource",
    "CsvSeriesSource",
]
