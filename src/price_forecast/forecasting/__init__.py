"""Autoregressive rollout and ensemble assembly."""

from .ensemble import EnsembleForecast, ForecastResult, outlook_band
from .forecaster import StepCallback, forecast

__all__ = ["EnsembleForecast", "ForecastResult", "outlook_band", "StepCallback", "forecast"]
