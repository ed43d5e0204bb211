"""Shared helpers."""

from .logger import setup_logger
from .symbols import sanitize_symbol, symbol_slug

__all__ = ["setup_logger", "sanitize_symbol", "symbol_slug"]
