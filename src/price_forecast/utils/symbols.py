"""Utility helpers for normalizing symbol identifiers."""

from __future__ import annotations


def sanitize_symbol(symbol: str) -> str:
    """Return an uppercase filesystem-safe symbol."""
    cleaned = symbol.strip().upper().replace("/", "_").replace(" ", "_")
    if not cleaned:
        raise ValueError("Symbol must not be empty.")
    return cleaned


def symbol_slug(symbol: str) -> str:
    """Return a lowercase slug suitable for filenames."""
    return sanitize_symbol(symbol).lower().replace(".", "_")
