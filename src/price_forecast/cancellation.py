"""Cooperative cancellation shared between the pipeline and its workers."""

from __future__ import annotations

import threading
from typing import Optional

from .errors import CancelledError


class CancellationToken:
    """
    Thread-safe cancellation flag.

    A child token reports cancelled when either itself or its parent was
    cancelled, which lets the pipeline stop sibling workers without touching the
    caller's token.
    """

    def __init__(self, parent: Optional["CancellationToken"] = None) -> None:
        self._event = threading.Event()
        self._parent = parent
        self.reason: str | None = None

    def cancel(self, reason: str = "cancelled by caller") -> None:
        if not self._event.is_set():
            self.reason = reason
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._parent is not None and self._parent.cancelled

    def raise_if_cancelled(self) -> None:
        if not self.cancelled:
            return
        reason = self.reason
        if reason is None and self._parent is not None:
            reason = self._parent.reason
        raise CancelledError(reason or "cancelled")

    def child(self) -> "CancellationToken":
        return CancellationToken(parent=self)
