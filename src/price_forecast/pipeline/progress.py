"""Progress sinks receiving per-variant training and forecast events."""

from __future__ import annotations

import queue
from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol

from ..utils.logger import setup_logger

logger = setup_logger("progress")


class ProgressSink(Protocol):
    def on_epoch_end(self, variant: str, epoch: int, metrics: Dict[str, float]) -> None:
        ...

    def on_forecast_step(self, variant: str, step: int, value: float) -> None:
        ...


@dataclass(frozen=True)
class ProgressEvent:
    kind: str  # "epoch" or "forecast_step"
    variant: str
    index: int
    metrics: Dict[str, float] = field(default_factory=dict)
    value: Optional[float] = None


class LoggingProgressSink:
    """Default sink: one structured log line per event."""

    def __init__(self, total_epochs: int | None = None) -> None:
        self.total_epochs = total_epochs

    def on_epoch_end(self, variant: str, epoch: int, metrics: Dict[str, float]) -> None:
        extra = {"variant": variant, "epoch": epoch, "metrics": metrics}
        if self.total_epochs:
            extra["percent"] = round(epoch / self.total_epochs * 100, 1)
        logger.info("Epoch complete", extra=extra)

    def on_forecast_step(self, variant: str, step: int, value: float) -> None:
        logger.info("Forecast step", extra={"variant": variant, "step": step, "value": value})


class QueueProgressSink:
    """
    Pushes events onto a thread-safe queue.

    Workers training in parallel each put their own events in epoch order, so a
    consumer filtering by variant always sees a monotonic stream.
    """

    def __init__(self, events: "queue.Queue[ProgressEvent] | None" = None) -> None:
        self.events: "queue.Queue[ProgressEvent]" = events if events is not None else queue.Queue()

    def on_epoch_end(self, variant: str, epoch: int, metrics: Dict[str, float]) -> None:
        self.events.put(ProgressEvent(kind="epoch", variant=variant, index=epoch, metrics=dict(metrics)))

    def on_forecast_step(self, variant: str, step: int, value: float) -> None:
        self.events.put(ProgressEvent(kind="forecast_step", variant=variant, index=step, value=value))

    def drain(self) -> list[ProgressEvent]:
        drained = []
        while True:
            try:
                drained.append(self.events.get_nowait())
            except queue.Empty:
                return drained
