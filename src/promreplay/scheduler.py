"""Per-series replay scheduling.

Every series is driven by its own daemon thread that wakes up once per
interval and applies one tick to the series' gauge cell. Threads never share a
cell, so no locking is needed around value updates.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import datetime

from promreplay.logger import logger
from promreplay.models.family import RegisteredFamily
from promreplay.models.override import GaugeCell
from promreplay.models.series import Series, tick

__all__ = ["Clock", "SeriesWorker", "local_now", "workers_for"]

Clock = Callable[[], datetime]


def local_now() -> datetime:
    """Current local time, timezone-aware."""
    return datetime.now().astimezone()


class SeriesWorker:
    """Background worker that ticks one series at a fixed period.

    The worker waits on a stop event between ticks, so setting the event ends
    the loop at the next tick boundary. Several workers usually share one event.
    """

    def __init__(
        self,
        family_name: str,
        series: Series,
        gauge: GaugeCell,
        stop_event: threading.Event | None = None,
        clock: Clock = local_now,
    ) -> None:
        """Initialize the worker.

        Args:
            family_name: Name of the metric family the series belongs to
            series: Series to tick
            gauge: The series' gauge cell, already seeded with the initial value
            stop_event: Shared stop signal (a private one is created if omitted)
            clock: Source of the instant passed to each tick
        """
        self.family_name = family_name
        self.series = series
        self.gauge = gauge
        self._stop_event = stop_event if stop_event is not None else threading.Event()
        self._clock = clock
        self._thread: threading.Thread | None = None
        self.ticks = 0

    @property
    def name(self) -> str:
        return self.series.describe(self.family_name)

    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the background worker thread."""
        if self.is_alive():
            return

        self._thread = threading.Thread(target=self._run, name=f"replay {self.name}", daemon=True)
        self._thread.start()
        logger.debug(f"SeriesWorker started for {self.name} every {self.series.interval:g}s")

    def stop(self, timeout: float = 5.0) -> None:
        """Stop the background worker thread.

        Args:
            timeout: Maximum time to wait for thread to stop
        """
        self._stop_event.set()
        self.join(timeout)

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None and self._thread.is_alive():
            self._thread.join(timeout=timeout)
        if self._thread is not None and not self._thread.is_alive():
            self._thread = None
            logger.debug(f"SeriesWorker stopped for {self.name}")

    def _run(self) -> None:
        """Main worker loop."""
        # Event.wait returns True once the stop signal is set
        while not self._stop_event.wait(timeout=self.series.interval):
            tick(self.series, self.gauge, self._clock(), family_name=self.family_name)
            self.ticks += 1


def workers_for(
    registered: list[RegisteredFamily],
    stop_event: threading.Event,
    clock: Clock = local_now,
) -> list[SeriesWorker]:
    """Build one worker per registered series, sharing ``stop_event``.

    Args:
        registered: Families returned by registration, in config order
        stop_event: Shared stop signal
        clock: Source of the instant passed to each tick

    Returns:
        Unstarted workers.
    """
    return [
        SeriesWorker(entry.family.name, series, cell, stop_event=stop_event, clock=clock)
        for entry in registered
        for series, cell in entry.cells
    ]
