"""Periodic driver for the shipper.

Lifecycle is explicit: the host calls `start()` and must call `shutdown()`
before exiting (or use the scheduler as a context manager). Shutdown waits
for an in-flight tick and then runs one last tick so nothing buffered is
left behind on a clean exit.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from ..util.jsonlog import log_json, utc_iso
from .types import SchedulerState, TickResult


logger = logging.getLogger(__name__)


class ShipScheduler:
    """Single re-arming timer: wait `period`, tick, repeat. Ticks never overlap."""

    def __init__(self, tick: Callable[[], TickResult], period_seconds: float):
        if period_seconds <= 0:
            raise ValueError(f"period_seconds must be positive, got {period_seconds}")
        self._tick = tick
        self.period_seconds = float(period_seconds)
        self._state = SchedulerState.IDLE
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def state(self) -> SchedulerState:
        return self._state

    def start(self) -> None:
        with self._lock:
            if self._state == SchedulerState.RUNNING:
                return
            if self._state != SchedulerState.IDLE:
                raise RuntimeError(f"cannot start a scheduler in state {self._state.value}")
            self._state = SchedulerState.RUNNING
            self._thread = threading.Thread(target=self._loop, name="logship-scheduler", daemon=True)
            self._thread.start()
        logger.info(f"[Scheduler] Started (tick every {self.period_seconds}s)")

    def shutdown(self) -> None:
        """Stop rearming, wait for a running tick, then flush once more. Idempotent."""
        with self._lock:
            if self._state in (SchedulerState.STOPPING, SchedulerState.STOPPED):
                return
            self._state = SchedulerState.STOPPING

        self._stop_event.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

        logger.info("[Scheduler] Running final flush")
        self._run_once()

        with self._lock:
            self._state = SchedulerState.STOPPED
        logger.info("[Scheduler] Stopped")

    def _loop(self) -> None:
        while not self._stop_event.wait(self.period_seconds):
            self._run_once()

    def _run_once(self) -> Optional[TickResult]:
        try:
            result = self._tick()
        except Exception:
            logger.exception("[Scheduler] Tick raised; will retry next period")
            return None

        if not result.ok:
            logger.warning(f"[Scheduler] Tick incomplete: {result.reason}")
        if result.batches or not result.ok:
            log_json(
                logger,
                {
                    "ts": utc_iso(),
                    "status": result.status.value,
                    "batches": result.batches,
                    "events": result.events,
                },
                level=logging.INFO if result.ok else logging.WARNING,
            )
        return result

    def __enter__(self) -> "ShipScheduler":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()
