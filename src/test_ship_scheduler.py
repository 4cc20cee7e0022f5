"""Tests for the re-arming scheduler and its shutdown sequence."""

from __future__ import annotations

import threading

import pytest

from logship.core.scheduler import ShipScheduler
from logship.core.types import SchedulerState, TickResult, TickStatus


class CountingTick:

    def __init__(self, result=None, raise_first=False):
        self.calls = 0
        self.active = 0
        self.max_active = 0
        self.result = result or TickResult(status=TickStatus.OK)
        self.raise_first = raise_first
        self._lock = threading.Lock()
        self.reached = {n: threading.Event() for n in range(1, 10)}

    def __call__(self) -> TickResult:
        with self._lock:
            self.calls += 1
            self.active += 1
            self.max_active = max(self.max_active, self.active)
            n = self.calls
        try:
            if self.raise_first and n == 1:
                raise RuntimeError("boom")
            return self.result
        finally:
            with self._lock:
                self.active -= 1
            if n in self.reached:
                self.reached[n].set()


def test_rejects_non_positive_period():
    with pytest.raises(ValueError):
        ShipScheduler(CountingTick(), 0)


def test_rearms_after_each_tick_and_never_overlaps():
    tick = CountingTick()
    scheduler = ShipScheduler(tick, period_seconds=0.01)
    scheduler.start()
    assert scheduler.state == SchedulerState.RUNNING
    assert tick.reached[3].wait(5.0)
    scheduler.shutdown()

    assert scheduler.state == SchedulerState.STOPPED
    assert tick.max_active == 1


def test_shutdown_runs_final_flush_once():
    tick = CountingTick()
    scheduler = ShipScheduler(tick, period_seconds=60.0)
    scheduler.start()
    scheduler.shutdown()
    scheduler.shutdown()

    assert tick.calls == 1
    assert scheduler.state == SchedulerState.STOPPED


def test_shutdown_without_start_still_flushes():
    tick = CountingTick()
    scheduler = ShipScheduler(tick, period_seconds=60.0)
    scheduler.shutdown()
    assert tick.calls == 1
    assert scheduler.state == SchedulerState.STOPPED


def test_cannot_restart_after_shutdown():
    scheduler = ShipScheduler(CountingTick(), period_seconds=60.0)
    scheduler.shutdown()
    with pytest.raises(RuntimeError):
        scheduler.start()


def test_start_twice_is_a_noop():
    tick = CountingTick()
    scheduler = ShipScheduler(tick, period_seconds=60.0)
    scheduler.start()
    scheduler.start()
    scheduler.shutdown()
    assert tick.calls == 1


def test_tick_exception_does_not_stop_rearming():
    tick = CountingTick(raise_first=True)
    scheduler = ShipScheduler(tick, period_seconds=0.01)
    scheduler.start()
    try:
        assert tick.reached[3].wait(5.0)
    finally:
        scheduler.shutdown()


def test_failed_ticks_keep_rearming():
    tick = CountingTick(result=TickResult.failure("upload failed (503): unavailable"))
    scheduler = ShipScheduler(tick, period_seconds=0.01)
    scheduler.start()
    try:
        assert tick.reached[3].wait(5.0)
    finally:
        scheduler.shutdown()


def test_shutdown_waits_for_in_flight_tick():
    entered = threading.Event()
    release = threading.Event()
    calls = []

    def slow_tick() -> TickResult:
        calls.append(threading.current_thread().name)
        if len(calls) == 1:
            entered.set()
            release.wait(5.0)
        return TickResult(status=TickStatus.OK)

    scheduler = ShipScheduler(slow_tick, period_seconds=0.01)
    scheduler.start()
    assert entered.wait(5.0)

    stopper = threading.Thread(target=scheduler.shutdown)
    stopper.start()
    stopper.join(0.1)
    assert stopper.is_alive()
    assert scheduler.state == SchedulerState.STOPPING
    assert len(calls) == 1

    release.set()
    stopper.join(5.0)
    assert not stopper.is_alive()
    assert len(calls) == 2
    assert calls[1] == stopper.name
    assert scheduler.state == SchedulerState.STOPPED


def test_context_manager_shuts_down():
    tick = CountingTick()
    with ShipScheduler(tick, period_seconds=60.0) as scheduler:
        assert scheduler.state == SchedulerState.RUNNING
    assert scheduler.state == SchedulerState.STOPPED
    assert tick.calls == 1
