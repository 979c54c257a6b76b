"""Countdown mechanisms that drive the clock at a fixed cadence."""

from __future__ import annotations

import asyncio
import threading
from typing import Callable, Optional, Protocol


class Countdown(Protocol):
    """Repeating callback the clock arms while running and disarms on pause."""

    @property
    def is_armed(self) -> bool:
        ...

    def arm(self, callback: Callable[[], None], interval_seconds: float) -> None:
        ...

    def disarm(self) -> None:
        ...


class LoopCountdown:
    """Countdown scheduled on an asyncio event loop with `call_later`.

    The callback runs on the loop thread, the same context that delivers UI
    messages, so clock mutations stay serialized without locking.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop):
        self._loop = loop
        self._handle: Optional[asyncio.TimerHandle] = None
        self._callback: Optional[Callable[[], None]] = None
        self._interval_seconds = 0.0

    @property
    def is_armed(self) -> bool:
        return self._handle is not None

    def arm(self, callback: Callable[[], None], interval_seconds: float) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be greater than zero")
        self.disarm()
        self._callback = callback
        self._interval_seconds = float(interval_seconds)
        self._handle = self._loop.call_later(self._interval_seconds, self._fire)

    def disarm(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._callback = None

    def _fire(self) -> None:
        callback = self._callback
        if callback is None:
            return
        # Re-arm first so the callback may disarm (pause, phase change).
        self._handle = self._loop.call_later(self._interval_seconds, self._fire)
        callback()


class ThreadCountdown:
    """Countdown backed by daemon `threading.Timer` threads.

    For hosts without an event loop. The callback runs on a timer thread,
    so the host must not drive the same clock from another thread.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._callback: Optional[Callable[[], None]] = None
        self._interval_seconds = 0.0
        self._generation = 0

    @property
    def is_armed(self) -> bool:
        with self._lock:
            return self._timer is not None

    def arm(self, callback: Callable[[], None], interval_seconds: float) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be greater than zero")
        with self._lock:
            self._cancel_locked()
            self._callback = callback
            self._interval_seconds = float(interval_seconds)
            self._schedule_locked()

    def disarm(self) -> None:
        with self._lock:
            self._cancel_locked()

    def _schedule_locked(self) -> None:
        timer = threading.Timer(self._interval_seconds, self._fire, args=(self._generation,))
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _cancel_locked(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._timer = None
        self._callback = None
        # Timers already past their wait see a stale generation and do nothing.
        self._generation += 1

    def _fire(self, generation: int) -> None:
        with self._lock:
            callback = self._callback
            if callback is None or generation != self._generation:
                return
            # Re-arm first so the callback may disarm (pause, phase change).
            self._schedule_locked()
        callback()
