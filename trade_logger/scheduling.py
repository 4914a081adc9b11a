"""
Timer scheduling for the cooperative, single-threaded event loop.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Protocol

from trade_logger.logging_utils import log_event

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(ABC):
    """
    Clock and timer source. Callbacks always run on the scheduler's own turn.
    """

    @abstractmethod
    def now(self) -> float:
        """
        Current time in seconds on the scheduler's clock.
        """

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """
        Run `callback` once after `delay` seconds.
        """

    @abstractmethod
    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        """
        Run `callback` every `interval` seconds until the handle is cancelled.
        """


class _IntervalHandle:
    def __init__(
        self,
        *,
        loop: asyncio.AbstractEventLoop,
        interval: float,
        callback: Callable[[], None],
    ) -> None:
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._cancelled = False
        self._handle = loop.call_later(interval, self._run)

    def _run(self) -> None:
        if self._cancelled:
            return
        self._handle = self._loop.call_later(self._interval, self._run)
        self._callback()

    def cancel(self) -> None:
        self._cancelled = True
        self._handle.cancel()


class AsyncioScheduler(Scheduler):
    """
    Scheduler backed by an asyncio event loop.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop or asyncio.get_running_loop()

    def now(self) -> float:
        return self._loop.time()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return self._loop.call_later(max(0.0, delay), callback)

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        return _IntervalHandle(loop=self._loop, interval=interval, callback=callback)


class DebounceState:
    IDLE = "idle"
    ARMED = "armed"
    FIRED = "fired"


class Debouncer:
    """
    Collapses bursts of triggers into one trailing call of `action`.

    State machine: idle -> armed(deadline) -> fired. Triggering while armed
    moves the deadline out to `delay` seconds from now.
    """

    def __init__(
        self,
        *,
        scheduler: Scheduler,
        delay: float,
        action: Callable[[], object],
    ) -> None:
        self._scheduler = scheduler
        self._delay = max(0.0, delay)
        self._action = action
        self._state = DebounceState.IDLE
        self._deadline: float | None = None
        self._handle: TimerHandle | None = None

    @property
    def state(self) -> str:
        return self._state

    @property
    def deadline(self) -> float | None:
        return self._deadline

    def trigger(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._deadline = self._scheduler.now() + self._delay
        self._handle = self._scheduler.call_later(self._delay, self._fire)
        self._state = DebounceState.ARMED

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._deadline = None
        self._state = DebounceState.IDLE

    def _fire(self) -> None:
        self._handle = None
        self._deadline = None
        self._state = DebounceState.FIRED
        log_event(logger, logging.DEBUG, "debounce_fired")
        self._action()
