"""
Shared fixtures: a virtual-clock scheduler and synthetic trade-history pages.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable

import pytest

from trade_logger.config.models import TradeSelectors
from trade_logger.scheduling import Scheduler


class ManualTimer:
    def __init__(
        self,
        *,
        due: float,
        seq: int,
        callback: Callable[[], None],
        interval: float | None = None,
    ) -> None:
        self.due = due
        self.seq = seq
        self.callback = callback
        self.interval = interval
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler(Scheduler):
    """
    Deterministic scheduler; time only moves when a test calls `advance`.
    """

    def __init__(self) -> None:
        self._now = 0.0
        self._seq = itertools.count()
        self._timers: list[ManualTimer] = []

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(due=self._now + max(0.0, delay), seq=next(self._seq), callback=callback)
        self._timers.append(timer)
        return timer

    def call_every(self, interval: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(
            due=self._now + interval,
            seq=next(self._seq),
            callback=callback,
            interval=interval,
        )
        self._timers.append(timer)
        return timer

    @property
    def pending(self) -> int:
        return sum(1 for timer in self._timers if not timer.cancelled)

    def advance(self, seconds: float) -> None:
        target = self._now + seconds + 1e-9
        while True:
            due = [t for t in self._timers if not t.cancelled and t.due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: (t.due, t.seq))
            self._now = timer.due
            if timer.interval is None:
                timer.cancelled = True
            else:
                timer.due += timer.interval
            timer.callback()
        self._timers = [t for t in self._timers if not t.cancelled]
        self._now = target


def trade_row(
    *,
    date: str = "3 Jan, 2024 11:05pm",
    partner: str = "Bob",
    partner_href: str = "https://steamcommunity.com/id/bob",
    verb: str = "You received:",
    item: str = "Mann Co. Supply Crate Key",
) -> str:
    return f"""
    <div class="tradehistory_row tradehistory_event_row">
      <div class="tradehistory_date">{date}</div>
      <div class="tradehistory_event_description">
        Trade with <a href="{partner_href}">{partner}</a>
      </div>
      <div>{verb}</div>
      <span class="history_item" data-economy-item="{item}"></span>
    </div>
    """


def history_page(*rows: str, load_more: bool = False) -> str:
    button = '<a class="load_more_history" href="#">Load More</a>' if load_more else ""
    return f"""
    <html><body>
      <div class="tradehistory_page">
        <div class="tradehistory_events">{''.join(rows)}</div>
        {button}
      </div>
    </body></html>
    """


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def selectors() -> TradeSelectors:
    return TradeSelectors()


@pytest.fixture()
def make_row() -> Callable[..., str]:
    return trade_row


@pytest.fixture()
def make_page() -> Callable[..., str]:
    return history_page
