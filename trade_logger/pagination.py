"""
Periodic activation of the page's "load more history" control.
"""

from __future__ import annotations

import logging

from bs4 import Tag

from trade_logger.config.models import TradeSelectors
from trade_logger.document import TradeDocument
from trade_logger.logging_utils import log_event
from trade_logger.scheduling import Scheduler, TimerHandle
from trade_logger.state import ToggleState

logger = logging.getLogger(__name__)

BOUND_ATTRIBUTE = "data-sthl-bound"


class PaginationDriver:
    """
    Clicks a visible load-more control once per interval while logging is on.
    """

    def __init__(
        self,
        *,
        document: TradeDocument,
        selectors: TradeSelectors,
        state: ToggleState,
        scheduler: Scheduler,
        interval: float = 3.0,
    ) -> None:
        self._document = document
        self._selectors = selectors
        self._state = state
        self._scheduler = scheduler
        self._interval = interval
        self._control: Tag | None = None
        self._handle: TimerHandle | None = None
        self.activations = 0

    def start(self) -> bool:
        """
        Bind the load-more control and start the interval; False if not bound.
        """

        control = self._document.select_one(self._selectors.load_more)
        if control is None:
            log_event(logger, logging.DEBUG, "load_more_control_not_found")
            return False
        if control.get(BOUND_ATTRIBUTE):
            return False

        control[BOUND_ATTRIBUTE] = "1"
        self._control = control
        self._handle = self._scheduler.call_every(self._interval, self._tick)
        log_event(
            logger,
            logging.INFO,
            "load_more_control_bound",
            element=control.name,
            interval_seconds=self._interval,
        )
        return True

    @property
    def bound(self) -> bool:
        return self._handle is not None

    def stop(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        if self._control is not None:
            del self._control[BOUND_ATTRIBUTE]
            self._control = None

    def _tick(self) -> None:
        control = self._control
        if control is None or not self._state.enabled:
            return
        if not self._document.is_rendered(control):
            return
        try:
            self._document.activate(control)
        except Exception as exc:
            log_event(
                logger,
                logging.ERROR,
                "control_activation_failed",
                error=str(exc),
            )
            return
        self.activations += 1
        log_event(
            logger,
            logging.DEBUG,
            "load_more_control_activated",
            activations=self.activations,
        )
