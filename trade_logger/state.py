"""
On/off state shared by the scanner and the pagination driver.
"""

from __future__ import annotations

import logging

from trade_logger.logging_utils import log_event

logger = logging.getLogger(__name__)


class ToggleState:
    """
    Single boolean written by the host's on/off control and read by the core.
    """

    def __init__(self, *, enabled: bool = True) -> None:
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, value: bool) -> None:
        if value == self._enabled:
            return
        self._enabled = value
        log_event(
            logger,
            logging.INFO,
            "trade_logging_toggled",
            enabled=value,
        )

    def toggle(self) -> bool:
        self.set_enabled(not self._enabled)
        return self._enabled
