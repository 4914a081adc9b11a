"""
Output boundaries for newly discovered trade entries.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import TextIO

from trade_logger.logging_utils import log_event
from trade_logger.types import TradeEntry

logger = logging.getLogger(__name__)


class LoggingEntrySink:
    """
    Emit each entry as one structured log event.
    """

    def __init__(self, target: logging.Logger | None = None, level: int = logging.INFO) -> None:
        self._logger = target or logger
        self._level = level

    def __call__(self, entry: TradeEntry) -> None:
        log_event(self._logger, self._level, "trade_entry_discovered", **entry.to_dict())


class JsonLinesEntrySink:
    """
    Write each entry as one JSON line to a text stream.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream or sys.stdout

    def __call__(self, entry: TradeEntry) -> None:
        self._stream.write(json.dumps(entry.to_dict(), sort_keys=True) + "\n")
        self._stream.flush()
