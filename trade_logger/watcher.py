"""
Mutation watcher that schedules a debounced re-scan.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from trade_logger.document import TradeDocument
from trade_logger.logging_utils import log_event
from trade_logger.scheduling import Debouncer
from trade_logger.types import MutationRecord

logger = logging.getLogger(__name__)


class ChangeWatcher:
    """
    Arms the debouncer whenever a mutation batch adds nodes to the tree.
    """

    def __init__(self, *, document: TradeDocument, debouncer: Debouncer) -> None:
        self._document = document
        self._debouncer = debouncer
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def watching(self) -> bool:
        return self._unsubscribe is not None

    def start(self) -> None:
        if self._unsubscribe is not None:
            return
        self._unsubscribe = self._document.observe(self._on_mutations)

    def stop(self) -> None:
        if self._unsubscribe is None:
            return
        self._unsubscribe()
        self._unsubscribe = None
        self._debouncer.cancel()

    def _on_mutations(self, records: list[MutationRecord]) -> None:
        if not any(record.added_nodes for record in records):
            return
        self._debouncer.trigger()
        log_event(
            logger,
            logging.DEBUG,
            "rescan_scheduled",
            records=len(records),
            deadline=self._debouncer.deadline,
        )
