"""
Trade-history scanner: discovery, extraction and dedup in one pass.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from trade_logger.config.models import MAX_RAW_TEXT_LIMIT, TradeSelectors
from trade_logger.document import TradeDocument
from trade_logger.logging_utils import log_event
from trade_logger.parsing import TradeParsingLayer, derive_key
from trade_logger.state import ToggleState
from trade_logger.storage import SeenKeyStore
from trade_logger.types import ScanResult, TradeEntry

logger = logging.getLogger(__name__)

EntrySink = Callable[[TradeEntry], None]


class TradeScanner:
    """
    Finds candidate blocks, builds entries and emits the ones not seen before.

    Keys are recorded even while the toggle state is off, so disabling output
    never makes entries resurface after a re-render.
    """

    def __init__(
        self,
        *,
        document: TradeDocument,
        selectors: TradeSelectors,
        seen_store: SeenKeyStore,
        state: ToggleState,
        sink: EntrySink,
        raw_text_limit: int = MAX_RAW_TEXT_LIMIT,
    ) -> None:
        self._document = document
        self._selectors = selectors
        self._seen_store = seen_store
        self._state = state
        self._sink = sink
        self._raw_text_limit = raw_text_limit

    def scan(self) -> ScanResult:
        blocks = self._document.select(self._selectors.entry_blocks)
        new_entries: list[TradeEntry] = []
        emitted = 0

        for block in blocks:
            entry = TradeParsingLayer.build_entry(
                block,
                selectors=self._selectors,
                raw_text_limit=self._raw_text_limit,
            )
            key = derive_key(entry)
            if self._seen_store.has(key):
                continue
            self._seen_store.add(key)
            new_entries.append(entry)

            if not self._state.enabled:
                continue
            try:
                self._sink(entry)
                emitted += 1
            except Exception as exc:
                log_event(
                    logger,
                    logging.ERROR,
                    "trade_entry_emit_failed",
                    key=key,
                    error=str(exc),
                )

        log_event(
            logger,
            logging.DEBUG,
            "trade_scan_completed",
            blocks_found=len(blocks),
            new_entries=len(new_entries),
            emitted=emitted,
            seen_keys=len(self._seen_store),
        )
        return ScanResult(
            blocks_found=len(blocks),
            new_entries=tuple(new_entries),
            emitted=emitted,
        )
