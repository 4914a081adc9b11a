"""
Trade-history logger: wires scanning, change watching and pagination.
"""

from __future__ import annotations

import logging

from trade_logger.config.models import TradeLoggerSettings, TradeSelectors
from trade_logger.document import TradeDocument
from trade_logger.logging_utils import log_event
from trade_logger.pagination import PaginationDriver
from trade_logger.scanner import EntrySink, TradeScanner
from trade_logger.scheduling import Debouncer, Scheduler
from trade_logger.sinks import LoggingEntrySink
from trade_logger.state import ToggleState
from trade_logger.storage import InMemorySeenKeyStore, SeenKeyStore
from trade_logger.types import ScanResult
from trade_logger.watcher import ChangeWatcher

logger = logging.getLogger(__name__)


class TradeHistoryLogger:
    """
    Single entry point for a host: `init()` once the page is ready.
    """

    def __init__(
        self,
        *,
        document: TradeDocument,
        scheduler: Scheduler,
        settings: TradeLoggerSettings | None = None,
        selectors: TradeSelectors | None = None,
        sink: EntrySink | None = None,
        seen_store: SeenKeyStore | None = None,
        state: ToggleState | None = None,
    ) -> None:
        self._settings = settings or TradeLoggerSettings()
        self._selectors = selectors or TradeSelectors()
        self._state = state or ToggleState(enabled=self._settings.enabled_on_start)
        if seen_store is None:
            seen_store = InMemorySeenKeyStore(max_keys=self._settings.max_seen_keys)
        self._seen_store = seen_store
        self._scanner = TradeScanner(
            document=document,
            selectors=self._selectors,
            seen_store=self._seen_store,
            state=self._state,
            sink=sink or LoggingEntrySink(),
            raw_text_limit=self._settings.raw_text_limit,
        )
        self._debouncer = Debouncer(
            scheduler=scheduler,
            delay=self._settings.debounce_seconds,
            action=self._scanner.scan,
        )
        self._watcher = ChangeWatcher(document=document, debouncer=self._debouncer)
        self._pagination = PaginationDriver(
            document=document,
            selectors=self._selectors,
            state=self._state,
            scheduler=scheduler,
            interval=self._settings.load_more_interval_seconds,
        )
        self._initialized = False

    @property
    def enabled(self) -> bool:
        return self._state.enabled

    @property
    def state(self) -> ToggleState:
        return self._state

    @property
    def seen_store(self) -> SeenKeyStore:
        return self._seen_store

    @property
    def debouncer(self) -> Debouncer:
        return self._debouncer

    @property
    def pagination(self) -> PaginationDriver:
        return self._pagination

    def init(self) -> ScanResult | None:
        if self._initialized:
            return None
        self._initialized = True

        result = self._scanner.scan()
        self._watcher.start()
        paginating = self._pagination.start()
        log_event(
            logger,
            logging.INFO,
            "trade_logger_initialized",
            blocks_found=result.blocks_found,
            new_entries=len(result.new_entries),
            paginating=paginating,
            enabled=self._state.enabled,
        )
        return result

    def scan(self) -> ScanResult:
        return self._scanner.scan()

    def toggle(self) -> bool:
        return self._state.toggle()

    def shutdown(self) -> None:
        self._watcher.stop()
        self._debouncer.cancel()
        self._pagination.stop()
        self._initialized = False
        log_event(logger, logging.INFO, "trade_logger_stopped", seen_keys=len(self._seen_store))
