"""
tests/test_engine.py

End-to-end behaviour of TradeHistoryLogger over a synthetic, lazily-growing page.
"""

from __future__ import annotations

import pytest
from bs4 import Tag

from trade_logger.config.models import TradeLoggerSettings
from trade_logger.document import SoupDocument
from trade_logger.engine import TradeHistoryLogger
from trade_logger.storage import InMemorySeenKeyStore
from trade_logger.types import TradeEntry


class LazyHost:
    """
    Serves one extra history row per load-more click, then removes the control.
    """

    def __init__(self, rows: list[str]) -> None:
        self.rows = rows
        self.document: SoupDocument | None = None

    def __call__(self, control: Tag) -> None:
        assert self.document is not None
        if not self.rows:
            self.document.remove(control)
            return
        self.document.append_html(".tradehistory_events", self.rows.pop(0))


@pytest.fixture()
def entries() -> list[TradeEntry]:
    return []


def _logger(document, scheduler, entries, **settings) -> TradeHistoryLogger:
    return TradeHistoryLogger(
        document=document,
        scheduler=scheduler,
        settings=TradeLoggerSettings(**settings),
        sink=entries.append,
    )


class TestTradeHistoryLogger:
    def test_init_scans_existing_entries(self, scheduler, entries, make_page, make_row) -> None:
        document = SoupDocument.from_html(make_page(make_row(partner="A"), make_row(partner="B")))
        trade_logger = _logger(document, scheduler, entries)

        result = trade_logger.init()

        assert result is not None and result.emitted == 2
        assert [entry.counterpart for entry in entries] == ["A", "B"]

    def test_init_twice_is_a_no_op(self, scheduler, entries, make_page, make_row) -> None:
        document = SoupDocument.from_html(make_page(make_row(), load_more=True))
        trade_logger = _logger(document, scheduler, entries)
        trade_logger.init()

        assert trade_logger.init() is None
        assert scheduler.pending == 1
        assert len(entries) == 1

    def test_lazy_loaded_rows_are_picked_up_after_debounce(
        self, scheduler, entries, make_page, make_row
    ) -> None:
        document = SoupDocument.from_html(make_page(make_row(partner="A")))
        trade_logger = _logger(document, scheduler, entries)
        trade_logger.init()

        document.append_html(".tradehistory_events", make_row(partner="B"))
        document.append_html(".tradehistory_events", make_row(partner="C"))
        assert len(entries) == 1

        scheduler.advance(0.2)
        assert [entry.counterpart for entry in entries] == ["A", "B", "C"]

    def test_pagination_drives_full_history_load(
        self, scheduler, entries, make_page, make_row
    ) -> None:
        host = LazyHost([make_row(partner="B"), make_row(partner="C")])
        document = SoupDocument.from_html(
            make_page(make_row(partner="A"), load_more=True), on_activate=host
        )
        host.document = document
        trade_logger = _logger(document, scheduler, entries)
        trade_logger.init()

        scheduler.advance(12.0)

        assert [entry.counterpart for entry in entries] == ["A", "B", "C"]
        assert trade_logger.pagination.activations == 3
        assert document.select(["a.load_more_history"]) == []

    def test_toggle_gates_emission_and_pagination(
        self, scheduler, entries, make_page, make_row
    ) -> None:
        host = LazyHost([make_row(partner="B")])
        document = SoupDocument.from_html(
            make_page(make_row(partner="A"), load_more=True), on_activate=host
        )
        host.document = document
        trade_logger = _logger(document, scheduler, entries, enabled_on_start=False)

        trade_logger.init()
        scheduler.advance(6.0)
        assert entries == []
        assert len(trade_logger.seen_store) == 1
        assert trade_logger.pagination.activations == 0

        assert trade_logger.toggle() is True
        scheduler.advance(3.2)
        assert [entry.counterpart for entry in entries] == ["B"]

    def test_shutdown_stops_all_timers(self, scheduler, entries, make_page, make_row) -> None:
        document = SoupDocument.from_html(make_page(make_row(), load_more=True))
        trade_logger = _logger(document, scheduler, entries)
        trade_logger.init()
        document.append_html(".tradehistory_events", make_row(partner="Late"))

        trade_logger.shutdown()
        scheduler.advance(30.0)

        assert scheduler.pending == 0
        assert len(entries) == 1

    def test_bounded_seen_store_from_settings(self, scheduler, entries, make_page, make_row) -> None:
        rows = [make_row(partner=name) for name in ("A", "B", "C")]
        document = SoupDocument.from_html(make_page(*rows))
        trade_logger = _logger(document, scheduler, entries, max_seen_keys=2)
        trade_logger.init()
        assert len(trade_logger.seen_store) == 2

    def test_injected_empty_store_is_used(self, scheduler, entries, make_page, make_row) -> None:
        store = InMemorySeenKeyStore()
        trade_logger = TradeHistoryLogger(
            document=SoupDocument.from_html(make_page(make_row())),
            scheduler=scheduler,
            seen_store=store,
            sink=entries.append,
        )
        trade_logger.init()
        assert trade_logger.seen_store is store
        assert len(store) == 1

    def test_init_after_shutdown_resumes_pagination(
        self, scheduler, entries, make_page, make_row
    ) -> None:
        host = LazyHost([make_row(partner="B")])
        document = SoupDocument.from_html(
            make_page(make_row(partner="A"), load_more=True), on_activate=host
        )
        host.document = document
        trade_logger = _logger(document, scheduler, entries)
        trade_logger.init()
        trade_logger.shutdown()

        trade_logger.init()
        assert trade_logger.pagination.bound

        scheduler.advance(3.2)
        assert trade_logger.pagination.activations == 1
        assert [entry.counterpart for entry in entries] == ["A", "B"]
