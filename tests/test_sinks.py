"""
tests/test_sinks.py

Output sinks and the toggle state.
"""

from __future__ import annotations

import io
import json
import logging
from datetime import datetime, timezone

import pytest

from trade_logger.sinks import JsonLinesEntrySink, LoggingEntrySink
from trade_logger.state import ToggleState
from trade_logger.types import TradeDirection, TradeEntry, TradeItem, TradeSide


@pytest.fixture()
def entry() -> TradeEntry:
    return TradeEntry(
        timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
        counterpart="Alice",
        direction=TradeDirection.RECEIVED,
        items=(TradeItem(name="Key", app="TF2", side=TradeSide.IN),),
        raw_text="Jan 1, 2024 Alice received Key",
    )


class TestSinks:
    def test_json_lines_sink_writes_one_line_per_entry(self, entry: TradeEntry) -> None:
        stream = io.StringIO()
        sink = JsonLinesEntrySink(stream)
        sink(entry)
        sink(entry)

        lines = stream.getvalue().splitlines()
        assert len(lines) == 2
        assert json.loads(lines[0]) == entry.to_dict()

    def test_logging_sink_emits_structured_event(
        self, entry: TradeEntry, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO, logger="trade_logger.sinks"):
            LoggingEntrySink()(entry)

        (record,) = caplog.records
        payload = json.loads(record.getMessage())
        assert payload["event"] == "trade_entry_discovered"
        assert payload["counterpart"] == "Alice"
        assert payload["timestamp"] == "2024-01-01T00:00:00+00:00"


class TestToggleState:
    def test_toggle_flips_and_returns_new_value(self) -> None:
        state = ToggleState()
        assert state.enabled is True
        assert state.toggle() is False
        assert state.enabled is False
        assert state.toggle() is True

    def test_changes_are_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        state = ToggleState(enabled=True)
        with caplog.at_level(logging.INFO, logger="trade_logger.state"):
            state.set_enabled(True)
            state.set_enabled(False)

        assert len(caplog.records) == 1
        assert json.loads(caplog.records[0].getMessage()) == {
            "enabled": False,
            "event": "trade_logging_toggled",
        }
