"""
Replay saved trade-history page snapshots through the logger.

The first snapshot is the initial page. Each activation of its load-more
control appends the entry blocks of the next snapshot, the way the live page
lazy-loads older history. The control is removed once every snapshot is in.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from collections import deque
from collections.abc import Sequence
from dataclasses import replace
from pathlib import Path

from bs4 import BeautifulSoup, Tag

from trade_logger.config import get_trade_logger_settings, load_selector_config, load_selectors
from trade_logger.config.models import TradeLoggerSettings, TradeSelectors
from trade_logger.document import SoupDocument
from trade_logger.engine import TradeHistoryLogger
from trade_logger.logging_utils import configure_logging, log_event
from trade_logger.scheduling import AsyncioScheduler
from trade_logger.sinks import JsonLinesEntrySink

logger = logging.getLogger(__name__)


def _top_level(blocks: list[Tag]) -> list[Tag]:
    ids = {id(block) for block in blocks}
    return [block for block in blocks if not any(id(parent) in ids for parent in block.parents)]


class SnapshotPager:
    """
    Host-side load-more handler that serves the remaining snapshots in order.
    """

    def __init__(
        self,
        *,
        pages: Sequence[str],
        selectors: TradeSelectors,
        finished: asyncio.Event,
    ) -> None:
        self._pages = deque(pages)
        self._selectors = selectors
        self._finished = finished
        self._document: SoupDocument | None = None

    def attach(self, document: SoupDocument) -> None:
        self._document = document

    def __call__(self, control: Tag) -> None:
        document = self._document
        if document is None:
            return
        if not self._pages:
            document.remove(control)
            self._finished.set()
            return

        fragment = BeautifulSoup(self._pages.popleft(), "html.parser")
        group = ", ".join(self._selectors.entry_blocks)
        blocks = _top_level(fragment.select(group))
        existing = _top_level(document.select(self._selectors.entry_blocks))
        if existing and existing[-1].parent is not None:
            parent = existing[-1].parent
        else:
            parent = document.soup.body or document.soup
        document.append_html(parent, "".join(str(block) for block in blocks))


async def replay(
    pages: Sequence[str],
    *,
    settings: TradeLoggerSettings,
    selectors: TradeSelectors,
) -> int:
    """
    Run the logger over the snapshots and return the number of seen entries.
    """

    finished = asyncio.Event()
    pager = SnapshotPager(pages=pages[1:], selectors=selectors, finished=finished)
    document = SoupDocument.from_html(pages[0], on_activate=pager)
    pager.attach(document)

    trade_logger = TradeHistoryLogger(
        document=document,
        scheduler=AsyncioScheduler(),
        settings=settings,
        selectors=selectors,
        sink=JsonLinesEntrySink(),
    )
    trade_logger.init()
    try:
        if trade_logger.enabled and trade_logger.pagination.bound:
            timeout = (
                settings.load_more_interval_seconds * (len(pages) + 2) + settings.debounce_seconds
            )
            try:
                await asyncio.wait_for(finished.wait(), timeout=timeout)
            except asyncio.TimeoutError:
                log_event(
                    logger,
                    logging.WARNING,
                    "replay_timed_out",
                    timeout_seconds=timeout,
                    activations=trade_logger.pagination.activations,
                )
        trade_logger.scan()
    finally:
        trade_logger.shutdown()
    return len(trade_logger.seen_store)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Extract trade entries from saved history pages.")
    parser.add_argument(
        "pages",
        nargs="+",
        help="HTML snapshots; the first is the initial page, the rest are load-more pages.",
    )
    parser.add_argument(
        "--selectors",
        dest="selectors",
        default=None,
        help="Optional JSON file overriding the default selector lists.",
    )
    parser.add_argument(
        "--disabled",
        action="store_true",
        help="Start with output disabled (entries are still recorded as seen).",
    )
    args = parser.parse_args(argv)

    settings = get_trade_logger_settings()
    configure_logging(settings.log_level)
    if args.disabled:
        settings = replace(settings, enabled_on_start=False)
    if args.selectors:
        selectors = load_selector_config(config_path=args.selectors)
    else:
        selectors = load_selectors(settings)

    pages = [Path(path).read_text(encoding="utf-8") for path in args.pages]
    asyncio.run(replay(pages, settings=settings, selectors=selectors))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
