"""
BeautifulSoup-based heuristics that turn one trade-history block into a record.

Every parser here is total: missing or unexpected markup resolves to `None`,
a default, or a skipped item. Nothing raises past `build_entry`.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from datetime import datetime, timezone

from bs4 import Tag

from trade_logger.config.models import MAX_RAW_TEXT_LIMIT, TradeSelectors
from trade_logger.parsing.text import node_text, normalize
from trade_logger.types import TradeDirection, TradeEntry, TradeItem, TradeSide

DATE_PATTERNS = [
    "%Y-%m-%d",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%b %d %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%d %B, %Y",
    "%d %b, %Y",
    "%m/%d/%Y",
    "%d/%m/%Y",
]
TIME_PATTERNS = [
    "%I:%M%p",
    "%I:%M %p",
    "%H:%M:%S",
    "%H:%M",
]
DATETIME_PATTERNS = [
    *DATE_PATTERNS,
    *(f"{date} {time}" for date in DATE_PATTERNS for time in TIME_PATTERNS),
]

_MONTH = r"(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]*"
DATE_TOKEN_REGEX = re.compile(
    r"\b(?:\d{4}-\d{2}-\d{2}|\d{1,2}/\d{1,2}/\d{4}|"
    rf"{_MONTH}\s+\d{{1,2}},?\s+\d{{4}}|\d{{1,2}}\s+{_MONTH},?\s+\d{{4}})"
    r"(?:\s+\d{1,2}:\d{2}(?::\d{2})?\s?(?:am|pm)?)?",
    flags=re.IGNORECASE,
)
ISO_PREFIX_REGEX = re.compile(r"^\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}")
AT_SEPARATOR_REGEX = re.compile(r"\s*@\s*")
ABBREVIATION_DOT_REGEX = re.compile(r"(?<=[A-Za-z])\.")

RECEIVED_KEYWORDS = ("received",)
GIVEN_KEYWORDS = ("given", "gave")
GIVEN_ONLY_KEYWORDS = ("traded away",)
OUTGOING_ITEM_KEYWORDS = ("traded away", "given")

ITEM_NAME_ATTRIBUTES = ("data-economy-item", "data-tooltip", "title", "data-title")


def parse_timestamp(text: str | None) -> datetime | None:
    """
    Parse free-form page date text to a UTC datetime, or `None`.
    """

    compact = AT_SEPARATOR_REGEX.sub(" ", normalize(text))
    if not compact:
        return None

    if ISO_PREFIX_REGEX.match(compact):
        iso_value = compact[:-1] + "+00:00" if compact.endswith("Z") else compact
        try:
            return _to_utc(datetime.fromisoformat(iso_value))
        except OverflowError:
            # Valid ISO text whose UTC instant falls outside datetime's range.
            return None
        except ValueError:
            pass

    compact = ABBREVIATION_DOT_REGEX.sub("", compact)
    parsed = _parse_with_patterns(compact)
    if parsed is not None:
        return parsed

    for match in DATE_TOKEN_REGEX.finditer(compact):
        parsed = _parse_with_patterns(match.group(0))
        if parsed is not None:
            return parsed
    return None


def infer_direction(block_text: str) -> str:
    """
    Classify a whole entry from direction vocabulary in its text.
    """

    lowered = block_text.lower()
    received = any(keyword in lowered for keyword in RECEIVED_KEYWORDS)
    given = any(keyword in lowered for keyword in GIVEN_KEYWORDS)

    if received and given:
        return TradeDirection.MIXED
    if received:
        return TradeDirection.RECEIVED
    if given or any(keyword in lowered for keyword in GIVEN_ONLY_KEYWORDS):
        return TradeDirection.GIVEN
    return TradeDirection.UNKNOWN


def derive_key(entry: TradeEntry) -> str:
    """
    Canonical dedup key: timestamp, counterpart, direction and item names/sides.
    """

    timestamp = entry.timestamp.isoformat() if entry.timestamp else "raw"
    items = ",".join(f"{item.name}:{item.side}" for item in entry.items)
    return f"{timestamp}|{entry.counterpart or 'n/a'}|{entry.direction}|{items}"


class TradeParsingLayer:
    """
    Field extraction over one trade-history block.
    """

    @classmethod
    def build_entry(
        cls,
        block: Tag,
        *,
        selectors: TradeSelectors,
        raw_text_limit: int = MAX_RAW_TEXT_LIMIT,
    ) -> TradeEntry:
        date_node = cls._select_one(block, selectors.date_fields)
        block_text = node_text(block)
        limit = max(0, min(raw_text_limit, MAX_RAW_TEXT_LIMIT))

        return TradeEntry(
            timestamp=parse_timestamp(node_text(date_node)),
            counterpart=cls.extract_counterpart(block, selectors=selectors),
            direction=infer_direction(block_text),
            items=tuple(cls.extract_items(block, selectors=selectors)),
            raw_text=block_text[:limit],
        )

    @classmethod
    def extract_counterpart(cls, block: Tag, *, selectors: TradeSelectors) -> str | None:
        link = cls._select_one(block, selectors.profile_links)
        if link is None:
            return None
        text = node_text(link)
        if text:
            return text
        href = normalize(cls._attribute(link, "href"))
        return href or None

    @classmethod
    def extract_items(cls, block: Tag, *, selectors: TradeSelectors) -> list[TradeItem]:
        items: list[TradeItem] = []
        for node in cls._select(block, selectors.items):
            name = cls._item_name(node)
            if not name:
                continue

            app: str | None = None
            side = TradeSide.IN
            event = cls._closest(node, selectors.item_events)
            if event is not None:
                label = cls._select_one(event, selectors.event_labels)
                app = node_text(label) or None
                event_text = node_text(event).lower()
                if any(keyword in event_text for keyword in OUTGOING_ITEM_KEYWORDS):
                    side = TradeSide.OUT

            items.append(TradeItem(name=name, app=app, quantity=1, side=side))
        return items

    @classmethod
    def _item_name(cls, node: Tag) -> str:
        for attribute in ITEM_NAME_ATTRIBUTES:
            name = normalize(cls._attribute(node, attribute))
            if name:
                return name
        return node_text(node)

    @staticmethod
    def _attribute(node: Tag, name: str) -> str:
        value = node.get(name)
        if value is None:
            return ""
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    @staticmethod
    def _select(node: Tag, selectors: Sequence[str]) -> list[Tag]:
        if not selectors:
            return []
        return node.select(", ".join(selectors))

    @staticmethod
    def _select_one(node: Tag, selectors: Sequence[str]) -> Tag | None:
        if not selectors:
            return None
        return node.select_one(", ".join(selectors))

    @staticmethod
    def _closest(node: Tag, selectors: Sequence[str]) -> Tag | None:
        if not selectors:
            return None
        return node.css.closest(", ".join(selectors))


def _parse_with_patterns(value: str) -> datetime | None:
    for pattern in DATETIME_PATTERNS:
        try:
            return _to_utc(datetime.strptime(value, pattern))
        except ValueError:
            continue
    return None


def _to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
