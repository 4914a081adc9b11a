"""
Trade logger configuration models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

MAX_RAW_TEXT_LIMIT = 500


@dataclass(frozen=True)
class TradeSelectors:
    """
    CSS selector lists used to locate trade-history structures in the page.

    Each list is joined into one selector group, so matches come back in
    document order without duplicates.
    """

    entry_blocks: list[str] = field(
        default_factory=lambda: [
            ".tradehistory_event",
            ".inventory_history_row",
            ".tradehistory_event_row",
        ]
    )
    date_fields: list[str] = field(
        default_factory=lambda: [
            ".tradehistory_date",
            ".tradehistory_timestamp",
            ".date",
        ]
    )
    profile_links: list[str] = field(
        default_factory=lambda: [
            'a[href*="/profiles/"]',
            'a[href*="/id/"]',
        ]
    )
    items: list[str] = field(
        default_factory=lambda: [
            ".history_item",
            ".tradehistory_item",
            ".item",
        ]
    )
    item_events: list[str] = field(default_factory=lambda: [".tradehistory_event"])
    event_labels: list[str] = field(
        default_factory=lambda: [
            ".tradehistory_event_description",
            ".tradehistory_event_heading",
        ]
    )
    load_more: list[str] = field(
        default_factory=lambda: [
            "a.load_more_history",
            ".load_more_button",
            ".btnv6_lightblue_blue",
        ]
    )


@dataclass(frozen=True)
class TradeLoggerSettings:
    """
    Runtime settings for the trade-history logger.
    """

    debounce_seconds: float = 0.2
    load_more_interval_seconds: float = 3.0
    raw_text_limit: int = MAX_RAW_TEXT_LIMIT
    enabled_on_start: bool = True
    max_seen_keys: int = 0
    selectors_path: str | None = None
    log_level: str = "INFO"
