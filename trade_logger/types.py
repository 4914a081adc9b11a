"""
Shared trade-history data models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from bs4 import PageElement


class TradeDirection:
    RECEIVED = "received"
    GIVEN = "given"
    MIXED = "mixed"
    UNKNOWN = "unknown"


class TradeSide:
    IN = "in"
    OUT = "out"


@dataclass(frozen=True)
class TradeItem:
    """
    One line item of a trade, named from the page markup.
    """

    name: str
    app: str | None = None
    quantity: int = 1
    side: str = TradeSide.IN

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "app": self.app,
            "quantity": self.quantity,
            "side": self.side,
        }


@dataclass(frozen=True)
class TradeEntry:
    """
    One structured trade-history record extracted from a page block.
    """

    timestamp: datetime | None
    counterpart: str | None
    direction: str
    items: tuple[TradeItem, ...] = ()
    raw_text: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "counterpart": self.counterpart,
            "direction": self.direction,
            "items": [item.to_dict() for item in self.items],
            "raw_text": self.raw_text,
        }


@dataclass(frozen=True)
class ScanResult:
    """
    Outcome for one scan pass over the document.
    """

    blocks_found: int
    new_entries: tuple[TradeEntry, ...] = ()
    emitted: int = 0


@dataclass(frozen=True)
class MutationRecord:
    """
    One tree change reported by the document to its observers.
    """

    added_nodes: tuple[PageElement, ...] = field(default_factory=tuple)
    removed_nodes: tuple[PageElement, ...] = field(default_factory=tuple)
