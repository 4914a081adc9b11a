"""
Incremental trade-history extraction from a live, re-rendering document tree.
"""

from trade_logger.engine import TradeHistoryLogger
from trade_logger.types import ScanResult, TradeDirection, TradeEntry, TradeItem, TradeSide

__all__ = [
    "ScanResult",
    "TradeDirection",
    "TradeEntry",
    "TradeHistoryLogger",
    "TradeItem",
    "TradeSide",
]
