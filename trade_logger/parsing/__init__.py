"""
Parsing layer exports.
"""

from trade_logger.parsing.text import node_text, normalize
from trade_logger.parsing.trade_parsers import (
    TradeParsingLayer,
    derive_key,
    infer_direction,
    parse_timestamp,
)

__all__ = [
    "TradeParsingLayer",
    "derive_key",
    "infer_direction",
    "node_text",
    "normalize",
    "parse_timestamp",
]
