"""
Config helpers for the trade logger.
"""

from trade_logger.config.loader import (
    get_trade_logger_settings,
    load_selector_config,
    load_selectors,
    read_trade_logger_settings,
)
from trade_logger.config.models import TradeLoggerSettings, TradeSelectors

__all__ = [
    "TradeLoggerSettings",
    "TradeSelectors",
    "get_trade_logger_settings",
    "load_selector_config",
    "load_selectors",
    "read_trade_logger_settings",
]
