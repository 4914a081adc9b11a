"""
Storage layer exports.
"""

from trade_logger.storage.base import SeenKeyStore
from trade_logger.storage.in_memory import InMemorySeenKeyStore

__all__ = ["InMemorySeenKeyStore", "SeenKeyStore"]
