"""
In-memory dedup key store scoped to one page session.
"""

from __future__ import annotations

from collections import OrderedDict

from trade_logger.storage.base import SeenKeyStore


class InMemorySeenKeyStore(SeenKeyStore):
    """
    Append-only key set. With `max_keys` set, the oldest keys are evicted first.
    """

    def __init__(self, *, max_keys: int | None = None) -> None:
        self._max_keys = max_keys if max_keys and max_keys > 0 else None
        self._keys: OrderedDict[str, None] = OrderedDict()

    def has(self, key: str) -> bool:
        return key in self._keys

    def add(self, key: str) -> None:
        if key in self._keys:
            return
        self._keys[key] = None
        if self._max_keys is not None:
            while len(self._keys) > self._max_keys:
                self._keys.popitem(last=False)

    def __len__(self) -> int:
        return len(self._keys)
