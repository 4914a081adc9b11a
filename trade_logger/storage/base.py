"""
Storage interface for dedup keys of already-observed trade entries.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class SeenKeyStore(ABC):
    """
    Set-membership store for canonical entry keys.
    """

    @abstractmethod
    def has(self, key: str) -> bool:
        """
        Return whether `key` was recorded earlier in the session.
        """

    @abstractmethod
    def add(self, key: str) -> None:
        """
        Record `key` as seen. Idempotent.
        """

    @abstractmethod
    def __len__(self) -> int: ...
