"""
Queryable, observable document boundary and its BeautifulSoup adapter.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence

from bs4 import BeautifulSoup, PageElement, Tag

from trade_logger.logging_utils import log_event
from trade_logger.types import MutationRecord

logger = logging.getLogger(__name__)

MutationCallback = Callable[[list[MutationRecord]], None]

DISPLAY_NONE_REGEX = re.compile(r"(?:^|;)\s*display\s*:\s*none\b", flags=re.IGNORECASE)


class TradeDocument(ABC):
    """
    Host-agnostic view of the live page the logger observes.
    """

    @abstractmethod
    def select(self, selectors: Sequence[str]) -> list[Tag]:
        """
        Elements matching any selector, in document order, without duplicates.
        """

    def select_one(self, selectors: Sequence[str]) -> Tag | None:
        matches = self.select(selectors)
        return matches[0] if matches else None

    @abstractmethod
    def observe(self, callback: MutationCallback) -> Callable[[], None]:
        """
        Subscribe to subtree mutation batches and return an unsubscribe callable.
        """

    @abstractmethod
    def is_rendered(self, element: Tag) -> bool:
        """
        Whether the element is attached to the tree and would get a layout box.
        """

    @abstractmethod
    def activate(self, element: Tag) -> None:
        """
        Simulate a user click on the element.
        """


class SoupDocument(TradeDocument):
    """
    TradeDocument over a BeautifulSoup tree that the host mutates in place.
    """

    def __init__(
        self,
        soup: BeautifulSoup,
        *,
        on_activate: Callable[[Tag], None] | None = None,
    ) -> None:
        self._soup = soup
        self._on_activate = on_activate
        self._observers: list[MutationCallback] = []

    @classmethod
    def from_html(
        cls,
        html: str,
        *,
        on_activate: Callable[[Tag], None] | None = None,
    ) -> "SoupDocument":
        return cls(BeautifulSoup(html, "html.parser"), on_activate=on_activate)

    @property
    def soup(self) -> BeautifulSoup:
        return self._soup

    def select(self, selectors: Sequence[str]) -> list[Tag]:
        if not selectors:
            return []
        return self._soup.select(", ".join(selectors))

    def observe(self, callback: MutationCallback) -> Callable[[], None]:
        self._observers.append(callback)

        def unsubscribe() -> None:
            if callback in self._observers:
                self._observers.remove(callback)

        return unsubscribe

    def is_rendered(self, element: Tag) -> bool:
        node: PageElement | None = element
        while node is not None:
            if node is self._soup:
                return True
            if isinstance(node, Tag) and self._is_hidden(node):
                return False
            node = node.parent
        return False

    def activate(self, element: Tag) -> None:
        if self._on_activate is None:
            log_event(
                logger,
                logging.DEBUG,
                "control_activation_ignored",
                element=element.name,
            )
            return
        self._on_activate(element)

    def append_html(self, parent: str | Tag, html: str) -> list[PageElement]:
        """
        Append parsed markup to `parent` (an element or the first match of a
        selector) and notify observers.
        """

        if isinstance(parent, str):
            parent = self._require(parent)
        added = self._adopt(parent, html)
        self._notify([MutationRecord(added_nodes=tuple(added))])
        return added

    def replace_html(self, selector: str, html: str) -> list[PageElement]:
        """
        Replace the children of the first matching element, as a re-render would.
        """

        target = self._require(selector)
        removed = [child.extract() for child in list(target.contents)]
        added = self._adopt(target, html)
        self._notify(
            [MutationRecord(added_nodes=tuple(added), removed_nodes=tuple(removed))]
        )
        return added

    def remove(self, element: Tag) -> None:
        element.extract()
        self._notify([MutationRecord(removed_nodes=(element,))])

    def _require(self, selector: str) -> Tag:
        found = self._soup.select_one(selector)
        if found is None:
            raise ValueError(f"No element matches selector '{selector}'.")
        return found

    @staticmethod
    def _adopt(parent: Tag, html: str) -> list[PageElement]:
        fragment = BeautifulSoup(html, "html.parser")
        added = [node.extract() for node in list(fragment.contents)]
        for node in added:
            parent.append(node)
        return added

    def _notify(self, records: list[MutationRecord]) -> None:
        for callback in list(self._observers):
            callback(records)

    @staticmethod
    def _is_hidden(tag: Tag) -> bool:
        if tag.has_attr("hidden"):
            return True
        if tag.name == "input" and str(tag.get("type", "")).lower() == "hidden":
            return True
        style = tag.get("style")
        return isinstance(style, str) and DISPLAY_NONE_REGEX.search(style) is not None
