"""
Whitespace cleanup shared by every parser.
"""

from __future__ import annotations

import re

from bs4 import Tag

WHITESPACE_REGEX = re.compile(r"\s+")


def normalize(value: str | None) -> str:
    """
    Collapse whitespace runs to one space and trim; `None` becomes "".
    """

    return WHITESPACE_REGEX.sub(" ", value or "").strip()


def node_text(node: Tag | None) -> str:
    if node is None:
        return ""
    return normalize(node.get_text(" "))
