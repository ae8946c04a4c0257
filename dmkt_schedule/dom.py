"""
Depth-first lookups over a parsed BeautifulSoup tree.

These helpers know nothing about the schedule page; they only match
elements by tag name and exact ``class`` attribute value. Trees must come
from ``parse_html`` so that ``class`` is kept as the raw attribute string.
"""
from __future__ import annotations

from typing import List

from bs4 import BeautifulSoup, NavigableString, Tag  # type: ignore[import]
from bs4.element import Comment  # type: ignore[import]

from .errors import ScheduleStructureError


def parse_html(html: str | bytes) -> BeautifulSoup:
    """Parse without splitting ``class`` into a list: ``class=" num "`` stays ``" num "``."""
    return BeautifulSoup(html, "html.parser", multi_valued_attributes=None)


def _matches(node, tag: str, klass: str) -> bool:
    return isinstance(node, Tag) and node.name == tag and node.get("class") == klass


def find_first(node, tag: str, klass: str) -> Tag | None:
    """Pre-order search for the first ``<tag class="klass">``; ``None`` if absent."""
    if _matches(node, tag, klass):
        return node
    if not isinstance(node, Tag):
        return None
    for child in node.children:
        found = find_first(child, tag, klass)
        if found is not None:
            return found
    return None


def find_all(node, tag: str, klass: str) -> List[Tag]:
    """
    Every ``<tag class="klass">`` under *node* in document order.

    A matched element is not searched any further, so nested matches are
    not reported.
    """
    if _matches(node, tag, klass):
        return [node]
    if not isinstance(node, Tag):
        return []
    found: List[Tag] = []
    for child in node.children:
        found.extend(find_all(child, tag, klass))
    return found


def first_text(tag: Tag) -> str:
    """Text of the first child of *tag*, which must be a text node."""
    child = tag.contents[0] if tag.contents else None
    if not isinstance(child, NavigableString) or isinstance(child, Comment):
        raise ScheduleStructureError(
            f"<{tag.name} class={tag.get('class')!r}> does not start with a text node"
        )
    return str(child)


def collect_text(node, tag: str) -> List[str]:
    """First-child text of every ``<tag>`` under *node*, in document order."""
    if isinstance(node, Tag) and node.name == tag:
        return [first_text(node)]
    if not isinstance(node, Tag):
        return []
    texts: List[str] = []
    for child in node.children:
        texts.extend(collect_text(child, tag))
    return texts
