"""Typed view over a rendered HTML document."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional

from bs4 import BeautifulSoup, Tag
from bs4.element import (
    CData,
    NavigableString,
    RubyParenthesisString,
    RubyTextString,
    Script,
    Stylesheet,
)

# string types that a browser counts in textContent; comments and template bodies are excluded
TEXT_CONTENT_TYPES = (NavigableString, CData, Script, Stylesheet, RubyTextString, RubyParenthesisString)


@dataclass(frozen=True)
class Element:
    """Read-only wrapper around a single DOM element."""

    _tag: Tag

    @property
    def name(self) -> str:
        return self._tag.name

    @property
    def text(self) -> str:
        """Trimmed text content of the element and all its descendants, script and style included."""
        return self._tag.get_text(types=TEXT_CONTENT_TYPES).strip()

    def attr(self, name: str) -> Optional[str]:
        value = self._tag.get(name)
        if isinstance(value, list):
            return " ".join(value)
        return value

    def select_one(self, selector: str) -> Optional["Element"]:
        found = self._tag.select_one(selector)
        return Element(found) if found is not None else None

    def closest(self, name: str) -> Optional["Element"]:
        parent = self._tag.find_parent(name)
        return Element(parent) if parent is not None else None


class HtmlDocument:
    """Snapshot of a rendered page that extractors can traverse."""

    def __init__(self, url: str, html: str) -> None:
        self.url = url
        self._soup = BeautifulSoup(html, "html.parser")

    def iter_elements(self) -> Iterator[Element]:
        """Every element in document (pre-order) traversal order."""
        for tag in self._soup.find_all(True):
            yield Element(tag)

    def select(self, selector: str) -> List[Element]:
        return [Element(tag) for tag in self._soup.select(selector)]

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"HtmlDocument(url={self.url!r})"
