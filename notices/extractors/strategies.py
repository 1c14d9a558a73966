"""Candidate extraction strategies.

``all-elements`` emits one candidate per element whose trimmed text is longer
than ``MIN_TEXT_LENGTH``. Ancestors and descendants share text, so the output
overlaps heavily. ``structural-selectors`` targets notice-like containers
instead. Neither strategy raises on an empty page.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, Protocol
from urllib.parse import urljoin, urlparse

from notices.models.domain import RawItem
from notices.render.document import Element, HtmlDocument
from notices.settings import Settings

MIN_TEXT_LENGTH = 10
MAX_TITLE_CHARS = 200
MAX_CONTENT_CHARS = 1000

STRUCTURAL_SELECTORS = (
    "article",
    ".news-item",
    ".notification",
    ".update-item",
    ".content-item",
    'li a[href*="notification"]',
    'li a[href*="news"]',
    ".list-group-item",
)
TITLE_SELECTOR = "h1, h2, h3, h4, h5, h6, .title, .heading"
CONTENT_SELECTOR = "p, .content, .description"


class ExtractionStrategy(Protocol):
    name: str

    def extract(self, doc: HtmlDocument) -> List[RawItem]: ...  # noqa: D401


def _cap(items: Iterable[RawItem], limit: Optional[int]) -> List[RawItem]:
    out: List[RawItem] = []
    for item in items:
        if limit is not None and len(out) >= limit:
            break
        out.append(item)
    return out


class AllElementsStrategy:
    name = "all-elements"

    def __init__(self, *, max_items: Optional[int] = None) -> None:
        self.max_items = max_items

    def _candidates(self, doc: HtmlDocument):
        for element in doc.iter_elements():
            text = element.text
            if len(text) <= MIN_TEXT_LENGTH:
                continue
            yield RawItem(
                title=text[:MAX_TITLE_CHARS],
                content=text[:MAX_CONTENT_CHARS],
                source_url=doc.url,
            )

    def extract(self, doc: HtmlDocument) -> List[RawItem]:
        return _cap(self._candidates(doc), self.max_items)


class StructuralSelectorsStrategy:
    name = "structural-selectors"

    def __init__(
        self,
        *,
        selectors: Iterable[str] = STRUCTURAL_SELECTORS,
        max_items_per_selector: int = 10,
        max_items: Optional[int] = None,
    ) -> None:
        self.selectors = tuple(selectors)
        self.max_items_per_selector = max_items_per_selector
        self.max_items = max_items

    @staticmethod
    def _resolve_link(doc: HtmlDocument, element: Element) -> str:
        link = element.select_one("a") or element.closest("a") or element
        href = link.attr("href")
        if not href:
            return doc.url
        parsed = urlparse(doc.url)
        return urljoin(f"{parsed.scheme}://{parsed.netloc}", href)

    def _item_for(self, doc: HtmlDocument, element: Element) -> Optional[RawItem]:
        title = (element.select_one(TITLE_SELECTOR) or element).text
        if len(title) <= MIN_TEXT_LENGTH:
            return None
        content = (element.select_one(CONTENT_SELECTOR) or element).text
        return RawItem(
            title=title[:MAX_TITLE_CHARS],
            content=content[:MAX_CONTENT_CHARS] or title[:MAX_CONTENT_CHARS],
            source_url=self._resolve_link(doc, element),
        )

    def extract(self, doc: HtmlDocument) -> List[RawItem]:
        for selector in self.selectors:
            elements = doc.select(selector)
            if not elements:
                continue
            items = []
            for element in elements[: self.max_items_per_selector]:
                item = self._item_for(doc, element)
                if item is not None:
                    items.append(item)
            # first selector with any match wins
            return _cap(items, self.max_items)
        return []


_STRATEGIES: Dict[str, Callable[[Settings], ExtractionStrategy]] = {
    AllElementsStrategy.name: lambda s: AllElementsStrategy(max_items=s.extraction_max_items),
    StructuralSelectorsStrategy.name: lambda s: StructuralSelectorsStrategy(
        max_items_per_selector=s.extraction_max_items_per_selector,
        max_items=s.extraction_max_items,
    ),
}


def get_strategy(settings: Settings) -> ExtractionStrategy:
    try:
        factory = _STRATEGIES[settings.extraction_strategy]
    except KeyError as exc:  # pragma: no cover - Literal type guards this
        raise ValueError(f"Unknown extraction strategy: {settings.extraction_strategy}") from exc
    return factory(settings)


def available_strategies() -> List[str]:
    return sorted(_STRATEGIES)
