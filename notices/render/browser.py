"""Playwright-backed page renderer.

Each ``open`` call launches its own browser and context, waits for network
idle and hands a parsed snapshot to the caller. The browser is closed when the
``with`` block exits, whether rendering or the caller's extraction raised.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, ContextManager, Iterator, Optional, Protocol

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from notices.errors import RenderError, RenderTimeoutError
from notices.render.document import HtmlDocument
from notices.settings import Settings
from notices.utils.logging import get_logger

logger = get_logger(__name__)

PlaywrightFactory = Callable[[], ContextManager[Any]]


class Renderer(Protocol):
    def open(self, url: str, *, timeout_seconds: Optional[float] = None) -> ContextManager[HtmlDocument]: ...  # noqa: D401


class PlaywrightRenderer:
    def __init__(
        self,
        *,
        navigation_timeout_seconds: float = 30.0,
        quiescence_ms: int = 0,
        headless: bool = True,
        user_agent: Optional[str] = None,
        playwright_factory: PlaywrightFactory = sync_playwright,
    ) -> None:
        self._navigation_timeout = float(navigation_timeout_seconds)
        self._quiescence_ms = int(quiescence_ms)
        self._headless = headless
        self._user_agent = user_agent
        self._playwright_factory = playwright_factory

    @classmethod
    def from_settings(cls, settings: Settings) -> "PlaywrightRenderer":
        return cls(
            navigation_timeout_seconds=settings.render_navigation_timeout_seconds,
            quiescence_ms=settings.render_quiescence_ms,
            headless=settings.render_headless,
            user_agent=settings.render_user_agent,
        )

    def _effective_timeout_ms(self, timeout_seconds: Optional[float]) -> float:
        timeout = self._navigation_timeout
        if timeout_seconds is not None:
            timeout = min(timeout, timeout_seconds)
        if timeout <= 0:
            raise RenderTimeoutError("No time left to render the page.")
        return timeout * 1000.0

    @contextmanager
    def open(self, url: str, *, timeout_seconds: Optional[float] = None) -> Iterator[HtmlDocument]:
        timeout_ms = self._effective_timeout_ms(timeout_seconds)
        with self._playwright_factory() as pw:
            try:
                browser = pw.chromium.launch(headless=self._headless)
            except PlaywrightError as exc:
                raise RenderError(f"Failed to launch browser: {exc}") from exc
            try:
                context_options = {"user_agent": self._user_agent} if self._user_agent else {}
                context = browser.new_context(**context_options)
                page = context.new_page()
                logger.info("render.navigate", extra={"url": url, "timeout_ms": timeout_ms})
                try:
                    page.goto(url, wait_until="networkidle", timeout=timeout_ms)
                    if self._quiescence_ms:
                        page.wait_for_timeout(self._quiescence_ms)
                    document = HtmlDocument(page.url, page.content())
                except PlaywrightTimeoutError as exc:
                    raise RenderTimeoutError(f"Timed out rendering {url}: {exc}") from exc
                except PlaywrightError as exc:
                    raise RenderError(f"Failed to render {url}: {exc}") from exc
                yield document
            finally:
                browser.close()
                logger.debug("render.closed", extra={"url": url})
