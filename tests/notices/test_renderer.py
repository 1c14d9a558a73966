from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import pytest
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from notices.errors import RenderError, RenderTimeoutError
from notices.render.browser import PlaywrightRenderer

HTML = "<html><body><p>Public notice about water supply</p></body></html>"


class FakePage:
    def __init__(self, *, goto_error: Optional[Exception] = None) -> None:
        self.goto_error = goto_error
        self.goto_calls: List[Dict[str, Any]] = []
        self.waited: List[int] = []
        self.url = "about:blank"

    def goto(self, url: str, *, wait_until: str, timeout: float) -> None:
        self.goto_calls.append({"url": url, "wait_until": wait_until, "timeout": timeout})
        if self.goto_error is not None:
            raise self.goto_error
        self.url = url + "#rendered"

    def wait_for_timeout(self, ms: int) -> None:
        self.waited.append(ms)

    def content(self) -> str:
        return HTML


class FakeBrowser:
    def __init__(self, page: FakePage) -> None:
        self.page = page
        self.context_options: Dict[str, Any] = {}
        self.closed = False

    def new_context(self, **options):
        self.context_options = options
        return self

    def new_page(self) -> FakePage:
        return self.page

    def close(self) -> None:
        self.closed = True


class FakePlaywright:
    def __init__(self, browser: FakeBrowser) -> None:
        self.browser = browser
        self.launches: List[Dict[str, Any]] = []
        self.chromium = self

    def launch(self, **kwargs) -> FakeBrowser:
        self.launches.append(kwargs)
        return self.browser


def _renderer(page: FakePage, **kwargs):
    pw = FakePlaywright(FakeBrowser(page))

    @contextmanager
    def factory():
        yield pw

    return PlaywrightRenderer(playwright_factory=factory, **kwargs), pw


def test_render_waits_for_network_idle_and_closes_browser():
    page = FakePage()
    renderer, pw = _renderer(page, navigation_timeout_seconds=12, quiescence_ms=250, user_agent="NoticeBot/1.0")

    with renderer.open("https://gov.example/notices") as doc:
        texts = [el.text for el in doc.iter_elements()]

    assert doc.url == "https://gov.example/notices#rendered"
    assert "Public notice about water supply" in texts
    assert page.goto_calls == [
        {"url": "https://gov.example/notices", "wait_until": "networkidle", "timeout": 12000.0}
    ]
    assert page.waited == [250]
    assert pw.launches == [{"headless": True}]
    assert pw.browser.context_options == {"user_agent": "NoticeBot/1.0"}
    assert pw.browser.closed


def test_run_deadline_shortens_navigation_timeout():
    page = FakePage()
    renderer, _ = _renderer(page, navigation_timeout_seconds=30)

    with renderer.open("https://gov.example/", timeout_seconds=5):
        pass

    assert page.goto_calls[0]["timeout"] == 5000.0
    assert page.waited == []


def test_navigation_timeout_raises_render_timeout_and_closes():
    page = FakePage(goto_error=PlaywrightTimeoutError("Timeout 30000ms exceeded."))
    renderer, pw = _renderer(page)

    with pytest.raises(RenderTimeoutError):
        with renderer.open("https://unreachable.example/"):
            pytest.fail("document must not be yielded")

    assert pw.browser.closed


def test_navigation_error_raises_render_error():
    page = FakePage(goto_error=PlaywrightError("net::ERR_NAME_NOT_RESOLVED"))
    renderer, pw = _renderer(page)

    with pytest.raises(RenderError) as exc:
        with renderer.open("https://unreachable.example/"):
            pass

    assert not isinstance(exc.value, RenderTimeoutError)
    assert pw.browser.closed


def test_browser_closed_when_extraction_raises():
    renderer, pw = _renderer(FakePage())

    with pytest.raises(ValueError):
        with renderer.open("https://gov.example/"):
            raise ValueError("extractor blew up")

    assert pw.browser.closed


def test_exhausted_deadline_fails_before_launching():
    renderer, pw = _renderer(FakePage())

    with pytest.raises(RenderTimeoutError):
        with renderer.open("https://gov.example/", timeout_seconds=0):
            pass

    assert pw.launches == []
