from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

import pytest

ROOT = Path(__file__).resolve().parents[1]

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from llm.settings import reset_summary_settings_cache  # noqa: E402
from notices.render.document import HtmlDocument  # noqa: E402
from notices.settings import reset_settings_cache  # noqa: E402


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path: Path):
    monkeypatch.chdir(tmp_path)  # keep stray .env files out of settings
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'notices.db'}")
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("SCRAPE_RUN_DEADLINE_SECONDS", raising=False)
    monkeypatch.delenv("EXTRACTION_STRATEGY", raising=False)
    root = logging.getLogger()
    saved_level, saved_handlers = root.level, list(root.handlers)
    reset_settings_cache()
    reset_summary_settings_cache()
    yield
    reset_settings_cache()
    reset_summary_settings_cache()
    # configure_logging() swaps root handlers and level; undo it for the next test
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


class StaticRenderer:
    """Renderer double that serves fixed HTML without a browser."""

    def __init__(self, html: str, *, final_url: Optional[str] = None, error: Optional[Exception] = None) -> None:
        self.html = html
        self.final_url = final_url
        self.error = error
        self.calls: List[Tuple[str, Optional[float]]] = []
        self.closed = 0

    @contextmanager
    def open(self, url: str, *, timeout_seconds: Optional[float] = None) -> Iterator[HtmlDocument]:
        self.calls.append((url, timeout_seconds))
        if self.error is not None:
            raise self.error
        try:
            yield HtmlDocument(self.final_url or url, self.html)
        finally:
            self.closed += 1


@pytest.fixture()
def static_renderer():
    return StaticRenderer
