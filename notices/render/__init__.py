"""Page rendering."""

from .browser import PlaywrightRenderer, Renderer  # noqa: F401
from .document import Element, HtmlDocument  # noqa: F401

__all__ = ["Element", "HtmlDocument", "PlaywrightRenderer", "Renderer"]
