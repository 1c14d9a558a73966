"""Error taxonomy for scrape runs."""

from __future__ import annotations


class ScrapeError(Exception):
    """Run-level failure; no records are produced."""


class RenderError(ScrapeError):
    """Navigation or browser failure while rendering the target page."""


class RenderTimeoutError(RenderError):
    """Navigation did not reach network idle within the allowed time."""


class PersistenceError(Exception):
    """Store lookup or insert failed for a single item."""
