# product_browser/errors.py

from typing import Optional


class BrowserError(Exception):
    """Base class for all product browser errors."""
    pass


class ConfigError(BrowserError):
    """Error related to configuration."""
    pass


class QueryError(BrowserError):
    """The data source rejected a query (bad sort column, page size...)."""
    pass


class FetchFailure(BrowserError):
    """A page fetch failed; the page stays a placeholder until retried."""

    def __init__(self, page: int, epoch: int, cause: Optional[BaseException] = None):
        self.page = page
        self.epoch = epoch
        self.cause = cause
        reason = f"{type(cause).__name__}: {cause}" if cause else "unknown error"
        super().__init__(f"Fetching page {page} (epoch {epoch}) failed - {reason}")


class InvalidPageRequest(BrowserError):
    """A page outside 1..total_pages was requested. Never propagated."""

    def __init__(self, page: int, total_pages: int):
        self.page = page
        self.total_pages = total_pages
        super().__init__(f"Page {page} is outside 1..{total_pages}")
