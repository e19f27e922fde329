"""
Exception hierarchy for the crawler.
"""
from __future__ import annotations

from typing import Optional


class SitemapperError(Exception):
    """Base class for all crawler errors."""


class UsageError(SitemapperError):
    """Command line was called with the wrong number of start URLs."""


class FetchError(SitemapperError):
    """A single page could not be fetched. Never fatal to the crawl."""

    def __init__(self, uri: str, reason: str, status_code: Optional[int] = None) -> None:
        super().__init__(f"{uri}: {reason}")
        self.uri = uri
        self.reason = reason
        self.status_code = status_code

    @property
    def category(self) -> str:
        """Summary bucket: HTTP status code, or connection_error when there was no response."""
        if self.status_code is None:
            return "connection_error"
        return str(self.status_code)


class UnsupportedContentError(FetchError):
    """The response was not HTML/XML markup and cannot be parsed for links."""

    @property
    def category(self) -> str:
        return "unsupported_content"
