"""Shared fixtures: an in-memory fetcher and a Document builder."""
from typing import Dict, List, Optional

import pytest

from sitemapper.document import Document
from sitemapper.errors import FetchError


class FakeFetcher:
    """
    In-memory stand-in for HttpFetcher.

    *pages* maps URI -> HTML. *failures* maps URI -> HTTP status to fail with.
    Any other URI fails as a connection error. Every call is recorded.
    """

    def __init__(self, pages: Dict[str, str], failures: Optional[Dict[str, int]] = None) -> None:
        self.pages = pages
        self.failures = failures or {}
        self.calls: List[str] = []

    def __call__(self, uri: str) -> Document:
        self.calls.append(uri)
        if uri in self.failures:
            status = self.failures[uri]
            raise FetchError(uri, f"HTTP {status}", status_code=status)
        if uri not in self.pages:
            raise FetchError(uri, "connection refused")
        return Document.from_html(self.pages[uri], uri)


@pytest.fixture()
def make_fetcher():
    """Return the FakeFetcher class for building per-test site graphs."""
    return FakeFetcher


@pytest.fixture()
def make_document():
    """Build a Document from an HTML snippet served at *url*."""

    def _make(html: str, url: str = "https://ex.com/") -> Document:
        return Document.from_html(html, url)

    return _make
