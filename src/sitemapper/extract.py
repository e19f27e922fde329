"""
Static asset and hyperlink extraction from a fetched Document.
"""
from __future__ import annotations

from typing import Set

from sitemapper.document import Document
from sitemapper.urls import is_same_origin, normalize_uri


def extract_assets(document: Document) -> Set[str]:
    """
    Collect every static resource referenced by the page.

    Covers any element with a src attribute (<audio>, <embed>, <iframe>,
    <img>, <input>, <script>, <source>, <track>, <video>, ...) plus
    <link href> (stylesheets, icons). Third-party hosts are kept.
    """
    assets: Set[str] = set()
    for selector, attr in (("[src]", "src"), ("link[href]", "href")):
        for element in document.select(selector):
            uri = normalize_uri(document.absolute(element, attr))
            if uri:
                assets.add(uri)
    return assets


def extract_links(document: Document, start_uri: str) -> Set[str]:
    """Collect same-domain <a href> targets to crawl next."""
    links: Set[str] = set()
    for element in document.select("a[href]"):
        uri = normalize_uri(document.absolute(element, "href"))
        if is_same_origin(uri, start_uri):
            links.add(uri)
    return links
