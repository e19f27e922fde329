"""
Fetched-page document model and the HTTP fetcher that produces it.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional
from urllib.parse import urljoin

import requests
import urllib3
from bs4 import BeautifulSoup
from bs4.element import Tag

from sitemapper.errors import FetchError, UnsupportedContentError

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_12_6) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/75.0.3770.142 Safari/537.36"
)
DEFAULT_TIMEOUT_S = 15.0

XML_TYPES: frozenset[str] = frozenset(("application/xml", "application/xhtml+xml"))


@dataclass(slots=True)
class Document:
    """Parsed page plus the URL it was served from (after redirects)."""
    url: str
    soup: BeautifulSoup
    base_url: str = field(init=False, default="")

    def __post_init__(self) -> None:
        base = self.soup.find("base", href=True)
        href = base.get("href") if isinstance(base, Tag) else None
        self.base_url = urljoin(self.url, href.strip()) if isinstance(href, str) else self.url

    @classmethod
    def from_html(cls, html: str, url: str) -> "Document":
        return cls(url=url, soup=BeautifulSoup(html, "lxml"))

    def select(self, selector: str) -> List[Tag]:
        """Return all elements matching a CSS selector."""
        return self.soup.select(selector)

    def absolute(self, element: Tag, attr: str) -> str:
        """
        Resolve an attribute value against the document base.

        Returns "" when the attribute is missing or cannot be resolved.
        """
        value = element.get(attr)
        if not isinstance(value, str) or not value.strip():
            return ""
        try:
            return urljoin(self.base_url, value.strip())
        except ValueError:
            return ""


def is_markup(content_type: str) -> bool:
    """Check if a Content-Type header names something we can parse for links.

    An absent header is treated as markup.
    """
    ct = content_type.split(";")[0].strip().lower()
    if not ct:
        return True
    return ct.startswith("text/") or ct in XML_TYPES or ct.endswith("+xml")


class HttpFetcher:
    """
    Fetch a URI and return its parsed Document.

    Raises FetchError on network errors, timeouts, malformed hosts,
    HTTP status >= 400 and non-markup responses. A missing Content-Type
    is parsed as markup.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout_s: float = DEFAULT_TIMEOUT_S,
    ) -> None:
        self._owns_session = session is None
        self.session = requests.Session() if session is None else session
        self.session.headers["User-Agent"] = user_agent
        self.timeout_s = timeout_s

    def __call__(self, uri: str) -> Document:
        try:
            resp = self.session.get(uri, timeout=self.timeout_s, allow_redirects=True)
        except (requests.RequestException, urllib3.exceptions.HTTPError, ValueError) as e:
            # urllib3 lets LocationParseError through for bad host labels
            raise FetchError(uri, str(e)) from e

        if resp.status_code >= 400:
            raise FetchError(uri, f"HTTP {resp.status_code}", status_code=resp.status_code)

        content_type = (resp.headers.get("content-type") or "").lower()
        if not is_markup(content_type):
            raise UnsupportedContentError(
                uri,
                f"unsupported content type {content_type}",
                status_code=resp.status_code,
            )

        return Document.from_html(resp.text, resp.url or uri)

    def close(self) -> None:
        """Close the HTTP session if this fetcher created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "HttpFetcher":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
