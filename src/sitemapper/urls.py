"""
URI normalization and same-origin filtering.
"""
from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

# RFC 3986 reserved + unreserved + '%', plus non-ASCII characters
URI_CHARS = re.compile(r"^[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=%\u0080-\U0010FFFF]*$")
BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")


def normalize_uri(raw: Optional[str]) -> Optional[str]:
    """
    Canonicalize an absolute link string for deduplication and comparison.

    - Strips surrounding whitespace
    - Drops fragments (#...)
    - Lowercases scheme and host
    - Keeps path, query, userinfo and port untouched

    Returns None for anything that is not a valid absolute URI
    (e.g. "mailto: someone@example.com" with a space, relative paths).
    """
    if not raw:
        return None

    candidate = raw.strip()
    if not candidate or not URI_CHARS.match(candidate) or BAD_ESCAPE.search(candidate):
        return None

    try:
        parts = urlsplit(candidate)
        parts.port  # raises on a non-numeric or out-of-range port
    except ValueError:
        return None

    if not parts.scheme or not SCHEME.match(parts.scheme):
        return None

    # Brackets are only legal around an IPv6 host, '#' only once
    rest = parts.path + parts.query + parts.fragment
    if "[" in rest or "]" in rest or "#" in parts.fragment:
        return None

    userinfo, at, hostport = parts.netloc.rpartition("@")
    netloc = userinfo + at + hostport.lower()

    return urlunsplit((
        parts.scheme.lower(),
        netloc,
        parts.path,
        parts.query,
        "",  # No fragment
    ))


def host_of(uri: str) -> str:
    """Return the lowercased host of *uri* without port, or "" if it has none."""
    try:
        return urlsplit(uri).hostname or ""
    except ValueError:
        return ""


def is_same_origin(uri: Optional[str], start_uri: str) -> bool:
    """Check if *uri* has a host and that host is exactly the start page's host."""
    if uri is None:
        return False
    host = host_of(uri)
    return bool(host) and host == host_of(start_uri)
