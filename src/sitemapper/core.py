"""
Core crawling logic and data structures.
"""
from __future__ import annotations

import sys
from collections import defaultdict, deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Deque, Dict, List, Optional, Set, Tuple

from sitemapper.document import DEFAULT_TIMEOUT_S, DEFAULT_USER_AGENT, Document, HttpFetcher
from sitemapper.errors import FetchError
from sitemapper.extract import extract_assets, extract_links
from sitemapper.urls import normalize_uri

Fetcher = Callable[[str], Document]


class PageState(Enum):
    PENDING = "pending"
    FETCHED = "fetched"


class Frontier:
    """FIFO queue of URIs awaiting fetch (BFS level order)."""

    __slots__ = ("_queue",)

    def __init__(self) -> None:
        self._queue: Deque[str] = deque()

    def push(self, uri: str) -> None:
        self._queue.append(uri)

    def pop(self) -> str:
        return self._queue.popleft()

    def __len__(self) -> int:
        return len(self._queue)

    def __bool__(self) -> bool:
        return bool(self._queue)


@dataclass(slots=True)
class CrawlStats:
    """Statistics collected during crawl for summary output."""
    pages_fetched: int = 0
    assets_found: int = 0
    error_counts: Dict[str, int] = field(default_factory=lambda: defaultdict(int))
    failures: List[Tuple[str, str]] = field(default_factory=list)

    def record_error(self, error: FetchError) -> None:
        """Record a failed fetch by category."""
        self.error_counts[error.category] += 1
        self.failures.append((error.uri, error.reason))

    def record_page(self, new_assets: int) -> None:
        self.pages_fetched += 1
        self.assets_found += new_assets


@dataclass(slots=True)
class CrawlState:
    """
    Registry, frontier and resource set for a single crawl.

    discover() is the only way into the frontier: a URI is registered as
    PENDING and enqueued in the same step, the first time it is seen.
    """
    start_uri: str
    registry: Dict[str, PageState] = field(default_factory=dict)
    frontier: Frontier = field(default_factory=Frontier)
    resources: Set[str] = field(default_factory=set)

    def discover(self, uri: str) -> bool:
        """Register and enqueue *uri* if unseen. Returns True when it was new."""
        if uri in self.registry:
            return False
        self.registry[uri] = PageState.PENDING
        self.frontier.push(uri)
        return True

    def is_pending(self, uri: str) -> bool:
        return self.registry.get(uri) is PageState.PENDING

    def mark_fetched(self, uri: str) -> None:
        self.registry[uri] = PageState.FETCHED

    def sorted_resources(self) -> List[str]:
        return sorted(self.resources)


@dataclass(slots=True)
class CrawlResult:
    """Sorted resource URIs plus crawl statistics."""
    resources: List[str]
    stats: CrawlStats


def print_progress(fetched: int, discovered: int, queue_size: int) -> None:
    """Print real-time progress to stderr."""
    # Clear line and print progress
    progress = f"\r\033[K Fetched: {fetched} | Discovered: {discovered} | Queue: {queue_size}"
    sys.stderr.write(progress)
    sys.stderr.flush()


def print_scan_line(uri: str, new_links: int, new_assets: int) -> None:
    """Print single fetch result line."""
    sys.stderr.write(f"\n  → OK {uri} (+{new_links} links, +{new_assets} assets)")
    sys.stderr.flush()


def print_error(error: FetchError) -> None:
    sys.stderr.write(f"\n  ✗ ERROR {error.uri}: {error.reason}\n")
    sys.stderr.flush()


def crawl(
    start_url: str,
    fetcher: Optional[Fetcher] = None,
    *,
    user_agent: str = DEFAULT_USER_AGENT,
    timeout_s: float = DEFAULT_TIMEOUT_S,
    verbose: bool = False,
) -> CrawlResult:
    """
    Collect all same-domain pages and their static assets using BFS traversal.

    Args:
        start_url: Absolute URL of the first page.
        fetcher: Callable returning a Document for a URI or raising FetchError.
            Defaults to an HttpFetcher built from user_agent and timeout_s.
        verbose: Show progress lines on stderr.

    A malformed start URL is not rejected up front; it fails on the first
    fetch and the result is empty.
    """
    seed = normalize_uri(start_url) or start_url
    state = CrawlState(start_uri=seed)
    stats = CrawlStats()
    state.discover(seed)

    http_fetcher = None
    if fetcher is None:
        http_fetcher = HttpFetcher(user_agent=user_agent, timeout_s=timeout_s)
        fetcher = http_fetcher

    if verbose:
        sys.stderr.write(f"Starting crawl from: {seed}\n")

    try:
        while state.frontier:
            uri = state.frontier.pop()

            if not state.is_pending(uri):
                continue

            if verbose:
                print_progress(stats.pages_fetched, len(state.registry), len(state.frontier))

            try:
                document = fetcher(uri)
            except FetchError as e:
                # Left PENDING and never re-enqueued, so it is not retried
                stats.record_error(e)
                print_error(e)
                continue

            state.mark_fetched(uri)
            state.resources.add(uri)

            assets = extract_assets(document)
            new_assets = len(assets - state.resources)
            state.resources |= assets

            # Sorted so frontier order does not depend on set iteration order
            new_links = sum(
                state.discover(link) for link in sorted(extract_links(document, seed))
            )
            stats.record_page(new_assets)

            if verbose:
                print_scan_line(uri, new_links, new_assets)
    finally:
        if http_fetcher is not None:
            http_fetcher.close()

    if verbose:
        sys.stderr.write("\n\n")

    return CrawlResult(resources=state.sorted_resources(), stats=stats)
