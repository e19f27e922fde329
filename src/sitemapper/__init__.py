"""
Site mapper that performs BFS traversal of same-domain links from a start URL.
Lists every fetched page and the static assets it references.
"""
from sitemapper.core import crawl, CrawlResult, CrawlState, CrawlStats
from sitemapper.errors import FetchError, UsageError

__version__ = "1.0.0"
__all__ = ["crawl", "CrawlResult", "CrawlState", "CrawlStats", "FetchError", "UsageError"]
