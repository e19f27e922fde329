"""
Command-line interface for the crawler.
"""
from __future__ import annotations

import argparse
import sys
from typing import List, NoReturn, Optional, Sequence

from sitemapper.core import CrawlStats, crawl
from sitemapper.document import DEFAULT_TIMEOUT_S, DEFAULT_USER_AGENT
from sitemapper.errors import UsageError


def print_summary(stats: CrawlStats) -> None:
    """Print crawl summary to stderr."""
    sys.stderr.write("=" * 50 + "\n")
    sys.stderr.write("CRAWL SUMMARY\n")
    sys.stderr.write("=" * 50 + "\n\n")

    sys.stderr.write(f"Pages fetched:          {stats.pages_fetched}\n")
    sys.stderr.write(f"Assets found:           {stats.assets_found}\n\n")

    if stats.error_counts:
        sys.stderr.write("Errors by type:\n")
        for error_type, count in sorted(stats.error_counts.items()):
            if error_type == "connection_error":
                label = "Connection errors"
            elif error_type == "unsupported_content":
                label = "Unsupported content"
            else:
                label = f"HTTP {error_type}"
            sys.stderr.write(f"  {label}: {count}\n")
    else:
        sys.stderr.write("No errors encountered.\n")

    sys.stderr.write("\n")


def print_resources(resources: List[str]) -> None:
    """Print the resource count followed by one URI per line to stdout."""
    print(f"Total resources found: {len(resources)}")
    for uri in resources:
        print(uri)


class UsageParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting with status 2."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = UsageParser(
        prog="sitemapper",
        description="List every same-domain page and static asset reachable from a start URL.",
    )
    # nargs="*" so a wrong count reaches main() instead of argparse's exit(2)
    parser.add_argument("start_url", nargs="*", help="Start URL (e.g. https://example.com)")
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT_S,
        help=f"Request timeout in seconds (default: {DEFAULT_TIMEOUT_S:g})",
    )
    parser.add_argument("--user-agent", default=DEFAULT_USER_AGENT, help="User-Agent header")
    parser.add_argument("--verbose", action="store_true", help="Show progress and summary")
    return parser


def parse_args(parser: argparse.ArgumentParser, argv: Optional[Sequence[str]]) -> argparse.Namespace:
    """Parse *argv*, raising UsageError unless exactly one start URL was given."""
    args = parser.parse_intermixed_args(argv)
    if len(args.start_url) != 1:
        raise UsageError(f"expected exactly one start URL, got {len(args.start_url)}")
    args.start_url = args.start_url[0]
    return args


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the crawler CLI."""
    parser = build_parser()
    try:
        args = parse_args(parser, argv)
    except UsageError:
        sys.stdout.write(parser.format_usage())
        return 0

    result = crawl(
        args.start_url,
        user_agent=args.user_agent,
        timeout_s=args.timeout,
        verbose=args.verbose,
    )

    if args.verbose:
        print_summary(result.stats)

    print_resources(result.resources)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
