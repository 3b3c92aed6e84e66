#!/usr/bin/env python3
"""
Command-line runner for the hotel scrapers.

Usage:
    cd backend
    python -m scrapers.cli <query> [--sources keys]

Examples:
    python -m scrapers.cli "paris"                      # Search every source
    python -m scrapers.cli "lake como" --sources kiwi   # One source
    python -m scrapers.cli --list                       # List all sources
"""

import asyncio
import argparse
import logging
import json

from scrapers.base import InvalidRequest, RenderingEngineUnavailable
from scrapers.manager import ScraperManager
from scrapers.utils.normalizers import normalize_source_keys


def list_all_scrapers(manager: ScraperManager):
    """Print every configured source."""
    print(f"\n{'='*60}")
    print("Configured sources")
    print(f"{'='*60}\n")

    for site in manager.list_scrapers():
        status = "enabled" if site['enabled'] else "disabled"
        print(f"{site['key']:<16} {site['name']:<20} [{status}]")
        print(f"{'':<16} {site['url']}")


async def run_search(manager: ScraperManager, query: str, sources: str = None) -> int:
    """Run one search and print the JSON envelope plus per-source summary."""
    source_keys = normalize_source_keys(sources) if sources else None

    try:
        result = await manager.search(query, source_keys)
    except InvalidRequest as e:
        print(f"Error: {e}")
        return 2
    except RenderingEngineUnavailable as e:
        print(f"Search failed: {e}")
        return 1

    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    print(json.dumps(manager.get_results_summary(result), indent=2, default=str))
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Search hotel sources from the command line")
    parser.add_argument('query', nargs='?', help="Free-text hotel query")
    parser.add_argument('--sources', help="Comma-separated source keys (default: all)")
    parser.add_argument('--list', action='store_true', help="List configured sources")
    parser.add_argument('-v', '--verbose', action='store_true', help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    manager = ScraperManager()

    if args.list:
        list_all_scrapers(manager)
        return 0

    if not args.query:
        parser.error("query is required unless --list is given")

    return asyncio.run(run_search(manager, args.query, args.sources))


if __name__ == '__main__':
    raise SystemExit(main())
