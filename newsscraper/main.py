#!/usr/bin/env python3
"""Main entry point for the news scraper.

Usage:
    newsscraper --source detik --query "ekonomi" --start-date 2015-01-01 --end-date 2015-01-02
    newsscraper --source kompas --query "banjir" --start-date 2015-01-01 --end-date 2015-01-30 --daily
    python -m newsscraper.main ... -v      # Run with verbose logging
"""

import argparse
import sys

from newsscraper.agent.runner import run


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        args: Command line arguments. If None, uses sys.argv.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog="newsscraper",
        description="Search news sites for articles in a date range and save them to CSV",
    )

    parser.add_argument(
        "--source",
        required=True,
        help="Source to search (detik, kompas, liputan6)",
    )

    parser.add_argument(
        "--query",
        required=True,
        help="Search text",
    )

    parser.add_argument(
        "--start-date",
        required=True,
        help="First day of the range, YYYY-MM-DD",
    )

    parser.add_argument(
        "--end-date",
        required=True,
        help="Last day of the range, YYYY-MM-DD",
    )

    parser.add_argument(
        "--daily",
        action="store_true",
        help="Scrape one day at a time, saving after each day",
    )

    parser.add_argument(
        "--output",
        default=None,
        help="CSV file to append articles to (default from OUTPUT_PATH)",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        dest="print_json",
        help="Print the found articles as JSON on stdout",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging output",
    )

    return parser.parse_args(args)


def main(args: list[str] | None = None) -> int:
    """Main entry point for the news scraper.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    parsed = parse_args(args)
    return run(
        source=parsed.source,
        query=parsed.query,
        start_date=parsed.start_date,
        end_date=parsed.end_date,
        daily=parsed.daily,
        output=parsed.output,
        verbose=parsed.verbose,
        print_json=parsed.print_json,
    )


if __name__ == "__main__":
    sys.exit(main())
