#!/usr/bin/env python3
"""Shinbukan schedule to iCalendar converter.

Fetches the monthly schedule pages of the dojo website, extracts the
events from each page's day grid and writes one iCalendar (.ics) file
covering all requested months.
"""

import argparse
import getpass
import logging
import sys
from datetime import date, datetime, timezone
from typing import Optional, TextIO

from scraper import CalendarParser, MonthResult, PageFetcher, collect_months, month_window
from scraper.config import (
    MAX_WORKERS,
    MONTHS_BACK,
    NUM_MONTHS,
    Settings,
    base_url_from_env,
    credentials_from_env,
    load_env_file,
)
from scraper.months import default_start
from transformer import ICalTransformer

logger = logging.getLogger(__name__)


def parse_month(month_str: str) -> tuple[int, int]:
    """Parse month string in YYYY-MM format."""
    try:
        parsed = datetime.strptime(month_str, "%Y-%m")
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Invalid month format: '{month_str}'. Expected YYYY-MM."
        )
    return parsed.year, parsed.month


def get_credentials(username: str, password: str) -> tuple[str, str]:
    """Prompt user for whichever login credential is missing.

    Returns:
        Tuple of (username, password).
    """
    if username and password:
        return username, password

    print("Schedule site authentication", file=sys.stderr)
    print("-" * 30, file=sys.stderr)

    if not username:
        username = input("Username: ").strip()
        if not username:
            print("Error: Username cannot be empty.", file=sys.stderr)
            sys.exit(1)

    if not password:
        password = getpass.getpass("Password: ")
        if not password:
            print("Error: Password cannot be empty.", file=sys.stderr)
            sys.exit(1)

    return username, password


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert the Shinbukan schedule pages to iCalendar format.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Credentials are read from REMOTEUSER / REMOTEPASS (environment or .env), or prompted for.

Examples:
  python3 shinbukan_ics.py > shinbukan.ics
  python3 shinbukan_ics.py --start 2024-04 --months 3 --output spring.ics
        """
    )

    parser.add_argument(
        "--start",
        type=parse_month,
        default=None,
        help=f"First month to fetch (format: YYYY-MM). Default: {MONTHS_BACK} months ago"
    )

    parser.add_argument(
        "--months",
        type=int,
        default=NUM_MONTHS,
        help=f"Number of months to fetch (default: {NUM_MONTHS})"
    )

    parser.add_argument(
        "--workers",
        type=int,
        default=MAX_WORKERS,
        help=f"Maximum number of pages fetched at once (default: {MAX_WORKERS})"
    )

    parser.add_argument(
        "--base-url",
        default=None,
        help="URL of the calendar directory (default: $SHINBUKAN_BASE_URL or the public site)"
    )

    parser.add_argument(
        "-o", "--output",
        default="-",
        help="Output file path, or - for standard output (default: -)"
    )

    parser.add_argument(
        "--show-browser",
        action="store_true",
        help="Run the browser with a visible window"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    return parser


def report_errors(results: list[MonthResult], stream: TextIO) -> bool:
    """Print every recorded error.

    Returns:
        True if at least one month had errors.
    """
    had_errors = False
    for result in results:
        if not result.has_errors:
            continue
        had_errors = True
        for err in result.errors:
            print("---", file=stream)
            print(
                f"Error occurred while processing the online calendar for "
                f"{result.year:04d}-{result.month:02d}!",
                file=stream,
            )
            print(err, file=stream)
            print("---", file=stream)
    return had_errors


def write_output(data: bytes, output: str) -> Optional[str]:
    """Write calendar data to a file or standard output.

    Returns:
        The file path written to, or None for standard output.
    """
    if output == "-":
        sys.stdout.buffer.write(data)
        sys.stdout.flush()
        return None

    output_path = output
    if not output_path.lower().endswith(".ics"):
        output_path = f"{output_path}.ics"
    with open(output_path, "wb") as f:
        f.write(data)
    return output_path


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the converter."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        stream=sys.stderr,
    )

    try:
        load_env_file()
        username, password = get_credentials(*credentials_from_env())
        settings = Settings(
            username=username,
            password=password,
            base_url=args.base_url or base_url_from_env(),
            months=args.months,
            workers=args.workers,
            headless=not args.show_browser,
        )

        start = args.start or default_start(date.today(), settings.months_back)
        months = month_window(start, settings.months)
        logger.info(
            "Fetching %d months starting %04d-%02d from %s",
            len(months), start[0], start[1], settings.base_url,
        )

        fetcher = PageFetcher(
            settings.username,
            settings.password,
            base_url=settings.base_url,
            headless=settings.headless,
        )
        results = collect_months(fetcher, months, settings.workers, CalendarParser())

        transformer = ICalTransformer(url_for=fetcher.url_for)
        transformer.transform(results, datetime.now(timezone.utc))
        output_path = write_output(transformer.to_ical(), args.output)

        logger.info("Found %d schedule events.", sum(len(r.events) for r in results))
        if output_path:
            logger.info("Schedule saved to: %s", output_path)

        if report_errors(results, sys.stderr):
            print("Error: Errors occurred while processing the input.", file=sys.stderr)
            return 1
        return 0

    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        return 130
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: An unexpected error occurred: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
