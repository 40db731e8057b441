#!/usr/bin/env python3
"""SDSU class schedule to iCalendar converter.

ETL pipeline that reads the enrolled courses from the PeopleSoft
class schedule page and generates an iCalendar (.ics) file.
"""

import argparse
import getpass
import logging
import sys
from pathlib import Path
from typing import Optional

from scraper import ScheduleScraper
from transformer import BaseTransformer, GoogleEventTransformer, ICalTransformer


def get_credentials() -> tuple[str, str]:
    """Prompt user for login credentials.

    Returns:
        Tuple of (username, password).
    """
    print("Portal Authentication")
    print("-" * 30)

    username = input("Username: ").strip()
    if not username:
        print("Error: Username cannot be empty.", file=sys.stderr)
        sys.exit(1)

    password = getpass.getpass("Password: ")
    if not password:
        print("Error: Password cannot be empty.", file=sys.stderr)
        sys.exit(1)

    return username, password


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert an SDSU class schedule to iCalendar format.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python3 sdsu2iCal.py --html "My Class Schedule.html"
  python3 sdsu2iCal.py --url <URL> --login --output spring.ics
  python3 sdsu2iCal.py --html schedule.html --format json -o events.json
        """
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--url",
        help="URL of the class schedule page to scrape"
    )
    source.add_argument(
        "--html",
        type=Path,
        help="Saved HTML of the class schedule page"
    )

    parser.add_argument(
        "-o", "--output",
        default="schedule.ics",
        help="Output file path (default: schedule.ics)"
    )

    parser.add_argument(
        "-f", "--format",
        choices=("ics", "json"),
        default="ics",
        help="ics for a calendar file, json for Google Calendar API events"
    )

    parser.add_argument(
        "--timezone",
        default=BaseTransformer.TIMEZONE,
        help=f"Time zone of the schedule times (default: {BaseTransformer.TIMEZONE})"
    )

    parser.add_argument(
        "--calendar-name",
        default=ICalTransformer.CALENDAR_NAME,
        help="Calendar display name"
    )

    parser.add_argument(
        "--no-timezone-block",
        action="store_true",
        help="Omit the calendar name and VTIMEZONE block"
    )

    parser.add_argument(
        "--login",
        action="store_true",
        help="Prompt for credentials and sign in before reading the page"
    )

    parser.add_argument(
        "--show-browser",
        action="store_true",
        help="Run Chrome with a visible window"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point for the ETL pipeline."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )

    # Ensure output file has the expected extension
    output_path = args.output
    extension = f".{args.format}"
    if not output_path.lower().endswith(extension):
        output_path = f"{output_path}{extension}"

    try:
        if args.html:
            scraper = ScheduleScraper()
            scraper.load_html(args.html.read_text(encoding="utf-8"))
        else:
            username, password = get_credentials() if args.login else (None, None)
            print(f"\nFetching schedule from: {args.url}")
            scraper = ScheduleScraper(username, password, headless=not args.show_browser)
            scraper.fetch_schedule(args.url)

        courses = scraper.parse_courses()
        print(f"Found {len(courses)} courses.")

        for index, reason in scraper.skipped:
            print(f"Skipping unreadable course row {index}: {reason}")

        if not courses:
            print("Warning: No courses found. The output will be empty.")

        transformer: BaseTransformer
        if args.format == "json":
            transformer = GoogleEventTransformer(timezone_name=args.timezone)
        else:
            transformer = ICalTransformer(
                timezone_name=args.timezone,
                calendar_name=args.calendar_name,
                include_timezone=not args.no_timezone_block
            )

        transformer.transform(courses)

        for diagnostic in transformer.diagnostics:
            print(f"Skipping {diagnostic.reason} course: {diagnostic.preview}")

        transformer.save(output_path)

        print(f"Schedule saved to: {output_path}")

    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        sys.exit(130)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error: An unexpected error occurred: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
