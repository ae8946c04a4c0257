"""
Command-line interface: scrape the schedule page and publish it as a calendar.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .config import Settings, get_settings
from .errors import ScheduleError
from .events import normalize_schedule
from .export import render
from .fetch import fetch_schedule_html
from .logs import setup_logging
from .schedule_html import parse_schedule_html
from .storage import ICS_CONTENT_TYPE, upload_calendar

logger = logging.getLogger("dmkt_schedule")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dmkt-schedule",
        description=(
            "Export the Aikatsu Academy! schedule to ICS / CSV / JSON.\n"
            "By default the page is fetched from SCHEDULE_URL and the ICS feed is "
            "uploaded to gs://$GCS_BUCKET/$GCS_PATH."
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--url", help="Schedule page URL. Overrides SCHEDULE_URL.")
    source.add_argument("--html", metavar="HTML_PATH", help="Parse a saved schedule page instead of fetching.")
    parser.add_argument(
        "-o",
        "--output",
        metavar="PATH",
        help="Write to a local file instead of uploading to Cloud Storage.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["ics", "csv", "json"],
        default="ics",
        help="Export format for --output. Default: ics",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level. Overrides LOG_LEVEL.",
    )
    return parser


def run(args: argparse.Namespace, settings: Settings) -> int:
    if args.output is None:
        bucket, path = settings.require_storage()

    if args.html:
        months = parse_schedule_html(html_path=args.html)
    else:
        months = parse_schedule_html(html_content=fetch_schedule_html(args.url or settings.schedule_url))
    logger.info("Parsed schedule", extra={"months": [m.label for m in months]})

    events = normalize_schedule(months)
    data = render(events, args.format, settings.timezone)

    if args.output is not None:
        out_path = Path(args.output)
        out_path.write_bytes(data)
        logger.info("Exported %d event(s) to %s", len(events), out_path, extra={"format": args.format})
    else:
        upload_calendar(data, bucket, path, content_type=ICS_CONTENT_TYPE)
        logger.info("Exported %d event(s) to gs://%s/%s", len(events), bucket, path, extra={"format": args.format})
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.output is None and args.format != "ics":
        parser.error("only ics can be uploaded; use --output for csv or json")
    setup_logging(logging.INFO)

    try:
        settings = get_settings()
        logging.getLogger().setLevel((args.log_level or settings.log_level).upper())
        return run(args, settings)
    except ScheduleError as e:
        logger.error(str(e), extra={"step": e.step, "error": type(e).__name__})
        return 1
    except OSError as e:
        logger.error(str(e), extra={"step": "io", "error": type(e).__name__})
        return 1


if __name__ == "__main__":
    sys.exit(main())
