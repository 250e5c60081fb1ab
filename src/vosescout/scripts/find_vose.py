"""Find VOSE/VO films showing in Gran Canaria cinemas.

Usage:
    vosescout              # Human-readable output
    vosescout --json       # JSON report
    vosescout --all-dates  # Every published date, not just today
"""

import argparse
import asyncio
import logging
import sys

from vosescout.config import settings
from vosescout.output.text import format_text
from vosescout.schemas.report import build_report
from vosescout.tasks.scrape_job import run_scrape_all

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Send log output to stderr so stdout carries only the report."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


async def find_vose(as_json: bool, all_dates: bool) -> str:
    """Scrape every source and render the result."""
    result = await run_scrape_all(all_dates=all_dates)
    if as_json:
        return build_report(result).to_json()
    return format_text(result, all_dates=all_dates)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Find films in original version (VOSE/VO) at Gran Canaria cinemas."
    )
    parser.add_argument("--json", action="store_true", help="Emit a JSON report")
    parser.add_argument(
        "--all-dates",
        action="store_true",
        help="Include every published date (default: today only)",
    )
    args = parser.parse_args(argv)

    configure_logging()

    try:
        output = asyncio.run(find_vose(args.json, args.all_dates))
    except Exception as e:
        logger.critical(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)

    print(output)


if __name__ == "__main__":
    main()
