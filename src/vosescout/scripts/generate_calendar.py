"""Generate the static VOSE calendar page.

Scrapes every source for all published dates and writes an HTML month
calendar (default: docs/index.html). With --schedule the page is rebuilt
every day until interrupted.
"""

import argparse
import asyncio
import logging
import sys

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from vosescout.config import settings
from vosescout.output.calendar import render_calendar, write_calendar
from vosescout.scripts.find_vose import configure_logging
from vosescout.tasks.scrape_job import run_scrape_all

logger = logging.getLogger(__name__)


async def generate_calendar(output: str) -> None:
    """Scrape all dates and write the calendar page."""
    result = await run_scrape_all(all_dates=True)
    write_calendar(output, render_calendar(result))
    logger.info(f"{result.total} showings, {len(result.errors)} source errors")


async def run_scheduled(output: str, hour: int) -> None:
    """Build the page now, then daily at ``hour`` local time."""
    scheduler = AsyncIOScheduler(timezone=settings.timezone)
    scheduler.add_job(
        generate_calendar,
        trigger=CronTrigger(hour=hour, minute=0, timezone=settings.timezone),
        args=[output],
        id="daily_calendar",
        name="Daily VOSE calendar rebuild",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(f"Scheduler started, calendar rebuilt daily at {hour:02d}:00")

    try:
        await generate_calendar(output)
        await asyncio.Event().wait()
    finally:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler shut down")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Generate the VOSE calendar page.")
    parser.add_argument(
        "--output",
        default=settings.calendar_output,
        metavar="PATH",
        help=f"Output file (default: {settings.calendar_output})",
    )
    parser.add_argument(
        "--schedule",
        action="store_true",
        help="Keep running and rebuild the page every day",
    )
    parser.add_argument(
        "--hour",
        type=int,
        default=6,
        metavar="H",
        help="Local hour for the daily rebuild (default: 6)",
    )
    args = parser.parse_args(argv)

    configure_logging()

    try:
        if args.schedule:
            asyncio.run(run_scheduled(args.output, args.hour))
        else:
            asyncio.run(generate_calendar(args.output))
    except KeyboardInterrupt:
        pass
    except Exception as e:
        logger.critical(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
