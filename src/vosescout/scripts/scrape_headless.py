"""Render client-side cinema pages in a headless browser and print JSON.

Run as a child process by HeadlessScraper, or by hand:

    vosescout-headless cinesa
    vosescout-headless all
"""

import argparse
import asyncio
import json
import logging
import sys

from vosescout.scrapers.headless import TARGETS, scrape_target
from vosescout.scrapers.models import Showing
from vosescout.scripts.find_vose import configure_logging
from vosescout.utils.dates import local_today

logger = logging.getLogger(__name__)


async def scrape_targets(keys: list[str]) -> tuple[list[Showing], int]:
    """Scrape each target in turn. Returns the showings and the failure count."""
    showings: list[Showing] = []
    failures = 0
    today = local_today()

    for key in keys:
        target = TARGETS[key]
        try:
            showings.extend(await scrape_target(target, today))
        except Exception as e:
            logger.error(f"{target.name} headless scrape error: {e}", exc_info=True)
            failures += 1

    return showings, failures


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Scrape client-rendered cinema pages with a headless browser."
    )
    parser.add_argument(
        "target",
        nargs="?",
        default="all",
        choices=[*TARGETS, "all"],
        help="Cinema to scrape (default: all)",
    )
    args = parser.parse_args(argv)

    configure_logging()

    keys = list(TARGETS) if args.target == "all" else [args.target]
    showings, failures = asyncio.run(scrape_targets(keys))

    sys.stdout.write(json.dumps([s.to_dict() for s in showings], ensure_ascii=False, indent=2))
    sys.stdout.write("\n")
    sys.exit(1 if failures else 0)


if __name__ == "__main__":
    main()
