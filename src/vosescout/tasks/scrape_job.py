"""Scrape job that runs every source and merges the results."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from vosescout.scrapers import BaseScraper, ScrapeError, Showing, get_default_scrapers
from vosescout.utils.dates import today_iso

logger = logging.getLogger(__name__)


@dataclass
class ScrapeResult:
    """Merged output of one scrape run."""

    showings: list[Showing]
    errors: list[ScrapeError] = field(default_factory=list)
    date: str = field(default_factory=today_iso)
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def total(self) -> int:
        return len(self.showings)


def dedupe_showings(showings: list[Showing]) -> list[Showing]:
    """Drop repeats of (cinema, title, date, times), keeping the first seen."""
    seen: set[tuple[str, str, str, str]] = set()
    unique: list[Showing] = []
    for showing in showings:
        key = showing.key()
        if key in seen:
            continue
        seen.add(key)
        unique.append(showing)
    return unique


def sort_key(showing: Showing) -> tuple[str, str, str]:
    first_time = showing.times[0] if showing.times else ""
    return (showing.cinema or "", showing.date or "", first_time)


def sort_showings(showings: list[Showing]) -> list[Showing]:
    """Order by cinema, then date, then first showtime; missing keys sort first."""
    return sorted(showings, key=sort_key)


async def run_scrape_all(
    all_dates: bool = False,
    scrapers: list[BaseScraper] | None = None,
) -> ScrapeResult:
    """Run every scraper in turn and merge their showings.

    Scrapers run one after another. A scraper that fails contributes no
    showings and one ScrapeError; the others are unaffected.
    """
    if scrapers is None:
        scrapers = get_default_scrapers()

    logger.info(f"Starting scrape of {len(scrapers)} sources (all dates: {all_dates})")

    collected: list[Showing] = []
    errors: list[ScrapeError] = []

    for scraper in scrapers:
        name = scraper.name or scraper.__class__.__name__
        try:
            showings = await scraper.get_showings(all_dates=all_dates)
        except Exception as e:
            logger.error(f"Error scraping {name}: {e}", exc_info=True)
            errors.append(ScrapeError(source=name, message=str(e) or e.__class__.__name__))
            continue

        if scraper.error:
            errors.append(ScrapeError(source=name, message=scraper.error))

        logger.info(f"Found {len(showings)} VOSE showings from {name}")
        collected.extend(showings)

    unique = sort_showings(dedupe_showings(collected))

    logger.info(
        f"Scrape complete: {len(unique)} showings "
        f"({len(collected) - len(unique)} duplicates dropped), {len(errors)} errors"
    )
    return ScrapeResult(showings=unique, errors=errors)
