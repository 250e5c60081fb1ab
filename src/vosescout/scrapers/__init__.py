"""Scraper registry for mapping source names to scraper factories."""

from typing import Callable

from vosescout.scrapers.artesiete import ArtesieteScraper
from vosescout.scrapers.base import BaseScraper
from vosescout.scrapers.headless import HeadlessScraper
from vosescout.scrapers.models import ScrapeError, Showing, ShowingCollector
from vosescout.scrapers.ocine import OcineScraper
from vosescout.scrapers.yelmo import YelmoScraper

# Registry mapping source names to scraper factories
SCRAPER_REGISTRY: dict[str, Callable[[], BaseScraper]] = {
    "yelmo": YelmoScraper,
    "artesiete": ArtesieteScraper,
    "ocine": OcineScraper,
    "cinesa": lambda: HeadlessScraper("cinesa"),
    "ocine-headless": lambda: HeadlessScraper("ocine"),
}

# Sources run on every scrape, in order
DEFAULT_SCRAPERS: tuple[str, ...] = ("yelmo", "artesiete", "ocine", "cinesa")


def get_scraper(name: str) -> BaseScraper | None:
    """
    Get a scraper instance by source name.

    Args:
        name: The source name (e.g., "yelmo", "cinesa")

    Returns:
        Scraper instance or None if name not found
    """
    factory = SCRAPER_REGISTRY.get(name)
    if factory:
        return factory()
    return None


def get_default_scrapers() -> list[BaseScraper]:
    """Fresh instances of every scraper in DEFAULT_SCRAPERS."""
    return [SCRAPER_REGISTRY[name]() for name in DEFAULT_SCRAPERS]


__all__ = [
    "SCRAPER_REGISTRY",
    "DEFAULT_SCRAPERS",
    "get_scraper",
    "get_default_scrapers",
    "BaseScraper",
    "ArtesieteScraper",
    "HeadlessScraper",
    "OcineScraper",
    "YelmoScraper",
    "ScrapeError",
    "Showing",
    "ShowingCollector",
]
