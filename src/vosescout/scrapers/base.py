"""Base scraper interface for all cinema scrapers."""

import logging
from abc import ABC, abstractmethod
from datetime import date

from vosescout.config import settings
from vosescout.scrapers.models import Showing
from vosescout.utils.dates import local_today

logger = logging.getLogger(__name__)


class BaseScraper(ABC):
    """
    Abstract base class for all cinema scrapers.

    All scrapers must implement the get_showings method. A scraper that fails
    returns an empty list and leaves the reason in ``error``; "failed" and
    "found nothing" look the same to the caller apart from that attribute.
    """

    name: str = ""  # Human-readable source name used in diagnostics
    source: str = ""  # Tag stored on every Showing this scraper produces

    def __init__(self) -> None:
        self.error: str | None = None
        self.all_dates = False
        self.today: date = local_today()

    @abstractmethod
    async def get_showings(self, all_dates: bool = False) -> list[Showing]:
        """
        Fetch VOSE showings from this source.

        Args:
            all_dates: Keep every published date instead of today only

        Returns:
            List of canonical showings

        Raises:
            Should NOT raise exceptions. Return empty list on errors and log them.
        """
        pass

    def _start(self, all_dates: bool) -> None:
        """Reset per-run state before a fetch."""
        self.error = None
        self.all_dates = all_dates
        self.today = local_today()

    def _fail(self, exc: BaseException) -> list[Showing]:
        """Record a top-level failure and return the empty result."""
        self.error = str(exc) or exc.__class__.__name__
        logger.error(f"{self.name} scraper error: {self.error}", exc_info=True)
        return []

    def _headers(self, **extra: str) -> dict[str, str]:
        headers = {
            "User-Agent": settings.user_agent,
            "Accept-Language": settings.accept_language,
        }
        headers.update(extra)
        return headers
