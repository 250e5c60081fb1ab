"""Ocine Premium 7 Palmas scraper (static HTML).

The cartelera is a Livewire page: the first paint is rendered on the server,
so a plain GET already contains the film cards. Cards carry no date; the
page lists today's programme, so showings are dated today.
"""

import logging

import httpx

from vosescout.config import settings
from vosescout.scrapers.base import BaseScraper
from vosescout.scrapers.dom import CardProfile, build_showings, extract_cards
from vosescout.scrapers.models import Showing

logger = logging.getLogger(__name__)

CINEMA_NAME = "Ocine Premium 7 Palmas"
CARTELERA_URL = "https://www.ocine.es/cines/premium-7-palmas/cartelera"

OCINE_PROFILE = CardProfile(
    card_selectors=("article", '[class*="movie"]', ".swiper-slide", 'div[class*="flex"]'),
    title_selectors=("h1", "h2", "h3", "h4", '[class*="title"]'),
    time_selectors=("button", "span", "a"),
)


class OcineScraper(BaseScraper):
    """Scraper for Ocine Premium 7 Palmas in Las Palmas."""

    name = "Ocine"
    source = "ocine-html"

    async def get_showings(self, all_dates: bool = False) -> list[Showing]:
        """Fetch the cartelera and extract VOSE cards."""
        self._start(all_dates)

        try:
            async with httpx.AsyncClient(
                timeout=settings.scrape_timeout, follow_redirects=True
            ) as client:
                response = await client.get(
                    CARTELERA_URL,
                    headers=self._headers(
                        Accept="text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
                    ),
                )
                response.raise_for_status()

            showings = self._parse_html(response.text)

        except Exception as e:
            return self._fail(e)

        logger.info(f"Ocine: Found {len(showings)} VOSE showings")
        return showings

    def _parse_html(self, html: str) -> list[Showing]:
        cards = extract_cards(html, OCINE_PROFILE)
        return build_showings(
            cards,
            cinema=CINEMA_NAME,
            date=self.today.isoformat(),
            url=CARTELERA_URL,
            source=self.source,
        )
