"""Artesiete Las Terrazas (Telde) scraper.

Artesiete's site is a Laravel/Vue app with no listing API. Strategy
(two-phase fetch):
  1. GET the cinema page and read the film list from the HTML-entity
     encoded ``:onlytitlesinfo='[...]'`` Vue prop.
  2. GET /TitlesHoursAtTheater/{theater}/{film id} for each film. The JSON
     response has ``sessions`` with ``NombreFormato`` (e.g. "2D VOSE"),
     ``NCopia`` ("13/02/2026") and ``HoraCine`` ("2026-02-13T20:30:00").

A failed detail request only loses that film.
"""

import html
import json
import logging
import re
from datetime import date
from urllib.parse import quote

import httpx

from vosescout.config import settings
from vosescout.scrapers.base import BaseScraper
from vosescout.scrapers.models import Showing, ShowingCollector
from vosescout.utils.dates import is_iso_date, normalise_date, normalise_time
from vosescout.utils.text import is_vose

logger = logging.getLogger(__name__)

BASE_URL = "https://terrazas.artesiete.es"
PAGE_URL = f"{BASE_URL}/Cine/1/Artesiete-terrazas"
THEATER_NAME = "ARTESIETE Las Terrazas"
CINEMA_NAME = "Artesiete Las Terrazas (Telde)"

_TITLES_PROP_RE = re.compile(r":onlytitlesinfo='(\[.*?\])'\s", re.DOTALL)


def extract_film_list(page_html: str) -> list[dict] | None:
    """Return the films embedded in the cinema page, or None if absent."""
    match = _TITLES_PROP_RE.search(page_html)
    if not match:
        return None
    return json.loads(html.unescape(match.group(1)))


def parse_sessions(
    film: dict,
    detail: dict,
    collector: ShowingCollector,
    today: date,
    all_dates: bool = False,
) -> int:
    """
    Merge one film's VOSE sessions into the collector.

    Args:
        film: Entry from the page's film list (``ID_Espectaculo``, ``Titulo``)
        detail: Decoded TitlesHoursAtTheater response
        collector: Accumulator shared by every film in the pass
        today: Local date for the today-only filter
        all_dates: Keep every date instead of today only

    Returns:
        Number of sessions added
    """
    title = (film.get("Titulo") or "").strip()
    if not title:
        return 0

    added = 0
    for session in detail.get("sessions") or []:
        fmt = session.get("NombreFormato") or ""
        if not is_vose(fmt):
            continue

        hora = session.get("HoraCine") or ""
        raw_date = session.get("NCopia") or hora[:10]
        date_str = normalise_date(raw_date, today)
        if not is_iso_date(date_str):
            logger.warning(f"Artesiete: unrecognised date {raw_date!r} for {title!r}")
            continue
        if not all_dates and date_str != today.isoformat():
            continue

        time = normalise_time(hora[11:16])
        if not time:
            logger.warning(f"Artesiete: no showtime in {hora!r} for {title!r}")
            continue

        film_info = session.get("film") or detail.get("film") or {}
        runtime = film_info.get("Duracion")
        try:
            collector.add(
                CINEMA_NAME,
                title,
                date_str,
                [time],
                language="Versión Original" if "VO" in fmt.upper() else fmt,
                format=fmt,
                rating=film_info.get("AbreviaturaCalificacion"),
                runtime=f"{runtime} min" if runtime else None,
                url=PAGE_URL,
                source=ArtesieteScraper.source,
            )
            added += 1
        except ValueError as e:
            logger.warning(f"Artesiete: skipping session for {title!r}: {e}")

    return added


class ArtesieteScraper(BaseScraper):
    """Scraper for Artesiete Las Terrazas in Telde."""

    name = "Artesiete"
    source = "artesiete-api"

    async def get_showings(self, all_dates: bool = False) -> list[Showing]:
        """Fetch VOSE showings, one detail request per film."""
        self._start(all_dates)

        try:
            async with httpx.AsyncClient(
                timeout=settings.scrape_timeout, follow_redirects=True
            ) as client:
                showings = await self._fetch(client)
        except Exception as e:
            return self._fail(e)

        logger.info(f"Artesiete: Found {len(showings)} VO/VOSE showings")
        return showings

    async def _fetch(self, client: httpx.AsyncClient) -> list[Showing]:
        # Phase 1: film list from the cinema page
        response = await client.get(PAGE_URL, headers=self._headers(Accept="text/html"))
        response.raise_for_status()

        films = extract_film_list(response.text)
        if films is None:
            raise ValueError("film data not found in page")

        logger.debug(f"Artesiete: {len(films)} films, checking for VO/VOSE sessions")

        # Phase 2: sessions per film
        collector = ShowingCollector()
        for film in films:
            if not isinstance(film, dict):
                logger.warning(f"Artesiete: skipping malformed film entry {film!r}")
                continue
            film_id = film.get("ID_Espectaculo")
            if film_id is None:
                continue
            try:
                detail = await self._fetch_detail(client, film_id)
                parse_sessions(film, detail, collector, self.today, self.all_dates)
            except Exception as e:
                logger.warning(f"Artesiete: error fetching film {film_id}: {e}")
                continue

        return collector.showings

    async def _fetch_detail(self, client: httpx.AsyncClient, film_id: int | str) -> dict:
        url = f"{BASE_URL}/TitlesHoursAtTheater/{quote(THEATER_NAME)}/{film_id}"
        response = await client.get(
            url,
            headers=self._headers(
                Accept="application/json",
                **{"X-Requested-With": "XMLHttpRequest"},
            ),
        )
        response.raise_for_status()
        return response.json()
