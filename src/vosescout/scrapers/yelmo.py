"""Yelmo Cines scraper using the now-playing JSON endpoint.

Yelmo publishes the whole Las Palmas region in one call:

    POST /now-playing.aspx/GetNowPlaying  {"cityKey": "las-palmas"}

The response is an ASP.NET page-method envelope::

    {"d": {"Cinemas": [{"Key", "Name", "Dates": [{"ShowtimeDate": "10 febrero",
        "Movies": [{"Title", "Rating", "RunTime", "Poster",
            "Formats": [{"Name", "Language", "Showtimes": [{"Time"}]}]}]}]}]}}
"""

import logging
from datetime import date

import httpx

from vosescout.config import settings
from vosescout.scrapers.base import BaseScraper
from vosescout.scrapers.models import Showing, ShowingCollector
from vosescout.utils.dates import is_iso_date, normalise_date, normalise_time
from vosescout.utils.text import is_vose

logger = logging.getLogger(__name__)

NOW_PLAYING_URL = "https://www.yelmocines.es/now-playing.aspx/GetNowPlaying"
CARTELERA_URL = "https://www.yelmocines.es/cartelera"
CITY_KEY = "las-palmas"

# Yelmo cinema keys on Gran Canaria (the las-palmas city also lists other islands)
GRAN_CANARIA_CINEMAS = frozenset({"premium-alisios", "las-arenas", "vecindario"})


def parse_payload(
    payload: dict,
    today: date,
    all_dates: bool = False,
) -> list[Showing]:
    """
    Map a GetNowPlaying response to canonical showings.

    Args:
        payload: Decoded JSON response
        today: Local date used for year-less dates and the today-only filter
        all_dates: Keep every date instead of today only

    Returns:
        One Showing per (cinema, title, date), formats and times merged

    Raises:
        ValueError: If the response has no ``d.Cinemas`` list
    """
    data = payload.get("d") if isinstance(payload, dict) else None
    cinemas = data.get("Cinemas") if isinstance(data, dict) else None
    if not isinstance(cinemas, list):
        raise ValueError("unexpected response: no d.Cinemas list")

    collector = ShowingCollector()
    for cinema in cinemas:
        key = cinema.get("Key")
        if key not in GRAN_CANARIA_CINEMAS:
            continue

        cinema_name = f"Yelmo {cinema.get('Name', key)}"

        for day in cinema.get("Dates") or []:
            raw_date = day.get("ShowtimeDate")
            date_str = normalise_date(raw_date, today)
            if not is_iso_date(date_str):
                logger.warning(f"Yelmo ({key}): unrecognised date {raw_date!r}, skipping")
                continue
            if not all_dates and date_str != today.isoformat():
                continue

            for movie in day.get("Movies") or []:
                for fmt in movie.get("Formats") or []:
                    try:
                        _add_format(collector, cinema_name, key, date_str, movie, fmt)
                    except (ValueError, TypeError, AttributeError) as e:
                        logger.warning(
                            f"Yelmo ({key}): failed to parse format for "
                            f"{movie.get('Title')!r}: {e}"
                        )

    return collector.showings


def _add_format(
    collector: ShowingCollector,
    cinema_name: str,
    cinema_key: str,
    date_str: str,
    movie: dict,
    fmt: dict,
) -> None:
    language = fmt.get("Language") or ""
    if not is_vose(language):
        return

    times = [
        t for t in (normalise_time(s.get("Time")) for s in fmt.get("Showtimes") or []) if t
    ]
    title = (movie.get("Title") or "").strip()
    if not title or not times:
        return

    runtime = movie.get("RunTime")
    collector.add(
        cinema_name,
        title,
        date_str,
        times,
        language=language,
        format=fmt.get("Name"),
        rating=movie.get("Rating"),
        runtime=f"{runtime} min" if runtime else None,
        poster=movie.get("Poster"),
        url=f"{CARTELERA_URL}/{cinema_key}",
        source=YelmoScraper.source,
    )


class YelmoScraper(BaseScraper):
    """Scraper for the Yelmo Cines venues on Gran Canaria."""

    name = "Yelmo"
    source = "yelmo-api"

    async def get_showings(self, all_dates: bool = False) -> list[Showing]:
        """Fetch VOSE showings from the Yelmo now-playing endpoint."""
        self._start(all_dates)

        try:
            async with httpx.AsyncClient(timeout=settings.scrape_timeout) as client:
                response = await client.post(
                    NOW_PLAYING_URL,
                    json={"cityKey": CITY_KEY},
                    headers=self._headers(Accept="application/json"),
                )
                response.raise_for_status()
                payload = response.json()

            showings = parse_payload(payload, self.today, all_dates)

        except Exception as e:
            return self._fail(e)

        logger.info(f"Yelmo: Found {len(showings)} VOSE showings")
        return showings
