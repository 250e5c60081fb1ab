"""Unit tests for the Artesiete Las Terrazas scraper."""

import json
from datetime import date
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest

from conftest import mock_client, mock_response
from vosescout.scrapers.artesiete import (
    CINEMA_NAME,
    ArtesieteScraper,
    extract_film_list,
    parse_sessions,
)
from vosescout.scrapers.models import ShowingCollector

FIXTURE_DIR = Path(__file__).parent / "fixtures" / "artesiete"
TODAY = date(2026, 2, 13)


@pytest.fixture
def page_html() -> str:
    return (FIXTURE_DIR / "cinema_page.html").read_text()


@pytest.fixture
def sessions_101() -> dict:
    return json.loads((FIXTURE_DIR / "sessions_101.json").read_text())


@pytest.fixture
def sessions_102() -> dict:
    return json.loads((FIXTURE_DIR / "sessions_102.json").read_text())


# ---------------------------------------------------------------------------
# extract_film_list — pure parsing, no HTTP
# ---------------------------------------------------------------------------


class TestArtesieteExtractFilmList:
    def test_decodes_entity_encoded_prop(self, page_html: str) -> None:
        films = extract_film_list(page_html)
        assert films == [
            {"ID_Espectaculo": 101, "Titulo": "Anatomía de una caída"},
            {"ID_Espectaculo": 102, "Titulo": "Oppenheimer"},
            {"ID_Espectaculo": 103, "Titulo": "Wonka"},
        ]

    def test_returns_none_when_prop_missing(self) -> None:
        assert extract_film_list("<html><body>Mantenimiento</body></html>") is None


# ---------------------------------------------------------------------------
# parse_sessions — pure parsing, no HTTP
# ---------------------------------------------------------------------------


class TestArtesieteParseSessions:
    def setup_method(self) -> None:
        self.collector = ShowingCollector()
        self.film = {"ID_Espectaculo": 101, "Titulo": "Anatomía de una caída"}

    def test_merges_sessions_into_one_record_per_date(self, sessions_101: dict) -> None:
        parse_sessions(self.film, sessions_101, self.collector, TODAY)

        assert len(self.collector) == 1
        showing = self.collector.showings[0]
        assert showing.cinema == CINEMA_NAME
        assert showing.date == "2026-02-13"
        assert showing.times == ["18:00", "21:30"]

    def test_ignores_dubbed_sessions(self, sessions_101: dict) -> None:
        parse_sessions(self.film, sessions_101, self.collector, TODAY)
        assert "17:00" not in self.collector.showings[0].times

    def test_all_dates_keeps_later_days(self, sessions_101: dict) -> None:
        parse_sessions(self.film, sessions_101, self.collector, TODAY, all_dates=True)
        assert [(s.date, s.times) for s in self.collector.showings] == [
            ("2026-02-13", ["18:00", "21:30"]),
            ("2026-02-14", ["20:00"]),
        ]

    def test_maps_rating_runtime_and_language(self, sessions_101: dict) -> None:
        parse_sessions(self.film, sessions_101, self.collector, TODAY)
        showing = self.collector.showings[0]
        assert showing.rating == "+12"
        assert showing.runtime == "151 min"
        assert showing.language == "Versión Original"
        assert showing.format == "2D VOSE"
        assert showing.source == "artesiete-api"

    def test_falls_back_to_hora_cine_date_and_session_film_info(
        self, sessions_102: dict
    ) -> None:
        film = {"ID_Espectaculo": 102, "Titulo": "Oppenheimer"}
        parse_sessions(film, sessions_102, self.collector, TODAY)

        showing = self.collector.showings[0]
        assert showing.date == "2026-02-13"
        assert showing.times == ["19:15"]
        assert showing.rating == "+16"
        assert showing.runtime == "180 min"

    def test_skips_session_with_unrecognised_date(self) -> None:
        detail = {"sessions": [{"NombreFormato": "VOSE", "NCopia": "pronto", "HoraCine": ""}]}
        assert parse_sessions(self.film, detail, self.collector, TODAY, all_dates=True) == 0
        assert len(self.collector) == 0

    def test_skips_film_without_title(self, sessions_101: dict) -> None:
        assert parse_sessions({"ID_Espectaculo": 1}, sessions_101, self.collector, TODAY) == 0


# ---------------------------------------------------------------------------
# get_showings — mocked HTTP
# ---------------------------------------------------------------------------


class TestArtesieteGetShowings:
    async def test_detail_failure_skips_only_that_film(
        self,
        page_html: str,
        sessions_101: dict,
        sessions_102: dict,
        fixed_today: date,
    ) -> None:
        requested: list[str] = []

        async def get(url: str, **kwargs: object):
            requested.append(url)
            if url.endswith("/101"):
                return mock_response(json_data=sessions_101)
            if url.endswith("/102"):
                return mock_response(json_data=sessions_102)
            if url.endswith("/103"):
                error = httpx.HTTPStatusError("500", request=None, response=None)
                return mock_response(status_code=500, error=error)
            return mock_response(text=page_html)

        scraper = ArtesieteScraper()
        with patch("httpx.AsyncClient", return_value=mock_client(get=get)):
            showings = await scraper.get_showings()

        assert [s.title for s in showings] == ["Anatomía de una caída", "Oppenheimer"]
        assert scraper.error is None
        assert len(requested) == 4
        assert requested[1].endswith("/TitlesHoursAtTheater/ARTESIETE%20Las%20Terrazas/101")

    async def test_network_error_on_detail_is_also_skipped(
        self, page_html: str, sessions_102: dict, fixed_today: date
    ) -> None:
        async def get(url: str, **kwargs: object):
            if url.endswith("/101"):
                raise httpx.ConnectError("connection refused")
            if url.endswith("/102"):
                return mock_response(json_data=sessions_102)
            if url.endswith("/103"):
                return mock_response(json_data={"sessions": []})
            return mock_response(text=page_html)

        with patch("httpx.AsyncClient", return_value=mock_client(get=get)):
            showings = await ArtesieteScraper().get_showings()

        assert [s.title for s in showings] == ["Oppenheimer"]

    async def test_missing_film_data_is_reported_as_failure(self, fixed_today: date) -> None:
        async def get(url: str, **kwargs: object):
            return mock_response(text="<html>Mantenimiento</html>")

        scraper = ArtesieteScraper()
        with patch("httpx.AsyncClient", return_value=mock_client(get=get)):
            showings = await scraper.get_showings()

        assert showings == []
        assert scraper.error == "film data not found in page"

    async def test_malformed_film_entry_is_skipped(
        self, sessions_102: dict, fixed_today: date
    ) -> None:
        page = (
            "<cartelera-cine :onlytitlesinfo='[null, "
            "{&quot;ID_Espectaculo&quot;:102,&quot;Titulo&quot;:&quot;Oppenheimer&quot;}]' "
            ':idcine="1"></cartelera-cine>'
        )

        async def get(url: str, **kwargs: object):
            if url.endswith("/102"):
                return mock_response(json_data=sessions_102)
            return mock_response(text=page)

        scraper = ArtesieteScraper()
        with patch("httpx.AsyncClient", return_value=mock_client(get=get)):
            showings = await scraper.get_showings()

        assert [s.title for s in showings] == ["Oppenheimer"]
        assert scraper.error is None

    async def test_page_failure_records_error(self, fixed_today: date) -> None:
        async def get(url: str, **kwargs: object):
            raise httpx.ConnectTimeout("timed out")

        scraper = ArtesieteScraper()
        with patch("httpx.AsyncClient", return_value=mock_client(get=get)):
            showings = await scraper.get_showings()

        assert showings == []
        assert scraper.error == "timed out"
