"""Unit tests for the scrape job: merge, dedupe, sort and failure isolation."""

from vosescout.scrapers import (
    DEFAULT_SCRAPERS,
    SCRAPER_REGISTRY,
    HeadlessScraper,
    YelmoScraper,
    get_default_scrapers,
    get_scraper,
)
from vosescout.scrapers.base import BaseScraper
from vosescout.scrapers.models import Showing
from vosescout.tasks.scrape_job import (
    dedupe_showings,
    run_scrape_all,
    sort_showings,
)
from vosescout.utils.dates import today_iso


def make_showing(**overrides) -> Showing:
    fields = {
        "cinema": "Yelmo Las Arenas",
        "title": "Past Lives",
        "date": "2026-02-13",
        "times": ["19:00"],
        "language": "VOSE",
        "format": "2D VOSE",
        "source": "test",
    }
    fields.update(overrides)
    return Showing(**fields)


class StaticScraper(BaseScraper):
    """Returns a fixed list of showings."""

    source = "static"

    def __init__(self, name: str, showings: list[Showing]) -> None:
        super().__init__()
        self.name = name
        self._showings = showings
        self.calls: list[bool] = []

    async def get_showings(self, all_dates: bool = False) -> list[Showing]:
        self._start(all_dates)
        self.calls.append(all_dates)
        return list(self._showings)


class ExplodingScraper(BaseScraper):
    """Raises out of get_showings, breaking the scraper contract."""

    name = "Exploding"

    async def get_showings(self, all_dates: bool = False) -> list[Showing]:
        raise RuntimeError("connection reset")


class SelfReportingScraper(BaseScraper):
    """Fails the way real scrapers do: logs, records the error, returns []."""

    name = "Self-reporting"

    async def get_showings(self, all_dates: bool = False) -> list[Showing]:
        self._start(all_dates)
        try:
            raise ConnectionError("HTTP 503")
        except Exception as e:
            return self._fail(e)


class TestDedupeShowings:
    def test_drops_exact_repeats_from_different_sources(self) -> None:
        a = make_showing(source="ocine-html")
        b = make_showing(source="headless-browser")
        assert dedupe_showings([a, b]) == [a]

    def test_keeps_same_title_with_different_times(self) -> None:
        a = make_showing(times=["19:00"])
        b = make_showing(times=["21:30"])
        assert dedupe_showings([a, b]) == [a, b]

    def test_is_idempotent(self) -> None:
        showings = [
            make_showing(),
            make_showing(),
            make_showing(times=["21:30"]),
            make_showing(cinema="Yelmo Vecindario"),
            make_showing(date=None),
        ]
        once = dedupe_showings(showings)
        assert dedupe_showings(once) == once
        assert len(once) == 4


class TestSortShowings:
    def test_orders_by_cinema_then_date_then_first_time(self) -> None:
        b = make_showing(cinema="B", date="2026-01-02", times=["18:00"])
        a = make_showing(cinema="A", date="2026-01-01", times=["10:00"])
        assert sort_showings([b, a]) == [a, b]

    def test_orders_by_date_within_cinema(self) -> None:
        later = make_showing(date="2026-02-14", times=["10:00"])
        earlier = make_showing(date="2026-02-13", times=["22:00"])
        assert sort_showings([later, earlier]) == [earlier, later]

    def test_orders_by_first_time_within_date(self) -> None:
        late = make_showing(title="Late", times=["22:00", "10:00"])
        early = make_showing(title="Early", times=["18:00"])
        assert sort_showings([late, early]) == [early, late]

    def test_missing_date_sorts_first(self) -> None:
        dated = make_showing(date="2026-02-13")
        undated = make_showing(date=None)
        assert sort_showings([dated, undated]) == [undated, dated]

    def test_comparison_is_lexicographic(self) -> None:
        lower = make_showing(cinema="Yelmo vecindario")
        upper = make_showing(cinema="Yelmo Vecindario")
        assert sort_showings([lower, upper]) == [upper, lower]


class TestRunScrapeAll:
    async def test_merges_and_sorts_results_from_all_scrapers(self) -> None:
        first = StaticScraper("First", [make_showing(cinema="B")])
        second = StaticScraper("Second", [make_showing(cinema="A")])

        result = await run_scrape_all(scrapers=[first, second])

        assert [s.cinema for s in result.showings] == ["A", "B"]
        assert result.total == 2
        assert result.errors == []

    async def test_dedupes_overlap_between_scrapers(self) -> None:
        first = StaticScraper("Ocine", [make_showing(source="ocine-html")])
        second = StaticScraper("Ocine headless", [make_showing(source="headless-browser")])

        result = await run_scrape_all(scrapers=[first, second])

        assert result.total == 1
        assert result.showings[0].source == "ocine-html"

    async def test_passes_all_dates_to_every_scraper(self) -> None:
        first = StaticScraper("First", [])
        second = StaticScraper("Second", [])

        await run_scrape_all(all_dates=True, scrapers=[first, second])

        assert first.calls == [True]
        assert second.calls == [True]

    async def test_raising_scraper_does_not_affect_others(self) -> None:
        good = StaticScraper("Good", [make_showing(), make_showing(cinema="Yelmo Vecindario")])

        result = await run_scrape_all(scrapers=[ExplodingScraper(), good])

        assert result.total == 2
        assert len(result.errors) == 1
        assert result.errors[0].source == "Exploding"
        assert result.errors[0].message == "connection reset"

    async def test_self_reported_failure_is_one_error_entry(self) -> None:
        good = StaticScraper("Good", [make_showing()])

        result = await run_scrape_all(scrapers=[good, SelfReportingScraper()])

        assert result.total == 1
        assert [str(e) for e in result.errors] == ["Self-reporting: HTTP 503"]

    async def test_empty_run_is_valid(self) -> None:
        result = await run_scrape_all(scrapers=[StaticScraper("Empty", [])])
        assert result.showings == []
        assert result.errors == []

    async def test_end_to_end_single_vose_film(self) -> None:
        api = StaticScraper(
            "Mock API",
            [
                make_showing(
                    cinema="Yelmo Premium Alisios",
                    title="Dune: Part Two",
                    language="V.O.S.E.",
                    date=today_iso(),
                    times=["20:30", "22:45"],
                )
            ],
        )
        html = StaticScraper("Mock HTML", [])

        result = await run_scrape_all(scrapers=[api, html])

        assert result.total == 1
        assert result.showings[0].times == ["20:30", "22:45"]
        assert result.date == today_iso()


class TestRegistry:
    def test_default_scrapers_are_registered(self) -> None:
        assert set(DEFAULT_SCRAPERS) <= set(SCRAPER_REGISTRY)
        assert "ocine-headless" not in DEFAULT_SCRAPERS

    def test_get_scraper_returns_fresh_instances(self) -> None:
        first = get_scraper("yelmo")
        assert isinstance(first, YelmoScraper)
        assert get_scraper("yelmo") is not first

    def test_get_scraper_unknown_name(self) -> None:
        assert get_scraper("kinepolis") is None

    def test_headless_entries_wrap_their_target(self) -> None:
        cinesa = get_scraper("cinesa")
        assert isinstance(cinesa, HeadlessScraper)
        assert cinesa.target.key == "cinesa"
        assert get_scraper("ocine-headless").target.key == "ocine"

    def test_get_default_scrapers_order(self) -> None:
        names = [s.source for s in get_default_scrapers()]
        assert names == ["yelmo-api", "artesiete-api", "ocine-html", "headless-browser"]
