"""Data models for scrapers."""

from dataclasses import asdict, dataclass

from vosescout.utils.dates import is_iso_date, is_strict_time


@dataclass
class Showing:
    """
    Canonical VOSE showing record.

    This is the output format that all scrapers must return: one record per
    (cinema, title, date) with every showtime found for it.
    """

    cinema: str  # Venue display name
    title: str  # Film title as it appears on the cinema website
    date: str | None  # ISO date (YYYY-MM-DD) or None if unknown
    times: list[str]  # Showtimes, HH:MM, no duplicates
    language: str | None = None  # e.g., "VOSE", "Versión Original"
    format: str | None = None  # e.g., "2D VOSE", "VOSE, 3D VOSE"
    rating: str | None = None
    runtime: str | None = None  # e.g., "120 min"
    poster: str | None = None
    url: str | None = None
    source: str = ""  # Scraper tag, e.g. "yelmo-api"

    def __post_init__(self) -> None:
        """Validate the date and showtimes, dropping duplicate times."""
        if self.date is not None and not is_iso_date(self.date):
            raise ValueError(f"date must be ISO formatted, got {self.date!r}")

        times: list[str] = []
        for t in self.times:
            if not is_strict_time(t):
                raise ValueError(f"showtime must be HH:MM, got {t!r}")
            if t not in times:
                times.append(t)
        if not times:
            raise ValueError("a showing needs at least one showtime")
        self.times = times

    def add_time(self, time: str) -> None:
        if not is_strict_time(time):
            raise ValueError(f"showtime must be HH:MM, got {time!r}")
        if time not in self.times:
            self.times.append(time)

    def add_format(self, label: str | None) -> None:
        if not label:
            return
        if not self.format:
            self.format = label
        elif label not in self.format:
            self.format = f"{self.format}, {label}"

    def key(self) -> tuple[str, str, str, str]:
        """Composite identity used for cross-source deduplication."""
        return (self.cinema, self.title, self.date or "", ",".join(self.times))

    def to_dict(self) -> dict:
        return asdict(self)


class ShowingCollector:
    """
    Accumulates showings for one scraper pass.

    Sessions for the same (cinema, title, date) are merged into a single
    Showing rather than emitted twice. Insertion order is preserved.
    """

    def __init__(self) -> None:
        self._showings: dict[tuple[str, str, str | None], Showing] = {}

    def add(
        self,
        cinema: str,
        title: str,
        date: str | None,
        times: list[str],
        **details: str | None,
    ) -> Showing:
        """Merge the session into an existing record or create a new one."""
        key = (cinema, title, date)
        existing = self._showings.get(key)
        if existing:
            for t in times:
                existing.add_time(t)
            existing.add_format(details.get("format"))
            return existing

        showing = Showing(cinema=cinema, title=title, date=date, times=list(times), **details)
        self._showings[key] = showing
        return showing

    def __len__(self) -> int:
        return len(self._showings)

    @property
    def showings(self) -> list[Showing]:
        return list(self._showings.values())


@dataclass
class ScrapeError:
    """A scraper-level failure recorded for diagnostics."""

    source: str
    message: str

    def __str__(self) -> str:
        return f"{self.source}: {self.message}"
