"""Console rendering of a scrape result."""

from vosescout.scrapers.models import Showing
from vosescout.tasks.scrape_job import ScrapeResult

RULE = "═" * 66


def _group(showings: list[Showing], key) -> dict[str, list[Showing]]:
    groups: dict[str, list[Showing]] = {}
    for showing in showings:
        groups.setdefault(key(showing), []).append(showing)
    return groups


def format_text(result: ScrapeResult, all_dates: bool = False) -> str:
    """Render the result grouped by cinema, and by date when all dates were requested."""
    lines = ["", RULE, f"  🎬 VOSE / VO Films in Gran Canaria — {result.date}", RULE]

    if not result.showings:
        lines += [
            "",
            "  No VOSE/VO films found for today.",
            "  Try with --all-dates to see upcoming showings.",
        ]

    for cinema, films in _group(result.showings, lambda s: s.cinema).items():
        lines += ["", f"  🏢 {cinema}", "  " + "─" * 60]

        for day, day_films in _group(films, lambda s: s.date or "unknown").items():
            if all_dates:
                lines.append(f"    📅 {day}")
            for film in day_films:
                details = " | ".join(
                    part for part in (film.language, film.format, film.runtime) if part
                )
                lines.append(f"    🎥 {film.title}")
                if details:
                    lines.append(f"       {details}")
                lines.append(f"       🕐 {', '.join(film.times)}")

        url = films[0].url
        if url:
            lines.append(f"    🔗 {url}")

    lines.append("")
    if result.errors:
        lines.append("  ⚠️  Errors:")
        lines += [f"    • {error}" for error in result.errors]
        lines.append("")

    lines.append(RULE)
    return "\n".join(lines)
