"""Static HTML calendar page built from a scrape result."""

import calendar
import logging
from datetime import date, datetime
from html import escape
from pathlib import Path
from zoneinfo import ZoneInfo

from vosescout.config import settings
from vosescout.scrapers.models import Showing
from vosescout.tasks.scrape_job import ScrapeResult

logger = logging.getLogger(__name__)

MONTH_NAMES_ES = (
    "", "Enero", "Febrero", "Marzo", "Abril", "Mayo", "Junio",
    "Julio", "Agosto", "Septiembre", "Octubre", "Noviembre", "Diciembre",
)
DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

# cinema -> (background, border, text, badge)
CINEMA_COLORS: dict[str, tuple[str, str, str, str]] = {
    "Yelmo Premium Alisios": ("#fef3c7", "#f59e0b", "#92400e", "#f59e0b"),
    "Yelmo Las Arenas": ("#dbeafe", "#3b82f6", "#1e40af", "#3b82f6"),
    "Yelmo Vecindario": ("#dcfce7", "#22c55e", "#166534", "#22c55e"),
    "Artesiete Las Terrazas (Telde)": ("#fce7f3", "#ec4899", "#9d174d", "#ec4899"),
    "Ocine Premium 7 Palmas": ("#ede9fe", "#8b5cf6", "#5b21b6", "#8b5cf6"),
    "Cinesa El Muelle": ("#fee2e2", "#ef4444", "#991b1b", "#ef4444"),
}
DEFAULT_COLOR = ("#f3f4f6", "#9ca3af", "#374151", "#6b7280")

STYLE = """
  :root { --bg: #0f172a; --surface: #1e293b; --surface2: #334155;
          --text: #e2e8f0; --text-dim: #94a3b8; --accent: #38bdf8; --today-ring: #facc15; }
  * { box-sizing: border-box; margin: 0; padding: 0; }
  body { font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif;
         background: var(--bg); color: var(--text); padding: 20px; max-width: 1200px; margin: 0 auto; }
  header { text-align: center; padding: 30px 0 20px; }
  header h1 { font-size: 2rem; font-weight: 800; color: var(--accent); margin-bottom: 6px; }
  .subtitle { color: var(--text-dim); font-size: 0.9rem; }
  .legend { display: flex; flex-wrap: wrap; gap: 12px; justify-content: center; margin: 16px 0 30px; }
  .legend-item { display: flex; align-items: center; gap: 6px; font-size: 0.8rem; color: var(--text-dim); }
  .legend-dot { width: 10px; height: 10px; border-radius: 50%; }
  .month-block { margin-bottom: 40px; }
  .month-title { font-size: 1.4rem; font-weight: 700; margin-bottom: 12px; color: var(--accent); }
  .calendar-grid { display: grid; grid-template-columns: repeat(7, 1fr); gap: 2px;
                   background: var(--surface2); border-radius: 12px; overflow: hidden; }
  .day-header { background: var(--surface); text-align: center; padding: 10px 4px; font-weight: 600;
                font-size: 0.8rem; color: var(--text-dim); text-transform: uppercase; }
  .day-cell { background: var(--surface); min-height: 100px; padding: 6px; }
  .day-cell.empty { background: var(--bg); min-height: 60px; }
  .day-cell.past { opacity: 0.45; }
  .day-cell.today { box-shadow: inset 0 0 0 2px var(--today-ring); opacity: 1; }
  .day-number { font-size: 0.85rem; font-weight: 700; color: var(--text-dim); margin-bottom: 4px; }
  .day-cell.has-films .day-number { color: var(--text); }
  .films-list { display: flex; flex-direction: column; gap: 3px; }
  .film-link { text-decoration: none; display: block; }
  .film-chip { padding: 3px 6px; border-radius: 4px; font-size: 0.7rem; line-height: 1.3;
               display: flex; flex-wrap: wrap; align-items: baseline; gap: 3px; }
  .film-time { font-weight: 700; }
  .film-title-text { font-weight: 600; overflow: hidden; text-overflow: ellipsis; white-space: nowrap;
                     flex: 1; min-width: 0; }
  .film-cinema-badge { font-size: 0.55rem; font-weight: 700; color: white; padding: 1px 4px;
                       border-radius: 3px; text-transform: uppercase; }
  footer { text-align: center; padding: 30px 0; color: var(--text-dim); font-size: 0.8rem; }
  @media (max-width: 768px) {
    body { padding: 10px; }
    .day-cell { min-height: 70px; padding: 4px; }
    .film-cinema-badge { display: none; }
  }
"""


def group_by_day(showings: list[Showing]) -> dict[str, dict[int, list[Showing]]]:
    """Bucket dated showings as {"YYYY-MM": {day: [showing, ...]}}."""
    months: dict[str, dict[int, list[Showing]]] = {}
    for showing in showings:
        if not showing.date:
            continue
        year, month, day = showing.date.split("-")
        months.setdefault(f"{year}-{month}", {}).setdefault(int(day), []).append(showing)
    return months


def short_cinema(cinema: str) -> str:
    return cinema.replace("Yelmo ", "").replace("Artesiete ", "").replace(" (Telde)", "")


def _film_chip(film: Showing) -> str:
    bg, border, text, badge = CINEMA_COLORS.get(film.cinema, DEFAULT_COLOR)
    tooltip = escape(
        f"{film.title} — {film.cinema}\n{', '.join(film.times)}\n{film.language or ''}"
    ).replace("\n", "&#10;")
    return (
        f'<a href="{escape(film.url or "#")}" target="_blank" class="film-link">'
        f'<div class="film-chip" style="background:{bg};border-left:3px solid {border};'
        f'color:{text}" title="{tooltip}">'
        f'<span class="film-time">{escape(film.times[0])}</span>'
        f'<span class="film-title-text">{escape(film.title)}</span>'
        f'<span class="film-cinema-badge" style="background:{badge}">'
        f"{escape(short_cinema(film.cinema))}</span>"
        "</div></a>"
    )


def render_month(year_month: str, days: dict[int, list[Showing]], today: date) -> str:
    """Render one Monday-first month grid."""
    year, month = (int(part) for part in year_month.split("-"))
    start_day, days_in_month = calendar.monthrange(year, month)

    parts = [
        '<div class="month-block">',
        f'<h2 class="month-title">{MONTH_NAMES_ES[month]} {year}</h2>',
        '<div class="calendar-grid">',
    ]
    parts += [f'<div class="day-header">{name}</div>' for name in DAY_NAMES]
    parts += ['<div class="day-cell empty"></div>'] * start_day

    for day in range(1, days_in_month + 1):
        current = date(year, month, day)

        # One chip per film and cinema on a given day
        seen: set[tuple[str, str]] = set()
        films: list[Showing] = []
        for film in days.get(day, []):
            if (film.title, film.cinema) in seen:
                continue
            seen.add((film.title, film.cinema))
            films.append(film)

        classes = ["day-cell"]
        if current == today:
            classes.append("today")
        if current < today:
            classes.append("past")
        if films:
            classes.append("has-films")

        parts.append(f'<div class="{" ".join(classes)}">')
        parts.append(f'<div class="day-number">{day}</div>')
        if films:
            parts.append('<div class="films-list">')
            parts += [_film_chip(film) for film in films]
            parts.append("</div>")
        parts.append("</div>")

    remaining = (7 - (start_day + days_in_month) % 7) % 7
    parts += ['<div class="day-cell empty"></div>'] * remaining
    parts.append("</div></div>")
    return "\n".join(parts)


def render_legend() -> str:
    items = [
        f'<span class="legend-item"><span class="legend-dot" style="background:{badge}">'
        f"</span>{escape(cinema)}</span>"
        for cinema, (_, _, _, badge) in CINEMA_COLORS.items()
    ]
    return '<div class="legend">' + "".join(items) + "</div>"


def render_calendar(result: ScrapeResult, today: date | None = None) -> str:
    """Render the full calendar page for every month that has showings."""
    tz = ZoneInfo(settings.timezone)
    today = today or datetime.now(tz).date()
    months = group_by_day(result.showings)
    updated = result.generated_at.astimezone(tz).strftime("%A %d %B %Y, %H:%M")
    cinema_count = len({s.cinema for s in result.showings})

    body = "\n".join(render_month(ym, months[ym], today) for ym in sorted(months))

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>🎬 VOSE Gran Canaria</title>
<style>{STYLE}</style>
</head>
<body>
<header>
  <h1>🎬 VOSE Gran Canaria</h1>
  <p class="subtitle">Films in original version (VOSE/VO) at cinemas in Gran Canaria</p>
  <p class="subtitle">Updated: {escape(updated)}</p>
</header>
{render_legend()}
{body}
<footer>
  <p>Data from Yelmo, Artesiete, Ocine &amp; Cinesa.</p>
  <p>🎥 {result.total} showings found across {cinema_count} cinemas</p>
</footer>
</body>
</html>
"""


def write_calendar(path: str | Path, html: str) -> Path:
    """Write the page, creating parent directories as needed."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(html, encoding="utf-8")
    logger.info(f"Calendar written to {out}")
    return out
