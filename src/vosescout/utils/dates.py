"""Date and time normalisation for Spanish cinema listings."""

import re
from datetime import date, datetime
from zoneinfo import ZoneInfo

from vosescout.config import settings

MONTHS_ES: dict[str, str] = {
    "enero": "01", "febrero": "02", "marzo": "03", "abril": "04",
    "mayo": "05", "junio": "06", "julio": "07", "agosto": "08",
    "septiembre": "09", "octubre": "10", "noviembre": "11", "diciembre": "12",
}

_ISO_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DMY_RE = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")
_DAY_MONTH_RE = re.compile(r"^(\d{1,2})\s+(\w+)$")
_TIME_RE = re.compile(r"^(\d{1,2})[:.](\d{2})(?::\d{2})?$")
_STRICT_TIME_RE = re.compile(r"^\d{2}:\d{2}$")


def local_today() -> date:
    """Today's date in the configured region timezone."""
    return datetime.now(ZoneInfo(settings.timezone)).date()


def today_iso() -> str:
    return local_today().isoformat()


def normalise_date(text: str | None, today: date | None = None) -> str | None:
    """
    Normalise a listing date to ISO format (YYYY-MM-DD).

    Handles "2026-02-10", "13/02/2026" and Spanish "10 febrero". A bare
    day and month name takes the year of ``today``.

    Unrecognised text is returned unchanged so it can still be displayed;
    use ``is_iso_date`` to detect that case.

    Args:
        text: Raw date text from the source
        today: Reference date for year-less input (defaults to local today)

    Returns:
        ISO date string, the original text, or None for empty input
    """
    if not text:
        return None

    text = text.strip()

    if _ISO_RE.match(text):
        return text

    dmy = _DMY_RE.match(text)
    if dmy:
        return f"{dmy.group(3)}-{dmy.group(2)}-{dmy.group(1)}"

    spanish = _DAY_MONTH_RE.match(text)
    if spanish:
        month = MONTHS_ES.get(spanish.group(2).lower())
        if month:
            day = spanish.group(1).zfill(2)
            year = (today or local_today()).year
            return f"{year}-{month}-{day}"

    return text


def is_iso_date(value: str | None) -> bool:
    """True if value is a real calendar date in YYYY-MM-DD form."""
    if not value or not _ISO_RE.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def normalise_time(text: str | None) -> str | None:
    """
    Normalise a showtime to zero-padded HH:MM.

    Accepts "9:30", "21:30", "21.30" and "21:30:00". Returns None for
    anything else, including out-of-range hours or minutes.
    """
    if not text:
        return None

    match = _TIME_RE.match(text.strip())
    if not match:
        return None

    hour = int(match.group(1))
    minute = int(match.group(2))
    if hour > 23 or minute > 59:
        return None

    return f"{hour:02d}:{minute:02d}"


def is_strict_time(value: str) -> bool:
    return bool(_STRICT_TIME_RE.match(value)) and normalise_time(value) == value
