"""DOM heuristics shared by the HTML and headless-browser scrapers.

Cinema listing pages differ in markup but share a shape: a "card" per film
holding a heading and a row of showtime buttons. A card is kept when its
text mentions a VOSE marker, it has a heading and at least one showtime.
"""

import logging
import re
from dataclasses import dataclass, field

from bs4 import BeautifulSoup, Tag

from vosescout.scrapers.models import Showing, ShowingCollector
from vosescout.utils.dates import normalise_time
from vosescout.utils.text import clean_text, is_vose

logger = logging.getLogger(__name__)

_TIME_TEXT_RE = re.compile(r"^\d{1,2}[:.]\d{2}$")


@dataclass(frozen=True)
class CardProfile:
    """CSS selectors describing where cards, titles and times live on a page."""

    card_selectors: tuple[str, ...] = (
        "article",
        '[class*="movie"]',
        '[class*="Movie"]',
        '[class*="film"]',
    )
    title_selectors: tuple[str, ...] = ("h2", "h3", "h4", '[class*="title"]')
    time_selectors: tuple[str, ...] = ("button", "a", "span")

    @property
    def card_css(self) -> str:
        return ", ".join(self.card_selectors)

    @property
    def title_css(self) -> str:
        return ", ".join(self.title_selectors)

    @property
    def time_css(self) -> str:
        return ", ".join(self.time_selectors)


@dataclass
class CardMatch:
    """A VOSE film card extracted from a listing page."""

    title: str
    times: list[str] = field(default_factory=list)

    def key(self) -> tuple[str, str]:
        return (self.title, ",".join(self.times))


DEFAULT_PROFILE = CardProfile()


def _match_card(candidate: Tag, profile: CardProfile) -> CardMatch | None:
    """A card for this element if it has a VOSE marker, a title and times."""
    if not is_vose(candidate.get_text(" ")):
        return None

    title_elem = candidate.select_one(profile.title_css)
    if not title_elem:
        return None

    title = clean_text(title_elem.get_text(" "))
    if not title:
        return None

    times: list[str] = []
    for elem in candidate.select(profile.time_css):
        text = elem.get_text(strip=True)
        if not _TIME_TEXT_RE.match(text):
            continue
        time = normalise_time(text)
        if time and time not in times:
            times.append(time)

    if not times:
        return None
    return CardMatch(title=title, times=times)


def extract_cards(html: str, profile: CardProfile = DEFAULT_PROFILE) -> list[CardMatch]:
    """
    Find VOSE film cards in a listing page.

    A candidate that wraps another complete card (a grid or carousel around
    several films) is skipped in favour of the inner one.

    Args:
        html: Page HTML (static or browser-rendered)
        profile: Selectors for the site

    Returns:
        Cards with a title and at least one HH:MM time, de-duplicated by
        (title, times) so the same film at different times is kept
    """
    soup = BeautifulSoup(html, "html.parser")
    candidates = soup.select(profile.card_css)
    logger.debug(f"Found {len(candidates)} candidate cards")

    matches = [(candidate, _match_card(candidate, profile)) for candidate in candidates]
    # Tag equality compares markup, so track identity
    complete = {id(candidate) for candidate, match in matches if match}

    cards: list[CardMatch] = []
    seen: set[tuple[str, str]] = set()

    for candidate, card in matches:
        if card is None:
            continue
        if any(id(inner) in complete for inner in candidate.find_all(True)):
            continue
        if card.key() in seen:
            continue
        seen.add(card.key())
        cards.append(card)

    return cards


def build_showings(
    cards: list[CardMatch],
    cinema: str,
    date: str | None,
    url: str,
    source: str,
) -> list[Showing]:
    """Turn extracted cards into canonical showings, merging repeated titles."""
    collector = ShowingCollector()
    for card in cards:
        collector.add(
            cinema,
            card.title,
            date,
            card.times,
            language="VOSE",
            format="VOSE",
            url=url,
            source=source,
        )
    return collector.showings
