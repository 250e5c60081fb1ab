"""Headless-browser scraper for client-rendered cinema pages.

Cinesa El Muelle is a React app behind Cloudflare and Ocine's Livewire
cartelera fills in its sessions after load, so neither can be read with a
plain GET. Strategy:
  1. Launch Chromium (a locally installed Chrome if one is found) through
     playwright-stealth.
  2. Navigate, dismiss the cookie banner, scroll and wait a fixed settle
     period so asynchronous content lands.
  3. Run the shared card heuristics over ``page.content()``.

By default the browser runs in a child process (``vosescout-headless``) so a
crashed or hung browser cannot take the main run down with it.
"""

import asyncio
import json
import logging
import os
import shutil
import signal
import sys
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from playwright.async_api import Page, async_playwright
from playwright_stealth import Stealth

from vosescout.config import settings
from vosescout.scrapers.base import BaseScraper
from vosescout.scrapers.dom import CardProfile, build_showings, extract_cards
from vosescout.scrapers.models import Showing
from vosescout.scrapers.ocine import CARTELERA_URL as OCINE_URL
from vosescout.scrapers.ocine import CINEMA_NAME as OCINE_NAME
from vosescout.scrapers.ocine import OCINE_PROFILE

logger = logging.getLogger(__name__)

SOURCE = "headless-browser"


@dataclass(frozen=True)
class HeadlessTarget:
    """A page that must be rendered before it can be scraped."""

    key: str
    name: str
    url: str
    profile: CardProfile


TARGETS: dict[str, HeadlessTarget] = {
    "ocine": HeadlessTarget(
        key="ocine",
        name=OCINE_NAME,
        url=OCINE_URL,
        profile=OCINE_PROFILE,
    ),
    "cinesa": HeadlessTarget(
        key="cinesa",
        name="Cinesa El Muelle",
        url="https://www.cinesa.es/cines/cinesa-el-muelle/",
        profile=CardProfile(
            card_selectors=('[class*="movie"]', '[class*="Movie"]', "article"),
            title_selectors=('[class*="title"]', '[class*="Title"]', "h2", "h3"),
            time_selectors=("button", "a", "span"),
        ),
    ),
}

# Commands looked up on PATH, then fixed install locations, in order
BROWSER_COMMANDS = (
    "google-chrome",
    "google-chrome-stable",
    "chromium",
    "chromium-browser",
    "chrome",
)
BROWSER_PATHS = (
    "/usr/bin/google-chrome",
    "/usr/bin/google-chrome-stable",
    "/usr/bin/chromium",
    "/usr/bin/chromium-browser",
    "/snap/bin/chromium",
    "/opt/google/chrome/chrome",
    "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome",
    "/Applications/Chromium.app/Contents/MacOS/Chromium",
    r"C:\Program Files\Google\Chrome\Application\chrome.exe",
    r"C:\Program Files (x86)\Google\Chrome\Application\chrome.exe",
)

# Cookie-consent accept buttons seen on Spanish cinema sites
CONSENT_SELECTORS = (
    "#onetrust-accept-btn-handler",
    "#didomi-notice-agree-button",
    "#CybotCookiebotDialogBodyLevelButtonLevelOptinAllowAll",
    "button[class*='cookie'][class*='accept']",
    "[class*='cookie'] button[class*='accept']",
    "button:has-text('Aceptar todas')",
    "button:has-text('Aceptar')",
)

_SCROLL_JS = "() => window.scrollBy(0, window.innerHeight)"


def find_browser_executable() -> str | None:
    """
    Locate a Chrome/Chromium executable.

    Checks ``settings.browser_path``, then PATH, then known installation
    locations. Returns None when nothing is found, in which case Playwright's
    own Chromium build is used.
    """
    if settings.browser_path:
        if Path(settings.browser_path).is_file():
            return settings.browser_path
        logger.warning(f"Configured browser not found: {settings.browser_path}")

    for command in BROWSER_COMMANDS:
        found = shutil.which(command)
        if found:
            return found

    for path in BROWSER_PATHS:
        if Path(path).is_file():
            return path

    return None


async def dismiss_consent(page: Page) -> bool:
    """Click the first visible cookie-consent button. Never raises."""
    for selector in CONSENT_SELECTORS:
        try:
            button = await page.query_selector(selector)
            if button and await button.is_visible():
                await button.click(timeout=2000)
                logger.debug(f"Dismissed cookie consent via {selector}")
                return True
        except Exception as e:
            logger.debug(f"Consent selector {selector} failed: {e}")
    return False


async def render_page(target: HeadlessTarget) -> str:
    """Render a page in headless Chromium and return the final HTML."""
    executable = find_browser_executable()
    logger.debug(f"Using browser: {executable or 'playwright bundled chromium'}")

    async with Stealth().use_async(async_playwright()) as p:
        browser = await p.chromium.launch(
            headless=True,
            executable_path=executable,
            args=["--no-sandbox", "--disable-setuid-sandbox"],
        )
        try:
            context = await browser.new_context(
                user_agent=settings.user_agent,
                locale="es-ES",
                timezone_id=settings.timezone,
                viewport={"width": 1440, "height": 900},
            )
            page = await context.new_page()

            logger.info(f"Navigating to {target.name}...")
            await page.goto(
                target.url,
                wait_until="networkidle",
                timeout=settings.browser_timeout * 1000,
            )
            await dismiss_consent(page)

            # Scroll twice to trigger lazy-loaded sessions
            await page.evaluate(_SCROLL_JS)
            await asyncio.sleep(settings.settle_seconds)
            await page.evaluate(_SCROLL_JS)
            await asyncio.sleep(settings.second_settle_seconds)

            return await page.content()
        finally:
            await browser.close()


async def scrape_target(target: HeadlessTarget, today: date) -> list[Showing]:
    """Render one target and extract its VOSE showings, dated today."""
    html = await render_page(target)
    cards = extract_cards(html, target.profile)
    if not cards:
        preview = html[:500].replace("\n", " ")
        logger.warning(f"No VOSE films found for {target.name}. Page preview: {preview}")

    return build_showings(
        cards,
        cinema=target.name,
        date=today.isoformat(),
        url=target.url,
        source=SOURCE,
    )


def _kill_process_group(proc: asyncio.subprocess.Process) -> None:
    """Kill the child and the browser processes it started."""
    if sys.platform == "win32":
        proc.kill()
        return
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        logger.debug(f"Headless child {proc.pid} already gone")


class HeadlessScraper(BaseScraper):
    """Scraper for one client-rendered cinema page."""

    source = SOURCE

    def __init__(self, target: str, isolated: bool | None = None) -> None:
        super().__init__()
        self.target = TARGETS[target]
        self.name = self.target.name
        self.isolated = settings.headless_isolated if isolated is None else isolated

    async def get_showings(self, all_dates: bool = False) -> list[Showing]:
        """Render the page (in a child process by default) and extract showings."""
        self._start(all_dates)

        try:
            if self.isolated:
                showings = await self._run_child()
            else:
                showings = await scrape_target(self.target, self.today)
        except Exception as e:
            return self._fail(e)

        logger.info(f"{self.name} (headless): Found {len(showings)} VOSE showings")
        return showings

    async def _run_child(self) -> list[Showing]:
        """Run the headless scrape as ``python -m`` and read its JSON output."""
        proc = await asyncio.create_subprocess_exec(
            sys.executable,
            "-m",
            "vosescout.scripts.scrape_headless",
            self.target.key,
            stdout=asyncio.subprocess.PIPE,
            start_new_session=True,
        )
        try:
            stdout, _ = await asyncio.wait_for(
                proc.communicate(), timeout=settings.headless_process_timeout
            )
        except asyncio.TimeoutError:
            raise TimeoutError(
                f"headless browser gave no result within {settings.headless_process_timeout}s"
            )
        finally:
            if proc.returncode is None:
                _kill_process_group(proc)
                await proc.wait()

        if proc.returncode != 0:
            raise RuntimeError(f"headless scrape exited with status {proc.returncode}")

        return [Showing(**record) for record in json.loads(stdout)]
