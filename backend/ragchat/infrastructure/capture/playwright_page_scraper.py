"""Playwright page scraper — headless Chromium fetch of a page's body text.

Loads each URL in a fresh browser context, reads ``document.body.innerHTML``
once the DOM is ready, and strips the markup down to plain text.
"""

import logging
import re

from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Playwright,
)

from ragchat.application.interfaces.page_scraper import PageScraper
from ragchat.domain.entities import SourceDocument
from ragchat.domain.exceptions import ScrapeError

logger = logging.getLogger(__name__)

_TAG_PATTERN = re.compile(r"<[^>]*>?", re.MULTILINE)
_NON_TEXT_BLOCK_PATTERN = re.compile(
    r"<(script|style|noscript)\b[^>]*>.*?</\1\s*>",
    re.IGNORECASE | re.DOTALL,
)

# Consent managers inject banner text into the body; block them up front.
_BLOCKED_CONSENT_SCRIPT_PATTERNS = [
    "*cookiebot.com*",
    "*cdn.cookielaw.org*",
    "*onetrust.com*",
    "*didomi.io*",
    "*quantcast.com*",
    "*trustarc.com*",
    "*usercentrics.eu*",
    "*consentmanager.net*",
]

_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_0) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/130.0 Safari/537.36"
)


def strip_html_tags(html: str) -> str:
    """Remove script/style blocks, then every remaining tag."""
    without_blocks = _NON_TEXT_BLOCK_PATTERN.sub("", html)
    return _TAG_PATTERN.sub("", without_blocks)


class PlaywrightPageScraper(PageScraper):
    """Infrastructure service for scraping page text via Playwright.

    Lifecycle:
        - ``start()`` launches the browser (once per process or run)
        - ``scrape()`` loads a URL and returns its text
        - ``stop()`` closes the browser
    """

    def __init__(self, timeout_ms: int = 30_000, headless: bool = True) -> None:
        self._timeout_ms = timeout_ms
        self._headless = headless
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None

    async def __aenter__(self) -> "PlaywrightPageScraper":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()

    async def start(self) -> None:
        """Launch the headless Chromium browser."""
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=self._headless)
        logger.info("PlaywrightPageScraper started (timeout=%dms)", self._timeout_ms)

    async def stop(self) -> None:
        """Close the browser and clean up Playwright resources."""
        if self._browser:
            await self._browser.close()
            self._browser = None
        if self._playwright:
            await self._playwright.stop()
            self._playwright = None
        logger.info("PlaywrightPageScraper stopped")

    async def scrape(self, url: str) -> SourceDocument:
        if not self._browser:
            raise RuntimeError("PlaywrightPageScraper not started — call start() first")

        context: BrowserContext = await self._browser.new_context(
            service_workers="block",
            user_agent=_USER_AGENT,
        )
        try:
            await self._block_consent_scripts(context)
            page = await context.new_page()
            page.set_default_timeout(self._timeout_ms)

            logger.info("Scraping: %s", url)
            response = await page.goto(url, wait_until="domcontentloaded")
            if response and response.status >= 400:
                logger.warning("HTTP %d for %s — continuing", response.status, url)

            html = await page.evaluate("() => document.body ? document.body.innerHTML : ''")
        except PlaywrightError as e:
            raise ScrapeError(url, str(e).splitlines()[0] if str(e) else type(e).__name__) from e
        finally:
            await context.close()

        text = strip_html_tags(html or "")
        logger.info("Scraped %s — %d characters", url, len(text))
        return SourceDocument(url=url, text=text)

    async def _block_consent_scripts(self, context: BrowserContext) -> None:
        """Block known cookie consent scripts via route interception."""
        for pattern in _BLOCKED_CONSENT_SCRIPT_PATTERNS:
            await context.route(pattern, lambda route: route.abort())
