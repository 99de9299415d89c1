"""
Browser Session Manager
=======================

Creates and tears down the single Playwright session a suite runs against.

Key Features:
- Engine selection (chrome/chromium, firefox, edge, webkit)
- Bounded retry (3 attempts, 2s apart) on launch failure
- Fixed 1920x1080 viewport, implicit and page-load timeouts
- Automation markers, images, notifications and extensions disabled on Chromium

Usage:
    from authflow.session import browser_session

    async with browser_session("chrome", headless=True) as session:
        await session.page.goto("http://localhost:4200/")
"""
from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import AsyncIterator, Optional

import anyio
from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from authflow.config import VIEWPORT_HEIGHT, VIEWPORT_WIDTH, Timeouts
from authflow.errors import SessionCreationError, UnsupportedBrowserError

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3
RETRY_BACKOFF = 2.0
# Upper bound for releasing a half-started or cancelled session
CLEANUP_TIMEOUT = 10.0

CHROMIUM_ARGS = [
    "--no-sandbox",
    "--disable-dev-shm-usage",
    "--disable-blink-features=AutomationControlled",
    "--disable-web-security",
    "--disable-features=VizDisplayCompositor,VoiceTranscription",
    "--disable-extensions",
    "--disable-plugins",
    "--blink-settings=imagesEnabled=false",
    "--no-first-run",
    "--disable-gpu",
    "--disable-notifications",
]

FIREFOX_PREFS = {
    "permissions.default.desktop-notification": 2,
    "permissions.default.image": 2,
    "dom.webdriver.enabled": False,
}

HIDE_WEBDRIVER_SCRIPT = "Object.defineProperty(navigator, 'webdriver', { get: () => undefined });"

# engine name -> (playwright browser type, channel)
ENGINES = {
    "chrome": ("chromium", None),
    "chromium": ("chromium", None),
    "edge": ("chromium", "msedge"),
    "firefox": ("firefox", None),
    "webkit": ("webkit", None),
}


class BrowserSession:
    """One live browser session owned by a suite."""

    def __init__(
        self,
        engine: str,
        playwright: Playwright,
        browser: Browser,
        context: BrowserContext,
        page: Page,
    ) -> None:
        self.engine = engine
        self._playwright: Optional[Playwright] = playwright
        self._browser: Optional[Browser] = browser
        self._context: Optional[BrowserContext] = context
        self._page: Optional[Page] = page

    @property
    def page(self) -> Page:
        if not self._page:
            raise RuntimeError("Session closed")
        return self._page

    @property
    def context(self) -> BrowserContext:
        if not self._context:
            raise RuntimeError("Session closed")
        return self._context

    @property
    def closed(self) -> bool:
        return self._playwright is None

    async def clear_cookies(self) -> None:
        await self.context.clear_cookies()

    async def close(self) -> None:
        """Release page, context, browser and driver."""
        if self.closed:
            logger.debug("Session for %s already closed", self.engine)
            return

        page, context, browser, playwright = self._page, self._context, self._browser, self._playwright
        self._page = self._context = self._browser = self._playwright = None

        # Unwinds page, context, browser, driver; every step runs even if one raises
        async with AsyncExitStack() as stack:
            stack.push_async_callback(playwright.stop)
            if browser:
                stack.push_async_callback(browser.close)
            if context:
                stack.push_async_callback(context.close)
            if page:
                stack.push_async_callback(page.close)


def _launch_options(engine: str, headless: bool) -> dict:
    browser_type, channel = ENGINES[engine]
    options: dict = {"headless": headless}
    if channel:
        options["channel"] = channel
    if engine in ("chrome", "chromium"):
        options["args"] = list(CHROMIUM_ARGS)
    elif browser_type == "firefox":
        options["firefox_user_prefs"] = dict(FIREFOX_PREFS)
    return options


async def _start(engine: str, headless: bool, timeouts: Timeouts) -> BrowserSession:
    browser_type, _ = ENGINES[engine]
    playwright = await async_playwright().start()
    browser: Optional[Browser] = None
    try:
        launcher = getattr(playwright, browser_type)
        browser = await launcher.launch(**_launch_options(engine, headless))
        context = await browser.new_context(
            viewport={"width": VIEWPORT_WIDTH, "height": VIEWPORT_HEIGHT},
        )
        context.set_default_timeout(timeouts.implicit)
        context.set_default_navigation_timeout(timeouts.page_load)
        if browser_type == "chromium":
            await context.add_init_script(HIDE_WEBDRIVER_SCRIPT)
        page = await context.new_page()
    except BaseException:
        # Half-started sessions must not leak a driver process, even when the
        # launch itself was cancelled by a deadline
        with anyio.move_on_after(CLEANUP_TIMEOUT, shield=True):
            try:
                if browser is not None:
                    await browser.close()
            finally:
                await playwright.stop()
        raise
    return BrowserSession(engine, playwright, browser, context, page)


async def create_session(
    engine: str = "chrome",
    headless: bool = True,
    timeouts: Optional[Timeouts] = None,
) -> BrowserSession:
    """Launch a browser session, retrying launch failures.

    Raises:
        UnsupportedBrowserError: unknown engine (not retried)
        SessionCreationError: every attempt failed
    """
    engine = engine.strip().lower()
    if engine not in ENGINES:
        raise UnsupportedBrowserError(engine)
    timeouts = timeouts or Timeouts()

    last_error: Exception | None = None
    for attempt in range(1, MAX_ATTEMPTS + 1):
        try:
            session = await _start(engine, headless, timeouts)
        except Exception as exc:
            last_error = exc
            logger.warning("Driver creation attempt %d/%d failed: %s", attempt, MAX_ATTEMPTS, exc)
            if attempt < MAX_ATTEMPTS:
                await anyio.sleep(RETRY_BACKOFF)
            continue
        logger.info(
            "%s session ready (headless=%s), screen resolution set to %dx%d",
            engine, headless, VIEWPORT_WIDTH, VIEWPORT_HEIGHT,
        )
        return session

    raise SessionCreationError(engine, MAX_ATTEMPTS, last_error) from last_error


async def close_session(session: BrowserSession) -> None:
    was_open = not session.closed
    await session.close()
    if was_open:
        logger.info("%s session closed", session.engine)


@asynccontextmanager
async def browser_session(
    engine: str = "chrome",
    headless: bool = True,
    timeouts: Optional[Timeouts] = None,
) -> AsyncIterator[BrowserSession]:
    """Yield a session and close it even when the body raises."""
    session = await create_session(engine, headless, timeouts)
    try:
        yield session
    finally:
        with anyio.move_on_after(CLEANUP_TIMEOUT, shield=True):
            await close_session(session)
