"""Resilient element lookup, field filling and clicking.

The target UI re-renders asynchronously, so every primitive here retries
locally with short fixed pauses before giving up:

- `locate` retries only when the element went stale mid-lookup
- `fill` retries the whole locate/clear/type sequence and falls back to
  assigning the value by script when the read-back does not match
- `click` retries the whole sequence and falls back to a script click
"""
from __future__ import annotations

import logging
from typing import Optional

import anyio
from playwright.async_api import ElementHandle, Page

from authflow.config import Timeouts, settings
from authflow.errors import ClickFailedError, ElementNotFoundError
from authflow.locators import Locator

logger = logging.getLogger(__name__)

LOCATE_RETRIES = 3
VISIBILITY_TIMEOUT = 2000
STALE_PAUSE = 0.1

OUTER_ATTEMPTS = 3
OUTER_PAUSE = 0.2

SCROLL_SETTLE = 0.06
CLEAR_SETTLE = 0.02
CLICK_SETTLE = 0.1
RESET_SETTLE = 0.1

STALE_MARKERS = (
    "not attached to the dom",
    "element is detached",
    "stale element",
    "jshandle is disposed",
    "execution context was destroyed",
)

SCROLL_SCRIPT = "el => el.scrollIntoView({behavior: 'smooth', block: 'center'})"
ASSIGN_VALUE_SCRIPT = """(el, value) => {
    el.value = value;
    el.dispatchEvent(new Event('input', { bubbles: true }));
}"""
RESET_FORM_SCRIPT = """() => {
    document.querySelectorAll('input, select, textarea').forEach(el => {
        if (el.type !== 'submit' && el.type !== 'button') {
            el.value = '';
            el.dispatchEvent(new Event('change', { bubbles: true }));
        }
    });
}"""


def is_stale_error(exc: BaseException) -> bool:
    """True when the element disappeared or was replaced during the lookup."""
    if type(exc).__name__ == "StaleElementReferenceError":
        return True
    message = str(exc).lower()
    return any(marker in message for marker in STALE_MARKERS)


async def locate(
    page: Page,
    locator: Locator,
    max_retries: int = LOCATE_RETRIES,
    timeouts: Optional[Timeouts] = None,
) -> ElementHandle:
    """Wait for presence, then visibility; retry on staleness only.

    Any other error (timeout, malformed selector, closed page) propagates
    from the first attempt.
    """
    timeouts = timeouts or settings.timeouts
    last_error: Exception | None = None

    for attempt in range(1, max_retries + 1):
        try:
            handle = await page.wait_for_selector(
                locator.selector, state="attached", timeout=timeouts.element_wait
            )
            if handle is None:
                raise ElementNotFoundError(locator, attempt)
            await handle.wait_for_element_state("visible", timeout=VISIBILITY_TIMEOUT)
            return handle
        except Exception as exc:
            if not is_stale_error(exc):
                raise
            last_error = exc
            logger.warning("Stale element retry %d/%d for %s", attempt, max_retries, locator)
            await anyio.sleep(STALE_PAUSE)

    raise ElementNotFoundError(locator, max_retries, last_error) from last_error


async def scroll_into_view(handle: ElementHandle) -> None:
    await handle.evaluate(SCROLL_SCRIPT)


async def fill(
    page: Page,
    locator: Locator,
    value: str,
    timeout: Optional[int] = None,
    timeouts: Optional[Timeouts] = None,
) -> ElementHandle:
    """Fill a text-like input and verify the value stuck.

    A read-back mismatch is answered with a direct script assignment plus an
    `input` event; that fallback is accepted without checking again.
    """
    timeouts = timeouts or settings.timeouts
    timeout = timeouts.element_wait if timeout is None else timeout
    last_error: Exception | None = None

    for attempt in range(1, OUTER_ATTEMPTS + 1):
        try:
            handle = await locate(page, locator, timeouts=timeouts)
            await handle.wait_for_element_state("enabled", timeout=timeout)

            await scroll_into_view(handle)
            await anyio.sleep(SCROLL_SETTLE)

            await handle.fill("")
            await anyio.sleep(CLEAR_SETTLE)
            await handle.type(value)

            actual = await handle.input_value()
            if actual != value:
                logger.info("Typed value for %s reads back as %r, assigning by script", locator, actual)
                await handle.evaluate(ASSIGN_VALUE_SCRIPT, value)
            return handle
        except Exception as exc:
            last_error = exc
            logger.warning("Fill attempt %d/%d failed: %s", attempt, OUTER_ATTEMPTS, exc)
            if attempt < OUTER_ATTEMPTS:
                await anyio.sleep(OUTER_PAUSE)

    logger.warning("Error filling element %s: %s", locator, last_error)
    raise last_error  # type: ignore[misc]


async def activate(handle: ElementHandle) -> None:
    """Pointer click, falling back to the element's own click()."""
    try:
        await handle.click()
    except Exception as click_error:
        logger.warning("Normal click failed, trying JavaScript: %s", click_error)
        await handle.evaluate("el => el.click()")


async def click(
    page: Page,
    locator: Locator,
    timeout: Optional[int] = None,
    timeouts: Optional[Timeouts] = None,
) -> ElementHandle:
    timeouts = timeouts or settings.timeouts
    timeout = timeouts.element_wait if timeout is None else timeout
    last_error: Exception | None = None

    for attempt in range(1, OUTER_ATTEMPTS + 1):
        try:
            handle = await locate(page, locator, timeouts=timeouts)
            await handle.wait_for_element_state("enabled", timeout=timeout)

            await scroll_into_view(handle)
            await anyio.sleep(CLICK_SETTLE)

            await activate(handle)
            return handle
        except Exception as exc:
            last_error = exc
            logger.warning("Click attempt %d/%d failed: %s", attempt, OUTER_ATTEMPTS, exc)
            if attempt < OUTER_ATTEMPTS:
                await anyio.sleep(OUTER_PAUSE)

    logger.warning("Error clicking element %s: %s", locator, last_error)
    raise ClickFailedError(locator, OUTER_ATTEMPTS, last_error) from last_error


async def type_into(handle: ElementHandle, value: str) -> None:
    """Scroll, clear and type without read-back (password inputs mask it)."""
    await scroll_into_view(handle)
    await anyio.sleep(SCROLL_SETTLE)
    await handle.fill("")
    await handle.type(value)


async def reset_form(page: Page) -> None:
    """Blank every form control left over from a previous case."""
    try:
        await page.evaluate(RESET_FORM_SCRIPT)
        await anyio.sleep(RESET_SETTLE)
    except Exception as exc:
        logger.warning("Could not reset form state: %s", exc)
