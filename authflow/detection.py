"""Raw ingredients for outcome classification: error text, URL, markers.

Classification itself lives in each scenario runner because registration and
login define success differently.
"""
from __future__ import annotations

import logging
from typing import Optional, Sequence

import anyio
from playwright.async_api import Page

from authflow.target import ERROR_SELECTORS

logger = logging.getLogger(__name__)

ERROR_SETTLE = 1.5


async def detect_error(
    page: Page,
    selectors: Sequence[str] = ERROR_SELECTORS,
    settle: float = ERROR_SETTLE,
) -> str:
    """Return the first visible error message on the page, or "".

    An empty string means no message was observed; it is not an error.
    """
    try:
        # Async validation needs time to render
        await anyio.sleep(settle)

        for selector in selectors:
            for element in await page.query_selector_all(selector):
                try:
                    if not await element.is_visible():
                        continue
                    text = (await element.inner_text()).strip()
                except Exception as exc:
                    logger.debug("Error checking selector %s: %s", selector, exc)
                    continue
                if text:
                    logger.info("Found error message: %s", text)
                    return text
    except Exception as exc:
        logger.warning("Error while scanning for error messages: %s", exc)
    return ""


async def find_visible_marker(page: Page, selectors: Sequence[str]) -> Optional[str]:
    """First selector, in listed order, that resolves to a visible element."""
    for selector in selectors:
        try:
            element = await page.query_selector(selector)
            if element is not None and await element.is_visible():
                logger.info("Found authenticated marker: %s", selector)
                return selector
        except Exception as exc:
            logger.debug("Marker %s not usable: %s", selector, exc)
            continue
        logger.debug("Selector %s not found", selector)
    return None


def is_account_url(url: str, account_url: str) -> bool:
    """Exact match, with or without one trailing slash."""
    return url == account_url or url == account_url + "/"
