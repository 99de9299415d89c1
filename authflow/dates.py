"""Multi-strategy date input setter.

Date inputs normalize or reject programmatic values depending on the widget
and locale, so each strategy is checked by reading the value back instead of
trusting the call. Strategies run in a fixed order and the first accepted
one wins.
"""
from __future__ import annotations

import logging
from typing import Awaitable, Callable, List, Optional, Tuple

import anyio
from playwright.async_api import ElementHandle, Page

from authflow.errors import DateAssignmentError
from authflow.records import calendar_date

logger = logging.getLogger(__name__)

KEYSTROKE_PAUSE = 0.01

ASSIGN_DATE_SCRIPT = """(el, value) => {
    el.value = '';
    el.value = value;
    el.dispatchEvent(new Event('input', { bubbles: true }));
    el.dispatchEvent(new Event('change', { bubbles: true }));
}"""

Strategy = Callable[[ElementHandle, str], Awaitable[None]]


def expected_year(iso_date: str) -> str:
    return iso_date.split("-", 1)[0]


def is_accepted(observed: str, requested: str) -> bool:
    """Accept when the year survived or the value is exactly what was asked for."""
    return expected_year(requested) in observed or observed == requested


async def _assign_by_script(element: ElementHandle, value: str) -> None:
    await element.evaluate(ASSIGN_DATE_SCRIPT, value)


async def _clear_and_type(element: ElementHandle, value: str) -> None:
    await element.fill("")
    await element.type(value)


async def _select_all_and_type(element: ElementHandle, value: str) -> None:
    await element.press("Control+a")
    await element.type(value)


async def _type_each_character(element: ElementHandle, value: str) -> None:
    await element.click()
    await element.fill("")
    for char in value:
        await element.type(char)
        await anyio.sleep(KEYSTROKE_PAUSE)


async def _assign_normalized(element: ElementHandle, value: str) -> None:
    normalized = calendar_date(value)
    if normalized is None:
        raise ValueError(f"{value!r} is not a calendar date")
    await _assign_by_script(element, normalized.isoformat())


STRATEGIES: List[Tuple[str, Strategy]] = [
    ("script assignment", _assign_by_script),
    ("clear and type", _clear_and_type),
    ("select all and type", _select_all_and_type),
    ("type character by character", _type_each_character),
    ("normalized calendar date", _assign_normalized),
]


async def set_date(page: Page, element: ElementHandle, iso_date: str) -> str:
    """Apply `iso_date` to a date input and return the value it ended up with.

    Raises:
        DateAssignmentError: no strategy produced an acceptable value
    """
    observed: List[str] = []

    for index, (name, strategy) in enumerate(STRATEGIES, start=1):
        try:
            await strategy(element, iso_date)
            value = await element.input_value()
        except Exception as exc:
            logger.warning("DOB strategy %d (%s) failed: %s", index, name, exc)
            continue

        observed.append(value)
        if is_accepted(value, iso_date):
            logger.info("DOB set successfully with strategy %d: %s", index, value)
            return value
        logger.warning("Strategy %d failed. Set: %s, Expected: %s", index, value, iso_date)

    raise DateAssignmentError(iso_date, observed)


def alternative_date_formats(iso_date: str) -> List[str]:
    """Unchanged, slash-delimited, day-first and month-first renderings."""
    parts = iso_date.split("-")
    formats = [iso_date, iso_date.replace("-", "/")]
    if len(parts) == 3:
        year, month, day = parts
        formats.append(f"{day}/{month}/{year}")
        formats.append(f"{month}/{day}/{year}")
    return formats


async def apply_date_fallbacks(page: Page, element: ElementHandle, iso_date: str) -> Optional[str]:
    """Best-effort sweep over alternative formats; never raises."""
    for candidate in alternative_date_formats(iso_date):
        try:
            logger.info("Trying alternative DOB format: %s", candidate)
            await _assign_by_script(element, candidate)
            value = await element.input_value()
        except Exception as exc:
            logger.warning("Alternative format %s failed: %s", candidate, exc)
            continue
        if expected_year(iso_date) in value or value == candidate:
            logger.info("Alternative DOB format worked: %s", value)
            return value

    logger.warning("No DOB format accepted for %s, continuing with partial value", iso_date)
    return None
