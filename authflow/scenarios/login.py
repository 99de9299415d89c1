"""Login scenario: home -> login form -> submit -> outcome -> sign out."""
from __future__ import annotations

import logging
from typing import Optional, Sequence

import anyio
from playwright.async_api import ElementHandle, Page

from authflow import target
from authflow.config import Timeouts, settings
from authflow.detection import detect_error, find_visible_marker, is_account_url
from authflow.errors import SubmitNotFoundError
from authflow.interactions import activate, click, fill, locate, reset_form, scroll_into_view, type_into
from authflow.locators import Locator
from authflow.records import LoginRecord
from authflow.results import Outcome, ScenarioResult
from authflow.scenarios.base import ScenarioRunner
from authflow.session import BrowserSession

logger = logging.getLogger(__name__)

HOME_SETTLE = 3.0
FORM_SETTLE = 0.2
SUBMIT_SETTLE = 0.1
RESPONSE_SETTLE = 1.0


async def find_submit(
    page: Page,
    selectors: Sequence[str] = target.LOGIN_SUBMIT_SELECTORS,
    timeouts: Optional[Timeouts] = None,
) -> ElementHandle:
    """First candidate selector that resolves wins; none is a page problem."""
    for selector in selectors:
        try:
            handle = await locate(page, Locator.css(selector), timeouts=timeouts)
        except Exception as exc:
            logger.info("Submit selector %s not found, trying next... (%s)", selector, exc)
            continue
        logger.info("✅ Found submit button with selector: %s", selector)
        return handle
    raise SubmitNotFoundError(selectors)


async def login_succeeded(
    page: Page,
    url: str,
    account_url: str,
    markers: Sequence[str] = target.AUTHENTICATED_MARKERS,
) -> bool:
    """URL check first, then authenticated markers in listed order."""
    if is_account_url(url, account_url):
        logger.info("✅ URL matches account page: %s", url)
        return True
    return await find_visible_marker(page, markers) is not None


async def reset_authentication(session: BrowserSession, timeouts: Optional[Timeouts] = None) -> None:
    """Sign out through the user menu if present, otherwise drop all cookies."""
    page = session.page
    wait = (timeouts or settings.timeouts).element_wait
    try:
        menu = await page.query_selector(target.NAV_USER_MENU.selector)
        if menu is not None:
            await menu.click()
            sign_out = await page.wait_for_selector(
                target.NAV_SIGN_OUT.selector, state="attached", timeout=wait
            )
            await sign_out.click()
            logger.info("🔄 Logged out after test case")
        else:
            await session.clear_cookies()
            logger.info("🧹 Cleared cookies after test case")
    except Exception as exc:
        logger.warning("Reset state failed: %s", exc)


class LoginRunner(ScenarioRunner):
    kind = "login"

    async def _run(self, record: LoginRecord) -> ScenarioResult:
        page = self.page
        timeouts = self.config.timeouts

        await page.goto(self.config.base_url)
        await anyio.sleep(HOME_SETTLE)

        await click(page, target.NAV_SIGN_IN, timeouts=timeouts)

        await page.wait_for_selector(target.EMAIL.selector, state="attached", timeout=timeouts.element_wait)
        await anyio.sleep(FORM_SETTLE)
        await reset_form(page)

        logger.info("📋 Filling login form...")
        logger.info("📧 Email: %s", record.email)
        logger.info("🔑 Password: %s", record.masked_password)

        await fill(page, target.EMAIL, record.email, timeouts=timeouts)

        password = await locate(page, target.PASSWORD, timeouts=timeouts)
        await type_into(password, record.password)

        logger.info("✅ Form filled, submitting...")
        button = await find_submit(page, timeouts=timeouts)
        await scroll_into_view(button)
        await anyio.sleep(SUBMIT_SETTLE)
        await activate(button)

        await anyio.sleep(RESPONSE_SETTLE)
        error_text = await detect_error(page)

        url = page.url
        succeeded = await login_succeeded(page, url, self.config.account_url)
        outcome = Outcome.SUCCESS if succeeded else Outcome.FAIL

        if outcome is Outcome.SUCCESS:
            self.results.record_success(record)
            logger.info("✅ %s: Login SUCCESS", record.case_id)
            logger.info("   Current URL: %s", url)
        else:
            self.results.record_failure(record.case_id)
            logger.warning("⚠ %s: Login FAILED", record.case_id)
            logger.warning("   Current URL: %s", url)
            if error_text:
                logger.warning("   Error: %s", error_text)

        return ScenarioResult(record.case_id, outcome, url, error_text)

    async def reset(self) -> None:
        await reset_authentication(self.session, self.config.timeouts)
