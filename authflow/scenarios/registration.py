"""Registration scenario: home -> registration form -> submit -> outcome."""
from __future__ import annotations

import logging

import anyio

from authflow import target
from authflow.dates import apply_date_fallbacks, set_date
from authflow.detection import detect_error
from authflow.errors import DateAssignmentError
from authflow.interactions import (
    activate,
    click,
    fill,
    locate,
    reset_form,
    scroll_into_view,
    type_into,
)
from authflow.locators import option_by_value
from authflow.records import RegistrationRecord
from authflow.results import Outcome, ScenarioResult
from authflow.scenarios.base import ScenarioRunner

logger = logging.getLogger(__name__)

HOME_SETTLE = 0.4
NAV_SETTLE = 0.1
FORM_SETTLE = 0.2
SCROLL_SETTLE = 0.06
DROPDOWN_SETTLE = 0.04
SUBMIT_SETTLE = 0.1
SUBMIT_ENABLED_TIMEOUT = 5000
RESPONSE_SETTLE = 0.6

SELECT_VALUE_SCRIPT = """(el, value) => {
    el.value = value;
    el.dispatchEvent(new Event('change', { bubbles: true }));
}"""


def classify_registration(url: str, error_text: str, login_path: str) -> Outcome:
    """Redirect to the login page means the account was created.

    An "out of stock" message is an environment problem of the target and
    overrides the URL verdict.
    """
    if target.OUT_OF_STOCK in error_text.lower():
        return Outcome.ENVIRONMENT_ERROR
    return Outcome.SUCCESS if login_path in url else Outcome.FAIL


class RegistrationRunner(ScenarioRunner):
    kind = "registration"

    async def _run(self, record: RegistrationRecord) -> ScenarioResult:
        page = self.page
        timeouts = self.config.timeouts

        await page.goto(self.config.base_url)
        await anyio.sleep(HOME_SETTLE)

        await click(page, target.NAV_SIGN_IN, timeouts=timeouts)
        await anyio.sleep(NAV_SETTLE)
        await click(page, target.REGISTER_LINK, timeouts=timeouts)

        await page.wait_for_selector(
            target.FIRST_NAME.selector, state="attached", timeout=timeouts.element_wait
        )
        await anyio.sleep(FORM_SETTLE)
        await reset_form(page)

        logger.info("📋 Filling form fields...")
        await fill(page, target.FIRST_NAME, record.first_name, timeouts=timeouts)
        await fill(page, target.LAST_NAME, record.last_name, timeouts=timeouts)

        await self._set_date_of_birth(record)

        await fill(page, target.STREET, record.street, timeouts=timeouts)
        await fill(page, target.POSTAL_CODE, record.postal_code, timeouts=timeouts)
        await fill(page, target.CITY, record.city, timeouts=timeouts)
        await fill(page, target.STATE, record.state, timeouts=timeouts)

        await self._select_country(record.country)

        await fill(page, target.PHONE, record.phone, timeouts=timeouts)
        await fill(page, target.EMAIL, record.email, timeouts=timeouts)

        logger.info("🔒 Setting password...")
        password = await locate(page, target.PASSWORD, timeouts=timeouts)
        await type_into(password, record.password)

        logger.info("✅ Form filled, submitting...")
        await self._submit()
        await anyio.sleep(RESPONSE_SETTLE)

        error_text = await detect_error(page)
        url = page.url
        outcome = classify_registration(url, error_text, self.config.login_path)
        self._record(record, outcome, error_text)
        return ScenarioResult(record.case_id, outcome, url, error_text)

    async def _set_date_of_birth(self, record: RegistrationRecord) -> None:
        """Best effort: a DOB that cannot be set does not abort the scenario."""
        dob = record.dob
        logger.info("📅 Setting DOB: %s", dob)
        if record.dob_date is None:
            logger.warning("⚠ %s: DOB %r is not a calendar date, the form may reject it", record.case_id, dob)
        element = await locate(self.page, target.DATE_OF_BIRTH, timeouts=self.config.timeouts)
        await scroll_into_view(element)
        await anyio.sleep(SCROLL_SETTLE)

        try:
            value = await set_date(self.page, element, dob)
            logger.info("📅 DOB successfully set to: %s", value)
        except DateAssignmentError as exc:
            logger.warning("⚠ Failed to set DOB: %s", exc)
            await apply_date_fallbacks(self.page, element, dob)

    async def _select_country(self, country: str) -> None:
        logger.info("🌍 Setting country...")
        select = await locate(self.page, target.COUNTRY, timeouts=self.config.timeouts)
        await scroll_into_view(select)
        await anyio.sleep(SCROLL_SETTLE)

        try:
            await select.click()
            await anyio.sleep(DROPDOWN_SETTLE)
            await click(self.page, option_by_value(country), timeouts=self.config.timeouts)
            selected = await select.input_value()
            if selected != country:
                raise ValueError(f"dropdown shows {selected!r} after clicking {country!r}")
        except Exception as exc:
            logger.warning("Fallback to JavaScript for country selection: %s", exc)
            await select.evaluate(SELECT_VALUE_SCRIPT, country)

    async def _submit(self) -> None:
        button = await locate(self.page, target.REGISTER_SUBMIT, timeouts=self.config.timeouts)
        await scroll_into_view(button)
        await anyio.sleep(SUBMIT_SETTLE)
        await button.wait_for_element_state("enabled", timeout=SUBMIT_ENABLED_TIMEOUT)
        await activate(button)

    def _record(self, record: RegistrationRecord, outcome: Outcome, error_text: str) -> None:
        if outcome is Outcome.SUCCESS:
            self.results.record_success(record)
            logger.info("✅ %s: Registration SUCCESS - redirected to login", record.case_id)
        elif outcome is Outcome.ENVIRONMENT_ERROR:
            logger.warning("⚠️ %s: System error (Out of stock) - skipping assertion", record.case_id)
        else:
            self.results.record_failure(record.case_id)
            logger.warning("⚠ %s: Registration FAILED - still on registration page", record.case_id)
            if error_text:
                logger.warning("   Error: %s", error_text)
