"""Login scenario, submit discovery and sign-out between cases."""
import pytest

from authflow import target
from authflow.config import settings
from authflow.errors import SubmitNotFoundError
from authflow.locators import Locator
from authflow.records import LoginRecord
from authflow.results import Outcome, SuiteResults
from authflow.scenarios import LoginRunner, reset_authentication
from authflow.scenarios.login import find_submit, login_succeeded

from fakes import FakeElement, FakePage, FakeSession

pytestmark = pytest.mark.asyncio

HOME = "http://localhost:4200/"
LOGIN_URL = "http://localhost:4200/#/auth/login"
ACCOUNT_URL = "http://localhost:4200/#/account"


def make_record(case_id="TC_LOGIN_01", email="customer@practicesoftwaretesting.com", password="welcome01",
                expected="Success"):
    return LoginRecord.from_dict(
        {"testCaseID": case_id, "email": email, "password": password, "expectedResult": expected}
    )


def login_page(accept=None):
    """Login form whose submit lands on the account page for accepted emails."""
    page = FakePage(HOME)
    page.add(target.NAV_SIGN_IN.selector, FakeElement(on_click=lambda: setattr(page, "url", LOGIN_URL)))
    email = page.add(target.EMAIL.selector, FakeElement())
    page.add(target.PASSWORD.selector, FakeElement())

    def submit():
        if accept and email.value == accept:
            page.url = ACCOUNT_URL

    page.add(Locator.css(target.LOGIN_SUBMIT_SELECTORS[0]).selector, FakeElement(on_click=submit))
    return page


@pytest.fixture
def results():
    return SuiteResults("Login", total=2)


async def test_valid_credentials_reach_account_page(config, results, sleeps):
    page = login_page(accept="customer@practicesoftwaretesting.com")
    record = make_record()

    result = await LoginRunner(FakeSession(page), results, config).run(record, index=1)

    assert result.outcome is Outcome.SUCCESS
    assert result.url == ACCOUNT_URL
    assert results.successful == [record]
    assert page.elements[target.PASSWORD.selector][0].value == "welcome01"
    # Home settle precedes everything else
    assert sleeps[0] == 3.0


async def test_invalid_credentials_fail_with_message(config, results):
    page = login_page(accept="customer@practicesoftwaretesting.com")
    page.add("#auth-error", FakeElement(text="Invalid email or password"))

    result = await LoginRunner(FakeSession(page), results, config).run(
        make_record("TC_LOGIN_02", "bad@x.com", "wrong", "Fail")
    )

    assert result.outcome is Outcome.FAIL
    assert result.url == LOGIN_URL
    assert result.error_text == "Invalid email or password"
    assert results.failed == ["TC_LOGIN_02"]


async def test_authenticated_marker_counts_as_success(config, results):
    page = login_page()
    page.add(".user-menu", FakeElement())

    result = await LoginRunner(FakeSession(page), results, config).run(make_record())

    assert result.outcome is Outcome.SUCCESS
    assert result.url == LOGIN_URL


async def test_missing_submit_is_recorded_and_raised(config, results):
    page = login_page()
    del page.elements[Locator.css(target.LOGIN_SUBMIT_SELECTORS[0]).selector]

    with pytest.raises(SubmitNotFoundError, match="Could not find submit button"):
        await LoginRunner(FakeSession(page), results, config).run(make_record())

    assert results.failed == ["TC_LOGIN_01"]
    assert (config.screenshot_dir / "TC_LOGIN_01-error.png").exists()


async def test_find_submit_tries_candidates_in_order(timeouts):
    page = FakePage()
    button = page.add(Locator.css('input[value="Login"]').selector, FakeElement())

    assert await find_submit(page, timeouts=timeouts) is button
    assert page.lookups == [Locator.css(s).selector for s in target.LOGIN_SUBMIT_SELECTORS[:3]]


async def test_login_succeeded_prefers_url():
    page = FakePage()
    assert await login_succeeded(page, ACCOUNT_URL + "/", ACCOUNT_URL)
    assert not await login_succeeded(page, ACCOUNT_URL + "/profile", ACCOUNT_URL)


async def test_reset_signs_out_through_user_menu():
    page = FakePage(ACCOUNT_URL)
    menu = page.add(target.NAV_USER_MENU.selector, FakeElement())
    sign_out = page.add(target.NAV_SIGN_OUT.selector, FakeElement())
    session = FakeSession(page)

    await reset_authentication(session)

    assert menu.called("click")
    assert sign_out.called("click")
    assert session.context.cookies


async def test_reset_clears_cookies_without_user_menu():
    session = FakeSession(FakePage(LOGIN_URL))

    await reset_authentication(session)

    assert session.context.cookies == []


async def test_reset_failure_is_logged_not_raised(caplog):
    page = FakePage(ACCOUNT_URL)
    page.add(target.NAV_USER_MENU.selector, FakeElement())

    await reset_authentication(FakeSession(page))

    assert "Reset state failed" in caplog.text


async def test_unexpected_login_success_is_counted_as_failure(config, results):
    page = login_page(accept="customer@practicesoftwaretesting.com")

    with pytest.raises(AssertionError, match="TC_LOGIN_01 expected Fail, got Success"):
        await LoginRunner(FakeSession(page), results, config).run(make_record(expected="Fail"))

    assert results.failed == ["TC_LOGIN_01"]
    assert results.successful == []
    assert (config.screenshot_dir / "TC_LOGIN_01-error.png").exists()


async def test_reset_uses_configured_element_wait(monkeypatch):
    monkeypatch.setattr(settings.timeouts, "element_wait", 1234)
    page = FakePage(ACCOUNT_URL)
    page.add(target.NAV_USER_MENU.selector, FakeElement())
    page.add(target.NAV_SIGN_OUT.selector, FakeElement())

    await reset_authentication(FakeSession(page))

    assert page.wait_timeouts == [1234]
