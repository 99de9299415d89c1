"""Registration scenario against an in-memory page."""
import pytest

from authflow import target
from authflow.errors import ClickFailedError
from authflow.locators import option_by_value
from authflow.records import RegistrationRecord
from authflow.results import Outcome, SuiteResults
from authflow.scenarios import RegistrationRunner, classify_registration

from fakes import FakeElement, FakePage, FakeSession

pytestmark = pytest.mark.asyncio

HOME = "http://localhost:4200/"
REGISTER_URL = "http://localhost:4200/#/auth/register"
LOGIN_URL = "http://localhost:4200/#/auth/login"

FIELDS = (
    target.FIRST_NAME,
    target.LAST_NAME,
    target.STREET,
    target.POSTAL_CODE,
    target.CITY,
    target.STATE,
    target.PHONE,
    target.EMAIL,
    target.PASSWORD,
)


def make_record(**overrides):
    data = {
        "testCaseID": "TC_REG_01",
        "firstName": "Jane",
        "lastName": "Doe",
        "dob": "2007-06-08",
        "street": "Test street 98",
        "postalCode": "1234AA",
        "city": "Vienna",
        "state": "Vienna",
        "country": "AT",
        "phone": "0987654321",
        "email": "jane@example.test",
        "password": "SuperSecure@123",
        "expectedResult": "Success",
    }
    data.update(overrides)
    return RegistrationRecord.from_dict(data)


def registration_page(redirect_to=None):
    """Page with the full registration form; submit optionally navigates."""
    page = FakePage(HOME)
    page.add(target.NAV_SIGN_IN.selector, FakeElement())
    page.add(target.REGISTER_LINK.selector, FakeElement(on_click=lambda: setattr(page, "url", REGISTER_URL)))
    for locator in FIELDS:
        page.add(locator.selector, FakeElement())
    page.add(target.DATE_OF_BIRTH.selector, FakeElement())

    country = page.add(target.COUNTRY.selector, FakeElement())
    page.add(option_by_value("AT").selector, FakeElement(on_click=lambda: setattr(country, "value", "AT")))

    def submit():
        if redirect_to:
            page.url = redirect_to

    page.add(target.REGISTER_SUBMIT.selector, FakeElement(on_click=submit))
    return page


def element(page, locator):
    return page.elements[locator.selector][0]


@pytest.fixture
def results():
    return SuiteResults("Registration", total=1)


async def test_successful_registration_redirects_to_login(config, results):
    page = registration_page(redirect_to=LOGIN_URL)
    runner = RegistrationRunner(FakeSession(page), results, config)
    record = make_record()

    result = await runner.run(record, index=1)

    assert result.outcome is Outcome.SUCCESS
    assert result.url == LOGIN_URL
    assert results.successful == [record]
    assert results.failed == []
    assert page.visited == [HOME]
    assert element(page, target.FIRST_NAME).value == "Jane"
    assert element(page, target.EMAIL).value == "jane@example.test"
    assert element(page, target.PASSWORD).value == "SuperSecure@123"
    assert element(page, target.DATE_OF_BIRTH).value == "2007-06-08"
    assert element(page, target.COUNTRY).value == "AT"


async def test_staying_on_form_with_message_is_failure(config, results):
    page = registration_page()
    page.add(".invalid-feedback", FakeElement(text="A customer with this email address already exists."))
    runner = RegistrationRunner(FakeSession(page), results, config)

    result = await runner.run(make_record(expectedResult="Fail"))

    assert result.outcome is Outcome.FAIL
    assert result.error_text == "A customer with this email address already exists."
    assert results.failed == ["TC_REG_01"]
    assert results.successful == []


async def test_out_of_stock_is_environment_error_and_not_counted(config, results):
    page = registration_page(redirect_to=LOGIN_URL)
    page.add(".alert", FakeElement(text="Out of stock"))
    runner = RegistrationRunner(FakeSession(page), results, config)

    result = await runner.run(make_record())

    assert result.outcome is Outcome.ENVIRONMENT_ERROR
    assert results.successful == []
    assert results.failed == []


async def test_country_falls_back_to_script_when_option_click_does_not_select(config, results):
    page = registration_page(redirect_to=LOGIN_URL)
    page.elements[option_by_value("AT").selector] = [FakeElement()]
    runner = RegistrationRunner(FakeSession(page), results, config)

    await runner.run(make_record())

    country = element(page, target.COUNTRY)
    scripts = [call for call in country.called("evaluate") if call[2] == "AT"]
    assert scripts
    assert country.value == "AT"


async def test_rejected_dob_does_not_abort_scenario(config, results):
    page = registration_page(redirect_to=LOGIN_URL)
    page.elements[target.DATE_OF_BIRTH.selector] = [FakeElement(transform=lambda source, value: "")]
    runner = RegistrationRunner(FakeSession(page), results, config)

    result = await runner.run(make_record())

    assert result.outcome is Outcome.SUCCESS


async def test_unexpected_error_counts_failure_saves_screenshot_and_reraises(config, results, caplog):
    caplog.set_level("INFO")
    page = registration_page(redirect_to=LOGIN_URL)
    del page.elements[target.REGISTER_LINK.selector]
    runner = RegistrationRunner(FakeSession(page), results, config)

    with pytest.raises(ClickFailedError):
        await runner.run(make_record())

    assert results.failed == ["TC_REG_01"]
    shot = config.screenshot_dir / "TC_REG_01-error.png"
    assert shot.exists()
    assert page.screenshots == [str(shot)]
    assert "Screenshot saved" in caplog.text


@pytest.mark.parametrize(
    "url, error_text, expected",
    [
        (LOGIN_URL, "", Outcome.SUCCESS),
        (REGISTER_URL, "", Outcome.FAIL),
        (REGISTER_URL, "Password is too weak", Outcome.FAIL),
        (LOGIN_URL, "Product is OUT OF STOCK", Outcome.ENVIRONMENT_ERROR),
        (REGISTER_URL, "out of stock", Outcome.ENVIRONMENT_ERROR),
    ],
)
async def test_classify_registration(url, error_text, expected):
    assert classify_registration(url, error_text, "/auth/login") is expected


async def test_unexpected_success_is_counted_as_failure(config, results):
    page = registration_page(redirect_to=LOGIN_URL)
    runner = RegistrationRunner(FakeSession(page), results, config)

    with pytest.raises(AssertionError, match="TC_REG_01 expected Fail, got Success"):
        await runner.run(make_record(expectedResult="Fail"))

    assert results.failed == ["TC_REG_01"]
    assert results.successful == []
    assert (config.screenshot_dir / "TC_REG_01-error.png").exists()


async def test_unexpected_failure_is_listed_once(config, results):
    page = registration_page()
    runner = RegistrationRunner(FakeSession(page), results, config)

    with pytest.raises(AssertionError, match="expected Success, got Fail"):
        await runner.run(make_record())

    assert results.failed == ["TC_REG_01"]


async def test_non_calendar_dob_is_reported(config, results, caplog):
    page = registration_page(redirect_to=LOGIN_URL)
    runner = RegistrationRunner(FakeSession(page), results, config)

    await runner.run(make_record(dob="31/02/2007"))

    assert "is not a calendar date" in caplog.text
