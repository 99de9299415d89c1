"""DOM contract of the application under test.

These selectors are integration points with the target UI. Changing any of
them changes what the suites consider a success or a failure.
"""
from __future__ import annotations

from typing import Tuple

from authflow.locators import Locator

# Navigation
NAV_SIGN_IN = Locator.css('[data-test="nav-sign-in"]')
REGISTER_LINK = Locator.css('[data-test="register-link"]')
NAV_USER_MENU = Locator.css('[data-test="nav-user-menu"]')
NAV_SIGN_OUT = Locator.css('[data-test="nav-sign-out"]')

# Registration form
FIRST_NAME = Locator.id("first_name")
LAST_NAME = Locator.id("last_name")
DATE_OF_BIRTH = Locator.id("dob")
STREET = Locator.id("address")
POSTAL_CODE = Locator.id("postcode")
CITY = Locator.id("city")
STATE = Locator.id("state")
COUNTRY = Locator.id("country")
PHONE = Locator.id("phone")
EMAIL = Locator.id("email")
PASSWORD = Locator.css('app-password-input input[type="password"]')
REGISTER_SUBMIT = Locator.css('button[type="submit"]')

# Scanned in order; the first visible element with text wins
ERROR_SELECTORS: Tuple[str, ...] = (
    ".error",
    ".alert-danger",
    ".invalid-feedback",
    ".text-danger",
    '[class*="error"]',
    '[class*="danger"]',
    ".mat-error",
    ".validation-error",
    ".alert",
    ".error-message",
    "#error",
    '[role="alert"]',
    ".notification",
    ".message",
    ".login-error",
    "#auth-error",
)

LOGIN_SUBMIT_SELECTORS: Tuple[str, ...] = (
    '[data-test="login-submit"]',
    'input[type="submit"]',
    'input[value="Login"]',
    ".btnSubmit",
)

AUTHENTICATED_MARKERS: Tuple[str, ...] = (
    '[data-test="user-menu"]',
    '[data-test="logout"]',
    ".user-menu",
    'a[href*="logout"]',
    'button[data-test*="logout"]',
)

# Environment carve-out for registration
OUT_OF_STOCK = "out of stock"
