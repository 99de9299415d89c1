"""Shared configuration for the registration/login UI suites.

Values are resolved in this order:
- process environment (MAX_USERS, MAX_LOGINS, BROWSER, HEADLESS, ...)
- `.env.defaults` at the repository root
- hard-coded defaults below

The module exposes a `settings` singleton that suites and the CLI share.
"""
from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urljoin

from authflow.env_defaults import REPO_ROOT, get_env_default

DEFAULT_BASE_URL = "http://localhost:4200/"
DEFAULT_MAX_USERS = 71
DEFAULT_MAX_LOGINS = 14
DEFAULT_BROWSER = "chrome"

LOGIN_PATH = "/auth/login"
ACCOUNT_FRAGMENT = "#/account"

VIEWPORT_WIDTH = 1920
VIEWPORT_HEIGHT = 1080


@dataclass
class Timeouts:
    """Timeouts in milliseconds."""

    implicit: int = 1000
    page_load: int = 10000
    element_wait: int = 7000
    test_case: int = 30000
    suite: int = 300000
    setup: int = 30000

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> "Timeouts":
        values: Dict[str, int] = {}
        for name in cls.__dataclass_fields__:
            key = f"TIMEOUT_{name.upper()}"
            raw = _lookup(env, key)
            if raw is not None:
                values[name] = _parse_int(key, raw)
        return cls(**values)


def _lookup(env: Mapping[str, str], key: str) -> Optional[str]:
    value = env.get(key)
    if value is None or value == "":
        value = get_env_default(key)
    return value or None


def _parse_int(key: str, raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from None


@dataclass
class HarnessConfig:
    """Resolved harness configuration."""

    base_url: str = DEFAULT_BASE_URL
    max_users: int = DEFAULT_MAX_USERS
    max_logins: int = DEFAULT_MAX_LOGINS
    headless: bool = True
    browser: str = DEFAULT_BROWSER
    data_dir: Path = field(default_factory=lambda: REPO_ROOT / "data")
    screenshot_dir: Path = field(default_factory=lambda: Path("screenshots"))
    timeouts: Timeouts = field(default_factory=Timeouts)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "HarnessConfig":
        env = os.environ if env is None else env

        max_users = _lookup(env, "MAX_USERS")
        max_logins = _lookup(env, "MAX_LOGINS")
        # Headless unless explicitly disabled
        headless = _lookup(env, "HEADLESS") != "false"
        data_dir = _lookup(env, "DATA_DIR")
        screenshot_dir = _lookup(env, "SCREENSHOT_DIR")

        return cls(
            base_url=_lookup(env, "BASE_URL") or DEFAULT_BASE_URL,
            max_users=_parse_int("MAX_USERS", max_users) if max_users else DEFAULT_MAX_USERS,
            max_logins=_parse_int("MAX_LOGINS", max_logins) if max_logins else DEFAULT_MAX_LOGINS,
            headless=headless,
            browser=(_lookup(env, "BROWSER") or DEFAULT_BROWSER).strip().lower(),
            data_dir=Path(data_dir) if data_dir else REPO_ROOT / "data",
            screenshot_dir=Path(screenshot_dir) if screenshot_dir else Path("screenshots"),
            timeouts=Timeouts.from_env(env),
        )

    @property
    def account_url(self) -> str:
        """Landing URL of an authenticated session."""
        return urljoin(self.base_url, ACCOUNT_FRAGMENT)

    @property
    def login_path(self) -> str:
        return LOGIN_PATH

    @property
    def registration_fixture(self) -> Path:
        return self.data_dir / "register.json"

    @property
    def login_fixture(self) -> Path:
        return self.data_dir / "login.json"

    def describe(self) -> Dict[str, Any]:
        return {
            "baseUrl": self.base_url,
            "maxUsers": self.max_users,
            "maxLogins": self.max_logins,
            "headless": self.headless,
            "browser": self.browser,
            "dataDir": str(self.data_dir),
            "screenshotDir": str(self.screenshot_dir),
            "timeouts": asdict(self.timeouts),
        }


settings = HarnessConfig.from_env()
