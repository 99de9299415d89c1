"""Fixtures shared by the journey suites."""
import pytest

from authflow.config import settings


@pytest.fixture(scope="session", autouse=True)
def setup_screenshot_dir():
    """Create the failure screenshot directory once per run."""
    settings.screenshot_dir.mkdir(parents=True, exist_ok=True)
