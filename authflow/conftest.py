import logging

import anyio
import httpx
import pytest
import pytest_asyncio

from authflow.config import settings
from authflow.session import close_session, create_session

logger = logging.getLogger(__name__)


@pytest.fixture(scope="session")
def target_available():
    """Skip live suites when the application under test is not running."""
    try:
        httpx.get(settings.base_url, timeout=5.0, follow_redirects=True)
    except httpx.HTTPError as exc:
        pytest.skip(f"Target {settings.base_url} not reachable: {exc}")
    logger.info("🚀 Test Configuration: %s", settings.describe())


@pytest_asyncio.fixture(scope="module", loop_scope="module")
async def session(target_available):
    """One browser session per suite, released even if a case raises."""
    setup_timeout = settings.timeouts.setup / 1000
    with anyio.fail_after(setup_timeout):
        browser = await create_session(settings.browser, settings.headless, settings.timeouts)
    try:
        yield browser
    finally:
        with anyio.fail_after(setup_timeout, shield=True):
            await close_session(browser)
