"""Failure screenshots keyed by test case id."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from playwright.async_api import Page

logger = logging.getLogger(__name__)


def screenshot_path(directory: Path, case_id: str) -> Path:
    return Path(directory) / f"{case_id}-error.png"


async def capture_failure_screenshot(page: Page, case_id: str, directory: Path) -> Optional[Path]:
    """Save `<case_id>-error.png`; returns None if the capture failed."""
    path = screenshot_path(directory, case_id)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        await page.screenshot(path=str(path), type="png", full_page=True)
    except Exception as exc:
        logger.warning("Could not save screenshot for %s: %s", case_id, exc)
        return None
    logger.info("📸 Screenshot saved: %s", path)
    return path
