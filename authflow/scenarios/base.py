"""Common scenario boundary: verdict, failure bookkeeping, screenshot and re-raise."""
from __future__ import annotations

import logging
from typing import Any, Optional

from authflow.config import HarnessConfig, settings
from authflow.results import ScenarioResult, SuiteResults, verify_outcome
from authflow.screenshots import capture_failure_screenshot
from authflow.session import BrowserSession

logger = logging.getLogger(__name__)


class ScenarioRunner:
    """Runs one fixture record end to end against a shared session.

    The observed outcome is checked against the record's expected result
    inside the same boundary as the browser steps, so a wrong verdict is
    counted, screenshotted and re-raised like any other failure.
    """

    kind = "scenario"

    def __init__(
        self,
        session: BrowserSession,
        results: SuiteResults,
        config: Optional[HarnessConfig] = None,
    ) -> None:
        self.session = session
        self.results = results
        self.config = config or settings

    @property
    def page(self):
        return self.session.page

    async def run(self, record: Any, index: Optional[int] = None) -> ScenarioResult:
        position = f" {index}/{self.results.total}" if index is not None else ""
        logger.info("🔄 Starting %s test%s: %s", self.kind, position, record.case_id)
        try:
            result = await self._run(record)
            verify_outcome(result, record.expected)
        except Exception as exc:
            self.results.record_failure(record.case_id)
            logger.warning("⚠ %s: Error - %s", record.case_id, exc)
            await capture_failure_screenshot(self.page, record.case_id, self.config.screenshot_dir)
            raise
        return result

    async def _run(self, record: Any) -> ScenarioResult:
        raise NotImplementedError
