"""Scenario outcomes and the per-suite result collector."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    SUCCESS = "Success"
    FAIL = "Fail"
    ENVIRONMENT_ERROR = "EnvironmentError"

    @classmethod
    def parse(cls, value: str) -> "Outcome":
        """Parse an expected result from a fixture (Success or Fail only)."""
        for outcome in (cls.SUCCESS, cls.FAIL):
            if value == outcome.value:
                return outcome
        raise ValueError(f"Expected result must be 'Success' or 'Fail', got {value!r}")


@dataclass(frozen=True)
class ScenarioResult:
    case_id: str
    outcome: Outcome
    url: str
    error_text: str = ""


@dataclass
class SuiteResults:
    """Aggregate counters for one suite; never shared between suites."""

    name: str
    total: int = 0
    successful: List[Any] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    def record_success(self, record: Any) -> None:
        self.successful.append(record)

    def record_failure(self, case_id: str) -> None:
        """Count a case as failed once; a failure supersedes an earlier success."""
        self.successful = [r for r in self.successful if getattr(r, "case_id", None) != case_id]
        if case_id not in self.failed:
            self.failed.append(case_id)

    def summary_lines(self) -> List[str]:
        lines = [
            f"📊 {self.name} Results Summary:",
            f"✅ Successful: {len(self.successful)}/{self.total}",
            f"⚠ Failed: {len(self.failed)}/{self.total}",
        ]
        if self.failed:
            lines.append(f"⚠ Failed {self.name} Test Cases:")
            lines.extend(f"  - {case_id}" for case_id in self.failed)
        return lines

    def log_summary(self) -> None:
        for line in self.summary_lines():
            logger.info(line)


def verify_outcome(result: ScenarioResult, expected: Outcome) -> bool:
    """Assert the observed outcome; environment errors are not asserted.

    Returns False when the case was exempt so the caller can mark it skipped.
    """
    if result.outcome is Outcome.ENVIRONMENT_ERROR:
        return False
    if result.outcome != expected:
        raise AssertionError(f"{result.case_id} expected {expected.value}, got {result.outcome.value}")
    return True
