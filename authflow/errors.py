"""Exceptions raised by the browser-interaction layer and scenario runners."""
from __future__ import annotations

from typing import Any, Sequence


class HarnessError(Exception):
    """Base class for harness failures."""


class UnsupportedBrowserError(HarnessError, ValueError):
    """Raised for an engine name the session manager does not know."""

    def __init__(self, engine: str) -> None:
        super().__init__(f"Browser {engine} is not supported")
        self.engine = engine


class SessionCreationError(HarnessError):
    """Raised when no browser session could be created; fatal to the suite."""

    def __init__(self, engine: str, attempts: int, last_error: BaseException | None = None) -> None:
        super().__init__(f"Could not start {engine} after {attempts} attempts: {last_error}")
        self.engine = engine
        self.attempts = attempts
        self.last_error = last_error


class ElementNotFoundError(HarnessError):
    """Raised when an element kept going stale until retries ran out."""

    def __init__(self, locator: Any, attempts: int, last_error: BaseException | None = None) -> None:
        super().__init__(f"Element {locator} not found after {attempts} attempts: {last_error}")
        self.locator = locator
        self.attempts = attempts
        self.last_error = last_error


class ClickFailedError(HarnessError):
    """Raised when every click attempt on an element failed."""

    def __init__(self, locator: Any, attempts: int, last_error: BaseException | None = None) -> None:
        super().__init__(f"Could not click {locator} after {attempts} attempts: {last_error}")
        self.locator = locator
        self.attempts = attempts
        self.last_error = last_error


class DateAssignmentError(HarnessError):
    """Raised when no date strategy produced an acceptable value."""

    def __init__(self, requested: str, observed: Sequence[str]) -> None:
        super().__init__(f"All date setting strategies failed for value: {requested}")
        self.requested = requested
        self.observed = list(observed)


class SubmitNotFoundError(HarnessError):
    """Raised when none of the submit control candidates is on the page."""

    def __init__(self, candidates: Sequence[str]) -> None:
        super().__init__("Could not find submit button")
        self.candidates = list(candidates)
