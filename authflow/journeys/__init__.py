"""
Data-driven journey suites.

- test_registration.py: one case per record in `register.json`
- test_login.py: one case per record in `login.json`

Each suite owns one browser session and one result collector.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional

import pytest

logger = logging.getLogger(__name__)


def record_params(loader: Callable, path: Path, limit: Optional[int]) -> List:
    """Fixture records as pytest params in fixture order, ids = test case ids."""
    try:
        records = loader(path, limit)
    except FileNotFoundError:
        logger.warning("Fixture file %s not found, suite has no cases", path)
        return []
    return [pytest.param(index, record, id=record.case_id) for index, record in enumerate(records, start=1)]
