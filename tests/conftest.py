import sys
from pathlib import Path

import anyio
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from authflow.config import HarnessConfig, Timeouts


@pytest.fixture(autouse=True)
def sleeps(monkeypatch):
    """Record anyio.sleep durations instead of sleeping."""
    recorded = []

    async def fake_sleep(delay, *args, **kwargs):
        recorded.append(delay)

    monkeypatch.setattr(anyio, "sleep", fake_sleep)
    return recorded


@pytest.fixture
def timeouts():
    return Timeouts()


@pytest.fixture
def config(tmp_path):
    return HarnessConfig(
        base_url="http://localhost:4200/",
        data_dir=tmp_path / "data",
        screenshot_dir=tmp_path / "screenshots",
    )
