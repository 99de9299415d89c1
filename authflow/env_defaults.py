"""Harness defaults catalog (`.env.defaults`).

Exported environment variables always win; the catalog only fills in what
the shell does not provide, e.g. when a suite is started from an IDE.
`AUTHFLOW_ENV_DEFAULTS` points the harness at another catalog file.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

REPO_ROOT = Path(__file__).resolve().parents[1]
CATALOG_OVERRIDE = "AUTHFLOW_ENV_DEFAULTS"


def catalog_path() -> Path:
    override = os.environ.get(CATALOG_OVERRIDE)
    return Path(override) if override else REPO_ROOT / ".env.defaults"


def parse_catalog(text: str) -> Dict[str, str]:
    """Parse `KEY=VALUE` lines.

    Accepts an optional `export ` prefix, single or double quoted values and
    trailing ` # comments` after unquoted values. Lines without `=` are
    ignored.
    """
    entries: Dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        name, sep, value = line.partition("=")
        if not sep or not name or name.startswith("#"):
            continue

        value = value.strip()
        if value[:1] in ('"', "'"):
            end = value.find(value[0], 1)
            value = value[1:end] if end > 0 else value[1:]
        else:
            value = value.split(" #", 1)[0].rstrip()
        entries[name.strip()] = value
    return entries


@lru_cache(maxsize=4)
def load_catalog(path: Path) -> Dict[str, str]:
    if not path.is_file():
        return {}
    return parse_catalog(path.read_text(encoding="utf-8"))


def get_env_default(key: str) -> Optional[str]:
    return load_catalog(catalog_path()).get(key)
