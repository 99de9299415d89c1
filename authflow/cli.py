#!/usr/bin/env python3
"""Run the registration/login journey suites.

Options are exported as the environment variables the suites read
(BROWSER, HEADLESS, MAX_USERS, MAX_LOGINS, BASE_URL, ...) before pytest
starts, so this module must not import `authflow.config` itself.

Usage:
    authflow --suite login --browser firefox --max-logins 3
    authflow --headed -- -x -k TC001
"""
from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional

import pytest

JOURNEYS_DIR = Path(__file__).resolve().parent / "journeys"

SUITES = {
    "registration": ["test_registration.py"],
    "login": ["test_login.py"],
    "all": ["test_registration.py", "test_login.py"],
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="authflow",
        description="Data-driven registration and login UI suites",
    )
    parser.add_argument("--suite", choices=sorted(SUITES), default="all", help="Which suite to run")
    parser.add_argument("--browser", help="chrome, chromium, firefox, edge or webkit")
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    parser.add_argument("--max-users", type=int, help="Registration records to run")
    parser.add_argument("--max-logins", type=int, help="Login records to run")
    parser.add_argument("--base-url", help="Application under test")
    parser.add_argument("--data-dir", help="Directory holding register.json and login.json")
    parser.add_argument("--screenshot-dir", help="Where failure screenshots are written")
    parser.add_argument("pytest_args", nargs=argparse.REMAINDER, help="Extra arguments passed to pytest")
    return parser


def environment_for(args: argparse.Namespace) -> Dict[str, str]:
    env: Dict[str, str] = {}
    if args.browser:
        env["BROWSER"] = args.browser
    if args.headed:
        env["HEADLESS"] = "false"
    if args.max_users is not None:
        env["MAX_USERS"] = str(args.max_users)
    if args.max_logins is not None:
        env["MAX_LOGINS"] = str(args.max_logins)
    if args.base_url:
        env["BASE_URL"] = args.base_url
    if args.data_dir:
        env["DATA_DIR"] = args.data_dir
    if args.screenshot_dir:
        env["SCREENSHOT_DIR"] = args.screenshot_dir
    return env


def pytest_arguments(args: argparse.Namespace) -> List[str]:
    extra = list(args.pytest_args)
    if extra and extra[0] == "--":
        extra = extra[1:]
    return [str(JOURNEYS_DIR / name) for name in SUITES[args.suite]] + extra


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    os.environ.update(environment_for(args))
    return int(pytest.main(pytest_arguments(args)))


if __name__ == "__main__":
    sys.exit(main())
