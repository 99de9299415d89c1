"""Data-driven registration and login UI harness built on Playwright."""

__version__ = "1.0.0"
