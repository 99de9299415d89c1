"""Declarative element locators rendered to Playwright selector strings."""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Literal

Mechanism = Literal["css", "id"]


@dataclass(frozen=True)
class Locator:
    """How to find zero or more elements: a mechanism plus its selector."""

    mechanism: Mechanism
    value: str

    @classmethod
    def css(cls, value: str) -> "Locator":
        return cls("css", value)

    @classmethod
    def id(cls, value: str) -> "Locator":
        return cls("id", value)

    @property
    def selector(self) -> str:
        if self.mechanism == "id":
            # Attribute form keeps ids with dots or leading digits valid
            return f"css=[id={json.dumps(self.value)}]"
        if self.mechanism == "css":
            return f"css={self.value}"
        raise ValueError(f"Unknown locator mechanism: {self.mechanism}")

    def __str__(self) -> str:
        return f"By.{self.mechanism}({self.value!r})"


def option_by_value(value: str) -> Locator:
    return Locator.css(f"option[value={json.dumps(value)}]")
