"""Fixture records for the registration and login suites."""
from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Callable, List, Optional, TypeVar

from authflow.results import Outcome

T = TypeVar("T")


def calendar_date(value: str) -> Optional[date]:
    """`YYYY-M-D` (zero padding optional) as a date, None if not a real date."""
    try:
        year, month, day = (int(part) for part in value.split("-"))
        return date(year, month, day)
    except ValueError:
        return None


def _required(data: dict, key: str) -> str:
    if key not in data:
        raise KeyError(key)
    return str(data[key])


@dataclass(frozen=True)
class RegistrationRecord:
    case_id: str
    first_name: str
    last_name: str
    dob: str
    street: str
    postal_code: str
    city: str
    state: str
    country: str
    phone: str
    email: str
    password: str
    expected: Outcome

    @property
    def dob_date(self) -> Optional[date]:
        """Date of birth as a calendar date, None when not a valid date."""
        return calendar_date(self.dob)

    @classmethod
    def from_dict(cls, data: dict) -> "RegistrationRecord":
        return cls(
            case_id=_required(data, "testCaseID"),
            first_name=_required(data, "firstName"),
            last_name=_required(data, "lastName"),
            dob=_required(data, "dob"),
            street=_required(data, "street"),
            postal_code=_required(data, "postalCode"),
            city=_required(data, "city"),
            state=_required(data, "state"),
            country=_required(data, "country"),
            phone=_required(data, "phone"),
            email=_required(data, "email"),
            password=_required(data, "password"),
            expected=Outcome.parse(_required(data, "expectedResult")),
        )


@dataclass(frozen=True)
class LoginRecord:
    case_id: str
    email: str
    password: str
    expected: Outcome

    @property
    def masked_password(self) -> str:
        return "*" * len(self.password)

    @classmethod
    def from_dict(cls, data: dict) -> "LoginRecord":
        return cls(
            case_id=_required(data, "testCaseID"),
            email=_required(data, "email"),
            password=_required(data, "password"),
            expected=Outcome.parse(_required(data, "expectedResult")),
        )


def _load(path: Path, limit: Optional[int], factory: Callable[[dict], T]) -> List[T]:
    raw: Any = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"{path}: expected a JSON array of records")

    if limit is not None:
        raw = raw[:limit]

    records: List[T] = []
    for index, item in enumerate(raw):
        try:
            records.append(factory(item))
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"{path}: invalid record at index {index}: {exc}") from exc
    return records


def load_registration_records(path: Path, limit: Optional[int] = None) -> List[RegistrationRecord]:
    return _load(path, limit, RegistrationRecord.from_dict)


def load_login_records(path: Path, limit: Optional[int] = None) -> List[LoginRecord]:
    return _load(path, limit, LoginRecord.from_dict)
