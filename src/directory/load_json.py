"""Load the employee directory from a JSON file.

The file is expected to be either a JSON list of employee objects or an object with a single
top-level key `"employees"` containing that list. A missing or malformed file is a configuration
error and is raised at startup.
"""

from __future__ import annotations

import json
import os
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import ValidationError

from src.directory.models import Employee


class DirectoryLoadError(RuntimeError):
    """Raised when the employee directory cannot be loaded."""


def require_employees_path() -> str:
    """Read `EMPLOYEES_PATH` from the environment or raise a clear error."""

    employees_path = os.getenv("EMPLOYEES_PATH")
    if not employees_path:
        raise RuntimeError("EMPLOYEES_PATH is required (set it in .env or environment)")
    return employees_path


def iter_employee_records(payload: Any) -> Iterable[dict[str, Any]]:
    """Yield raw employee objects from a decoded directory payload."""

    if isinstance(payload, dict) and isinstance(payload.get("employees"), list):
        payload = payload["employees"]
    if not isinstance(payload, list):
        raise DirectoryLoadError(
            "Unexpected directory format: expected a list or an object with key 'employees'"
        )

    for record in payload:
        if not isinstance(record, dict):
            raise DirectoryLoadError(f"Unexpected employee record: {record!r}")
        yield record


def parse_employees(payload: Any) -> list[Employee]:
    """Validate a decoded payload into `Employee` records with unique ids."""

    employees: list[Employee] = []
    seen: set[int] = set()
    for record in iter_employee_records(payload):
        try:
            employee = Employee.model_validate(record)
        except ValidationError as exc:
            raise DirectoryLoadError(f"Invalid employee record: {exc}") from exc
        if employee.id in seen:
            raise DirectoryLoadError(f"Duplicate employee id: {employee.id}")
        seen.add(employee.id)
        employees.append(employee)
    return employees


def load_employees(path: str | Path | None = None) -> Sequence[Employee]:
    """Load the employee directory.

    If `path` is omitted, the function loads `.env` and reads `EMPLOYEES_PATH`.

    Raises:
        DirectoryLoadError: If the file is unreadable or its content is invalid.
    """

    if path is None:
        load_dotenv(".env")
        path = require_employees_path()

    try:
        payload = json.loads(Path(path).read_bytes())
    except (OSError, json.JSONDecodeError) as exc:
        raise DirectoryLoadError(f"Cannot read employee directory {path}: {exc}") from exc

    return tuple(parse_employees(payload))
