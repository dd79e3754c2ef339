"""Pytest configuration.

The repository uses a flat `src/` layout. This conftest ensures tests can import from the `src.*`
namespace when running `pytest` locally, and provides a small in-memory employee directory.
"""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

import pytest

# Ensure `import src...` works when running pytest without installing the package.
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from src.app import App, create_app  # noqa: E402
from src.config.settings import Settings  # noqa: E402
from src.directory.models import Employee  # noqa: E402
from src.intent.dates import DateparserRecognizer  # noqa: E402
from src.intent.dictionaries import AliasDictionary, build_default_dictionaries  # noqa: E402
from src.intent.schema import FieldType  # noqa: E402

REFERENCE_DATE = date(2025, 6, 15)


def _employee(
        employee_id: int,
        name: str,
        department: str,
        role: str,
        location: str,
        hire_date: date,
) -> Employee:
    return Employee.model_validate(
        {
            "id": employee_id,
            "name": name,
            "department": department,
            "position": role,
            "location": location,
            "hire_date": hire_date.isoformat(),
            "email": f"{name.split()[0].lower()}@corp.com",
            "phone": f"555-00{employee_id:02d}",
        }
    )


@pytest.fixture()
def employees() -> tuple[Employee, ...]:
    rows = (
        (1, "Rick Sanchez", "Engineering", "Manager", "Salt Lake City", date(2015, 3, 1)),
        (2, "Summer Smith", "Engineering", "Software Engineer", "Salt Lake City", date(2021, 6, 15)),
        (3, "Morty Smith", "Sales", "Team Lead", "Reno", date(2019, 9, 10)),
        (4, "Beth Smith", "Human Resources", "Director", "Headquarters", date(2010, 2, 5)),
        (5, "Jerry Smith", "Support", "Supervisor", "Provo", date(2018, 11, 20)),
        (6, "Carol Danvers", "Engineering", "Software Engineer", "Salt Lake City", date(2022, 1, 10)),
        (7, "Bruce Wayne", "Sales", "Manager", "Las Vegas", date(2016, 7, 18)),
        (8, "Sarah Connor", "Information Technology", "SysAdmin", "San Jose", date(2017, 8, 12)),
    )
    return tuple(_employee(*row) for row in rows)


@pytest.fixture()
def dictionaries() -> dict[FieldType, AliasDictionary]:
    return build_default_dictionaries()


@pytest.fixture()
def recognizer() -> DateparserRecognizer:
    return DateparserRecognizer(reference_date=REFERENCE_DATE)


@pytest.fixture()
def settings() -> Settings:
    return Settings(_env_file=None, EMPLOYEES_PATH=None, LLM_ENABLED=False)


@pytest.fixture()
def app(settings: Settings, employees: tuple[Employee, ...], recognizer: DateparserRecognizer) -> App:
    return create_app(settings, employees, recognizer=recognizer)
