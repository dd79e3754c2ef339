"""Tests for QuerySpec assembly and the reference in-memory executor."""

from __future__ import annotations

from datetime import date

from src.directory.models import Employee
from src.intent.schema import DateRange, IntentLabel, Operator, Slots
from src.query.builder import build_query_spec
from src.query.executor import execute_query, project_employee


def _ids(employees: list[Employee]) -> list[int]:
    return [e.id for e in employees]


def test_build_query_spec_defaults_to_empty_slots() -> None:
    spec = build_query_spec("contact_email")
    assert spec.intent == IntentLabel.contact_email
    assert spec.slots == Slots()


def test_no_filters_returns_everyone_in_order(employees: tuple[Employee, ...]) -> None:
    spec = build_query_spec(IntentLabel.contact_info)
    assert _ids(execute_query(spec, employees)) == [1, 2, 3, 4, 5, 6, 7, 8]


def test_department_marker(employees: tuple[Employee, ...]) -> None:
    spec = build_query_spec(
        IntentLabel.filter_by_department, Slots(markers=frozenset({"department:Engineering"}))
    )
    assert _ids(execute_query(spec, employees)) == [1, 2, 6]


def test_role_match_is_case_insensitive(employees: tuple[Employee, ...]) -> None:
    spec = build_query_spec(
        IntentLabel.filter_by_role, Slots(markers=frozenset({"role:software engineer"}))
    )
    assert _ids(execute_query(spec, employees)) == [2, 6]


def test_entities_and_before(employees: tuple[Employee, ...]) -> None:
    slots = Slots(
        entity_ids=frozenset({1, 2, 6}),
        operator=Operator.before,
        date_range=DateRange(end=date(2022, 1, 10)),
    )
    # Strictly before: Carol was hired on the bound itself.
    assert _ids(execute_query(build_query_spec(IntentLabel.contact_email, slots), employees)) == [
        1,
        2,
    ]


def test_after_is_strict(employees: tuple[Employee, ...]) -> None:
    slots = Slots(operator=Operator.after, date_range=DateRange(start=date(2021, 6, 15)))
    spec = build_query_spec(IntentLabel.filter_by_hire_date, slots)
    assert _ids(execute_query(spec, employees)) == [6]


def test_between_is_inclusive(employees: tuple[Employee, ...]) -> None:
    slots = Slots(
        operator=Operator.between,
        date_range=DateRange(start=date(2016, 7, 18), end=date(2018, 11, 20)),
    )
    spec = build_query_spec(IntentLabel.filter_by_hire_date, slots)
    assert _ids(execute_query(spec, employees)) == [5, 7, 8]


def test_single_date_filters_on_the_period_it_names(employees: tuple[Employee, ...]) -> None:
    slots = Slots(single_date=date(2021, 1, 1), single_date_end=date(2021, 12, 31))
    spec = build_query_spec(IntentLabel.filter_by_hire_date, slots)
    assert _ids(execute_query(spec, employees)) == [2]

    day = build_query_spec(IntentLabel.filter_by_hire_date, Slots(single_date=date(2022, 1, 10)))
    assert _ids(execute_query(day, employees)) == [6]


def test_single_date_needs_a_hiring_context(employees: tuple[Employee, ...]) -> None:
    slots = Slots(single_date=date(2021, 1, 1), single_date_end=date(2021, 12, 31))
    spec = build_query_spec(IntentLabel.contact_email, slots)
    assert len(execute_query(spec, employees)) == len(employees)

    marked = Slots(
        markers=frozenset({"field:hire_date"}),
        single_date=date(2021, 1, 1),
        single_date_end=date(2021, 12, 31),
    )
    spec = build_query_spec(IntentLabel.contact_email, marked)
    assert _ids(execute_query(spec, employees)) == [2]


def test_projection_follows_intent(employees: tuple[Employee, ...]) -> None:
    rick = employees[0]
    assert project_employee(rick, IntentLabel.contact_email) == {
        "id": 1,
        "name": "Rick Sanchez",
        "email": "rick@corp.com",
    }
    assert project_employee(rick, IntentLabel.filter_by_hire_date)["hire_date"] == "2015-03-01"
    assert project_employee(rick, IntentLabel.contact_address)["address"] is None
