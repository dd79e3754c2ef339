"""Reference in-memory query executor.

The executor converts a validated `QuerySpec` into a list of predicates over `Employee` records
and keeps the records matching all of them, in directory order. Field comparisons are
case-insensitive equality on canonical values.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import date
from typing import Any

from src.directory.models import Employee
from src.intent.schema import FieldType, IntentLabel, Operator, QuerySpec, Slots, field_marker

Predicate = Callable[[Employee], bool]

_FIELD_ATTRIBUTES: dict[FieldType, str] = {
    FieldType.department: "department",
    FieldType.role: "role",
    FieldType.location: "location",
}

# Contact fields returned per intent in addition to the display name.
_PROJECTIONS: dict[IntentLabel, tuple[str, ...]] = {
    IntentLabel.contact_email: ("email",),
    IntentLabel.contact_phone: ("phone",),
    IntentLabel.contact_address: ("address",),
    IntentLabel.contact_birthday: ("birthday",),
    IntentLabel.filter_by_hire_date: ("hire_date",),
    IntentLabel.contact_info: ("email", "phone", "address"),
}
_DEFAULT_PROJECTION: tuple[str, ...] = ("department", "role", "location", "email", "phone")
_HIRE_DATE_MARKER = field_marker(FieldType.field, "hire_date")


def _field_predicate(attribute: str, values: Iterable[str]) -> Predicate:
    wanted = {v.casefold() for v in values}
    return lambda e: getattr(e, attribute).casefold() in wanted


def _hire_date_bounds(slots: Slots) -> tuple[date | None, date | None]:
    start = slots.date_range.start if slots.date_range else None
    end = slots.date_range.end if slots.date_range else None
    if slots.operator == Operator.before and end is None:
        end = slots.single_date
    if slots.operator == Operator.after and start is None:
        start = slots.single_date
    return start, end


def _hire_date_period(start: date, end: date) -> Predicate:
    return lambda e: e.hire_date is not None and start <= e.hire_date <= end


def _hire_date_predicate(spec: QuerySpec) -> Predicate | None:
    slots = spec.slots
    if slots.operator is None:
        # A lone date filters on the period it names, but only when the query is about hiring.
        about_hiring = (
                spec.intent == IntentLabel.filter_by_hire_date
                or _HIRE_DATE_MARKER in slots.markers
        )
        if slots.single_date is None or not about_hiring:
            return None
        return _hire_date_period(slots.single_date, slots.single_date_end or slots.single_date)

    start, end = _hire_date_bounds(slots)
    if slots.operator == Operator.before:
        if end is None:
            return None
        return lambda e: e.hire_date is not None and e.hire_date < end
    if slots.operator == Operator.after:
        if start is None:
            return None
        return lambda e: e.hire_date is not None and e.hire_date > start

    def _between(e: Employee) -> bool:
        if e.hire_date is None:
            return False
        if start is not None and e.hire_date < start:
            return False
        return end is None or e.hire_date <= end

    return _between


def build_predicates(spec: QuerySpec) -> list[Predicate]:
    """Build the conjunction of filters implied by the slots of `spec`."""

    slots = spec.slots
    predicates: list[Predicate] = []

    if slots.entity_ids:
        ids = slots.entity_ids
        predicates.append(lambda e: e.id in ids)

    for field_type, attribute in _FIELD_ATTRIBUTES.items():
        values = slots.field_values(field_type)
        if values:
            predicates.append(_field_predicate(attribute, values))

    hire_date = _hire_date_predicate(spec)
    if hire_date is not None:
        predicates.append(hire_date)

    return predicates


def execute_query(spec: QuerySpec, employees: Iterable[Employee]) -> list[Employee]:
    """Return the employees matching every filter of `spec`, preserving directory order."""

    predicates = build_predicates(spec)
    return [e for e in employees if all(p(e) for p in predicates)]


def project_employee(employee: Employee, intent: IntentLabel) -> dict[str, Any]:
    """Select the fields worth showing for `intent` (JSON-compatible values)."""

    row: dict[str, Any] = {"id": employee.id, "name": employee.display_name}
    for attribute in _PROJECTIONS.get(intent, _DEFAULT_PROJECTION):
        value = getattr(employee, attribute)
        if attribute == "address":
            value = value.formatted() if value is not None else None
        elif isinstance(value, date):
            value = value.isoformat()
        row[attribute] = value
    return row
