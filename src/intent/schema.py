"""Query understanding schema (Pydantic models).

This schema is the contract between the understanding pipeline and the query executor. `Slots`
and `QuerySpec` are immutable once built; cross-field invariants are enforced on construction.
"""

from __future__ import annotations

from datetime import date
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class IntentLabel(StrEnum):
    """Closed set of supported query intents."""

    contact_email = "contact_email"
    contact_phone = "contact_phone"
    contact_address = "contact_address"
    contact_birthday = "contact_birthday"
    filter_by_hire_date = "filter_by_hire_date"
    filter_by_department = "filter_by_department"
    filter_by_role = "filter_by_role"
    filter_by_location = "filter_by_location"
    contact_info = "contact_info"
    unknown = "unknown"


class Operator(StrEnum):
    """Date comparison operators."""

    before = "before"
    after = "after"
    between = "between"


class FieldType(StrEnum):
    """Field types that can appear in `fieldType:canonicalValue` markers."""

    department = "department"
    role = "role"
    location = "location"
    field = "field"


def field_marker(field_type: str, value: str) -> str:
    """Format a resolved field marker (e.g. `department:Engineering`)."""

    return f"{field_type}:{value}"


def split_marker(marker: str) -> tuple[str, str]:
    """Split a marker into `(field_type, value)`; values may themselves contain `:`."""

    field_type, _, value = marker.partition(":")
    return field_type, value


class DateRange(BaseModel):
    """A calendar-day range where either bound may be open."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    start: date | None = None
    end: date | None = None

    @model_validator(mode="after")
    def validate_bounds(self) -> DateRange:
        """Require at least one bound and `start <= end` when both are present."""

        if self.start is None and self.end is None:
            raise ValueError("date range requires start and/or end")
        if self.start is not None and self.end is not None and self.start > self.end:
            raise ValueError("start must be <= end")
        return self


class Slots(BaseModel):
    """Structured filters extracted from one query."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    markers: frozenset[str] = Field(default_factory=frozenset)
    operator: Operator | None = None
    single_date: date | None = None
    single_date_end: date | None = None
    date_range: DateRange | None = None
    entity_ids: frozenset[int] = Field(default_factory=frozenset)

    @model_validator(mode="after")
    def validate_semantics(self) -> Slots:
        """Enforce that `between` carries a range, periods are ordered and markers are well-formed."""

        if self.operator == Operator.between and self.date_range is None:
            raise ValueError("operator=between requires a date_range")
        if self.single_date_end is not None and (
                self.single_date is None or self.single_date_end < self.single_date
        ):
            raise ValueError("single_date_end requires single_date <= single_date_end")
        for marker in self.markers:
            field_type, value = split_marker(marker)
            if not field_type or not value:
                raise ValueError(f"malformed field marker: {marker!r}")
        return self

    def field_values(self, field_type: str) -> list[str]:
        """Return canonical values for one field type, sorted for stable output."""

        return sorted(
            value
            for field_type_, value in map(split_marker, self.markers)
            if field_type_ == field_type
        )

    def _single(self, field_type: FieldType) -> str | None:
        values = self.field_values(field_type)
        return values[0] if values else None

    @property
    def department(self) -> str | None:
        return self._single(FieldType.department)

    @property
    def role(self) -> str | None:
        return self._single(FieldType.role)

    @property
    def location(self) -> str | None:
        return self._single(FieldType.location)


class QuerySpec(BaseModel):
    """The terminal `(intent, slots)` pair handed to the query executor."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    intent: IntentLabel
    slots: Slots = Field(default_factory=Slots)
