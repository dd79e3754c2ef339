"""Employee directory records.

Records are owned by the external directory; the understanding pipeline only reads them to build
name variants and the reference executor filters them.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class Address(BaseModel):
    """A postal address."""

    model_config = ConfigDict(extra="ignore", frozen=True, str_strip_whitespace=True)

    street: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""

    def formatted(self) -> str:
        region = " ".join(part for part in (self.state, self.zip) if part)
        return ", ".join(part for part in (self.street, self.city, region) if part)


class Employee(BaseModel):
    """An immutable employee record."""

    model_config = ConfigDict(extra="ignore", frozen=True, str_strip_whitespace=True)

    id: int
    first_name: str = ""
    last_name: str = ""
    department: str = ""
    role: str = Field(default="", validation_alias=AliasChoices("role", "position"))
    location: str = ""
    hire_date: date | None = Field(
        default=None, validation_alias=AliasChoices("hire_date", "original_hire_date")
    )
    email: str = ""
    phone: str = ""
    birthday: date | None = None
    address: Address | None = None

    @model_validator(mode="before")
    @classmethod
    def split_display_name(cls, data: Any) -> Any:
        """Accept a single `name` key ("Rick Sanchez") in place of first/last names."""

        if not isinstance(data, dict) or "name" not in data:
            return data
        if data.get("first_name") or data.get("last_name"):
            return data

        first, _, last = str(data["name"]).strip().partition(" ")
        return {**data, "first_name": first, "last_name": last.strip()}

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
