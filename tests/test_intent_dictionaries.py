"""Tests for alias dictionaries and alias-exact canonicalization."""

from __future__ import annotations

import pytest

from src.intent.dictionaries import (
    AliasDictionary,
    AliasDictionaryError,
    canonicalize,
    canonicalize_all,
    find_alias,
    get_canonical_value_sets,
)
from src.intent.schema import FieldType


def test_department_synonyms_canonicalize(dictionaries: dict[FieldType, AliasDictionary]) -> None:
    departments = dictionaries[FieldType.department]
    assert canonicalize("eng", departments) == "Engineering"
    assert canonicalize("ENG", departments) == "Engineering"
    assert canonicalize("hr", departments) == "Human Resources"
    assert canonicalize("R&D", departments) == "Research and Development"


def test_unknown_value_is_none(dictionaries: dict[FieldType, AliasDictionary]) -> None:
    assert canonicalize("unknown-dept", dictionaries[FieldType.department]) is None
    assert canonicalize("", dictionaries[FieldType.department]) is None


def test_substring_scan_is_token_aligned(dictionaries: dict[FieldType, AliasDictionary]) -> None:
    departments = dictionaries[FieldType.department]
    assert canonicalize("everyone in the eng org", departments) == "Engineering"
    # "dev" must not fire inside "devon".
    assert canonicalize("devon street", departments) is None


def test_insertion_order_is_priority(dictionaries: dict[FieldType, AliasDictionary]) -> None:
    roles = dictionaries[FieldType.role]
    match = find_alias("list all software engineers", roles)
    assert match is not None
    assert match.canonical == "Software Engineer"


def test_canonicalize_all_collects_field_names(
        dictionaries: dict[FieldType, AliasDictionary],
) -> None:
    fields = dictionaries[FieldType.field]
    assert canonicalize_all("hire date and office of beth", fields) == ["hire_date", "location"]


def test_conflicting_alias_is_a_configuration_error() -> None:
    with pytest.raises(AliasDictionaryError):
        AliasDictionary.from_synonyms("department", {"Sales": ("biz",), "Support": ("biz",)})


def test_empty_canonical_value_is_rejected() -> None:
    with pytest.raises(AliasDictionaryError):
        AliasDictionary.from_synonyms("department", {"  ": ("x",)})


def test_canonical_value_sets_expose_every_field_type(
        dictionaries: dict[FieldType, AliasDictionary],
) -> None:
    value_sets = get_canonical_value_sets(dictionaries)
    assert set(value_sets) == {"department", "role", "location", "field"}
    assert "Engineering" in value_sets["department"]
    assert value_sets["field"] == ["hire_date", "department", "position", "location", "job"]
