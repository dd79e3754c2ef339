"""Tests for name/field variant generation and the check-lock-check variant cache."""

from __future__ import annotations

import threading
import time

from src.directory.models import Employee
from src.intent.dictionaries import AliasDictionary
from src.intent.schema import FieldType
from src.resolution.variants import (
    VariantCache,
    build_field_variant_maps,
    build_field_variants,
    build_name_variant_map,
    build_name_variants,
    name_variant_cache,
)


def test_name_variants_cover_common_spellings() -> None:
    variants = build_name_variants("Morty", "Smith")
    assert {
        "morty",
        "smith",
        "morty smith",
        "smith morty",
        "morty s",
        "m smith",
        "mortysmith",
        "mortys",
        "morty smiths",
        "msmith",
    } <= variants


def test_name_variants_are_lowercase_and_longer_than_one_char(
        employees: tuple[Employee, ...],
) -> None:
    for variants in build_name_variant_map(employees).values():
        assert variants
        for variant in variants:
            assert len(variant) > 1
            assert variant == variant.lower()


def test_name_variants_are_idempotent(employees: tuple[Employee, ...]) -> None:
    assert build_name_variant_map(employees) == build_name_variant_map(employees)


def test_name_variants_drop_apostrophes() -> None:
    variants = build_name_variants("Ra's", "al Ghul")
    assert {"ras", "al ghul", "ras al ghul", "rasalghul"} <= variants
    assert not any("'" in v for v in variants)


def test_single_name_employee() -> None:
    assert build_name_variants("Bane", "") == frozenset({"bane", "banes"})


def test_field_variants_include_acronyms_and_words() -> None:
    variants = build_field_variants("Research and Development", ("r&d",))
    assert {"research and development", "research", "development", "rd", "r&d"} <= variants
    assert "researchdevelopment" in variants
    assert "and" not in variants


def test_field_variant_maps_follow_dictionaries(
        dictionaries: dict[FieldType, AliasDictionary],
) -> None:
    maps = build_field_variant_maps(dictionaries)
    assert set(maps) == {FieldType.department, FieldType.role, FieldType.location}
    assert "slc" in maps[FieldType.location]["Salt Lake City"]
    assert "hq" in maps[FieldType.location]["Headquarters"]


def test_cache_builds_once_under_concurrent_first_access() -> None:
    calls: list[int] = []

    def build() -> dict[int, frozenset[str]]:
        calls.append(1)
        time.sleep(0.05)
        return {1: frozenset({"rick"})}

    cache = VariantCache(build, name="test")
    barrier = threading.Barrier(8)
    results: list[dict[int, frozenset[str]]] = []

    def worker() -> None:
        barrier.wait()
        results.append(cache.get())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(calls) == 1
    assert cache.generation == 1
    assert all(r is results[0] for r in results)


def test_refresh_rebuilds_and_bumps_generation(employees: tuple[Employee, ...]) -> None:
    source = list(employees[:2])
    cache = name_variant_cache(lambda: source)
    assert set(cache.get()) == {1, 2}

    source.append(employees[2])
    assert set(cache.get()) == {1, 2}

    cache.refresh()
    assert set(cache.get()) == {1, 2, 3}
    assert cache.generation == 2
