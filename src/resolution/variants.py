"""Search-friendly string variants for employee names and org field values.

Variant sets are lowercase, deduplicated and never contain strings shorter than two characters.
Generation is deterministic and order-independent (the output is a set).
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Mapping, Sized
from typing import Generic, TypeVar

from src.directory.models import Employee
from src.intent.dictionaries import AliasDictionary
from src.intent.normalize import normalize_text
from src.intent.schema import FieldType

logger = logging.getLogger(__name__)

_FIELD_WORD_SEPARATORS = str.maketrans({"-": " ", "&": " ", "/": " "})
_FIELD_FILLER_WORDS = frozenset({"and", "of", "the"})
_NAME_APOSTROPHES = str.maketrans("", "", "'’")

ORG_FIELD_TYPES: tuple[FieldType, ...] = (FieldType.department, FieldType.role, FieldType.location)


def _sanitize(variants: Iterable[str]) -> frozenset[str]:
    cleaned = (" ".join(v.lower().split()) for v in variants)
    return frozenset(v for v in cleaned if len(v) > 1)


def build_name_variants(first_name: str, last_name: str) -> frozenset[str]:
    """Build the variants under which a person may plausibly be typed.

    Example for "Morty Smith": `morty`, `smith`, `morty smith`, `smith morty`, `morty s`,
    `m smith`, `mortysmith`, `mortys`, `morty smiths`, `mortysmiths`, `msmith`.
    Apostrophes are dropped, so "Ra's al Ghul" is reachable as `ras`.
    """

    fn = " ".join((first_name or "").lower().translate(_NAME_APOSTROPHES).split())
    ln = " ".join((last_name or "").lower().translate(_NAME_APOSTROPHES).split())

    variants: set[str] = set()
    if fn:
        variants.add(fn)
        variants.add(f"{fn}s")
    if ln:
        variants.add(ln)

    if fn and ln:
        joined_ln = ln.replace(" ", "")
        variants.update(
            {
                f"{fn} {ln}",
                f"{ln} {fn}",
                f"{fn} {ln[0]}",
                f"{fn[0]} {ln}",
                f"{fn}{joined_ln}",
                f"{fn} {ln}s",
                f"{fn}{joined_ln}s",
                f"{fn[0]}{joined_ln}",
            }
        )

    return _sanitize(variants)


def build_variants(employee: Employee) -> frozenset[str]:
    return build_name_variants(employee.first_name, employee.last_name)


def build_field_variants(value: str, synonyms: Iterable[str] = ()) -> frozenset[str]:
    """Build variants for an org field value ("Research and Development" -> `r&d`, `rd`, ...)."""

    normalized = " ".join((value or "").lower().split())
    if not normalized:
        return frozenset()

    variants: set[str] = {normalized}
    words = [
        w
        for w in normalized.translate(_FIELD_WORD_SEPARATORS).split()
        if w not in _FIELD_FILLER_WORDS
    ]

    if len(words) > 1:
        variants.update(w for w in words if len(w) > 1)

        acronym = "".join(w[0] for w in words)
        if len(acronym) > 1:
            variants.add(acronym)
            if len(acronym) == 2:
                variants.add(f"{acronym[0]}&{acronym[1]}")

        variants.add("".join(words))

    variants.update(normalize_text(s) for s in synonyms)
    return _sanitize(variants)


def build_name_variant_map(employees: Iterable[Employee]) -> dict[int, frozenset[str]]:
    return {employee.id: build_variants(employee) for employee in employees}


def build_field_variant_maps(
        dictionaries: Mapping[FieldType, AliasDictionary],
        field_types: Iterable[FieldType] = ORG_FIELD_TYPES,
) -> dict[FieldType, dict[str, frozenset[str]]]:
    """Build `{field_type: {canonical_value: variants}}` from the alias dictionaries."""

    return {
        field_type: {
            canonical: build_field_variants(canonical, synonyms)
            for canonical, synonyms in dictionaries[field_type].synonyms.items()
        }
        for field_type in field_types
        if field_type in dictionaries
    }


T = TypeVar("T", bound=Sized)


class VariantCache(Generic[T]):
    """Lazily built, explicitly refreshed cache (check-lock-check on first access).

    Reads after the first build are lock-free; `refresh()` rebuilds under the lock and starts a new
    cache generation.
    """

    def __init__(self, build: Callable[[], T], *, name: str) -> None:
        self._build = build
        self._name = name
        self._lock = threading.Lock()
        self._value: T | None = None
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def get(self) -> T:
        value = self._value
        if value is not None:
            return value

        with self._lock:
            if self._value is None:
                self._value = self._rebuild()
            return self._value

    def refresh(self) -> T:
        with self._lock:
            self._value = self._rebuild()
            return self._value

    def _rebuild(self) -> T:
        value = self._build()
        self._generation += 1
        logger.info(
            "variant cache built name=%s generation=%d size=%d",
            self._name,
            self._generation,
            len(value),
        )
        return value


def name_variant_cache(
        employees: Callable[[], Iterable[Employee]],
) -> VariantCache[dict[int, frozenset[str]]]:
    """Cache of `employee id -> name variants` over a directory source."""

    return VariantCache(lambda: build_name_variant_map(employees()), name="names")


def field_variant_cache(
        dictionaries: Mapping[FieldType, AliasDictionary],
) -> VariantCache[dict[FieldType, dict[str, frozenset[str]]]]:
    """Cache of per-field-type variant maps built from the alias dictionaries."""

    return VariantCache(lambda: build_field_variant_maps(dictionaries), name="fields")
