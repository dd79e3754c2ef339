"""Slot assembly: names, canonical field values and dates from one query.

Names are resolved first and their query tokens are excluded from field resolution. Each org
field type (department, role, location) is then canonicalized via its alias dictionary and, when
no alias is present, resolved fuzzily over the field variant index. A token accepted for one
field type is not reused for the next.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable, Mapping
from dataclasses import dataclass

from src.intent.dates import DateparserRecognizer, DateRecognizer, extract_dates
from src.intent.dictionaries import AliasDictionary, alias_keys_in, canonicalize_all, find_alias
from src.intent.schema import FieldType, Slots, field_marker
from src.resolution.fuzzy import NameMatch, resolve, tokenize
from src.resolution.variants import ORG_FIELD_TYPES, VariantCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchSettings:
    """Fuzzy matching knobs shared by name and field resolution."""

    top_n: int = 3
    name_min_score: int = 85
    field_min_score: int = 85


def _claim(tokens: set[str], phrases: Iterable[str]) -> None:
    for phrase in phrases:
        tokens.update(phrase.split())


class SlotAssembler:
    """Builds `Slots` from query text using the shared variant caches."""

    def __init__(
            self,
            *,
            dictionaries: Mapping[FieldType, AliasDictionary],
            name_variants: VariantCache[dict[int, frozenset[str]]],
            field_variants: VariantCache[dict[FieldType, dict[str, frozenset[str]]]],
            recognizer: DateRecognizer | None = None,
            settings: MatchSettings | None = None,
    ) -> None:
        self._dictionaries = dictionaries
        self._name_variants = name_variants
        self._field_variants = field_variants
        self._recognizer = recognizer or DateparserRecognizer()
        self._settings = settings or MatchSettings()

    def resolve(
            self,
            text: str,
            variant_map: Mapping[Hashable, Iterable[str]] | None,
    ) -> list[NameMatch]:
        return resolve(
            text,
            variant_map,
            top_n=self._settings.top_n,
            min_score=self._settings.name_min_score,
        )

    def resolve_names(self, text: str) -> list[NameMatch]:
        return self.resolve(text, self._name_variants.get())

    def refresh(self) -> None:
        self._name_variants.refresh()
        self._field_variants.refresh()

    def field_markers(self, text: str, *, claimed: set[str] | None = None) -> list[str]:
        """Resolve `fieldType:canonicalValue` markers, at most one per org field type."""

        claimed = set(claimed or ())
        field_maps = self._field_variants.get()
        markers: list[str] = []

        for field_type in ORG_FIELD_TYPES:
            dictionary = self._dictionaries.get(field_type)
            if dictionary is None:
                continue

            alias = find_alias(text, dictionary)
            if alias is not None:
                markers.append(field_marker(field_type, alias.canonical))
                _claim(claimed, [alias.key, *alias_keys_in(text, dictionary, alias.canonical)])
                continue

            remaining = " ".join(t for t in tokenize(text) if t not in claimed)
            matches = resolve(
                remaining,
                field_maps.get(field_type),
                top_n=self._settings.top_n,
                min_score=self._settings.field_min_score,
            )
            if matches:
                best = matches[0]
                logger.debug(
                    "field resolved field_type=%s value=%s token=%s score=%d kind=%s",
                    field_type,
                    best.entity_id,
                    best.query_token,
                    best.score,
                    best.kind.name,
                )
                markers.append(field_marker(field_type, str(best.entity_id)))
                _claim(claimed, [best.query_token])

        field_names = self._dictionaries.get(FieldType.field)
        if field_names is not None:
            markers.extend(
                field_marker(FieldType.field, name) for name in canonicalize_all(text, field_names)
            )
        return markers

    def assemble(self, text: str) -> Slots:
        """Extract slots; every stage degrades to "slot absent" instead of failing."""

        if not (text or "").strip():
            return Slots()

        name_matches = self.resolve_names(text)
        claimed: set[str] = set()
        _claim(claimed, (m.query_token for m in name_matches))

        markers = self.field_markers(text, claimed=claimed)
        dates = extract_dates(text, self._recognizer)

        return Slots(
            markers=frozenset(markers),
            operator=dates.operator,
            single_date=dates.single_date,
            single_date_end=dates.single_date_end,
            date_range=dates.date_range,
            entity_ids=frozenset(m.entity_id for m in name_matches),
        )
