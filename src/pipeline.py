"""Query understanding facade.

`understand` turns free text into a `QuerySpec`: the classifier labels the intent, the slot
assembler extracts names, canonical field values and dates, and the builder composes the result.
Extraction misses produce `unknown` or absent slots; nothing here raises for ordinary input.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable, Mapping
from dataclasses import dataclass
from time import monotonic

from src.intent.classifier import ClassifySource, IntentClassifier
from src.intent.dictionaries import AliasDictionary, get_canonical_value_sets
from src.intent.schema import FieldType, QuerySpec
from src.intent.slots import SlotAssembler
from src.query.builder import build_query_spec
from src.resolution.fuzzy import NameMatch

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UnderstandResult:
    """QuerySpec plus information about which classifier tier labelled it."""

    spec: QuerySpec
    source: ClassifySource


class QueryUnderstandingPipeline:
    """Entry point of the understanding core; shared across requests and threads."""

    def __init__(
            self,
            *,
            classifier: IntentClassifier,
            slots: SlotAssembler,
            dictionaries: Mapping[FieldType, AliasDictionary],
    ) -> None:
        self._classifier = classifier
        self._slots = slots
        self._dictionaries = dictionaries

    def understand_with_source(self, text: str) -> UnderstandResult:
        started = monotonic()
        logger.debug("understanding text=%r", text)

        classified = self._classifier.classify_with_source(text)
        slots = self._slots.assemble(text)
        spec = build_query_spec(classified.intent, slots)

        latency_ms = int((monotonic() - started) * 1000)
        logger.info(
            "understood intent=%s source=%s fields=%d entities=%d latency_ms=%d",
            spec.intent,
            classified.source,
            len(slots.markers),
            len(slots.entity_ids),
            latency_ms,
        )
        return UnderstandResult(spec=spec, source=classified.source)

    def understand(self, text: str) -> QuerySpec:
        """Parse text into an `(intent, slots)` pair (convenience wrapper)."""

        return self.understand_with_source(text).spec

    def resolve_entities(
            self,
            text: str,
            variant_map: Mapping[Hashable, Iterable[str]] | None = None,
    ) -> list[NameMatch]:
        """Run the fuzzy resolver standalone (defaults to the cached name index)."""

        if variant_map is None:
            return self._slots.resolve_names(text)
        return self._slots.resolve(text, variant_map)

    def get_canonical_value_sets(self) -> dict[str, list[str]]:
        return get_canonical_value_sets(self._dictionaries)

    def refresh(self) -> None:
        """Rebuild the name and field variant caches (e.g. after the directory changed)."""

        self._slots.refresh()
