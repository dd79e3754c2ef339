"""QuerySpec assembly: pure composition of the intent label and extracted slots."""

from __future__ import annotations

from src.intent.schema import IntentLabel, QuerySpec, Slots


def build_query_spec(intent: IntentLabel | str, slots: Slots | None = None) -> QuerySpec:
    """Combine an intent and slots into the immutable `QuerySpec` handed to the executor."""

    return QuerySpec(intent=IntentLabel(intent), slots=slots if slots is not None else Slots())
