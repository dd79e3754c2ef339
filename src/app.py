"""Application composition root.

This module wires together configuration, the employee directory, the alias dictionaries, the
variant caches and the intent classifier into one shared understanding pipeline.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from src.config.settings import Settings
from src.directory.load_json import load_employees
from src.directory.models import Employee
from src.intent.classifier import IntentPredictor, build_intent_classifier
from src.intent.dates import DateparserRecognizer, DateRecognizer
from src.intent.dictionaries import build_default_dictionaries
from src.intent.slots import MatchSettings, SlotAssembler
from src.pipeline import QueryUnderstandingPipeline
from src.resolution.variants import field_variant_cache, name_variant_cache


@dataclass(frozen=True)
class App:
    """Shared application dependencies for request handlers."""

    settings: Settings
    employees: Sequence[Employee]
    pipeline: QueryUnderstandingPipeline


def create_app(
        settings: Settings,
        employees: Sequence[Employee] | None = None,
        *,
        predictor: IntentPredictor | None = None,
        recognizer: DateRecognizer | None = None,
) -> App:
    """Create the application container.

    Note:
        Without `employees` the directory is loaded from `settings.employees_path` (or
        `EMPLOYEES_PATH`). The variant caches are built lazily on the first query.
    """

    if employees is None:
        employees = load_employees(settings.employees_path)
    employees = tuple(employees)

    dictionaries = build_default_dictionaries()
    slots = SlotAssembler(
        dictionaries=dictionaries,
        name_variants=name_variant_cache(lambda: employees),
        field_variants=field_variant_cache(dictionaries),
        recognizer=recognizer or DateparserRecognizer(),
        settings=MatchSettings(
            top_n=settings.match_top_n,
            name_min_score=settings.name_min_score,
            field_min_score=settings.field_min_score,
        ),
    )
    classifier = build_intent_classifier(
        dictionaries=dictionaries,
        predictor=predictor,
        llm_enabled=settings.llm_enabled,
        llm_api_key=settings.llm_api_key,
    )

    pipeline = QueryUnderstandingPipeline(
        classifier=classifier,
        slots=slots,
        dictionaries=dictionaries,
    )
    return App(settings=settings, employees=employees, pipeline=pipeline)
