"""Intent classifier orchestration (predictor optional; keyword-rules fallback)."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal, Protocol

from src.intent.dictionaries import AliasDictionary, build_default_dictionaries
from src.intent.llm_predictor import IntentPredictorError, LLMIntentPredictor, llm_config_from_env
from src.intent.rules import classify_by_rules
from src.intent.schema import FieldType, IntentLabel

logger = logging.getLogger(__name__)

ClassifySource = Literal["predictor", "rules"]

# Upper-case names emitted by older trained models.
_LEGACY_LABELS: dict[str, IntentLabel] = {
    "contact_hire_date": IntentLabel.filter_by_hire_date,
    "hire_date": IntentLabel.filter_by_hire_date,
    "contact_department": IntentLabel.filter_by_department,
    "contact_role": IntentLabel.filter_by_role,
    "contact_location": IntentLabel.filter_by_location,
    "contact": IntentLabel.contact_info,
    "contact_details": IntentLabel.contact_info,
    "email": IntentLabel.contact_email,
    "phone": IntentLabel.contact_phone,
    "address": IntentLabel.contact_address,
    "birthday": IntentLabel.contact_birthday,
}


class IntentPredictor(Protocol):
    """Statistical intent model; returns a free-form label for the text."""

    def predict(self, text: str) -> str: ...


@dataclass(frozen=True)
class ClassifyResult:
    """Intent label plus information about which tier produced it."""

    intent: IntentLabel
    source: ClassifySource


def parse_intent_label(raw: str | None) -> IntentLabel | None:
    """Map a predictor label onto `IntentLabel` (`CONTACT_EMAIL`, `contact-email`, ...).

    Returns:
        The label, or `None` when it is not part of the closed intent set.
    """

    value = (raw or "").strip().strip("\"'").lower().replace("-", "_").replace(" ", "_")
    if not value:
        return None
    try:
        return IntentLabel(value)
    except ValueError:
        return _LEGACY_LABELS.get(value)


class RuleIntentClassifier:
    """Rule-only classifier."""

    def __init__(self, dictionaries: Mapping[FieldType, AliasDictionary] | None = None) -> None:
        self._dictionaries = dictionaries if dictionaries is not None else build_default_dictionaries()

    def classify_with_source(self, text: str) -> ClassifyResult:
        intent = classify_by_rules(text, dictionaries=self._dictionaries)
        return ClassifyResult(intent=intent, source="rules")

    def classify(self, text: str) -> IntentLabel:
        return self.classify_with_source(text).intent


class PredictorIntentClassifier:
    """Configured-predictor classifier; falls back to the wrapped rule classifier.

    The predictor is asked first. A predictor error or a label outside the closed intent set never
    fails the request: the keyword rules decide instead.
    """

    def __init__(self, predictor: IntentPredictor, rules: RuleIntentClassifier) -> None:
        self._predictor = predictor
        self._rules = rules

    def classify_with_source(self, text: str) -> ClassifyResult:
        if (text or "").strip():
            try:
                raw = self._predictor.predict(text)
            except IntentPredictorError as exc:
                logger.info("predictor failed, using rules error=%s", exc)
            else:
                intent = parse_intent_label(raw)
                if intent is not None:
                    return ClassifyResult(intent=intent, source="predictor")
                logger.info("predictor label not recognized, using rules label=%r", raw)

        return self._rules.classify_with_source(text)

    def classify(self, text: str) -> IntentLabel:
        return self.classify_with_source(text).intent


IntentClassifier = RuleIntentClassifier | PredictorIntentClassifier


def build_intent_classifier(
        *,
        dictionaries: Mapping[FieldType, AliasDictionary] | None = None,
        predictor: IntentPredictor | None = None,
        llm_enabled: bool = False,
        llm_api_key: str | None = None,
) -> IntentClassifier:
    """Select the classifier variant at construction time.

    Strategy:
        1) An explicitly supplied predictor wins.
        2) Otherwise, if LLM mode is enabled, build the LLM predictor from the environment.
        3) Without a predictor the classifier is rule-only.
    """

    rules = RuleIntentClassifier(dictionaries)
    if predictor is None and llm_enabled:
        predictor = LLMIntentPredictor(llm_config_from_env(api_key=llm_api_key))
    if predictor is None:
        return rules
    return PredictorIntentClassifier(predictor, rules)
