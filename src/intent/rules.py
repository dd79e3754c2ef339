"""Keyword rules for intent classification (deterministic baseline).

Rules are evaluated top to bottom and the first match wins. Contact cues (email, phone, address,
birthday) come before the hire-date cue, and both come before the broad department/role/location
cues, which would otherwise shadow the more specific intents. Department, role and location rules
also fire on any alias of their dictionary ("devs", "hq", "mgr").
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from src.intent.dictionaries import AliasDictionary, build_default_dictionaries
from src.intent.normalize import contains_phrase, normalize_text
from src.intent.schema import FieldType, IntentLabel


@dataclass(frozen=True)
class IntentRule:
    """Fires when any of `phrases` (or any alias of `alias_field`) occurs in the text."""

    intent: IntentLabel
    phrases: tuple[str, ...]
    alias_field: FieldType | None = None

    def matches(self, normalized: str, dictionaries: Mapping[FieldType, AliasDictionary]) -> bool:
        if any(contains_phrase(normalized, phrase) for phrase in self.phrases):
            return True
        if self.alias_field is None or self.alias_field not in dictionaries:
            return False
        return any(
            contains_phrase(normalized, key) for key in dictionaries[self.alias_field].lookup
        )


DEFAULT_RULES: tuple[IntentRule, ...] = (
    IntentRule(
        IntentLabel.contact_email,
        ("email", "emails", "e-mail", "e-mails", "mail", "email address", "email addresses"),
    ),
    IntentRule(
        IntentLabel.contact_phone,
        (
            "phone", "phones", "phone number", "phone numbers", "telephone", "cell", "mobile",
            "number", "numbers", "call", "ring",
        ),
    ),
    IntentRule(
        IntentLabel.contact_address,
        ("address", "addresses", "home address", "mailing address", "live", "lives", "reside"),
    ),
    IntentRule(
        IntentLabel.contact_birthday,
        ("birthday", "birthdays", "born", "birth date", "date of birth", "dob", "birthdate"),
    ),
    IntentRule(
        IntentLabel.filter_by_hire_date,
        (
            "hired", "hire", "hire date", "hiring", "joined", "start date", "started",
            "onboarded", "tenure", "new hires",
        ),
    ),
    IntentRule(
        IntentLabel.filter_by_department,
        ("department", "departments", "dept", "division"),
        alias_field=FieldType.department,
    ),
    IntentRule(
        IntentLabel.filter_by_role,
        ("role", "roles", "position", "positions", "title", "titles", "job", "jobs"),
        alias_field=FieldType.role,
    ),
    IntentRule(
        IntentLabel.filter_by_location,
        ("location", "locations", "office", "offices", "based", "located", "city", "site"),
        alias_field=FieldType.location,
    ),
    IntentRule(
        IntentLabel.contact_info,
        ("contact", "contacts", "contact info", "details", "reach", "info", "information"),
    ),
)


def classify_by_rules(
        text: str,
        *,
        dictionaries: Mapping[FieldType, AliasDictionary] | None = None,
        rules: Sequence[IntentRule] = DEFAULT_RULES,
) -> IntentLabel:
    """Return the intent of the first matching rule, or `unknown`."""

    normalized = normalize_text(text)
    if not normalized:
        return IntentLabel.unknown

    if dictionaries is None:
        dictionaries = build_default_dictionaries()

    for rule in rules:
        if rule.matches(normalized, dictionaries):
            return rule.intent
    return IntentLabel.unknown
