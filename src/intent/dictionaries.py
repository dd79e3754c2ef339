"""Alias dictionaries for departments, roles, locations and generic field names.

These mappings are used by the slot assembler and the rules-based classifier and should remain
small and deterministic. Lookup order is insertion order: within a dictionary, more specific
canonical values (e.g. "Software Engineer") must be declared before broader ones ("Engineer"),
because the substring scan returns the first key contained in the input.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from src.intent.normalize import contains_phrase, normalize_text
from src.intent.schema import FieldType


class AliasDictionaryError(ValueError):
    """Raised when an alias dictionary is malformed (fatal at startup)."""


DEPARTMENT_SYNONYMS: dict[str, tuple[str, ...]] = {
    "Research and Development": ("r&d", "rnd", "r and d", "research", "research & development"),
    "Engineering": ("eng", "engg", "dev", "devs", "software", "engineering team"),
    "Sales": ("sales team", "selling", "account management"),
    "Human Resources": ("hr", "people ops", "people operations", "personnel", "recruiting"),
    "Support": ("customer support", "customer service", "support team"),
    "Information Technology": ("it department", "it dept", "it team", "infotech"),
    "Marketing": ("mktg", "marketing team", "growth", "brand"),
    "Legal": ("legal team", "law", "counsel", "compliance"),
}

ROLE_SYNONYMS: dict[str, tuple[str, ...]] = {
    "Software Engineer": ("software engineers", "swe", "developer", "developers", "programmer"),
    "Network Engineer": ("network engineers", "network admin"),
    "Engineer": ("engineers",),
    "Team Lead": ("team leads", "tech lead", "lead"),
    "Director": ("directors",),
    "Manager": ("managers", "mgr", "mgrs"),
    "Supervisor": ("supervisors",),
    "SysAdmin": ("sysadmins", "sys admin", "system administrator"),
    "Security Analyst": ("security analysts", "infosec"),
    "Analyst": ("analysts",),
    "Scientist": ("scientists", "researcher", "researchers"),
    "Content Creator": ("content creators", "creator", "writer"),
    "Support Specialist": ("support specialists",),
    "Legal Assistant": ("legal assistants",),
    "Attorney": ("attorneys", "lawyer", "lawyers"),
    "Paralegal": ("paralegals",),
    "Designer": ("designers",),
    "Architect": ("architects",),
    "Help Desk": ("helpdesk", "help desk tech"),
    "Recruiter": ("recruiters",),
}

LOCATION_SYNONYMS: dict[str, tuple[str, ...]] = {
    "Salt Lake City": ("slc", "salt lake", "utah office"),
    "Headquarters": ("hq", "head office", "main office"),
    "Las Vegas": ("vegas",),
    "Reno": (),
    "Provo": (),
    "Ogden": (),
    "San Jose": (),
    "Palo Alto": (),
    "Los Angeles": ("la office",),
    "San Francisco": ("sf", "san fran"),
    "San Diego": (),
    "Remote": ("remotely", "work from home", "wfh"),
}

# Ways of naming a field itself rather than one of its values.
FIELD_NAME_SYNONYMS: dict[str, tuple[str, ...]] = {
    "hire_date": ("hire date", "hired", "hire", "start date", "joined", "started", "onboarded"),
    "department": ("dept", "departments", "division", "team", "group", "unit"),
    "position": ("role", "roles", "title", "titles", "positions", "rank", "level"),
    "location": ("locations", "office", "offices", "site", "workplace", "facility", "based"),
    "job": ("jobs", "assignment", "assignments"),
}


@dataclass(frozen=True)
class AliasMatch:
    """A normalized alias key matched to its canonical value."""

    key: str
    canonical: str


@dataclass(frozen=True)
class AliasDictionary:
    """Many-to-one, case-insensitive mapping from alias keys to canonical values."""

    field_type: str
    synonyms: Mapping[str, tuple[str, ...]]
    lookup: Mapping[str, str] = field(repr=False)

    @classmethod
    def from_synonyms(
            cls,
            field_type: str,
            synonyms: Mapping[str, Iterable[str]],
    ) -> AliasDictionary:
        """Build a dictionary; the canonical value itself is always an alias of itself.

        Raises:
            AliasDictionaryError: On empty canonical values or aliases mapped to two values.
        """

        lookup: dict[str, str] = {}
        frozen: dict[str, tuple[str, ...]] = {}
        for canonical, aliases in synonyms.items():
            if not normalize_text(canonical):
                raise AliasDictionaryError(f"{field_type}: empty canonical value")

            aliases = tuple(aliases)
            frozen[canonical] = aliases
            for alias in (canonical, *aliases):
                key = normalize_text(alias)
                if not key:
                    continue
                existing = lookup.setdefault(key, canonical)
                if existing != canonical:
                    raise AliasDictionaryError(
                        f"{field_type}: alias {key!r} maps to both {existing!r} and {canonical!r}"
                    )

        return cls(field_type=field_type, synonyms=frozen, lookup=lookup)

    def canonical_values(self) -> list[str]:
        return list(self.synonyms)


def find_alias(text: str, dictionary: AliasDictionary) -> AliasMatch | None:
    """Find the alias that canonicalizes `text` (exact whole-input first, then substring scan)."""

    normalized = normalize_text(text)
    if not normalized:
        return None

    canonical = dictionary.lookup.get(normalized)
    if canonical is not None:
        return AliasMatch(key=normalized, canonical=canonical)

    for key, canonical in dictionary.lookup.items():
        if contains_phrase(normalized, key):
            return AliasMatch(key=key, canonical=canonical)
    return None


def alias_keys_in(text: str, dictionary: AliasDictionary, canonical: str) -> list[str]:
    """Return every alias key of `canonical` that occurs in `text`."""

    normalized = normalize_text(text)
    return [
        key
        for key, value in dictionary.lookup.items()
        if value == canonical and contains_phrase(normalized, key)
    ]


def canonicalize(text: str, dictionary: AliasDictionary) -> str | None:
    """Map free text to a canonical value using alias-exact matching only.

    Returns:
        The canonical value, or `None` when no alias is present.
    """

    match = find_alias(text, dictionary)
    return match.canonical if match else None


def canonicalize_all(text: str, dictionary: AliasDictionary) -> list[str]:
    """Return every canonical value mentioned in `text`, in dictionary order."""

    normalized = normalize_text(text)
    if not normalized:
        return []

    found: list[str] = []
    for key, canonical in dictionary.lookup.items():
        if canonical not in found and contains_phrase(normalized, key):
            found.append(canonical)
    return found


def build_default_dictionaries() -> dict[FieldType, AliasDictionary]:
    """Build the configured alias dictionaries keyed by field type."""

    return {
        FieldType.department: AliasDictionary.from_synonyms(
            FieldType.department, DEPARTMENT_SYNONYMS
        ),
        FieldType.role: AliasDictionary.from_synonyms(FieldType.role, ROLE_SYNONYMS),
        FieldType.location: AliasDictionary.from_synonyms(FieldType.location, LOCATION_SYNONYMS),
        FieldType.field: AliasDictionary.from_synonyms(FieldType.field, FIELD_NAME_SYNONYMS),
    }


def get_canonical_value_sets(
        dictionaries: Mapping[FieldType, AliasDictionary],
) -> dict[str, list[str]]:
    """Expose the configured alias universe as `{field_type: [canonical values]}`."""

    return {str(field_type): d.canonical_values() for field_type, d in dictionaries.items()}
