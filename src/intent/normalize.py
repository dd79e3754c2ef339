"""Text normalization for deterministic query understanding."""

from __future__ import annotations

import re

_NON_WORD_RE = re.compile(r"[^0-9a-z_&\-\s]+", flags=re.IGNORECASE)
_MULTISPACE_RE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Normalize user text for keyword and alias lookups.

    Normalization is intentionally conservative:
        - Lowercase.
        - Drop possessive apostrophes ("rick's" -> "ricks").
        - Replace remaining punctuation with spaces (`&` and `-` are kept for "r&d", "e-mail").
        - Collapse whitespace.

    The goal is deterministic tokenization, not linguistic lemmatization.
    """

    value = (text or "").strip().lower()

    # Normalize common unicode dashes and quotes to ASCII.
    value = value.replace("—", "-").replace("–", "-").replace("’", "'")
    value = value.replace("'", "")

    value = _NON_WORD_RE.sub(" ", value)
    value = _MULTISPACE_RE.sub(" ", value).strip()
    return value


def collapse_whitespace(text: str) -> str:
    """Lowercase and collapse whitespace while keeping punctuation (dates need `/`, `,`, `-`)."""

    return _MULTISPACE_RE.sub(" ", (text or "").strip().lower())


def contains_phrase(text: str, phrase: str) -> bool:
    """Whether normalized `text` contains `phrase` aligned to token boundaries."""

    return f" {phrase} " in f" {text} "
