"""Multi-tier fuzzy resolution of query tokens against a variant index.

For every query token the tiers run in priority order and stop at the first tier with a hit:

    1. exact     - token equals a variant (score 100)
    2. substring - token/variant containment at a word boundary (score 95, tokens of 3+ chars)
    3. fuzzy     - `rapidfuzz` similarity, top-N candidates at or above `min_score`

Adjacent token pairs are then matched as two-word phrases (exact, else fuzzy with a lowered
threshold) to recover full names. Results hold at most one match per entity.
"""

from __future__ import annotations

import logging
import re
from collections import defaultdict
from collections.abc import Callable, Hashable, Iterable, Mapping
from dataclasses import dataclass
from enum import IntEnum

from rapidfuzz import fuzz, process

logger = logging.getLogger(__name__)

EXACT_SCORE = 100
SUBSTRING_SCORE = 95
MIN_SUBSTRING_LENGTH = 3
PHRASE_SCORE_FLOOR = 75
PHRASE_SCORE_DISCOUNT = 10

STOP_WORDS: frozenset[str] = frozenset(
    {
        "get", "me", "show", "find", "the", "a", "an", "and", "or", "for", "with",
        "email", "emails", "phone", "phones", "address", "addresses",
        "in", "of", "to", "at", "on", "by", "is", "are", "it", "who", "what", "all",
        "list", "give", "tell", "please", "their", "his", "her", "my",
        "people", "everyone", "anyone", "employee", "employees", "staff",
        "work", "works", "was", "were", "do", "does",
    }
)

_TOKEN_SPLIT_RE = re.compile(r"[\s,;:]+")
_TOKEN_TRIM = ".?!\"'()[]"

Scorer = Callable[..., float]


class MatchKind(IntEnum):
    """Resolution tier; a lower value wins ties on score."""

    exact = 0
    substring = 1
    fuzzy = 2


@dataclass(frozen=True)
class NameMatch:
    """One resolved entity (employee id or canonical field value) for a query token."""

    entity_id: Hashable
    matched_variant: str
    query_token: str
    score: int
    kind: MatchKind


def phrase_min_score(min_score: int) -> int:
    """Threshold for two-word phrase fuzzy matching: `min_score - 10`, floored at 75."""

    return max(min_score - PHRASE_SCORE_DISCOUNT, PHRASE_SCORE_FLOOR)


def tokenize(text: str, stop_words: frozenset[str] = STOP_WORDS) -> list[str]:
    """Split query text into lowercase, deduplicated candidate tokens (order preserved)."""

    tokens: list[str] = []
    seen: set[str] = set()
    for raw in _TOKEN_SPLIT_RE.split((text or "").lower()):
        token = raw.replace("’", "'").strip(_TOKEN_TRIM)
        if token.endswith("'s"):
            token = token[:-2]
        if len(token) <= 1 or token in stop_words or token in seen:
            continue
        seen.add(token)
        tokens.append(token)
    return tokens


def _bounded_in(needle: str, haystack: str) -> bool:
    return (
            haystack.startswith(needle)
            or f" {needle}" in haystack
            or haystack.endswith(needle)
    )


class _VariantTable:
    """Flattened `(entity_id, variant)` pairs with an exact-lookup index."""

    def __init__(self, variant_map: Mapping[Hashable, Iterable[str]]) -> None:
        self.pairs: list[tuple[Hashable, str]] = [
            (entity_id, variant.lower())
            for entity_id, variants in variant_map.items()
            for variant in sorted(variants)
        ]
        self.choices: list[str] = [variant for _, variant in self.pairs]
        self._by_variant: dict[str, list[int]] = defaultdict(list)
        for idx, variant in enumerate(self.choices):
            self._by_variant[variant].append(idx)

    def exact(self, token: str) -> list[NameMatch]:
        return [
            self._match(idx, token, EXACT_SCORE, MatchKind.exact)
            for idx in self._by_variant.get(token, ())
        ]

    def substring(self, token: str) -> list[NameMatch]:
        if len(token) < MIN_SUBSTRING_LENGTH:
            return []

        found: list[NameMatch] = []
        for idx, variant in enumerate(self.choices):
            forward = token in variant and _bounded_in(token, variant)
            reverse = (
                    len(variant) >= MIN_SUBSTRING_LENGTH
                    and variant in token
                    and _bounded_in(variant, token)
            )
            if forward or reverse:
                found.append(self._match(idx, token, SUBSTRING_SCORE, MatchKind.substring))
        return found

    def fuzzy(self, token: str, *, limit: int, min_score: int, scorer: Scorer) -> list[NameMatch]:
        results = process.extract(
            token,
            self.choices,
            scorer=scorer,
            limit=limit,
            score_cutoff=min_score,
        )
        return [
            self._match(idx, token, int(round(score)), MatchKind.fuzzy)
            for _, score, idx in results
        ]

    def _match(self, idx: int, token: str, score: int, kind: MatchKind) -> NameMatch:
        entity_id, variant = self.pairs[idx]
        return NameMatch(
            entity_id=entity_id,
            matched_variant=variant,
            query_token=token,
            score=score,
            kind=kind,
        )


def _rank_key(match: NameMatch) -> tuple[int, int]:
    return -match.score, int(match.kind)


def rank_matches(matches: Iterable[NameMatch]) -> list[NameMatch]:
    """Keep the best match per entity (score, then match kind) and sort across entities."""

    best: dict[Hashable, NameMatch] = {}
    for match in matches:
        current = best.get(match.entity_id)
        if current is None or _rank_key(match) < _rank_key(current):
            best[match.entity_id] = match
    return sorted(best.values(), key=_rank_key)


def resolve(
        text: str,
        variant_map: Mapping[Hashable, Iterable[str]] | None,
        *,
        top_n: int = 3,
        min_score: int = 85,
        scorer: Scorer = fuzz.ratio,
        stop_words: frozenset[str] = STOP_WORDS,
) -> list[NameMatch]:
    """Resolve entity mentions in `text` against `variant_map`.

    Returns:
        Ranked matches, at most one per entity. An empty text or variant map yields `[]`.
    """

    if not (text or "").strip() or not variant_map:
        return []

    table = _VariantTable(variant_map)
    if not table.pairs:
        return []

    tokens = tokenize(text, stop_words)
    matches: list[NameMatch] = []

    for token in tokens:
        found = table.exact(token)
        if not found:
            found = table.substring(token)
        if not found:
            found = table.fuzzy(token, limit=top_n, min_score=min_score, scorer=scorer)
        if found:
            logger.debug(
                "token resolved token=%s kind=%s candidates=%d",
                token,
                found[0].kind.name,
                len(found),
            )
        matches.extend(found)

    phrase_threshold = phrase_min_score(min_score)
    for left, right in zip(tokens, tokens[1:]):
        phrase = f"{left} {right}"
        found = table.exact(phrase)
        if not found:
            found = table.fuzzy(phrase, limit=top_n, min_score=phrase_threshold, scorer=scorer)
        matches.extend(found)

    return rank_matches(matches)
