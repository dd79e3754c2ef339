"""English date recognition and date/range/operator extraction.

All dates are calendar days. A recognizer turns text into `date`/`daterange` mentions; the
extractor combines mentions with operator keywords into a single date, a range and an operator.

Operator precedence: value-driven assignment wins. A recognized `daterange` always sets
`operator=between`, even when the keyword scan found "before"/"after".
"""

from __future__ import annotations

import calendar
import logging
import re
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Literal, Protocol

import dateparser
from dateparser.conf import Settings as DateparserSettings

from src.intent.normalize import collapse_whitespace, contains_phrase, normalize_text
from src.intent.schema import DateRange, Operator

logger = logging.getLogger(__name__)

_DATEPARSER_SETTINGS = DateparserSettings().replace(
    STRICT_PARSING=True,
    DATE_ORDER="MDY",
    TIMEZONE="UTC",
    TO_TIMEZONE="UTC",
    RETURN_AS_TIMEZONE_AWARE=True,
)

_MONTH_NUMBERS: dict[str, int] = {
    name: idx
    for idx, name in enumerate(
        ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"),
        start=1,
    )
}

_MONTH = (
    r"(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)"
)
_YEAR = r"(?:19|20)\d{2}"
_DAY = r"\d{1,2}(?:st|nd|rd|th)?"

# Alternatives are ordered longest-first so e.g. an ISO date is never split into a bare year.
_FRAGMENT = (
    rf"(?:\d{{4}}-\d{{1,2}}-\d{{1,2}}"
    rf"|\d{{1,2}}/\d{{1,2}}/{_YEAR}"
    rf"|{_MONTH}\.?\s{_DAY},?\s{_YEAR}"
    rf"|{_DAY}\s(?:of\s)?{_MONTH}\.?,?\s{_YEAR}"
    rf"|{_MONTH}\.?,?\s{_YEAR}"
    rf"|(?:last|this|next)\syear"
    rf"|{_YEAR})"
)

_FRAGMENT_RE = re.compile(rf"\b{_FRAGMENT}\b")
_RANGE_RES: tuple[re.Pattern[str], ...] = (
    re.compile(
        rf"\b(?:between|from)\s(?P<start>{_FRAGMENT})\s(?:and|to|until|through|thru|-)\s"
        rf"(?P<end>{_FRAGMENT})\b"
    ),
    re.compile(rf"\b(?P<start>{_FRAGMENT})\s(?:to|until|through|thru)\s(?P<end>{_FRAGMENT})\b"),
)

_YEAR_ONLY_RE = re.compile(_YEAR)
_MONTH_YEAR_RE = re.compile(rf"(?P<m>{_MONTH})\.?,?\s(?P<y>{_YEAR})")
_RELATIVE_YEAR_RE = re.compile(r"(?P<rel>last|this|next)\syear")
_RELATIVE_YEAR_OFFSETS: dict[str, int] = {"last": -1, "this": 0, "next": 1}

# Operator phrase directly in front of a date fragment ("hired before 2024").
_MODIFIER_RE = re.compile(
    r"\b(?P<op>before|earlier than|prior to|after|later than|since)\s(?:the\s)?$"
)
_MODIFIER_OPERATORS: dict[str, Operator] = {
    "before": Operator.before,
    "earlier than": Operator.before,
    "prior to": Operator.before,
    "after": Operator.after,
    "later than": Operator.after,
    "since": Operator.after,
}

OPERATOR_KEYWORDS: tuple[tuple[Operator, tuple[str, ...]], ...] = (
    (Operator.before, ("before", "earlier than", "prior to")),
    (Operator.after, ("after", "later than", "since")),
    (Operator.between, ("between", "from", "to", "range")),
)

MentionKind = Literal["date", "daterange"]


@dataclass(frozen=True)
class DateMention:
    """A recognized date value (`kind="date"`) or range (`kind="daterange"`)."""

    kind: MentionKind
    value: date | None = None
    start: date | None = None
    end: date | None = None
    modifier: Operator | None = None


class DateRecognizer(Protocol):
    """Date/time recognition facility (`parse(text) -> mentions in text order`)."""

    def parse(self, text: str) -> list[DateMention]: ...


@dataclass(frozen=True)
class DateExtraction:
    """Best-effort dates pulled from one query."""

    single_date: date | None = None
    single_date_end: date | None = None
    date_range: DateRange | None = None
    operator: Operator | None = None


def _parse_date_fragment(fragment: str) -> date | None:
    dt = dateparser.parse(fragment, languages=["en"], settings=_DATEPARSER_SETTINGS)
    if not dt:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.date()


def _fragment_period(fragment: str, today: date) -> tuple[date, date] | None:
    """Resolve a date fragment into the inclusive calendar period it names."""

    value = fragment.strip()

    match = _RELATIVE_YEAR_RE.fullmatch(value)
    if match:
        year = today.year + _RELATIVE_YEAR_OFFSETS[match.group("rel")]
        return date(year, 1, 1), date(year, 12, 31)

    if _YEAR_ONLY_RE.fullmatch(value):
        year = int(value)
        return date(year, 1, 1), date(year, 12, 31)

    match = _MONTH_YEAR_RE.fullmatch(value)
    if match:
        year = int(match.group("y"))
        month = _MONTH_NUMBERS[match.group("m")[:3]]
        last_day = calendar.monthrange(year, month)[1]
        return date(year, month, 1), date(year, month, last_day)

    day = _parse_date_fragment(value)
    if day is None:
        return None
    return day, day


class DateparserRecognizer:
    """English date recognizer built on regex fragments and `dateparser`.

    Explicit ranges ("between 2020 and 2023", "from may 2021 to june 2022") become `daterange`
    mentions spanning the first day of the start period to the last day of the end period.
    Other fragments become `date` mentions at the first day of the period they name, with `end`
    set to the last day of that period.
    """

    def __init__(self, *, reference_date: date | None = None) -> None:
        self._reference_date = reference_date

    def _today(self) -> date:
        return self._reference_date or datetime.now(UTC).date()

    def parse(self, text: str) -> list[DateMention]:
        value = collapse_whitespace(text)
        if not value:
            return []

        today = self._today()
        found: list[tuple[int, DateMention]] = []

        for pattern in _RANGE_RES:
            for match in pattern.finditer(value):
                start = _fragment_period(match.group("start"), today)
                end = _fragment_period(match.group("end"), today)
                if start is None or end is None:
                    continue
                lo, hi = start[0], end[1]
                if lo > hi:
                    lo, hi = end[0], start[1]
                found.append((match.start(), DateMention(kind="daterange", start=lo, end=hi)))
                # Blank out the consumed span so its fragments are not recognized twice.
                blank = " " * (match.end() - match.start())
                value = value[: match.start()] + blank + value[match.end():]

        for match in _FRAGMENT_RE.finditer(value):
            period = _fragment_period(match.group(0), today)
            if period is None:
                logger.debug("date fragment ignored fragment=%r", match.group(0))
                continue
            prefix = _MODIFIER_RE.search(value[: match.start()])
            modifier = _MODIFIER_OPERATORS[prefix.group("op")] if prefix else None
            found.append(
                (
                    match.start(),
                    DateMention(kind="date", value=period[0], end=period[1], modifier=modifier),
                )
            )

        found.sort(key=lambda item: item[0])
        return [mention for _, mention in found]


def detect_operator(text: str) -> Operator | None:
    """Detect a comparison operator from keywords (before > after > between)."""

    normalized = normalize_text(text)
    for operator, phrases in OPERATOR_KEYWORDS:
        if any(contains_phrase(normalized, phrase) for phrase in phrases):
            return operator
    return None


def extract_dates(text: str, recognizer: DateRecognizer | None = None) -> DateExtraction:
    """Extract a single date, a range and an operator from free text.

    Resolution policy:
        - A `daterange` populates both bounds and forces `operator=between`.
        - A `date` attached to "before" (its own modifier, else the keyword scan) becomes
          `range.end`; attached to "after" it becomes `range.start`.
        - Otherwise one date is stored as the single date, together with the last day of the
          period it names; two or more dates form a `between` range from min/max.
        - A keyword operator with nothing to attach to is dropped. A "between" keyword alone
          never turns one date into an open range.

    Unparsable date text is ignored; this function never raises on user input.
    """

    if not (text or "").strip():
        return DateExtraction()

    recognizer = recognizer or DateparserRecognizer()
    operator = detect_operator(text)
    mentions = recognizer.parse(text)

    start: date | None = None
    end: date | None = None
    saw_range = False
    singles: list[DateMention] = []

    for mention in mentions:
        if mention.kind == "daterange":
            start = mention.start if mention.start is not None else start
            end = mention.end if mention.end is not None else end
            saw_range = True
            continue
        if mention.value is None:
            continue

        attached = mention.modifier or operator
        if attached == Operator.before:
            end = mention.value
        elif attached == Operator.after:
            start = mention.value
        else:
            singles.append(mention)

    single_date: date | None = None
    single_date_end: date | None = None
    if len(singles) >= 2:
        values = [m.value for m in singles if m.value is not None]
        lo, hi = min(values), max(values)
        start = lo if start is None else min(start, lo)
        end = hi if end is None else max(end, hi)
    elif len(singles) == 1:
        single_date = singles[0].value
        single_date_end = singles[0].end

    if start is not None and end is not None and start > end:
        start, end = end, start

    if saw_range or len(singles) >= 2 or (start is not None and end is not None):
        operator = Operator.between
    elif end is not None:
        operator = Operator.before
    elif start is not None:
        operator = Operator.after
    else:
        operator = None

    date_range = DateRange(start=start, end=end) if (start or end) else None
    if single_date_end is not None and single_date is not None and single_date_end < single_date:
        single_date_end = None
    return DateExtraction(
        single_date=single_date,
        single_date_end=single_date_end,
        date_range=date_range,
        operator=operator,
    )
