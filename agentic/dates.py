"""Date normalization and duration arithmetic for task scheduling.

Everything here is a pure function of its arguments: the reference instant,
timezone and recognizer are passed in by the caller (command handlers read
them from the user's config). Nothing in this module performs I/O or logs.

Dates leave this module as canonical ``YYYY-MM-DD`` strings or ``None``.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timezone as dt_timezone
from typing import List, Optional, Protocol, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import dateparser
import dateparser.search
from dateparser.date import DateDataParser
from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

from . import config
from .errors import InvalidDateError, InvalidDurationError, ParseError

DATE_PARTS = ('day', 'month', 'year')

# Rendered by format_for_display when a task has no date.
DISPLAY_PLACEHOLDER = '-'

OCCURRENCE_PREVIEW_COUNT = 3

ISO_PREFIX_RE = re.compile(r"^\d{4}-\d{2}-\d{2}")
DURATION_TOKEN_RE = re.compile(r"([+-]?\d+)([dwmy])", re.IGNORECASE)
REPEAT_RE = re.compile(r"^(\d+)\s*(day|week|month|year)s?$", re.IGNORECASE)

DURATION_UNITS = {'d': 'days', 'w': 'weeks', 'm': 'months', 'y': 'years'}
REPEAT_UNITS = {'day': 'days', 'week': 'weeks', 'month': 'months', 'year': 'years'}

# Common English number-words that dateparser can turn into months or days
# when they appear alone (e.g. 'eight' -> August). A match consisting only of
# one of these, or of a bare 1-2 digit number, is not treated as a date.
NUMBER_WORDS = {
    'zero', 'one', 'two', 'three', 'four', 'five', 'six', 'seven', 'eight', 'nine', 'ten', 'eleven', 'twelve'
}

# Tokens that make dateparser.search give up on the whole string (hashtags,
# p1-p4 style markers, multipliers like "2x"). Masked out on a second pass.
SEARCH_NOISE_RE = re.compile(r"#\w+|\bp\d\b|\b\d+x\b", re.IGNORECASE)

# A word right before a matched phrase that belongs to it ("next friday",
# "on friday"). search_dates often leaves it out of the match.
QUALIFIER_RE = re.compile(r"\b(next|this|on|by)\s+$", re.IGNORECASE)


def now_utc() -> datetime:
    """Return timezone-aware current UTC datetime."""
    return datetime.now(dt_timezone.utc)


def _zone(tz_name: str | None):
    """ZoneInfo for tz_name, or None (server local time) when unset or unknown."""
    if not tz_name:
        return None
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        return None


def _to_local(value: datetime, tz_name: str | None = None) -> datetime:
    """Convert an aware datetime to naive wall time in tz_name; naive values pass through."""
    if value.tzinfo is None:
        return value
    tz = _zone(tz_name)
    local = value.astimezone(tz) if tz is not None else value.astimezone()
    return local.replace(tzinfo=None)


def reference_time(reference: datetime | date | None = None, timezone: str | None = None) -> datetime:
    """Normalize a caller-supplied reference instant to naive wall time.

    ``None`` means "now" in ``timezone`` (or server local time). A plain
    ``date`` is taken as midnight of that day.
    """
    if reference is None:
        return _to_local(now_utc(), timezone)
    if not isinstance(reference, datetime):
        return datetime(reference.year, reference.month, reference.day)
    return _to_local(reference, timezone)


def today(timezone: str | None = None) -> str:
    return reference_time(None, timezone).date().isoformat()


def to_canonical_date(value: datetime | date, timezone: str | None = None) -> str:
    if isinstance(value, datetime):
        return _to_local(value, timezone).date().isoformat()
    return value.isoformat()


def _parse_iso(value: str) -> datetime | None:
    try:
        return isoparse(value.strip())
    except (ValueError, OverflowError):
        return None


def is_valid_iso_date(value: str | None) -> bool:
    if not value:
        return False
    return _parse_iso(value) is not None


# ---------------------------------------------------------------------------
# Recognizer
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DateCandidate:
    """One date/time phrase found in free text.

    ``explicit`` holds the subset of ``DATE_PARTS`` that was stated in
    ``text``; anything missing was inferred from the reference instant.
    """

    text: str
    index: int
    value: datetime
    explicit: frozenset = frozenset(DATE_PARTS)

    @property
    def end(self) -> int:
        return self.index + len(self.text)

    @property
    def ambiguous(self) -> bool:
        return not set(DATE_PARTS) <= set(self.explicit)


class DateRecognizer(Protocol):
    def recognize(self, text: str, reference: datetime) -> List[DateCandidate]:
        """Return ranked candidates (best first) for date phrases in text."""


def _is_noise(match_text: str) -> bool:
    token = match_text.strip().lower()
    return token in NUMBER_WORDS or bool(re.fullmatch(r"\d{1,2}", token))


def _locate(text: str, fragment: str, start: int = 0) -> int:
    index = text.find(fragment, start)
    if index < 0:
        index = text.lower().find(fragment.lower(), start)
    return index


class DateparserRecognizer:
    """Date recognizer backed by the dateparser library (English only).

    The whole input is tried first with ``DateDataParser`` (cheap, and exact
    for inputs like ``--due "next friday"``); free text falls back to
    ``dateparser.search.search_dates``, whose results come back in text order.

    Which of day/month/year were explicit is found by re-parsing the matched
    span with ``REQUIRE_PARTS`` set to each part in turn: dateparser's
    absolute parser rejects the span when that part is missing, while
    relative phrases ('tomorrow', 'in 3 weeks') go through its relative-time
    parser, which fixes all three parts and ignores ``REQUIRE_PARTS``.
    """

    def __init__(self, languages=('en',), prefer_dates_from: str | None = None):
        self.languages = list(languages)
        self.prefer_dates_from = prefer_dates_from or config.DATE_PREFERENCE

    def _settings(self, reference: datetime, **extra) -> dict:
        settings = {
            'RELATIVE_BASE': reference,
            'PREFER_DATES_FROM': self.prefer_dates_from,
            'RETURN_AS_TIMEZONE_AWARE': False,
        }
        settings.update(extra)
        return settings

    def _explicit_parts(self, text: str, reference: datetime) -> frozenset:
        explicit = set()
        for part in DATE_PARTS:
            settings = self._settings(reference, REQUIRE_PARTS=[part])
            if dateparser.parse(text, languages=self.languages, settings=settings) is not None:
                explicit.add(part)
        return frozenset(explicit)

    def _candidate(self, text: str, index: int, value: datetime, reference: datetime) -> DateCandidate:
        return DateCandidate(
            text=text,
            index=index,
            value=value,
            explicit=self._explicit_parts(text, reference),
        )

    def recognize(self, text: str, reference: datetime) -> List[DateCandidate]:
        if not text or not text.strip():
            return []
        stripped = text.strip()
        if not _is_noise(stripped):
            parser = DateDataParser(languages=self.languages, settings=self._settings(reference))
            whole = parser.get_date_data(stripped).date_obj
            if whole is not None:
                return [self._candidate(stripped, text.index(stripped), whole, reference)]

        haystack = text
        results = self._search(haystack, reference)
        if not results:
            # same length as text, so offsets found in the masked copy hold
            masked = SEARCH_NOISE_RE.sub(lambda m: ' ' * len(m.group(0)), text)
            if masked != text:
                haystack = masked
                results = self._search(haystack, reference)

        out: List[DateCandidate] = []
        cursor = 0
        for match_text, value in results:
            if _is_noise(match_text):
                continue
            index = _locate(haystack, match_text, cursor)
            if index < 0:
                continue
            end = index + len(match_text)
            cursor = end
            start, value, phrase = self._widen(haystack, index, end, value, reference)
            out.append(DateCandidate(
                text=text[start:end],
                index=start,
                value=value,
                explicit=self._explicit_parts(phrase, reference),
            ))
        return out

    def _search(self, text: str, reference: datetime) -> list:
        return dateparser.search.search_dates(
            text, languages=self.languages, settings=self._settings(reference)
        ) or []

    def _widen(self, text: str, index: int, end: int, value: datetime, reference: datetime):
        """Pull a leading 'next'/'this'/'on'/'by' into the matched span.

        Returns the new start, the value and the phrase that produced it.
        """
        qualifier = QUALIFIER_RE.search(text[:index])
        if not qualifier:
            return index, value, text[index:end]
        parser = DateDataParser(languages=self.languages, settings=self._settings(reference))
        reparsed = parser.get_date_data(text[qualifier.start():end]).date_obj
        if reparsed is not None:
            return qualifier.start(), reparsed, text[qualifier.start():end]
        # "this" is too common a word to drop unless it parses as part of the date
        if qualifier.group(1).lower() == 'this':
            return index, value, text[index:end]
        return qualifier.start(), value, text[index:end]


DEFAULT_RECOGNIZER = DateparserRecognizer()


# ---------------------------------------------------------------------------
# Normalization and display
# ---------------------------------------------------------------------------

def parse_date_input(
    text: str,
    reference: datetime | date | None = None,
    timezone: str | None = None,
    recognizer: Optional[DateRecognizer] = None,
) -> Tuple[str, bool]:
    """Normalize a user-supplied date to ``(YYYY-MM-DD, ambiguous)``.

    Inputs that start with an ISO calendar date and parse as ISO-8601 are
    returned as-is and are never ambiguous. Anything else goes through the
    recognizer anchored at ``reference``; its first candidate wins, and it is
    ambiguous when its day, month or year was inferred rather than stated.

    Raises ParseError when the recognizer finds nothing.
    """
    raw = (text or '').strip()
    if ISO_PREFIX_RE.match(raw):
        parsed = _parse_iso(raw)
        if parsed is not None:
            return to_canonical_date(parsed, timezone), False

    anchor = reference_time(reference, timezone)
    candidates = (recognizer or DEFAULT_RECOGNIZER).recognize(raw, anchor)
    if not candidates:
        raise ParseError(f'Unable to parse date: "{text}"')
    best = candidates[0]
    return to_canonical_date(best.value, timezone), best.ambiguous


def format_for_display(value: str | None) -> str:
    """Render a stored date for humans.

    Missing dates render as ``DISPLAY_PLACEHOLDER``; values that do not parse
    are returned unchanged so a bad record never breaks a listing.
    """
    if not value:
        return DISPLAY_PLACEHOLDER
    parsed = _parse_iso(value)
    if parsed is None:
        return value
    return to_canonical_date(parsed)


# ---------------------------------------------------------------------------
# Durations
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Duration:
    days: int = 0
    weeks: int = 0
    months: int = 0
    years: int = 0

    def as_relativedelta(self) -> relativedelta:
        # relativedelta applies years/months first (clamping the day to the
        # month length), then weeks/days, in a single addition.
        return relativedelta(years=self.years, months=self.months, weeks=self.weeks, days=self.days)


def parse_duration(text: str) -> Duration:
    """Parse compact duration tokens such as ``+3d``, ``2w`` or ``1w2d``.

    Same-unit tokens accumulate (``+1d+2d`` is three days) and negative
    values subtract. Text between tokens is ignored, but at least one token
    must be present or InvalidDurationError is raised.
    """
    totals = dict.fromkeys(DURATION_UNITS.values(), 0)
    consumed = 0
    for match in DURATION_TOKEN_RE.finditer(text or ''):
        totals[DURATION_UNITS[match.group(2).lower()]] += int(match.group(1))
        consumed += len(match.group(0))
    if not consumed:
        raise InvalidDurationError(f'Invalid duration: "{text}"')
    return Duration(**totals)


def apply_snooze(
    current: str | None,
    delta: str,
    reference: datetime | date | None = None,
    timezone: str | None = None,
) -> str:
    """Push ``current`` (or today, when unset) forward by ``delta``."""
    if current:
        anchor = _parse_iso(current)
        if anchor is None:
            raise InvalidDateError('Cannot snooze; invalid existing date')
        anchor = _to_local(anchor, timezone)
    else:
        anchor = reference_time(reference, timezone)
    duration = parse_duration(delta)
    try:
        return to_canonical_date(anchor + duration.as_relativedelta())
    except (ValueError, OverflowError):
        raise InvalidDurationError(f'Duration out of range: "{delta}"') from None


def summarize_next_occurrences(repeat: str | None, base: str | None) -> List[str]:
    """Preview the next three dates of a repeating task.

    ``repeat`` looks like ``'2 weeks'`` or ``'1 month'``. Each occurrence is
    the previous one plus the interval, so month-end clamping carries forward
    (Jan 31 + 1 month -> Feb 29 -> Mar 29). Returns an empty list for any
    missing or unrecognized input.
    """
    if not repeat or not base:
        return []
    cursor = _parse_iso(base)
    if cursor is None:
        return []
    match = REPEAT_RE.match(repeat.strip())
    if not match:
        return []
    step = relativedelta(**{REPEAT_UNITS[match.group(2).lower()]: int(match.group(1))})
    occurrences = []
    for _ in range(OCCURRENCE_PREVIEW_COUNT):
        try:
            cursor = cursor + step
        except (ValueError, OverflowError):
            return []
        occurrences.append(to_canonical_date(cursor))
    return occurrences
