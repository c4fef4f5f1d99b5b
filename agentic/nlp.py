"""Natural-language metadata extraction for task titles.

``extract_metadata("Pay rent tomorrow #finance high")`` returns the cleaned
title ``"Pay rent"`` together with the due date, tags and priority found in
it. Like ``agentic.dates`` this module is pure: no I/O, no logging.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Tuple

from .dates import DEFAULT_RECOGNIZER, DateRecognizer, reference_time, to_canonical_date
from .errors import InvalidPriorityError

# Every accepted spelling of a priority. Note p0/p1 are urgent and p2 is high
# ("P0 is most urgent"), while p3/p4 step down to medium/low.
PRIORITY_ALIASES = {
    'l': 'low',
    'low': 'low',
    'm': 'medium',
    'med': 'medium',
    'medium': 'medium',
    'h': 'high',
    'hi': 'high',
    'high': 'high',
    'p2': 'high',
    'u': 'urgent',
    'urgent': 'urgent',
    'critical': 'urgent',
    'p0': 'urgent',
    'p1': 'urgent',
    'p3': 'medium',
    'p4': 'low',
}

HASHTAG_RE = re.compile(r"#(\w+)")
# Only these markers are picked out of a title; the short aliases (l, m, h,
# u...) are too common as plain words and are accepted from flags only.
PRIORITY_MARKER_RE = re.compile(r"\b(p[1-4]|low|medium|high|urgent)\b", re.IGNORECASE)
TAG_SPLIT_RE = re.compile(r"[,\s]+")


@dataclass(frozen=True)
class ExtractionResult:
    title: str
    due: Optional[str] = None
    ambiguous: bool = False
    priority: Optional[str] = None
    tags: Tuple[str, ...] = ()


def parse_priority(value: str | None, default: str = 'medium') -> str:
    """Map a priority token (flag value or title marker) to low/medium/high/urgent.

    Empty input returns ``default``; unknown tokens raise InvalidPriorityError.
    """
    if not value:
        return default
    try:
        return PRIORITY_ALIASES[value.strip().lower()]
    except KeyError:
        raise InvalidPriorityError(f'Invalid priority: "{value}"') from None


def parse_tags(value: str | None) -> list[str]:
    """Split a ``--tags`` value like ``"work, #Focus home"`` into ``['work', 'focus', 'home']``."""
    if not value:
        return []
    tags: list[str] = []
    for raw in TAG_SPLIT_RE.split(value):
        tag = raw.strip()
        if tag.startswith('#'):
            tag = tag[1:]
        tag = tag.lower()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def _collapse(text: str) -> str:
    return re.sub(r"\s{2,}", " ", text).strip()


def extract_metadata(
    title: str,
    reference: datetime | date | None = None,
    timezone: str | None = None,
    recognizer: Optional[DateRecognizer] = None,
) -> ExtractionResult:
    """Pull a due date, hashtags and a priority marker out of a task title.

    The steps run in a fixed order, each on the output of the previous one:

    1. the recognizer's first date phrase is resolved and cut out;
    2. every ``#tag`` is collected (lowercased, de-duplicated) and removed;
    3. the first whole-word priority marker is mapped and removed.

    A title that ends up empty is returned unchanged instead.
    """
    anchor = reference_time(reference, timezone)
    cleaned = title
    due = None
    ambiguous = False

    candidates = (recognizer or DEFAULT_RECOGNIZER).recognize(title, anchor)
    if candidates:
        best = candidates[0]
        due = to_canonical_date(best.value, timezone)
        ambiguous = best.ambiguous
        before = title[:best.index].rstrip()
        after = title[best.end:].lstrip()
        cleaned = f"{before} {after}".strip() if after else before.strip()

    tags: list[str] = []
    for match in HASHTAG_RE.finditer(cleaned):
        tag = match.group(1).lower()
        if tag not in tags:
            tags.append(tag)
    cleaned = _collapse(HASHTAG_RE.sub('', cleaned))

    priority = None
    marker = PRIORITY_MARKER_RE.search(cleaned)
    if marker:
        priority = parse_priority(marker.group(0))
        cleaned = _collapse(cleaned[:marker.start()] + cleaned[marker.end():])

    if not cleaned:
        cleaned = title.strip() or title

    return ExtractionResult(
        title=cleaned,
        due=due,
        ambiguous=ambiguous,
        priority=priority,
        tags=tuple(tags),
    )
