import pytest
from datetime import date, datetime, timedelta, timezone

from agentic.dates import (
    DISPLAY_PLACEHOLDER,
    DateCandidate,
    DateparserRecognizer,
    Duration,
    apply_snooze,
    format_for_display,
    is_valid_iso_date,
    parse_date_input,
    parse_duration,
    reference_time,
    summarize_next_occurrences,
    today,
)
from agentic.errors import InvalidDateError, InvalidDurationError, ParseError

from conftest import KeywordRecognizer


class ExplodingRecognizer:
    def recognize(self, text, reference):
        raise AssertionError('recognizer must not be consulted for ISO input')


# --- parse_date_input ---

@pytest.mark.parametrize('ref', [datetime(2024, 1, 10), datetime(1999, 12, 31, 23, 59), date(2030, 6, 1)])
def test_iso_fast_path_ignores_reference(ref):
    assert parse_date_input('2026-02-01', reference=ref, recognizer=ExplodingRecognizer()) == ('2026-02-01', False)


def test_iso_with_time_component_keeps_calendar_date():
    result = parse_date_input('2026-02-01T10:30:00', recognizer=ExplodingRecognizer())
    assert result == ('2026-02-01', False)


def test_invalid_iso_falls_back_to_recognizer(no_dates):
    with pytest.raises(ParseError):
        parse_date_input('2026-13-45', reference=datetime(2024, 1, 10), recognizer=no_dates)
    assert no_dates.calls


def test_no_candidate_raises_parse_error(no_dates):
    with pytest.raises(ParseError) as exc:
        parse_date_input('whenever', recognizer=no_dates)
    assert 'whenever' in str(exc.value)


def test_first_candidate_wins_and_carries_ambiguity(recognizer, reference):
    assert parse_date_input('tomorrow', reference=reference, recognizer=recognizer) == ('2024-01-11', False)
    assert parse_date_input('march', reference=reference, recognizer=recognizer) == ('2024-03-10', True)


def test_recognizer_is_anchored_at_reference(recognizer, reference):
    parse_date_input('tomorrow', reference=reference, recognizer=recognizer)
    assert recognizer.calls[-1][1] == reference


def test_dateparser_month_only_is_ambiguous():
    due, ambiguous = parse_date_input('March', reference=datetime(2024, 1, 10))
    assert ambiguous is True
    assert due.startswith('2024-03-')


def test_dateparser_relative_phrase_is_not_ambiguous():
    assert parse_date_input('tomorrow', reference=datetime(2024, 1, 10, 12, 0)) == ('2024-01-11', False)
    assert parse_date_input('in 3 weeks', reference=datetime(2024, 1, 10, 12, 0)) == ('2024-01-31', False)


def test_dateparser_full_date_is_not_ambiguous():
    assert parse_date_input('17 September 2025', reference=datetime(2024, 1, 10)) == ('2025-09-17', False)


def test_dateparser_garbage_raises():
    with pytest.raises(ParseError):
        parse_date_input('qwertyuiop', reference=datetime(2024, 1, 10))


def test_dateparser_recognizer_skips_number_words():
    recognizer = DateparserRecognizer()
    assert recognizer.recognize('eight', datetime(2024, 1, 10)) == []


def test_dateparser_recognizer_reports_span():
    text = 'Pay rent tomorrow'
    candidates = DateparserRecognizer().recognize(text, datetime(2024, 1, 10, 12, 0))
    assert candidates
    best = candidates[0]
    assert text[best.index:best.end].lower() == 'tomorrow'
    assert not best.ambiguous


def test_candidate_ambiguity():
    value = datetime(2024, 3, 1)
    assert DateCandidate('March 1 2024', 0, value).ambiguous is False
    assert DateCandidate('March 1', 0, value, frozenset({'day', 'month'})).ambiguous is True
    assert DateCandidate('March', 0, value, frozenset({'month'})).end == 5


def test_aware_reference_is_converted_to_timezone():
    # 2024-01-10 23:30 UTC is already the 11th in Tokyo
    ref = datetime(2024, 1, 10, 23, 30, tzinfo=timezone.utc)
    assert reference_time(ref, 'Asia/Tokyo') == datetime(2024, 1, 11, 8, 30)
    assert reference_time(ref, 'UTC') == datetime(2024, 1, 10, 23, 30)


def test_reference_time_accepts_plain_date():
    assert reference_time(date(2024, 2, 29)) == datetime(2024, 2, 29)


def test_is_valid_iso_date():
    assert is_valid_iso_date('2024-01-01')
    assert not is_valid_iso_date('not-a-date')
    assert not is_valid_iso_date(None)


# --- format_for_display ---

@pytest.mark.parametrize('value', [None, ''])
def test_display_missing_date(value):
    assert format_for_display(value) == DISPLAY_PLACEHOLDER


@pytest.mark.parametrize('value', ['2024-01-01', '2024-02-29', '1999-12-31'])
def test_display_round_trips_canonical(value):
    assert format_for_display(value) == value
    assert format_for_display(format_for_display(value)) == value


def test_display_passes_garbage_through():
    assert format_for_display('not-a-date') == 'not-a-date'


def test_display_drops_time_component():
    assert format_for_display('2024-01-01T09:30:00') == '2024-01-01'


# --- parse_duration ---

@pytest.mark.parametrize('text,expected', [
    ('+3d', Duration(days=3)),
    ('2w', Duration(weeks=2)),
    ('-1m', Duration(months=-1)),
    ('1y', Duration(years=1)),
    ('+1d+2d', Duration(days=3)),
    ('1w2d', Duration(weeks=1, days=2)),
    ('3D', Duration(days=3)),
    ('in 2w please', Duration(weeks=2)),
])
def test_parse_duration(text, expected):
    assert parse_duration(text) == expected


@pytest.mark.parametrize('text', ['abc', '', '3x', '+d'])
def test_parse_duration_rejects_garbage(text):
    with pytest.raises(InvalidDurationError):
        parse_duration(text)


# --- apply_snooze ---

def test_snooze_existing_date():
    assert apply_snooze('2024-01-01', '+1w') == '2024-01-08'


def test_snooze_negative():
    assert apply_snooze('2024-01-10', '-3d') == '2024-01-07'


def test_snooze_month_end_clamps_before_adding_days():
    # Jan 31 + 1 month clamps to Feb 29 (leap year), then + 1 day
    assert apply_snooze('2024-01-31', '1m1d') == '2024-03-01'


def test_snooze_without_date_anchors_on_reference():
    assert apply_snooze(None, '+3d', reference=datetime(2024, 1, 10)) == '2024-01-13'


def test_snooze_without_date_anchors_on_today():
    expected = (datetime.strptime(today(), '%Y-%m-%d') + timedelta(days=3)).date().isoformat()
    assert apply_snooze(None, '+3d') == expected


def test_snooze_invalid_existing_date():
    with pytest.raises(InvalidDateError):
        apply_snooze('someday', '+1d')


def test_snooze_invalid_duration():
    with pytest.raises(InvalidDurationError):
        apply_snooze('2024-01-01', 'later')


@pytest.mark.parametrize('delta', ['+9999y', '-3000y', '+999999999d'])
def test_snooze_out_of_calendar_range(delta):
    with pytest.raises(InvalidDurationError, match='out of range'):
        apply_snooze('2024-01-01', delta)


# --- summarize_next_occurrences ---

def test_occurrences_are_cumulative():
    assert summarize_next_occurrences('2 weeks', '2024-01-01') == ['2024-01-15', '2024-01-29', '2024-02-12']


@pytest.mark.parametrize('repeat,base,expected', [
    ('1 day', '2024-02-28', ['2024-02-29', '2024-03-01', '2024-03-02']),
    ('1 month', '2024-01-31', ['2024-02-29', '2024-03-29', '2024-04-29']),
    ('1 year', '2024-02-29', ['2025-02-28', '2026-02-28', '2027-02-28']),
    ('3 Weeks', '2024-01-01', ['2024-01-22', '2024-02-12', '2024-03-04']),
    ('2days', '2024-01-01', ['2024-01-03', '2024-01-05', '2024-01-07']),
])
def test_occurrence_units(repeat, base, expected):
    assert summarize_next_occurrences(repeat, base) == expected


@pytest.mark.parametrize('repeat,base', [
    (None, '2024-01-01'),
    ('bogus', '2024-01-01'),
    ('2 weeks', None),
    ('2 weeks', 'not-a-date'),
    ('every 2 weeks', '2024-01-01'),
    ('5000 years', '2024-01-01'),
    ('999999999 days', '2024-01-01'),
])
def test_occurrences_empty_on_bad_input(repeat, base):
    assert summarize_next_occurrences(repeat, base) == []


def test_keyword_recognizer_orders_by_position(recognizer):
    candidates = recognizer.recognize('tomorrow or next friday', datetime(2024, 1, 10))
    assert [c.text for c in candidates][0] == 'tomorrow'
    assert isinstance(recognizer, KeywordRecognizer)


@pytest.mark.parametrize('text,phrase', [
    ('Pay rent tomorrow p1', 'tomorrow'),
    ('Pay rent tomorrow #p1', 'tomorrow'),
])
def test_dateparser_recognizer_sees_past_markers(text, phrase):
    candidates = DateparserRecognizer().recognize(text, datetime(2024, 1, 10, 12, 0))
    assert candidates
    best = candidates[0]
    assert best.text.lower() == phrase
    assert text[best.index:best.end] == best.text
    assert best.value.date().isoformat() == '2024-01-11'


def test_dateparser_recognizer_keeps_leading_qualifier():
    text = 'Meeting with Bob next friday'
    best = DateparserRecognizer().recognize(text, datetime(2024, 1, 10, 12, 0))[0]
    assert text[:best.index].rstrip() == 'Meeting with Bob'
    assert best.text.lower().startswith('next')
