from datetime import datetime

import pytest

from agentic import config
from agentic.audit import close_audit_log
from agentic.dates import DATE_PARTS, DateCandidate

# Fixed "now" used across the suite: Wednesday 2024-01-10, midday.
REFERENCE = datetime(2024, 1, 10, 12, 0)


class KeywordRecognizer:
    """Deterministic recognizer: finds fixed phrases, case-insensitively.

    ``phrases`` maps a phrase to ``(resolved datetime, explicit parts)``.
    """

    def __init__(self, phrases=None):
        self.phrases = phrases or {}
        self.calls = []

    def recognize(self, text, reference):
        self.calls.append((text, reference))
        lowered = text.lower()
        out = []
        for phrase, (value, explicit) in self.phrases.items():
            index = lowered.find(phrase.lower())
            if index >= 0:
                out.append(DateCandidate(
                    text=text[index:index + len(phrase)],
                    index=index,
                    value=value,
                    explicit=frozenset(explicit),
                ))
        return sorted(out, key=lambda c: c.index)


@pytest.fixture(autouse=True)
def agentic_home(tmp_path, monkeypatch):
    home = tmp_path / 'agentic-home'
    monkeypatch.setenv('AGENTIC_HOME', str(home))
    monkeypatch.setattr(config, 'DEFAULT_TIMEZONE', 'UTC')
    monkeypatch.setattr(config, 'DISABLE_AUDIT', False)
    yield home
    close_audit_log()


@pytest.fixture
def reference():
    return REFERENCE


@pytest.fixture
def recognizer():
    return KeywordRecognizer({
        'tomorrow': (datetime(2024, 1, 11, 9, 0), DATE_PARTS),
        'next friday': (datetime(2024, 1, 12), DATE_PARTS),
        'march': (datetime(2024, 3, 10), ('month',)),
        'friday': (datetime(2024, 1, 12), ()),
    })


@pytest.fixture
def no_dates():
    return KeywordRecognizer()
