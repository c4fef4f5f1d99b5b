"""Simple runtime configuration for the agentic task CLI.

Control flags are read from environment variables so they can be toggled in
development or tests without code changes. User-facing preferences (theme,
default priority, timezone, integrations) live in ``config.json`` inside the
data directory and are handled by ``agentic.storage``.
"""
import os
from pathlib import Path


def _trueish(v: str | None) -> bool:
    if not v:
        return False
    return v.lower() in ('1', 'true', 'yes', 'on')


AGENT_NAME = 'agentic'

# Output longer than this many lines is truncated unless --verbose is given.
MAX_DEFAULT_LINES = 40

# REPL history: how many lines are loaded at start and how many are kept on save.
HISTORY_LOAD_LIMIT = 100
HISTORY_SAVE_LIMIT = 200

# Log level for the stream handler installed by the CLI entry point.
LOG_LEVEL = os.getenv('AGENTIC_LOG_LEVEL', 'WARNING').upper()

# Which way dateparser resolves incomplete dates ('Friday', 'March 5'):
# 'future', 'past' or 'current_period'. Tasks are usually due ahead, so
# default to 'future'.
DATE_PREFERENCE = os.getenv('AGENTIC_DATE_PREFERENCE', 'future').lower()

# When true, the audit log is not written at all.
DISABLE_AUDIT = _trueish(os.getenv('AGENTIC_DISABLE_AUDIT', '0'))

# IANA timezone written into a freshly bootstrapped config.json. Dates such as
# 'today' are resolved in the zone stored there, not in this default.
DEFAULT_TIMEZONE = os.getenv('AGENTIC_TIMEZONE') or os.getenv('TZ') or 'UTC'

DEFAULT_ROLE = 'tasks'
DEFAULT_THEME = 'minimal'
DEFAULT_PRIORITY = 'medium'

ROLES = ('tasks', 'grocery', 'finance', 'habits', 'email')
THEMES = ('minimal', 'mono', 'color')
PRIORITIES = ('low', 'medium', 'high', 'urgent')

SUPPORTED_INTEGRATIONS = ('google-calendar', 'gmail', 'notion', 'dropbox')


# Paths are resolved on every call (not at import) so AGENTIC_HOME can be
# redirected per process or per test.
def data_directory() -> Path:
    home = os.getenv('AGENTIC_HOME')
    if home:
        return Path(home).expanduser()
    return Path.home() / f'.{AGENT_NAME}'


def data_file() -> Path:
    return data_directory() / 'data.json'


def config_file() -> Path:
    return data_directory() / 'config.json'


def audit_log_file() -> Path:
    return data_directory() / 'audit.log'


def history_file() -> Path:
    return data_directory() / 'repl-history'
