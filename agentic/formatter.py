"""Plain-text rendering of tasks and config for the terminal.

Tables have fixed column widths so a listing lines up regardless of content;
overlong cells are cut and end in an ellipsis. ANSI colour is only emitted
when the caller passes ``theme='color'``.
"""
from typing import Dict, List, NamedTuple, Optional, Sequence

from . import config
from .dates import format_for_display, summarize_next_occurrences
from .models import AgentConfig, Task

ELLIPSIS = '…'
HISTORY_PREVIEW = 5

ANSI_COLORS = {
    'cyan': '\x1b[36m',
    'yellow': '\x1b[33m',
    'green': '\x1b[32m',
    'red': '\x1b[31m',
}
ANSI_RESET = '\x1b[0m'

PRIORITY_COLORS = {'urgent': 'red', 'high': 'yellow', 'medium': 'green'}


class Column(NamedTuple):
    key: str
    title: str
    width: int


COLUMNS = (
    Column('id', 'ID', 4),
    Column('title', 'Title', 32),
    Column('due', 'Due', 12),
    Column('priority', 'Pri', 6),
    Column('tags', 'Tags', 18),
    Column('status', 'Status', 10),
)


def colorize(text: str, color: str, theme: Optional[str] = None) -> str:
    if theme != 'color' or color not in ANSI_COLORS:
        return text
    return f"{ANSI_COLORS[color]}{text}{ANSI_RESET}"


def truncate(text: str, size: int) -> str:
    if len(text) <= size:
        return text
    return text[:size - 1] + ELLIPSIS


def pad(text: str, size: int) -> str:
    return text.ljust(size)


def _cell(text: str, width: int, color: Optional[str] = None, theme: Optional[str] = None) -> str:
    # colour goes on after padding so escape codes never count toward width
    cell = pad(truncate(text, width), width)
    return colorize(cell, color, theme) if color else cell


def format_task_row(task: Task, theme: Optional[str] = None) -> str:
    values: Dict[str, str] = {
        'id': str(task.id),
        'title': task.title,
        'due': format_for_display(task.due),
        'priority': task.priority[:1].upper() or '-',
        'tags': ','.join(task.tags),
        'status': 'Done' if task.status == 'done' else 'Open',
    }
    colors = {
        'priority': PRIORITY_COLORS.get(task.priority, 'cyan'),
        'status': 'green' if task.status == 'done' else 'cyan',
    }
    cells = [_cell(values[c.key], c.width, colors.get(c.key), theme) for c in COLUMNS]
    return ' ' + ' | '.join(cells)


def format_header() -> str:
    return ' ' + ' | '.join(pad(c.title, c.width) for c in COLUMNS)


def format_separator() -> str:
    total = sum(c.width for c in COLUMNS) + (len(COLUMNS) - 1) * 3 + 2
    return '-' * total


def format_table(tasks: Sequence[Task], theme: Optional[str] = None) -> List[str]:
    lines = [format_separator(), format_header(), format_separator()]
    lines.extend(format_task_row(task, theme) for task in tasks)
    lines.append(format_separator())
    return lines


def build_task_summary(task: Task) -> List[str]:
    """Detail view used by ``agent view``: fields, repeat preview and recent history."""
    lines = [f"[{task.id}] {task.title}", f"  status: {task.status}"]
    if task.due:
        lines.append(f"  due: {format_for_display(task.due)}")
    lines.append(f"  priority: {task.priority}")
    if task.tags:
        lines.append(f"  tags: {', '.join(task.tags)}")
    if task.repeat:
        lines.append(f"  repeat: {task.repeat}")
        upcoming = summarize_next_occurrences(task.repeat, task.due)
        if upcoming:
            lines.append(f"  next: {', '.join(upcoming)}")
    if task.notes:
        lines.append(f"  notes: {task.notes}")
    lines.append(f"  created: {task.created_at}")
    lines.append(f"  updated: {task.updated_at}")
    if task.history:
        lines.append('  history:')
        for entry in task.history[-HISTORY_PREVIEW:]:
            suffix = f" ({entry.details})" if entry.details else ''
            lines.append(f"    - {entry.timestamp}: {entry.action}{suffix}")
    return lines


def show_config(cfg: AgentConfig) -> List[str]:
    lines = [
        'Configuration',
        f"  role: {cfg.role}",
        f"  theme: {cfg.theme}",
        f"  default_priority: {cfg.default_priority}",
        f"  timezone: {cfg.timezone}",
    ]
    if not cfg.integrations:
        lines.append('  integrations: none configured')
    else:
        lines.append('  integrations:')
        for name, integration in cfg.integrations.items():
            lines.append(f"    - {name}: {'enabled' if integration.enabled else 'disabled'}")
    return lines


def ensure_line_limit(lines: List[str], limit: Optional[int] = None) -> List[str]:
    """Cut output to ``limit`` lines (default MAX_DEFAULT_LINES), the last one a notice."""
    limit = limit or config.MAX_DEFAULT_LINES
    if len(lines) <= limit:
        return lines
    kept = lines[:limit - 1]
    kept.append(f"{ELLIPSIS} truncated {len(lines) - len(kept)} lines - use --verbose for full output")
    return kept
