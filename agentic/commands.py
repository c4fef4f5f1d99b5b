"""Command registry and handlers behind the ``agent`` CLI and REPL.

Each handler receives the parsed ``argparse.Namespace`` plus a
``CommandContext`` and returns output lines; it never prints. Handlers raise
``AgenticError`` subclasses for anything the user should see as an error.
"""
import argparse
import csv
import io
import json
import logging
import secrets
import sys
from dataclasses import dataclass, field
from datetime import datetime
from importlib.metadata import PackageNotFoundError, version as package_version
from typing import Callable, Dict, List, Optional, Sequence

from . import config, storage
from .audit import log_audit
from .dates import DateRecognizer, apply_snooze, format_for_display, is_valid_iso_date, parse_date_input, reference_time
from .errors import CommandError, StorageError, TaskNotFoundError, UnknownCommandError
from .formatter import build_task_summary, ensure_line_limit, format_table, show_config
from .models import AgentState, IntegrationConfig, Task, TaskHistoryEntry, iso_timestamp
from .nlp import extract_metadata, parse_priority, parse_tags

logger = logging.getLogger(__name__)

MACHINE_FORMATS = ('json', 'csv', 'md')
PRIORITY_RANK = {'urgent': 4, 'high': 3, 'medium': 2, 'low': 1}
CONFIG_KEYS = ('role', 'theme', 'default_priority', 'timezone')


def prompt_confirm(message: str, default: bool = False, input_fn: Callable[[str], str] = input) -> bool:
    suffix = ' [Y/n] ' if default else ' [y/N] '
    try:
        answer = input_fn(message + suffix)
    except EOFError:
        return False
    answer = answer.strip().lower()
    if not answer:
        return default
    return answer in ('y', 'yes')


def _stdio_is_tty() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


@dataclass
class CommandContext:
    """Per-invocation settings passed to every handler.

    ``theme`` None means "use the theme from config.json". ``reference`` pins
    "now" for date resolution; None is the real clock.
    """
    theme: Optional[str] = None
    interactive: bool = field(default_factory=_stdio_is_tty)
    recognizer: Optional[DateRecognizer] = None
    reference: Optional[datetime] = None
    confirm: Callable[..., bool] = prompt_confirm


@dataclass
class CommandDef:
    name: str
    description: str
    usage: str
    handler: Callable[[argparse.Namespace, CommandContext], List[str]]
    arguments: Sequence[tuple] = ()
    examples: Sequence[str] = ()
    # Parse every token as positional, so durations like -3d are not taken for flags.
    positional_only: bool = False


COMMANDS: Dict[str, CommandDef] = {}


class CommandParser(argparse.ArgumentParser):
    """ArgumentParser that raises CommandError instead of printing and exiting."""

    def error(self, message):
        raise CommandError(f"{self.prog}: {message}")


def command(name: str, description: str, usage: str, arguments=(), examples=(), positional_only=False):
    def decorator(fn):
        COMMANDS[name] = CommandDef(
            name=name,
            description=description,
            usage=usage,
            handler=fn,
            arguments=arguments,
            examples=examples,
            positional_only=positional_only,
        )
        return fn
    return decorator


def build_parser(definition: CommandDef) -> CommandParser:
    parser = CommandParser(prog=f"agent {definition.name}", add_help=False, allow_abbrev=False)
    for flags, kwargs in definition.arguments:
        parser.add_argument(*flags, **kwargs)
    return parser


def help_output(name: Optional[str] = None) -> str:
    definition = COMMANDS.get(name) if name else None
    if definition is None:
        lines = [
            f"{config.AGENT_NAME} commands",
            '  add, list, view, done, snooze, edit, search',
            '  config, export, import, today, sync, help',
            '',
            'Use "agent help <command>" for details.',
        ]
        return '\n'.join(lines)
    lines = [f"{definition.name}: {definition.description}", f"usage: {definition.usage}"]
    if definition.examples:
        lines.append('examples:')
        lines.extend(f"  {example}" for example in definition.examples)
    return '\n'.join(lines)


def version_string() -> str:
    try:
        return f"{config.AGENT_NAME} {package_version(config.AGENT_NAME)}"
    except PackageNotFoundError:
        return f"{config.AGENT_NAME} 0.0.0"


def _resolve_theme(ctx: CommandContext) -> str:
    if ctx.theme:
        return ctx.theme
    try:
        return storage.read_config().theme
    except StorageError:
        logger.warning('could not read theme from config; using %s', config.DEFAULT_THEME, exc_info=True)
        return config.DEFAULT_THEME


def run_command(
    argv: Sequence[str],
    *,
    theme: Optional[str] = None,
    interactive: Optional[bool] = None,
    recognizer: Optional[DateRecognizer] = None,
    reference: Optional[datetime] = None,
    confirm: Optional[Callable[..., bool]] = None,
) -> str:
    """Run one command line (without the program name) and return its output text."""
    argv = list(argv)
    if not argv:
        return help_output()

    for flag in ('--help', '-h'):
        if flag in argv:
            index = argv.index(flag)
            target = argv[1] if index == 0 and len(argv) > 1 else argv[0]
            return help_output(None if target.startswith('-') else target)

    if '--version' in argv or '-v' in argv:
        return version_string()

    name, rest = argv[0], argv[1:]
    definition = COMMANDS.get(name)
    if definition is None:
        raise UnknownCommandError(f'Unknown command: {name}. Try "agent help".')

    verbose = '--verbose' in rest
    rest = [arg for arg in rest if arg != '--verbose']
    parser = build_parser(definition)
    args = parser.parse_args(['--', *rest] if definition.positional_only and rest else rest)

    ctx = CommandContext(
        theme=theme,
        interactive=_stdio_is_tty() if interactive is None else interactive,
        recognizer=recognizer,
        reference=reference,
        confirm=confirm or prompt_confirm,
    )
    ctx.theme = _resolve_theme(ctx)

    logger.debug('running command %s with %r', name, rest)
    lines = definition.handler(args, ctx)
    skip_limit = verbose or getattr(args, 'format', None) in MACHINE_FORMATS
    return '\n'.join(lines if skip_limit else ensure_line_limit(lines))


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def find_task(state: AgentState, task_id) -> Task:
    task = state.find(task_id)
    if task is None:
        raise TaskNotFoundError(task_id)
    return task


def _task_id(raw: Optional[str]) -> int:
    if not raw:
        raise CommandError('Task id required')
    try:
        return int(raw)
    except ValueError:
        raise CommandError(f'Invalid task id: "{raw}"') from None


def confirm_ambiguous_date(candidate: str, ctx: CommandContext) -> None:
    if not ctx.interactive:
        raise CommandError(f'Ambiguous date resolves to {candidate}; please specify YYYY-MM-DD.')
    if not ctx.confirm(f"Date resolves to {candidate}. Continue?", default=True):
        raise CommandError('Cancelled')


def confirm_destructive(action: str, ctx: CommandContext, assume_yes: bool = False) -> None:
    if assume_yes:
        return
    if not ctx.interactive:
        raise CommandError(f"{action} Re-run with --yes")
    if not ctx.confirm(f"{action} Continue?", default=False):
        raise CommandError('Cancelled')


def _timezone() -> Optional[str]:
    return storage.read_config().timezone


def _task_json(tasks: Sequence[Task]) -> str:
    return json.dumps([t.model_dump(mode='json', exclude_none=True) for t in tasks], indent=2)


def _csv_lines(header: Sequence[str], rows: Sequence[Sequence]) -> List[str]:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator='\n')
    writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue().splitlines()


def _sort_key(key: str):
    if key == 'priority':
        return lambda t: -PRIORITY_RANK.get(t.priority, 0)
    if key == 'created':
        return lambda t: t.created_at
    return lambda t: t.due or ''


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@command(
    'add',
    'Create a new task',
    'agent add "title" [--due 2024-06-01] [--p high] [--tags tag1,tag2] [--repeat "2 weeks"] [--notes text]',
    arguments=[
        (('title',), {'nargs': '*'}),
        (('--due',), {}),
        (('-p', '--p', '--priority'), {'dest': 'priority'}),
        (('--tags',), {}),
        (('--repeat',), {}),
        (('--notes',), {}),
    ],
    examples=[
        'agent add "Pay rent next month"',
        'agent add "Write summary" --due 2024-07-01 --p high --tags work',
        'agent add "Water plants" --repeat "1 week"',
    ],
)
def cmd_add(args, ctx):
    title = ' '.join(args.title).strip()
    if not title:
        raise CommandError('Title is required: agent add "Task title"')
    cfg = storage.read_config()
    tz = cfg.timezone

    natural = extract_metadata(title, reference=ctx.reference, timezone=tz, recognizer=ctx.recognizer)
    if args.due:
        due, ambiguous = parse_date_input(args.due, reference=ctx.reference, timezone=tz, recognizer=ctx.recognizer)
    else:
        due, ambiguous = natural.due, natural.ambiguous
    if due and ambiguous:
        confirm_ambiguous_date(due, ctx)

    if args.priority:
        priority = parse_priority(args.priority)
    else:
        priority = natural.priority or cfg.default_priority
    tags = []
    for tag in parse_tags(args.tags) + list(natural.tags):
        if tag not in tags:
            tags.append(tag)

    state = storage.read_state()
    now = iso_timestamp()
    details = f"priority={priority}" + (f" due={due}" if due else '')
    task = Task(
        id=state.allocate_id(),
        title=natural.title,
        notes=args.notes,
        due=due,
        priority=priority,
        tags=tags,
        repeat=args.repeat,
        created_at=now,
        updated_at=now,
        history=[TaskHistoryEntry(timestamp=now, action='created', details=details)],
    )
    state.tasks.append(task)
    storage.write_state(state)
    log_audit('add', {'id': task.id})
    logger.info('added task %s', task.id)
    return [f"✓ Task added: [{task.id}] {task.title}" + (f" (due {task.due})" if task.due else '')]


@command(
    'list',
    'List tasks',
    'agent list [--status open|done|all] [--tag focus] [--limit 20] [--format json|csv|md] [--sort due|priority|created]',
    arguments=[
        (('--status',), {'default': 'open', 'choices': ('open', 'done', 'all')}),
        (('--tag',), {}),
        (('--limit',), {'type': int}),
        (('--format',), {}),
        (('--sort',), {'default': 'due', 'choices': ('due', 'priority', 'created')}),
    ],
)
def cmd_list(args, ctx):
    state = storage.read_state()
    tasks = sorted(state.tasks, key=_sort_key(args.sort), reverse=args.sort == 'created')
    if args.status != 'all':
        tasks = [t for t in tasks if t.status == args.status]
    if args.tag:
        tag = args.tag.lstrip('#').lower()
        tasks = [t for t in tasks if tag in t.tags]
    if args.limit and args.limit > 0:
        tasks = tasks[:args.limit]

    if args.format == 'json':
        return [_task_json(tasks)]
    if args.format == 'csv':
        header = ['id', 'title', 'due', 'priority', 'tags', 'status', 'repeat', 'created_at', 'updated_at']
        rows = [
            [t.id, t.title, t.due or '', t.priority, ';'.join(t.tags), t.status, t.repeat or '', t.created_at, t.updated_at]
            for t in tasks
        ]
        return _csv_lines(header, rows)
    if args.format == 'md':
        lines = ['| ID | Title | Due | Pri | Tags | Status |', '| :- | :---- | :-: | :-: | :--- | :----- |']
        for t in tasks:
            lines.append(f"| {t.id} | {t.title} | {format_for_display(t.due)} | {t.priority} | {','.join(t.tags)} | {t.status} |")
        return lines
    if args.format:
        raise CommandError(f"Unsupported format: {args.format}")
    return format_table(tasks, ctx.theme)


@command('view', 'View task details', 'agent view <id>', arguments=[(('id',), {'nargs': '?'})])
def cmd_view(args, ctx):
    task = find_task(storage.read_state(), _task_id(args.id))
    return build_task_summary(task)


@command(
    'done',
    'Mark a task complete',
    'agent done <id> [--undo]',
    arguments=[(('id',), {'nargs': '?'}), (('--undo',), {'action': 'store_true'})],
)
def cmd_done(args, ctx):
    task_id = _task_id(args.id)
    state = storage.read_state()
    task = find_task(state, task_id)
    now = iso_timestamp()
    if args.undo:
        task.status = 'open'
        task.completed_at = None
        task.record('reopened', timestamp=now)
    else:
        task.status = 'done'
        task.completed_at = now
        task.record('completed', timestamp=now)
    storage.write_state(state)
    log_audit('done --undo' if args.undo else 'done', {'id': task_id})
    return [f"✓ Task {'reopened' if args.undo else 'completed'}: [{task.id}] {task.title}"]


@command(
    'snooze',
    'Snooze a task by duration (e.g. +3d, +1w)',
    'agent snooze <id> +3d',
    arguments=[(('id',), {'nargs': '?'}), (('duration',), {'nargs': '?'})],
    examples=['agent snooze 4 +3d', 'agent snooze 4 1w2d', 'agent snooze 4 -1d'],
    positional_only=True,
)
def cmd_snooze(args, ctx):
    if not args.id or not args.duration:
        raise CommandError('Usage: agent snooze <id> +3d')
    task_id = _task_id(args.id)
    state = storage.read_state()
    task = find_task(state, task_id)
    updated = apply_snooze(task.due, args.duration, reference=ctx.reference, timezone=_timezone())
    task.due = updated
    task.snoozed_until = updated
    task.record('snoozed', args.duration)
    storage.write_state(state)
    log_audit('snooze', {'id': task_id, 'duration': args.duration})
    return [f"✓ Task snoozed: [{task.id}] now due {updated}"]


@command(
    'edit',
    "Edit a task's fields",
    'agent edit <id> [--title ...] [--due ...] [--priority ...] [--tags ...] [--repeat ...] [--notes ...] [--clear-due]',
    arguments=[
        (('id',), {'nargs': '?'}),
        (('--title',), {}),
        (('--due',), {}),
        (('-p', '--p', '--priority'), {'dest': 'priority'}),
        (('--tags',), {}),
        (('--repeat',), {}),
        (('--notes',), {}),
        (('--clear-due',), {'action': 'store_true', 'dest': 'clear_due'}),
    ],
)
def cmd_edit(args, ctx):
    task_id = _task_id(args.id)
    state = storage.read_state()
    task = find_task(state, task_id)
    updates = []

    if args.title:
        task.title = args.title
        updates.append('title')
    if args.priority:
        task.priority = parse_priority(args.priority)
        updates.append(f"priority={task.priority}")
    if args.tags:
        task.tags = parse_tags(args.tags)
        updates.append('tags')
    if args.repeat:
        task.repeat = args.repeat
        updates.append(f"repeat={task.repeat}")
    if args.notes is not None:
        task.notes = args.notes
        updates.append('notes')
    if args.clear_due:
        task.due = None
        updates.append('due cleared')
    elif args.due:
        due, ambiguous = parse_date_input(
            args.due, reference=ctx.reference, timezone=_timezone(), recognizer=ctx.recognizer
        )
        if ambiguous:
            confirm_ambiguous_date(due, ctx)
        task.due = due
        updates.append(f"due={due}")

    if not updates:
        return ['No changes applied.']

    task.record('edited', ', '.join(updates))
    storage.write_state(state)
    log_audit('edit', {'id': task_id, 'updates': updates})
    return [f"✓ Updated task [{task.id}]: {', '.join(updates)}"]


@command(
    'search',
    'Search tasks by text',
    'agent search <query> [--format json]',
    arguments=[(('query',), {'nargs': '*'}), (('--format',), {})],
)
def cmd_search(args, ctx):
    query = ' '.join(args.query).strip()
    if not query:
        raise CommandError('Search query required')
    needle = query.lower()
    matches = [
        t for t in storage.read_state().tasks
        if needle in t.title.lower()
        or needle in (t.notes or '').lower()
        or any(needle in tag for tag in t.tags)
    ]
    if args.format == 'json':
        return [_task_json(matches)]
    return [f"Results: {len(matches)}"] + format_table(matches, ctx.theme)


@command(
    'export',
    'Export tasks in a chosen format',
    'agent export --format json|csv|md --yes',
    arguments=[(('--format',), {'default': 'json'}), (('--yes',), {'action': 'store_true'})],
    examples=['agent export --format csv --yes > tasks.csv'],
)
def cmd_export(args, ctx):
    if args.format not in MACHINE_FORMATS:
        raise CommandError(f"Unsupported format: {args.format}")
    confirm_destructive('Exporting task data may expose sensitive info.', ctx, args.yes)
    tasks = storage.read_state().tasks
    log_audit('export', {'format': args.format, 'count': len(tasks)})
    if args.format == 'json':
        return [_task_json(tasks)]
    if args.format == 'csv':
        header = ['id', 'title', 'due', 'priority', 'tags', 'status']
        return _csv_lines(header, [[t.id, t.title, t.due or '', t.priority, ';'.join(t.tags), t.status] for t in tasks])
    lines = ['| ID | Title | Due | Priority | Tags | Status |', '| :- | :---- | :- | :------ | :--- | :----- |']
    for t in tasks:
        lines.append(f"| {t.id} | {t.title} | {format_for_display(t.due)} | {t.priority} | {', '.join(t.tags)} | {t.status} |")
    return lines


def _imported_task(raw: dict, task_id: int, source: str, now: str) -> Task:
    due = raw.get('due') or None
    if due is not None and not is_valid_iso_date(due):
        raise CommandError(f'Invalid due date in import: "{due}"')
    raw_tags = raw.get('tags') or []
    if isinstance(raw_tags, str):
        raw_tags = [raw_tags]
    return Task(
        id=task_id,
        title=str(raw.get('title') or f"Imported {secrets.token_hex(2)}"),
        notes=raw.get('notes'),
        due=format_for_display(due) if due else None,
        priority=parse_priority(str(raw.get('priority') or '')),
        tags=parse_tags(' '.join(str(tag) for tag in raw_tags)),
        repeat=raw.get('repeat'),
        status='done' if raw.get('status') == 'done' else 'open',
        created_at=now,
        updated_at=now,
        history=[TaskHistoryEntry(timestamp=now, action='imported', details=source)],
    )


@command(
    'import',
    'Import tasks from JSON with confirmation',
    'agent import --file path/to.json --yes',
    arguments=[(('--file',), {}), (('--yes',), {'action': 'store_true'})],
)
def cmd_import(args, ctx):
    if not args.file:
        raise CommandError('Provide --file path for import data')
    try:
        with open(args.file, 'r', encoding='utf-8') as f:
            payload = json.load(f)
    except FileNotFoundError:
        raise CommandError(f"File not found: {args.file}") from None
    except json.JSONDecodeError as exc:
        raise CommandError(f"Invalid JSON: {exc}") from exc
    if not isinstance(payload, list):
        raise CommandError('Import expects an array of tasks')
    if not payload:
        raise CommandError('No tasks found in import file')
    if not all(isinstance(item, dict) for item in payload):
        raise CommandError('Import expects an array of task objects')

    preview = [f"  {i}. {item.get('title') or '[missing title]'}" for i, item in enumerate(payload[:3], start=1)]
    confirm_destructive(f"Import {len(payload)} tasks from {args.file}? Preview:\n" + '\n'.join(preview), ctx, args.yes)

    state = storage.read_state()
    now = iso_timestamp()
    imported = [_imported_task(item, state.next_id + i, args.file, now) for i, item in enumerate(payload)]
    # ids are committed only once every record validated
    state.next_id += len(imported)
    state.tasks.extend(imported)
    storage.write_state(state)
    log_audit('import', {'count': len(imported)})
    return [f"✓ Imported {len(imported)} tasks"]


def _config_set(cfg, key: str, value: str) -> None:
    if key == 'role':
        if value not in config.ROLES:
            raise CommandError(f"role must be one of {'|'.join(config.ROLES)}")
        cfg.role = value
    elif key == 'theme':
        if value not in config.THEMES:
            raise CommandError(f"theme must be {'|'.join(config.THEMES)}")
        cfg.theme = value
    elif key == 'default_priority':
        if value not in config.PRIORITIES:
            raise CommandError(f"default_priority must be {'|'.join(config.PRIORITIES)}")
        cfg.default_priority = value
    elif key == 'timezone':
        cfg.timezone = value
    else:
        raise CommandError(f"Unsupported config key: {key}")


def _config_integrations(cfg, rest: List[str]) -> List[str]:
    if len(rest) < 2:
        raise CommandError('Usage: agent config integrations <enable|disable|show> <name> [key=<value>]')
    action, name, options = rest[0], rest[1], rest[2:]
    if action == 'show':
        integration = cfg.integrations.get(name)
        if integration is None:
            return [f"integration {name} not configured"]
        return [
            f"integration: {name}",
            f"  enabled: {str(integration.enabled).lower()}",
            f"  api key: {'[set]' if integration.api_key else '[missing]'}",
            '  run agent sync to trigger remote updates',
        ]
    if action not in ('enable', 'disable'):
        raise CommandError('Integration action must be enable, disable, or show')
    if name not in config.SUPPORTED_INTEGRATIONS:
        raise CommandError(f"Unsupported integration: {name}. Supported: {', '.join(config.SUPPORTED_INTEGRATIONS)}")

    integration = cfg.integrations.get(name) or IntegrationConfig()
    integration.enabled = action == 'enable'
    for option in options:
        key, sep, value = option.partition('=')
        if not sep:
            raise CommandError(f'Expected key=<value>, got "{option}"')
        if key == 'key':
            integration.api_key = value
        else:
            integration.extra[key] = value
    cfg.integrations[name] = integration
    storage.write_config(cfg)
    log_audit(f"config integrations {action}", {'name': name})
    return [
        f"✓ Integration {name} {'enabled' if integration.enabled else 'disabled'}",
        '  api key stored' if integration.api_key else '  api key not set',
        '  Next steps:',
        f"    - provide API credentials via agent config integrations enable {name} key=<value>",
        f"    - run agent sync --provider {name}",
    ]


@command(
    'config',
    'Show or set configuration',
    'agent config [show]|set <key> <value>|get <key>|integrations <enable|disable|show> <name> [key=<value>]',
    arguments=[(('action',), {'nargs': '*'})],
    examples=['agent config set theme color', 'agent config integrations enable notion key=secret'],
)
def cmd_config(args, ctx):
    sub, rest = (args.action[0], args.action[1:]) if args.action else ('show', [])
    cfg = storage.read_config()
    if sub == 'show':
        return show_config(cfg)
    if sub == 'get':
        if not rest:
            raise CommandError('Usage: agent config get <key>')
        if rest[0] not in CONFIG_KEYS:
            raise CommandError(f"Unsupported config key: {rest[0]}")
        return [f"{rest[0]}: {getattr(cfg, rest[0])}"]
    if sub == 'set':
        if len(rest) < 2:
            raise CommandError('Usage: agent config set <key> <value>')
        key, value = rest[0], rest[1]
        _config_set(cfg, key, value)
        storage.write_config(cfg)
        log_audit('config set', {'key': key, 'value': value})
        return [f"✓ Updated {key} -> {value}"]
    if sub == 'integrations':
        return _config_integrations(cfg, rest)
    raise CommandError(f"Unknown config action: {sub}")


@command(
    'sync',
    'Perform integrations sync or show setup help',
    'agent sync [--provider google-calendar]',
    arguments=[(('--provider',), {})],
)
def cmd_sync(args, ctx):
    if not args.provider:
        return [
            'integration required',
            '  Configure via: agent config integrations enable <provider> key=<token>',
            f"  Supported: {', '.join(config.SUPPORTED_INTEGRATIONS)}",
        ]
    integration = storage.read_config().integrations.get(args.provider)
    if integration is None or not integration.enabled or not integration.api_key:
        return [
            'integration required',
            f"  {args.provider} is not fully configured.",
            '  Steps:',
            f"    - agent config integrations enable {args.provider} key=<token>",
            f"    - rerun agent sync --provider {args.provider}",
        ]
    log_audit('sync', {'provider': args.provider})
    return [
        f"Sync queued for {args.provider}.",
        'Remote operations are not executed automatically in offline mode.',
    ]


@command('today', 'Show tasks relevant for today', 'agent today')
def cmd_today(args, ctx):
    current = reference_time(ctx.reference, _timezone()).date().isoformat()
    due_today = [t for t in storage.read_state().tasks if t.status == 'open' and t.due and format_for_display(t.due) == current]
    if not due_today:
        return ['No tasks due today.']
    # tasks carry no time of day, so everything lands in "Anytime"
    lines = ['Anytime']
    lines.extend(f"  - [{t.id}] {t.title} ({t.priority})" for t in due_today)
    return lines


@command('help', 'Show help', 'agent help [command]', arguments=[(('topic',), {'nargs': '?'})])
def cmd_help(args, ctx):
    return help_output(args.topic).split('\n')


@command('--first-run', 'First run onboarding', 'agent --first-run')
def cmd_first_run(args, ctx):
    examples = [
        'agent add "Finish slides" --due 2026-02-01 --p high --tags work,meeting',
        'agent list --limit 10',
        'agent view 3',
        'agent done 3',
        'agent snooze 4 +3d',
        'agent export --format csv --yes > tasks.csv',
    ]
    lines = [f"Welcome to {config.AGENT_NAME}!", '', 'Quick actions:']
    lines.extend(f"  - {example}" for example in examples)
    lines.extend(['', 'Try agent --help for full reference.'])
    return lines
