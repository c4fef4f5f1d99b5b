"""Interactive ``agent>`` prompt.

Each line is split shell-style and handed to ``run_command``; errors are
printed and the session carries on. ``:quit``/``:exit`` or end-of-input leave.
History is kept in ``<data dir>/repl-history``.
"""
import logging
import shlex
import sys
from typing import Callable, List, Optional, TextIO

from . import config
from .commands import run_command

try:
    import readline
except ImportError:  # not available on every platform; line editing is optional
    readline = None

logger = logging.getLogger(__name__)

PROMPT = 'agent> '
EXIT_COMMANDS = (':quit', ':exit')


def load_history(limit: int = config.HISTORY_LOAD_LIMIT) -> List[str]:
    path = config.history_file()
    try:
        with open(path, 'r', encoding='utf-8') as f:
            lines = [line.rstrip('\n') for line in f if line.strip()]
    except FileNotFoundError:
        return []
    except OSError:
        logger.warning('could not read REPL history at %s', path, exc_info=True)
        return []
    return lines[-limit:]


def save_history(history: List[str], limit: int = config.HISTORY_SAVE_LIMIT) -> None:
    path = config.history_file()
    kept = [line for line in history if line.strip()][-limit:]
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            f.write('\n'.join(kept) + '\n' if kept else '')
    except OSError:
        logger.warning('could not save REPL history to %s', path, exc_info=True)


def start_repl(
    theme: Optional[str] = None,
    input_fn: Callable[[str], str] = input,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
    **command_options,
) -> List[str]:
    """Run the prompt loop until the user leaves; returns the session history.

    ``command_options`` are passed through to every ``run_command`` call.
    """
    out = out or sys.stdout
    err = err or sys.stderr
    history = load_history()
    if readline is not None and input_fn is input:
        for line in history:
            readline.add_history(line)

    while True:
        try:
            line = input_fn(PROMPT)
        except (EOFError, KeyboardInterrupt):
            out.write('\n')
            break
        line = line.strip()
        if not line:
            continue
        if line in EXIT_COMMANDS:
            break
        try:
            output = run_command(shlex.split(line), theme=theme, **command_options)
        except ValueError as e:
            # AgenticError, or shlex rejecting unbalanced quotes
            err.write(f"✗ {e}\n")
            continue
        if output:
            out.write(output + '\n')
        if not history or history[-1] != line:
            history.append(line)

    out.write('bye.\n')
    save_history(history)
    return history
