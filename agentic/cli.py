"""Entry point for the ``agent`` console script.

Usage:
    agent                       start the interactive REPL
    agent <command> [args...]   run one command and exit
    agent --theme color list    override the configured theme for this run
"""
import logging
import sys
from typing import Optional

from . import config
from .audit import close_audit_log, log_audit
from .commands import run_command
from .errors import AgenticError, UnknownCommandError

logger = logging.getLogger(__name__)


def setup_logging(level: Optional[str] = None) -> None:
    """Attach one stderr handler to the package logger; stdout carries command output only."""
    pkg_logger = logging.getLogger(config.AGENT_NAME)
    if not pkg_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s:%(name)s: %(message)s'))
        pkg_logger.addHandler(handler)
    pkg_logger.setLevel(level or config.LOG_LEVEL)


def main(argv: Optional[list[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    setup_logging()

    theme = None
    if args and args[0] == '--theme':
        if len(args) < 2 or args[1] not in config.THEMES:
            print(f"✗ --theme expects one of {'|'.join(config.THEMES)}", file=sys.stderr)
            return 1
        theme = args[1]
        args = args[2:]

    try:
        if not args:
            # imported lazily: readline setup is only wanted for interactive sessions
            from .repl import start_repl
            log_audit('repl')
            start_repl(theme=theme)
            return 0
        output = run_command(args, theme=theme)
        if output:
            print(output)
        return 0
    except UnknownCommandError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 2
    except AgenticError as e:
        logger.debug('command failed', exc_info=True)
        print(f"✗ {e}", file=sys.stderr)
        return 1
    finally:
        close_audit_log()


if __name__ == '__main__':
    raise SystemExit(main())
