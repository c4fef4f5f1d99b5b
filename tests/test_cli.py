import json
import logging

import pytest

from agentic import cli, storage


@pytest.fixture(autouse=True)
def reset_logging():
    pkg_logger = logging.getLogger('agentic')
    yield
    # handlers installed by main() hold the per-test captured stderr
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)
    pkg_logger.setLevel(logging.NOTSET)


def test_runs_command_and_prints(capsys):
    assert cli.main(['add', 'Review notes', '--due', '2024-05-01']) == 0
    captured = capsys.readouterr()
    assert captured.out == '✓ Task added: [1] Review notes (due 2024-05-01)\n'
    assert storage.read_state().find(1).due == '2024-05-01'


def test_unknown_command_exit_code(capsys):
    assert cli.main(['fly']) == 2
    assert capsys.readouterr().err.startswith('✗ Unknown command: fly')


def test_failure_exit_code(capsys):
    assert cli.main(['view', '3']) == 1
    assert capsys.readouterr().err == '✗ Task not found: 3\n'


def test_theme_override(capsys):
    cli.main(['add', 'Alpha', '-p', 'urgent'])
    capsys.readouterr()
    assert cli.main(['--theme', 'color', 'list']) == 0
    assert '\x1b[31m' in capsys.readouterr().out
    assert storage.read_config().theme == 'minimal'


def test_bad_theme(capsys):
    assert cli.main(['--theme', 'neon', 'list']) == 1
    assert '--theme' in capsys.readouterr().err


def test_no_args_starts_repl(monkeypatch, agentic_home):
    calls = []
    monkeypatch.setattr('agentic.repl.start_repl', lambda theme=None: calls.append(theme))
    assert cli.main(['--theme', 'mono']) == 0
    assert calls == ['mono']
    records = [json.loads(line) for line in (agentic_home / 'audit.log').read_text().splitlines()]
    assert records[-1]['command'] == 'repl'


def test_json_output_is_not_truncated(capsys):
    for i in range(30):
        cli.main(['add', f"Task {i}"])
    capsys.readouterr()
    assert cli.main(['list', '--format', 'json']) == 0
    assert len(json.loads(capsys.readouterr().out)) == 30


@pytest.mark.parametrize('argv', [['--version'], ['help'], ['--first-run']])
def test_informational_commands(argv, capsys):
    assert cli.main(argv) == 0
    assert capsys.readouterr().out.strip()
