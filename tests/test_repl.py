import io

from agentic import config, storage
from agentic.repl import load_history, save_history, start_repl


def _scripted(lines):
    feed = iter(lines)

    def input_fn(prompt):
        assert prompt == 'agent> '
        try:
            return next(feed)
        except StopIteration:
            raise EOFError
    return input_fn


def _session(lines, **kwargs):
    out, err = io.StringIO(), io.StringIO()
    history = start_repl(input_fn=_scripted(lines), out=out, err=err, interactive=False, **kwargs)
    return history, out.getvalue(), err.getvalue()


def test_runs_commands_until_quit(recognizer, reference):
    history, out, err = _session(
        ['add "Buy milk" #home', '', 'list', ':quit', 'add "never run"'],
        recognizer=recognizer,
        reference=reference,
    )
    assert '✓ Task added: [1] Buy milk' in out
    assert 'Buy milk' in out.split('✓ Task added')[1]
    assert out.endswith('bye.\n')
    assert err == ''
    assert [t.title for t in storage.read_state().tasks] == ['Buy milk']
    assert history == ['add "Buy milk" #home', 'list']


def test_errors_do_not_end_session():
    history, out, err = _session(['fly', 'view 9', 'add "unbalanced', 'help'])
    assert '✗ Unknown command: fly' in err
    assert '✗ Task not found: 9' in err
    assert err.count('✗') == 3
    assert 'agentic commands' in out
    # only successful lines are remembered
    assert history == ['help']


def test_consecutive_duplicates_are_collapsed():
    history, _, _ = _session(['help', 'help', 'today', 'help'])
    assert history == ['help', 'today', 'help']


def test_history_persisted_and_reloaded():
    _session(['help', 'today'])
    assert config.history_file().read_text() == 'help\ntoday\n'
    history, _, _ = _session(['sync'])
    assert history == ['help', 'today', 'sync']


def test_history_limits(agentic_home):
    save_history([f"cmd {i}" for i in range(300)])
    lines = config.history_file().read_text().splitlines()
    assert len(lines) == config.HISTORY_SAVE_LIMIT
    assert lines[-1] == 'cmd 299'
    loaded = load_history()
    assert len(loaded) == config.HISTORY_LOAD_LIMIT
    assert loaded[0] == 'cmd 200'


def test_missing_history_file_is_empty():
    assert load_history() == []
