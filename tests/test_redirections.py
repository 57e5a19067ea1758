import os
from contextlib import contextmanager

import pytest

from minishellpy.redirections import (
    HEREDOC_PROMPT,
    HeredocInterrupted,
    RedirectionError,
    collect_heredocs,
    restore_redirections,
    save_std_streams,
    setup_redirections,
    strip_quotes,
)
from minishellpy.shell import Shell
from minishellpy.signals import sigint_received
from minishellpy.tokens import Redirection, TokenType


@contextmanager
def redirected():
    stdin_copy, stdout_copy = save_std_streams()
    try:
        yield
    finally:
        restore_redirections(stdin_copy, stdout_copy)


def reader(lines, prompts=None):
    pending = iter(lines)

    def read(prompt):
        if prompts is not None:
            prompts.append(prompt)
        return next(pending, None)

    return read


@pytest.fixture
def shell():
    return Shell.from_environ({"NAME": "world"}, interactive=False)


@pytest.mark.parametrize(
    "text, expected",
    [("'abc'", "abc"), ('"x y"', "x y"), ("abc", "abc"), ("'", "'"), ("'ab\"", "'ab\""), ("''", "")],
)
def test_strip_quotes(text, expected):
    assert strip_quotes(text) == expected


def test_collect_expands_unquoted_delimiter(shell):
    prompts = []
    result = collect_heredocs(
        [Redirection(TokenType.HEREDOC, "EOF")], reader(["hello $NAME", "EOF"], prompts), shell
    )
    assert result == "hello world\n"
    assert prompts == [HEREDOC_PROMPT, HEREDOC_PROMPT]


@pytest.mark.parametrize("delimiter", ["'EOF'", '"EOF"'])
def test_collect_quoted_delimiter_keeps_text(shell, delimiter):
    result = collect_heredocs(
        [Redirection(TokenType.HEREDOC, delimiter)], reader(["hello $NAME", "EOF"]), shell
    )
    assert result == "hello $NAME\n"


def test_only_last_heredoc_is_kept(shell):
    redirections = [
        Redirection(TokenType.HEREDOC, "A"),
        Redirection(TokenType.REDIR_IN, "ignored"),
        Redirection(TokenType.HEREDOC, "B"),
    ]
    result = collect_heredocs(redirections, reader(["x", "A", "y", "B"]), shell)
    assert result == "y\n"


def test_empty_heredoc_gives_empty_text(shell):
    assert collect_heredocs([Redirection(TokenType.HEREDOC, "E")], reader(["E"]), shell) == ""


def test_no_heredoc_reads_nothing(shell):
    prompts = []
    assert collect_heredocs([Redirection(TokenType.REDIR_OUT, "f")], reader(["x"], prompts), shell) is None
    assert prompts == []


def test_end_of_input_aborts(shell):
    assert collect_heredocs([Redirection(TokenType.HEREDOC, "EOF")], reader(["line"]), shell) is None


def test_interrupt_aborts(shell):
    def interrupted(prompt):
        raise KeyboardInterrupt

    assert collect_heredocs([Redirection(TokenType.HEREDOC, "EOF")], interrupted, shell) is None
    assert sigint_received() is False


def test_output_redirection_truncates(tmp_path):
    target = tmp_path / "out.txt"
    target.write_text("old content that is long")
    with redirected():
        setup_redirections([Redirection(TokenType.REDIR_OUT, str(target))])
        os.write(1, b"data")
    assert target.read_text() == "data"


def test_append_redirection_keeps_content(tmp_path):
    target = tmp_path / "out.txt"
    target.write_text("first ")
    with redirected():
        setup_redirections([Redirection(TokenType.REDIR_APPEND, str(target))])
        os.write(1, b"second")
    assert target.read_text() == "first second"


def test_every_output_file_is_created_and_last_wins(tmp_path):
    first, second = tmp_path / "a", tmp_path / "b"
    with redirected():
        setup_redirections(
            [Redirection(TokenType.REDIR_OUT, str(first)), Redirection(TokenType.REDIR_OUT, str(second))]
        )
        os.write(1, b"payload")
    assert first.read_text() == ""
    assert second.read_text() == "payload"


def test_input_redirection(tmp_path):
    source = tmp_path / "in.txt"
    source.write_bytes(b"input bytes")
    redirection = Redirection(TokenType.REDIR_IN, str(source))
    with redirected():
        setup_redirections([redirection])
        data = os.read(0, 100)
    assert data == b"input bytes"
    assert data == open(redirection.target, "rb").read()


def test_missing_input_raises(tmp_path, capsys):
    missing = str(tmp_path / "missing")
    with redirected():
        with pytest.raises(RedirectionError) as info:
            setup_redirections([Redirection(TokenType.REDIR_IN, missing)])
    assert info.value.target == missing
    assert capsys.readouterr().err.startswith(f"minishell: minishell: {missing}: ")


def test_heredoc_feeds_stdin(shell):
    lines = ["first", "second", "EOF"]
    heredoc = [Redirection(TokenType.HEREDOC, "EOF")]
    with redirected():
        setup_redirections(heredoc, reader(lines))
        data = os.read(0, 1024)
    assert data == b"first\nsecond\n"
    assert data.decode() == collect_heredocs(heredoc, reader(lines), shell)


def test_heredoc_expands_from_process_environment(monkeypatch):
    monkeypatch.setenv("MSH_TEST_VAR", "value")
    lines = ["$MSH_TEST_VAR", "EOF"]
    heredoc = [Redirection(TokenType.HEREDOC, "EOF")]
    with redirected():
        setup_redirections(heredoc, reader(lines))
        data = os.read(0, 1024)
    assert data == b"value\n"
    process_shell = Shell.from_environ(dict(os.environ), interactive=False)
    assert data.decode() == collect_heredocs(heredoc, reader(lines), process_shell)


def test_cut_short_heredoc_raises():
    with redirected():
        with pytest.raises(HeredocInterrupted):
            setup_redirections([Redirection(TokenType.HEREDOC, "EOF")], reader([]))


def test_restore_closes_copies():
    stdin_copy, stdout_copy = save_std_streams()
    restore_redirections(stdin_copy, stdout_copy)
    for fd in (stdin_copy, stdout_copy):
        with pytest.raises(OSError):
            os.fstat(fd)