"""Input and output redirections, heredocs included."""

from __future__ import annotations

import os
import signal
import sys
import tempfile
import threading
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager, suppress
from typing import Optional

from .errors import print_error
from .expander import expand_env_vars
from .shell import Shell
from .signals import clear_sigint, setup_heredoc_signals, sigint_received
from .tokens import Redirection, TokenType

ReadLine = Callable[[str], Optional[str]]

HEREDOC_PROMPT = "> "
_FILE_MODE = 0o644
_QUOTES = "'\""


class RedirectionError(Exception):
    """A redirection could not be set up."""

    def __init__(self, target: str | None, reason: str) -> None:
        super().__init__(f"{target}: {reason}" if target else reason)
        self.target = target
        self.reason = reason


class HeredocInterrupted(RedirectionError):
    """Heredoc input ended early, by end of input or by an interrupt."""

    def __init__(self) -> None:
        super().__init__(None, "heredoc input interrupted")


def strip_quotes(text: str) -> str:
    """Remove one pair of matching single or double quotes around ``text``."""
    if len(text) >= 2 and text[0] in _QUOTES and text[-1] == text[0]:
        return text[1:-1]
    return text


def _default_read_line(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None


def _strerror(exc: OSError) -> str:
    return os.strerror(exc.errno) if exc.errno else str(exc)


@contextmanager
def _heredoc_signals() -> Iterator[None]:
    """Use the heredoc interrupt handler, then put the previous handlers back."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return
    handled = [signal.SIGINT]
    if hasattr(signal, "SIGQUIT"):
        handled.append(signal.SIGQUIT)
    saved = {signum: signal.getsignal(signum) for signum in handled}
    setup_heredoc_signals()
    try:
        yield
    finally:
        for signum, handler in saved.items():
            if handler is not None:
                signal.signal(signum, handler)


def _read_heredoc(target: str, read_line: ReadLine, shell: Shell | None, keep: bool) -> str | None:
    """Read one heredoc body; return None when input ends or is interrupted."""
    delimiter = strip_quotes(target)
    expand = delimiter == target
    lines: list[str] = []
    while True:
        line = read_line(HEREDOC_PROMPT)
        if line is None:
            return None
        if sigint_received():
            clear_sigint()
            return None
        if line == delimiter:
            break
        if keep:
            if expand:
                if shell is None:
                    shell = Shell.from_environ(interactive=False)
                line = expand_env_vars(line, shell)
            lines.append(line)
    return "".join(f"{line}\n" for line in lines)


def collect_heredocs(
    redirections: Sequence[Redirection],
    read_line: ReadLine | None = None,
    shell: Shell | None = None,
) -> str | None:
    """Read every heredoc of ``redirections`` and return the body of the last one.

    Bodies of earlier heredocs are read and discarded. Lines of the last body
    are expanded unless its delimiter was quoted. Returns None when there is
    no heredoc, or when input ends or is interrupted before a delimiter.
    ``shell`` defaults to one built from the process environment.
    """
    heredocs = [r for r in redirections if r.kind is TokenType.HEREDOC]
    if not heredocs:
        return None
    reader = read_line if read_line is not None else _default_read_line
    clear_sigint()
    content: str | None = None
    with _heredoc_signals():
        try:
            for position, heredoc in enumerate(heredocs):
                keep = position == len(heredocs) - 1
                body = _read_heredoc(heredoc.target, reader, shell, keep)
                if body is None:
                    return None
                if keep:
                    content = body
        except KeyboardInterrupt:
            clear_sigint()
            return None
    return content


def _flush_stdout() -> None:
    with suppress(ValueError, OSError):
        sys.stdout.flush()


def _replace_fd(fd: int, target_fd: int) -> None:
    if target_fd == 1:
        _flush_stdout()
    os.dup2(fd, target_fd)
    os.close(fd)


def _redirect_file(path: str, flags: int, target_fd: int) -> None:
    try:
        fd = os.open(path, flags, _FILE_MODE)
    except OSError as exc:
        reason = _strerror(exc)
        print_error("minishell", path, reason)
        raise RedirectionError(path, reason) from exc
    _replace_fd(fd, target_fd)


def _feed_stdin(content: str) -> None:
    with tempfile.TemporaryFile() as buffer:
        buffer.write(content.encode("utf-8", "surrogateescape"))
        buffer.flush()
        buffer.seek(0)
        os.dup2(buffer.fileno(), 0)


def setup_redirections(redirections: Sequence[Redirection], read_line: ReadLine | None = None) -> None:
    """Point standard input and output at the redirection targets, in order.

    All heredocs are read when the first one is reached; only the last body
    is fed to standard input. Raises :class:`RedirectionError` after
    reporting a file that cannot be opened, and :class:`HeredocInterrupted`
    when heredoc input is cut short.
    """
    heredoc_done = False
    for redirection in redirections:
        kind = redirection.kind
        if kind is TokenType.REDIR_IN:
            _redirect_file(redirection.target, os.O_RDONLY, 0)
        elif kind is TokenType.REDIR_OUT:
            _redirect_file(redirection.target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 1)
        elif kind is TokenType.REDIR_APPEND:
            _redirect_file(redirection.target, os.O_WRONLY | os.O_CREAT | os.O_APPEND, 1)
        elif kind is TokenType.HEREDOC and not heredoc_done:
            content = collect_heredocs(redirections, read_line)
            if content is None:
                raise HeredocInterrupted()
            _feed_stdin(content)
            heredoc_done = True


def save_std_streams() -> tuple[int, int]:
    """Return copies of the standard input and output descriptors."""
    _flush_stdout()
    return os.dup(0), os.dup(1)


def restore_redirections(stdin_copy: int, stdout_copy: int) -> None:
    """Put back the saved standard input and output and close the copies."""
    _flush_stdout()
    os.dup2(stdin_copy, 0)
    os.dup2(stdout_copy, 1)
    os.close(stdin_copy)
    os.close(stdout_copy)