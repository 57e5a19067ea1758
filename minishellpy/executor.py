"""Running parsed commands: builtins inside the shell, programs as child processes."""

from __future__ import annotations

import os
import subprocess
import sys
from collections.abc import Iterator, Sequence
from contextlib import contextmanager, redirect_stdout, suppress
from typing import NoReturn

from .builtins import ShellExit, execute_builtin, is_builtin
from .errors import print_command_not_found, print_error
from .pathsearch import find_executable, is_path_like
from .redirections import (
    RedirectionError,
    restore_redirections,
    save_std_streams,
    setup_redirections,
)
from .shell import Shell
from .tokens import Command

_FAILURE = 1
_NOT_EXECUTABLE = 126
_NOT_FOUND = 127


def _strerror(exc: OSError) -> str:
    return os.strerror(exc.errno) if exc.errno else str(exc)


def _exec_environment(shell: Shell) -> dict[str, str]:
    environment: dict[str, str] = {}
    for entry in shell.env_array:
        key, _, value = entry.partition("=")
        environment[key] = value
    return environment


def _flush_std() -> None:
    for stream in (sys.stdout, sys.stderr):
        with suppress(ValueError, OSError, AttributeError):
            stream.flush()


@contextmanager
def _stdout_to_fd() -> Iterator[None]:
    """Send ``sys.stdout`` to descriptor 1 while a redirected builtin runs."""
    _flush_std()
    stream = open(1, "w", encoding="utf-8", closefd=False)
    try:
        with redirect_stdout(stream):
            yield
    finally:
        with suppress(ValueError, OSError):
            stream.flush()


def _run_builtin(command: Command, shell: Shell) -> int:
    stdin_copy, stdout_copy = save_std_streams()
    try:
        try:
            setup_redirections(command.redirections)
        except RedirectionError:
            status = _FAILURE
        else:
            if not command.args:
                status = 0
            elif command.redirections:
                with _stdout_to_fd():
                    status = execute_builtin(command.args, shell)
            else:
                status = execute_builtin(command.args, shell)
    finally:
        restore_redirections(stdin_copy, stdout_copy)
    shell.exit_status = status
    return status


def _report_missing(command: Command, shell: Shell) -> int:
    name = command.args[0]
    status = _NOT_FOUND
    if is_path_like(name):
        if os.access(name, os.F_OK) and (os.path.isdir(name) or not os.access(name, os.X_OK)):
            status = _NOT_EXECUTABLE
    else:
        print_error(name, None, "command not found")
    shell.exit_status = status
    return status


def _run_external(command: Command, shell: Shell, path: str) -> int:
    stdin_copy, stdout_copy = save_std_streams()
    try:
        try:
            setup_redirections(command.redirections)
        except RedirectionError:
            status = _FAILURE
        else:
            _flush_std()
            try:
                process = subprocess.Popen(
                    list(command.args), executable=path, env=_exec_environment(shell)
                )
            except OSError as exc:
                print_error(command.args[0], None, _strerror(exc))
                status = _FAILURE
            else:
                returncode = process.wait()
                status = returncode if returncode >= 0 else _FAILURE
    finally:
        restore_redirections(stdin_copy, stdout_copy)
    shell.exit_status = status
    return status


def execute_single_command(command: Command, shell: Shell) -> int:
    """Run one command that is not part of a pipeline and return its status.

    Builtins and commands without arguments run inside the shell, so their
    effects on the environment and the directory last.
    """
    if not command.args or is_builtin(command.args[0]):
        return _run_builtin(command, shell)
    path = find_executable(command.args[0], shell)
    if path is None:
        return _report_missing(command, shell)
    return _run_external(command, shell, path)


def _close(fd: int | None) -> None:
    if fd is not None:
        with suppress(OSError):
            os.close(fd)


def _run_pipeline_child(
    command: Command,
    path: str | None,
    shell: Shell,
    read_fd: int | None,
    pipe_fds: tuple[int, int] | None,
) -> NoReturn:
    status = _FAILURE
    try:
        if read_fd is not None:
            os.dup2(read_fd, 0)
            os.close(read_fd)
        if pipe_fds is not None:
            read_end, write_end = pipe_fds
            os.close(read_end)
            os.dup2(write_end, 1)
            os.close(write_end)
        with suppress(OSError):
            sys.stdin = open(0, encoding="utf-8", closefd=False)
        sys.stdout = open(1, "w", encoding="utf-8", closefd=False)
        try:
            setup_redirections(command.redirections)
        except RedirectionError:
            status = _FAILURE
        else:
            if is_builtin(command.args[0]):
                try:
                    status = execute_builtin(command.args, shell)
                except ShellExit as exc:
                    status = exc.status
            elif path is not None:
                try:
                    os.execve(path, list(command.args), _exec_environment(shell))
                except OSError as exc:
                    print_error(command.args[0], None, _strerror(exc))
                    status = _FAILURE
    except BaseException:
        status = _FAILURE
    finally:
        _flush_std()
        os._exit(status)


def execute_pipeline(commands: Sequence[Command], shell: Shell) -> int:
    """Run commands connected by pipes, each in its own process.

    Returns the status of the last command; 127 when the last command
    could not be found.
    """
    commands = list(commands)
    prev_read: int | None = None
    last_status = 0
    last_not_found = False
    pids: list[int] = []
    for position, command in enumerate(commands):
        has_next = position < len(commands) - 1
        pipe_fds = os.pipe() if has_next else None
        if not command.args:
            if pipe_fds is not None:
                os.close(pipe_fds[1])
                _close(prev_read)
                prev_read = pipe_fds[0]
            continue
        name = command.args[0]
        path = find_executable(name, shell)
        if path is None and not is_builtin(name):
            print_command_not_found(name)
            last_status = _NOT_FOUND
            shell.exit_status = last_status
            last_not_found = not has_next
            if pipe_fds is not None:
                _close(pipe_fds[0])
                _close(pipe_fds[1])
            _close(prev_read)
            prev_read = None
            continue
        last_not_found = False
        _flush_std()
        pid = os.fork()
        if pid == 0:
            _run_pipeline_child(command, path, shell, prev_read, pipe_fds)
        pids.append(pid)
        _close(prev_read)
        prev_read = None
        if pipe_fds is not None:
            os.close(pipe_fds[1])
            prev_read = pipe_fds[0]
    _close(prev_read)
    for pid in pids:
        _, wait_status = os.waitpid(pid, 0)
        if os.WIFEXITED(wait_status) and not last_not_found:
            last_status = os.WEXITSTATUS(wait_status)
            shell.exit_status = last_status
    return last_status


def execute_commands(commands: Sequence[Command], shell: Shell) -> int:
    """Run a parsed line: one command directly, several as a pipeline."""
    commands = list(commands)
    if not commands:
        return 0
    if len(commands) == 1:
        status = execute_single_command(commands[0], shell)
    else:
        status = execute_pipeline(commands, shell)
    shell.exit_status = status
    return status