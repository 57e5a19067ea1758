"""Commands the shell runs itself instead of starting a program."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Sequence

from .errors import print_error
from .shell import Shell

_SUCCESS = 0
_ERROR = 1


class ShellExit(Exception):
    """Raised by ``exit`` when the shell should terminate with ``status``."""

    def __init__(self, status: int) -> None:
        super().__init__(status)
        self.status = status & 0xFF


def _write(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


def echo(args: Sequence[str]) -> int:
    """Print the arguments separated by spaces; ``-n``, ``-nn``... drop the newline."""
    words = list(args[1:])
    newline = True
    while words and _is_n_flag(words[0]):
        newline = False
        words.pop(0)
    _write(" ".join(words) + ("\n" if newline else ""))
    return _SUCCESS


def _is_n_flag(arg: str) -> bool:
    return len(arg) > 1 and arg[0] == "-" and set(arg[1:]) == {"n"}


def cd(args: Sequence[str], shell: Shell) -> int:
    """Change directory to the argument or to ``$HOME``, updating PWD and OLDPWD."""
    if len(args) < 2:
        path = shell.env.get("HOME")
        if path is None:
            print_error("cd", None, "HOME not set")
            shell.exit_status = _ERROR
            return _ERROR
    elif len(args) > 2:
        shell.exit_status = _SUCCESS
        return _SUCCESS
    else:
        path = args[1]
    try:
        shell.env.set("OLDPWD", os.getcwd())
    except OSError:
        pass
    try:
        os.chdir(path)
    except OSError as exc:
        print_error("cd", path, os.strerror(exc.errno) if exc.errno else str(exc))
        shell.exit_status = _ERROR
        return _ERROR
    try:
        shell.env.set("PWD", os.getcwd())
    except OSError:
        pass
    shell.refresh_env_array()
    shell.exit_status = _SUCCESS
    return _SUCCESS


def pwd() -> int:
    """Print the current working directory."""
    try:
        cwd = os.getcwd()
    except OSError as exc:
        print_error("pwd", None, os.strerror(exc.errno) if exc.errno else str(exc))
        return _ERROR
    _write(cwd + "\n")
    return _SUCCESS


def _is_valid_name(name: str) -> bool:
    if not name:
        return False
    first, rest = name[0], name[1:]
    if not (first == "_" or first.isascii() and first.isalpha()):
        return False
    return all(ch == "_" or (ch.isascii() and ch.isalnum()) for ch in rest)


def _export_one(arg: str, shell: Shell) -> int:
    key, sep, value = arg.partition("=")
    if not _is_valid_name(key):
        sys.stderr.write(f"minishell: export: `{arg}': not a valid identifier\n")
        sys.stderr.flush()
        shell.exit_status = _ERROR
        return _ERROR
    if sep:
        shell.env.set(key, value)
    elif shell.env.get(key) is None:
        shell.env.set(key, "")
    return _SUCCESS


def export(args: Sequence[str], shell: Shell) -> int:
    """Set variables from ``NAME=VALUE`` arguments, or list them when there are none.

    Processing stops at the first invalid name, which yields status 1.
    """
    if len(args) < 2:
        _write("".join(f'declare -x {key}="{value}"\n' for key, value in shell.env.items()))
        return _SUCCESS
    status = _SUCCESS
    for arg in args[1:]:
        status = _export_one(arg, shell)
        if status != _SUCCESS:
            break
    shell.refresh_env_array()
    return status


def unset(args: Sequence[str], shell: Shell) -> int:
    """Remove each named variable."""
    if len(args) < 2:
        return _SUCCESS
    for name in args[1:]:
        shell.env.remove(name)
    shell.refresh_env_array()
    return _SUCCESS


def env(shell: Shell) -> int:
    """Print every variable as ``NAME=VALUE``."""
    _write("".join(f"{key}={value}\n" for key, value in shell.env.items()))
    return _SUCCESS


def _is_valid_number(text: str) -> bool:
    digits = text[1:] if text[:1] in ("+", "-") else text
    return bool(digits) and all("0" <= ch <= "9" for ch in digits)


def exit_builtin(args: Sequence[str], shell: Shell) -> int:
    """Print ``exit`` and raise :class:`ShellExit`.

    A non-numeric argument or extra arguments are reported; an interactive
    shell then stays alive and the status is returned instead.
    """
    _write("exit\n")
    if len(args) < 2:
        raise ShellExit(shell.exit_status)
    if not _is_valid_number(args[1]):
        print_error("exit", args[1], "numeric argument required")
        shell.exit_status = 2
        if not shell.interactive:
            raise ShellExit(2)
        return 2
    status = int(args[1])
    if len(args) > 2:
        print_error("exit", None, "too many arguments")
        shell.exit_status = _ERROR
        if not shell.interactive:
            raise ShellExit(_ERROR)
        return _ERROR
    raise ShellExit(status)


_BUILTINS: dict[str, Callable[[Sequence[str], Shell], int]] = {
    "echo": lambda args, shell: echo(args),
    "cd": cd,
    "pwd": lambda args, shell: pwd(),
    "export": export,
    "unset": unset,
    "env": lambda args, shell: env(shell),
    "exit": exit_builtin,
}


def is_builtin(name: str | None) -> bool:
    """True when ``name`` is a command the shell runs itself."""
    return name is not None and name in _BUILTINS


def execute_builtin(args: Sequence[str], shell: Shell) -> int:
    """Run the builtin named by ``args[0]`` and return its status (1 if unknown)."""
    if not args:
        return _ERROR
    handler = _BUILTINS.get(args[0])
    if handler is None:
        return _ERROR
    return handler(args, shell)