"""Error messages written to standard error."""

from __future__ import annotations

import sys
from typing import TextIO

PREFIX = "minishell: "


def format_error(cmd: str | None, arg: str | None, msg: str) -> str:
    """Build ``minishell: [cmd: ][arg: ]msg`` without a trailing newline."""
    parts = [PREFIX]
    if cmd is not None:
        parts.append(f"{cmd}: ")
    if arg is not None:
        parts.append(f"{arg}: ")
    parts.append(msg)
    return "".join(parts)


def print_error(cmd: str | None, arg: str | None, msg: str, stream: TextIO | None = None) -> None:
    """Write a formatted error line to ``stream`` (standard error by default)."""
    out = sys.stderr if stream is None else stream
    out.write(format_error(cmd, arg, msg) + "\n")
    out.flush()


def print_syntax_error(token: str, stream: TextIO | None = None) -> None:
    print_error("syntax error near unexpected token", token, "", stream)


def print_command_not_found(cmd: str, stream: TextIO | None = None) -> None:
    print_error(cmd, None, "command not found", stream)


def print_permission_denied(path: str, stream: TextIO | None = None) -> None:
    print_error(path, None, "Permission denied", stream)


def print_no_such_file(path: str, stream: TextIO | None = None) -> None:
    print_error(path, None, "No such file or directory", stream)


def print_is_directory(path: str, stream: TextIO | None = None) -> None:
    print_error(path, None, "Is a directory", stream)