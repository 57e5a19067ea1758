"""Locating the program a command name refers to."""

from __future__ import annotations

import os

from .errors import print_is_directory, print_no_such_file, print_permission_denied
from .shell import Shell


def is_path_like(cmd: str) -> bool:
    """True when ``cmd`` starts with ``/``, ``./`` or ``../``."""
    return cmd.startswith(("/", "./", "../"))


def _check_explicit_path(cmd: str) -> str | None:
    if not os.access(cmd, os.F_OK):
        print_no_such_file(cmd)
        return None
    if os.path.isdir(cmd):
        print_is_directory(cmd)
        return None
    if not os.access(cmd, os.X_OK):
        print_permission_denied(cmd)
        return None
    return cmd


def _check_current_directory(cmd: str) -> str | None:
    if os.access(cmd, os.F_OK) and not os.path.isdir(cmd) and os.access(cmd, os.X_OK):
        return cmd
    return None


def _search_path(cmd: str, path_env: str) -> str | None:
    for directory in filter(None, path_env.split(":")):
        candidate = f"{directory}/{cmd}"
        if os.access(candidate, os.X_OK):
            return candidate
    return None


def find_executable(cmd: str, shell: Shell) -> str | None:
    """Return the path to run for ``cmd``, or None when there is none.

    Explicit paths report why they cannot be run on standard error; other
    names are tried in the current directory and then along ``PATH``.
    """
    if not cmd:
        return None
    if is_path_like(cmd):
        return _check_explicit_path(cmd)
    found = _check_current_directory(cmd)
    if found is not None:
        return found
    path_env = shell.env.get("PATH")
    if path_env is None:
        return None
    return _search_path(cmd, path_env)