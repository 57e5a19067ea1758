"""Variable expansion and quote removal for parsed commands."""

from __future__ import annotations

from collections.abc import Iterable

from .shell import Shell
from .tokens import Command, TokenType

_QUOTES = "'\""


def _is_name_char(ch: str) -> bool:
    return ch == "_" or ("a" <= ch <= "z") or ("A" <= ch <= "Z") or ("0" <= ch <= "9")


def _expand_dollar(text: str, index: int, shell: Shell) -> tuple[str, int]:
    """Expand the ``$`` at ``text[index]``; return the expansion and the next index."""
    index += 1
    if index < len(text) and text[index] == "?":
        return str(shell.exit_status), index + 1
    start = index
    while index < len(text) and _is_name_char(text[index]):
        index += 1
    if index == start:
        return "$", index
    value = shell.env.get(text[start:index])
    return ("" if value is None else value), index


def expand_env_vars(text: str, shell: Shell) -> str:
    """Remove quotes and expand ``$NAME`` and ``$?``, except inside single quotes."""
    out: list[str] = []
    quote: str | None = None
    index = 0
    while index < len(text):
        ch = text[index]
        if ch in _QUOTES and (quote is None or quote == ch):
            quote = ch if quote is None else None
            index += 1
            continue
        if ch == "$" and quote != "'":
            expansion, index = _expand_dollar(text, index, shell)
            out.append(expansion)
            continue
        out.append(ch)
        index += 1
    return "".join(out)


def expand_args(command: Command, shell: Shell) -> None:
    """Expand every argument in place and drop those that became empty."""
    expanded = (expand_env_vars(arg, shell) for arg in command.args)
    command.args = [arg for arg in expanded if arg]


def expand_redirections(command: Command, shell: Shell) -> None:
    """Expand redirection targets; heredoc delimiters are left as written."""
    for redirection in command.redirections:
        if redirection.kind is not TokenType.HEREDOC:
            redirection.target = expand_env_vars(redirection.target, shell)


def expand_variables(commands: Iterable[Command], shell: Shell) -> None:
    """Expand arguments and redirections of every command of a pipeline."""
    for command in commands:
        expand_args(command, shell)
        expand_redirections(command, shell)