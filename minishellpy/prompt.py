"""The interactive prompt and line history."""

from __future__ import annotations

from collections.abc import Callable
from typing import Optional

try:
    import readline as _readline
except ImportError:
    _readline = None

GREEN = "\033[32m"
YELLOW = "\033[33m"
RESET = "\033[0m"


def build_prompt() -> str:
    """Return the coloured prompt text."""
    return f"{GREEN}minishell{RESET}{YELLOW}$>{RESET} "


def display_prompt(read_line: Callable[[str], Optional[str]] | None = None) -> str | None:
    """Show the prompt and return the line typed, or None at end of input."""
    reader = read_line if read_line is not None else input
    try:
        return reader(build_prompt())
    except EOFError:
        return None


def add_to_history(line: str | None) -> bool:
    """Record a non-empty line in the line-editing history; return whether it was."""
    if not line:
        return False
    if _readline is not None:
        _readline.add_history(line)
    return True