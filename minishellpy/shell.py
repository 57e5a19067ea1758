"""Shell state shared by the parser, the builtins and the executor."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from .environment import Environment


@dataclass
class Shell:
    """Environment, exported environment strings and last exit status."""

    env: Environment = field(default_factory=Environment)
    env_array: list[str] = field(default_factory=list)
    exit_status: int = 0
    interactive: bool = False

    @classmethod
    def from_environ(
        cls,
        environ: Mapping[str, str] | Iterable[str] | None = None,
        interactive: bool | None = None,
    ) -> Shell:
        """Create a shell from a mapping or from ``KEY=VALUE`` strings.

        ``environ`` defaults to the process environment and ``interactive``
        to whether standard input is a terminal.
        """
        if environ is None:
            environ = os.environ
        if isinstance(environ, Mapping):
            entries: Iterable[str] = [f"{key}={value}" for key, value in environ.items()]
        else:
            entries = environ
        if interactive is None:
            interactive = _stdin_is_tty()
        shell = cls(env=Environment.from_strings(entries), interactive=interactive)
        shell.refresh_env_array()
        return shell

    def refresh_env_array(self) -> list[str]:
        """Rebuild ``env_array`` from ``env`` and return it."""
        self.env_array = self.env.to_list()
        return self.env_array

    def environ_dict(self) -> dict[str, str]:
        """Return the environment as a dict, suitable for starting programs."""
        return dict(self.env.items())


def _stdin_is_tty() -> bool:
    try:
        return sys.stdin is not None and sys.stdin.isatty()
    except (AttributeError, ValueError, OSError):
        return False