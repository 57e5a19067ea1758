"""Ordered collection of shell environment variables."""

from __future__ import annotations

from collections.abc import Iterable, Iterator


class Environment:
    """Environment variables in a fixed order.

    Variables loaded from strings keep their order; a variable set for the
    first time goes to the front, as the shell's ``export`` output shows.
    """

    def __init__(self) -> None:
        self._vars: dict[str, str] = {}

    @classmethod
    def from_strings(cls, entries: Iterable[str]) -> Environment:
        """Build from ``KEY=VALUE`` strings; an entry without ``=`` gets an empty value."""
        env = cls()
        for entry in entries:
            key, _, value = entry.partition("=")
            env._vars[key] = value
        return env

    def get(self, key: str) -> str | None:
        """Return the value of ``key``, or None when it is not set."""
        return self._vars.get(key)

    def set(self, key: str, value: str) -> None:
        """Replace the value of ``key`` in place, or add it at the front."""
        if key in self._vars:
            self._vars[key] = value
        else:
            self._vars = {key: value, **self._vars}

    def remove(self, key: str) -> None:
        """Remove ``key`` if present."""
        self._vars.pop(key, None)

    def to_list(self) -> list[str]:
        """Return the variables as ``KEY=VALUE`` strings, in order."""
        return [f"{key}={value}" for key, value in self._vars.items()]

    def items(self) -> Iterator[tuple[str, str]]:
        """Iterate over ``(key, value)`` pairs in order."""
        return iter(list(self._vars.items()))

    def __contains__(self, key: object) -> bool:
        return key in self._vars

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._vars))

    def __len__(self) -> int:
        return len(self._vars)

    def __repr__(self) -> str:
        return f"Environment({self._vars!r})"