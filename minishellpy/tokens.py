"""Token, redirection and command types shared by the parser stages."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum, auto


class TokenType(Enum):
    """Kinds of token produced by the tokenizer."""

    WORD = auto()
    PIPE = auto()
    REDIR_IN = auto()
    REDIR_OUT = auto()
    REDIR_APPEND = auto()
    HEREDOC = auto()
    EOF = auto()

    @property
    def is_redirection(self) -> bool:
        return self in _REDIRECTION_TYPES


_REDIRECTION_TYPES = frozenset(
    {TokenType.REDIR_IN, TokenType.REDIR_OUT, TokenType.REDIR_APPEND, TokenType.HEREDOC}
)


@dataclass(frozen=True)
class Token:
    """A single lexical token."""

    type: TokenType
    value: str


@dataclass
class Redirection:
    """A redirection attached to a command; ``target`` is a file or heredoc delimiter."""

    kind: TokenType
    target: str


@dataclass
class Command:
    """One simple command of a pipeline."""

    args: list[str] = field(default_factory=list)
    redirections: list[Redirection] = field(default_factory=list)

    def add_redirection(self, kind: TokenType, target: str) -> Redirection:
        """Append a redirection, keeping source order, and return it."""
        redirection = Redirection(kind, target)
        self.redirections.append(redirection)
        return redirection


def attach_redirection(tokens: Sequence[Token], index: int, command: Command) -> int:
    """Attach the redirection at ``tokens[index]`` to ``command``.

    The redirection is added only when the next token is a word. Returns the
    index of the last token consumed: the word's index, or ``index`` itself
    when no word follows.
    """
    following = index + 1
    if following < len(tokens) and tokens[following].type is TokenType.WORD:
        command.add_redirection(tokens[index].type, tokens[following].value)
        return following
    return index