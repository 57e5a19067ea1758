"""Splits a pre-processed line into tokens."""

from __future__ import annotations

from .tokens import Token, TokenType

_WHITESPACE = " \t\n"
_OPERATORS = "|<>"
_QUOTES = "'\""


def is_whitespace(char: str) -> bool:
    """True for a space, tab or newline."""
    return char != "" and char in _WHITESPACE


def skip_whitespace(text: str, index: int) -> int:
    """Return the first index at or after ``index`` that is not whitespace."""
    while index < len(text) and is_whitespace(text[index]):
        index += 1
    return index


def _read_word(text: str, index: int) -> tuple[Token, int]:
    start = index
    length = len(text)
    while index < length and not is_whitespace(text[index]) and text[index] not in _OPERATORS:
        ch = text[index]
        index += 1
        if ch in _QUOTES:
            closing = text.find(ch, index)
            index = length if closing == -1 else closing + 1
    return Token(TokenType.WORD, text[start:index]), index


def _read_operator(text: str, index: int) -> tuple[Token, int]:
    ch = text[index]
    if ch == "|":
        return Token(TokenType.PIPE, "|"), index + 1
    doubled = index + 1 < len(text) and text[index + 1] == ch
    if ch == "<":
        if doubled:
            return Token(TokenType.HEREDOC, "<<"), index + 2
        return Token(TokenType.REDIR_IN, "<"), index + 1
    if doubled:
        return Token(TokenType.REDIR_APPEND, ">>"), index + 2
    return Token(TokenType.REDIR_OUT, ">"), index + 1


def tokenize(text: str) -> list[Token]:
    """Split ``text`` into words and operators; quotes stay inside their word."""
    tokens: list[Token] = []
    index = 0
    while True:
        index = skip_whitespace(text, index)
        if index >= len(text):
            break
        if text[index] in _OPERATORS:
            token, index = _read_operator(text, index)
        else:
            token, index = _read_word(text, index)
        tokens.append(token)
    return tokens