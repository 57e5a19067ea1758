"""First pass over an input line: puts spaces around operators outside quotes."""

from __future__ import annotations

_QUOTES = "'\""
_SPECIALS = "|<>"
_DOUBLED = "<>"


def lexer_analyze(text: str) -> str:
    """Return ``text`` with ``|``, ``<``, ``>``, ``<<`` and ``>>`` set apart by spaces.

    Characters inside single or double quotes are copied unchanged.
    """
    out: list[str] = []
    quote: str | None = None
    i = 0
    length = len(text)
    while i < length:
        ch = text[i]
        if quote is None and ch in _QUOTES:
            quote = ch
            out.append(ch)
            i += 1
            continue
        if quote is not None and ch == quote:
            quote = None
            out.append(ch)
            i += 1
            continue
        if quote is None and ch in _SPECIALS:
            if out and out[-1] != " ":
                out.append(" ")
            out.append(ch)
            i += 1
            if ch in _DOUBLED and i < length and text[i] == ch:
                out.append(ch)
                i += 1
            if i < length and text[i] != " ":
                out.append(" ")
            continue
        out.append(ch)
        i += 1
    return "".join(out)