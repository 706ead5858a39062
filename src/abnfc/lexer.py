"""ABNF lexer — splits one grammar line into positioned fragments."""

from __future__ import annotations

import re

from abnfc.errors import LexError
from abnfc.tokens import PUNCTUATION, TokenType

# Alternatives are tried in priority order at each offset. Comments end the
# line and are never emitted.
_FRAGMENT = re.compile(
    r"""
      (?P<comment>;.*)
    | (?P<incremental>=/)
    | (?P<punct>[=/(){}\[\]])
    | (?P<repeat>\d*\*\d*|\d+)
    | (?P<rulename><[A-Za-z][A-Za-z0-9\-]*>|[A-Za-z][A-Za-z0-9\-]*)
    | (?P<numval>%[bdxBDX][0-9A-Fa-f.\-]+)
    | (?P<string>"(?:\\.|[^"\\])*"|'(?:\\.|[^'\\])*')
    """,
    re.VERBOSE,
)

_WHITESPACE = re.compile(r"\s*")

_GROUP_TYPES = {
    "incremental": TokenType.INCREMENTAL,
    "repeat": TokenType.REPEAT,
    "rulename": TokenType.RULENAME,
    "numval": TokenType.NUMVAL,
    "string": TokenType.STRING,
}

Fragment = tuple[TokenType, str, int]


def lex_line(line: str, char: int = 0) -> tuple[list[Fragment], int]:
    """Tokenize *line* starting at offset *char*.

    Returns ``(type, text, char)`` fragments and the offset just past the
    last fragment and its trailing whitespace.
    """
    fragments: list[Fragment] = []
    pos = _WHITESPACE.match(line, char).end()

    while pos < len(line):
        m = _FRAGMENT.match(line, pos)
        if m is None:
            if line[pos] in "\"'":
                raise LexError("unterminated string", pos)
            raise LexError(f"unexpected character {line[pos]!r}", pos)

        kind = m.lastgroup
        if kind == "comment":
            pos = len(line)
            break

        text = m.group()
        if kind == "punct":
            fragments.append((PUNCTUATION[text], text, pos))
        else:
            fragments.append((_GROUP_TYPES[kind], text, pos))
        pos = _WHITESPACE.match(line, m.end()).end()

    return fragments, pos
