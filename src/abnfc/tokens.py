"""Token types and the immutable token record."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from abnfc.source import Source


class TokenType(Enum):
    # Structural (single-character)
    EQUALS = auto()  # =
    SLASH = auto()  # /
    LPAREN = auto()  # (
    RPAREN = auto()  # )
    LBRACE = auto()  # {
    RBRACE = auto()  # }
    LBRACKET = auto()  # [
    RBRACKET = auto()  # ]

    INCREMENTAL = auto()  # =/

    # Content
    REPEAT = auto()  # 3*5, 3*, *5, * or 5
    RULENAME = auto()  # rule, my-rule, <rule>
    NUMVAL = auto()  # %x20-7E, %d72.101
    STRING = auto()  # "abc" (case-insensitive) or 'abc' (case-sensitive)


PUNCTUATION: dict[str, TokenType] = {
    "=": TokenType.EQUALS,
    "/": TokenType.SLASH,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
}


@dataclass(frozen=True, slots=True)
class Token:
    """A lexed grammar fragment with its zero-based line and char offset."""

    type: TokenType
    value: str
    line: int
    char: int
    source: Source | None = field(default=None, repr=False, compare=False)

    @property
    def length(self) -> int:
        return len(self.value)

    def __str__(self) -> str:
        return self.value


def rule_name(token: Token) -> str:
    """Return the rule name spelled by *token*, without ``<>`` decoration."""
    value = token.value
    if value.startswith("<") and value.endswith(">"):
        return value[1:-1]
    return value
