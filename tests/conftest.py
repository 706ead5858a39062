"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from abnfc.grammar import Grammar, compile
from abnfc.lexer import lex_line
from abnfc.source import Source
from abnfc.tokens import Token, TokenType

SAMPLE_GRAMMAR = """\
; Every construct the resolver knows, in one rule
complex = rule1 rule2 / *rule2 / [rule4-1 rule4-2 / rule4-3] (rule5 / rule6) / 2*5([rule7] (rule8 / rule9) rule10)

rule1 = "a"
rule2 = 'b'
rule4-1 = "c"
rule4-2 = "d"
rule4-3 = "e"
rule5 = "f"
rule6 = "g"
rule7 = "h"
rule8 = "i"
rule9 = "j"
rule10 = %x6B  ; k
"""


@pytest.fixture
def lex():
    """Return a helper that lexes one line and returns its fragment texts."""

    def _lex(line: str) -> list[str]:
        fragments, _ = lex_line(line)
        return [text for _, text, _ in fragments]

    return _lex


@pytest.fixture
def build():
    """Return a helper that builds a Source from grammar text."""

    def _build(text: str, path: str = "test.abnf") -> Source:
        return Source.build(text, path)

    return _build


@pytest.fixture
def grammar():
    """Return a helper that compiles grammar text."""

    def _compile(text: str, entry: str | None = None) -> Grammar:
        return compile(text, entry, "test.abnf")

    return _compile


@pytest.fixture
def sample() -> Grammar:
    return compile(SAMPLE_GRAMMAR, path="sample.abnf")


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def body_values(source: Source, name: str) -> list[str]:
    """Return the body token texts of rule *name*."""
    return [t.value for t in source.rules[name].body]
