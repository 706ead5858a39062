"""ABNF rule resolver — turns a rule's body tokens into a combinator tree."""

from __future__ import annotations

import re
from collections.abc import Container

from abnfc.ast import (
    And,
    CaseInsensitiveString,
    CaseSensitiveString,
    Named,
    Node,
    Optional,
    Or,
    Repetition,
)
from abnfc.errors import GrammarSyntaxError, UndefinedRuleError
from abnfc.literals import expand_numeric
from abnfc.source import RuleTokens
from abnfc.tokens import Token, TokenType, rule_name

_CLOSERS = {
    TokenType.RPAREN: ")",
    TokenType.RBRACKET: "]",
}

_ESCAPE = re.compile(r"\\(.)")


def parse_repetition(text: str) -> tuple[int, int | None]:
    """Return ``(min, max)`` for a repetition prefix; max None is unbounded."""
    if "*" not in text:
        count = int(text)
        return count, count
    lo, _, hi = text.partition("*")
    return (int(lo) if lo else 0), (int(hi) if hi else None)


def unquote(text: str) -> str:
    """Strip the quotes of a string token and resolve backslash escapes."""
    return _ESCAPE.sub(r"\1", text[1:-1])


class Parser:
    """Recursive descent resolver for the body of one rule."""

    def __init__(self, group: RuleTokens, rules: Container[str]) -> None:
        self._name = group.name
        self._tokens = group.body
        self._rules = rules
        self._pos = 0

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _peek(self) -> Token | None:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _advance(self) -> Token:
        tok = self._tokens[self._pos]
        self._pos += 1
        return tok

    def _last(self) -> Token:
        """The most recently consumed token, or the rule name before any."""
        if self._pos > 0:
            return self._tokens[self._pos - 1]
        return self._name

    # ------------------------------------------------------------------
    # Grammar
    # ------------------------------------------------------------------

    def parse(self) -> Node:
        return self._parse_alternation(None, self._name)

    def _parse_alternation(self, close: TokenType | None, opener: Token) -> Node:
        alternatives: list[Node] = []
        elements: list[Node] = []

        while True:
            tok = self._peek()
            if tok is None:
                if close is not None:
                    raise GrammarSyntaxError.for_token(opener, "unterminated group").expected(
                        _CLOSERS[close]
                    )
                alternatives.append(self._collapse(elements, self._last()))
                break
            if close is not None and tok.type == close:
                self._advance()
                alternatives.append(self._collapse(elements, tok))
                break
            if tok.type == TokenType.SLASH:
                self._advance()
                alternatives.append(self._collapse(elements, tok))
                elements = []
                continue
            elements.append(self._parse_element())

        if len(alternatives) == 1:
            return alternatives[0]
        return Or(tuple(alternatives))

    @staticmethod
    def _collapse(elements: list[Node], boundary: Token) -> Node:
        if not elements:
            raise GrammarSyntaxError.for_token(boundary, "empty alternative")
        if len(elements) == 1:
            return elements[0]
        return And(tuple(elements))

    def _parse_element(self) -> Node:
        tok = self._advance()

        if tok.type == TokenType.LPAREN:
            return self._parse_alternation(TokenType.RPAREN, tok)

        if tok.type == TokenType.LBRACKET:
            return Optional(self._parse_alternation(TokenType.RBRACKET, tok))

        if tok.type == TokenType.STRING:
            if tok.value[0] == "'":
                return CaseSensitiveString(unquote(tok.value))
            return CaseInsensitiveString(unquote(tok.value))

        if tok.type == TokenType.NUMVAL:
            try:
                return CaseSensitiveString(expand_numeric(tok.value))
            except ValueError as exc:
                raise GrammarSyntaxError.for_token(
                    tok, f"invalid numeric literal '{tok.value}': {exc}"
                ) from None

        if tok.type == TokenType.REPEAT:
            return self._parse_repetition(tok)

        if tok.type == TokenType.RULENAME:
            name = rule_name(tok)
            if name.lower() not in self._rules:
                assert tok.source is not None
                raise UndefinedRuleError(name, tok.source, tok.line, tok.char)
            return Named(name.lower(), name)

        raise GrammarSyntaxError.for_token(tok)

    def _parse_repetition(self, tok: Token) -> Repetition:
        lo, hi = parse_repetition(tok.value)
        if hi is not None and lo > hi:
            raise GrammarSyntaxError.for_token(tok, f"invalid repetition '{tok.value}'")

        nxt = self._peek()
        if nxt is None or nxt.type in (TokenType.SLASH, TokenType.RPAREN, TokenType.RBRACKET):
            raise GrammarSyntaxError.for_token(nxt or tok, "expected element after repetition")
        return Repetition(lo, hi, self._parse_element())


def parse_rule(group: RuleTokens, rules: Container[str]) -> Node:
    """Resolve the body tokens of *group* against the names in *rules*."""
    return Parser(group, rules).parse()
