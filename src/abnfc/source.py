"""Grammar source — lines, positioned tokens, and tokens grouped by rule."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from abnfc.errors import GrammarSyntaxError, LexError
from abnfc.lexer import lex_line
from abnfc.tokens import Token, TokenType, rule_name

logger = logging.getLogger(__name__)

# Smallest meaningful grammar: name, '=', one element
MIN_TOKENS = 3


@dataclass(slots=True)
class RuleTokens:
    """The defining name token of a rule and the tokens of its body."""

    name: Token
    body: list[Token] = field(default_factory=list)

    @property
    def display_name(self) -> str:
        return rule_name(self.name)


class Source:
    """Grammar text split into lines, tokens, and per-rule token groups."""

    def __init__(self, text: str, path: str = "<grammar>") -> None:
        self.text = text
        self.path = path
        self.lines = re.split(r"\r\n|\r|\n", text)
        self.tokens: list[Token] = []
        # Keyed by lowercase rule name, in declaration order
        self.rules: dict[str, RuleTokens] = {}

    @classmethod
    def build(cls, text: str, path: str = "<grammar>") -> Source:
        """Tokenize *text* and group its tokens by rule."""
        src = cls(text, path)
        src._tokenize()
        if len(src.tokens) < MIN_TOKENS:
            at = src.tokens[-1] if src.tokens else None
            line = at.line if at else 0
            char = at.char if at else 0
            raise GrammarSyntaxError("grammar must define at least one rule", src, line, char)
        src._group()
        return src

    def _tokenize(self) -> None:
        for i, line in enumerate(self.lines):
            try:
                fragments, _ = lex_line(line)
            except LexError as exc:
                raise GrammarSyntaxError(exc.message, self, i, exc.char) from None
            for tt, text, char in fragments:
                self.tokens.append(Token(tt, text.strip(), i, char, self))

    def _group(self) -> None:
        current: RuleTokens | None = None

        for token, nxt in zip(self.tokens, self.tokens[1:]):
            if nxt.type == TokenType.EQUALS:
                current = self._define(token)
            elif nxt.type == TokenType.INCREMENTAL:
                current = self._continue(token, nxt)
            elif token.type not in (TokenType.EQUALS, TokenType.INCREMENTAL):
                self._append(current, token)

        last = self.tokens[-1]
        if last.type not in (TokenType.EQUALS, TokenType.INCREMENTAL):
            self._append(current, last)

    def _define(self, token: Token) -> RuleTokens:
        if token.type != TokenType.RULENAME:
            raise GrammarSyntaxError.for_token(token, "expected rule name before '='")
        key = rule_name(token).lower()
        if key in self.rules:
            logger.warning(
                "%s:%d: rule '%s' redefined, earlier definition dropped",
                self.path,
                token.line + 1,
                rule_name(token),
            )
        group = RuleTokens(token)
        self.rules[key] = group
        return group

    def _continue(self, token: Token, marker: Token) -> RuleTokens:
        key = rule_name(token).lower()
        group = self.rules.get(key)
        if token.type != TokenType.RULENAME or group is None:
            raise GrammarSyntaxError.for_token(
                token, f"incremental alternative for undefined rule '{token.value}'"
            )
        group.body.append(Token(TokenType.SLASH, "/", marker.line, marker.char, self))
        return group

    @staticmethod
    def _append(group: RuleTokens | None, token: Token) -> None:
        if group is None:
            raise GrammarSyntaxError.for_token(token, "expected rule definition")
        group.body.append(token)
