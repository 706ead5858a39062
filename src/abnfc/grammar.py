"""Rule registry and the compiled grammar object."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from abnfc.ast import Named, Node
from abnfc.errors import GrammarError, NestingTooDeepError
from abnfc.matcher import Callbacks, Input, Match, Matcher
from abnfc.parser import parse_rule
from abnfc.source import RuleTokens, Source
from abnfc.tokens import Token

logger = logging.getLogger(__name__)

BEFORE_PREFIX = "before "


@dataclass(eq=False, slots=True)
class Rule:
    """A named rule; ``body`` is filled in once every rule is registered."""

    name: str
    original_name: str
    token: Token
    tokens: list[Token]
    line: str
    index: int
    body: Node | None = field(default=None, repr=False)

    @classmethod
    def stub(cls, group: RuleTokens, source: Source, index: int) -> Rule:
        line = source.lines[group.name.line]
        return cls(
            name=group.display_name.lower(),
            original_name=group.display_name,
            token=group.name,
            tokens=group.body,
            line=line,
            index=index,
        )


def normalize_callbacks(callbacks: Mapping[str, Any]) -> dict[str, Callbacks]:
    """Fold a callback mapping into one ``Callbacks`` pair per rule name.

    Accepts ``{"name": after}``, ``{"before name": before}`` and
    ``{"name": Callbacks(before, after)}``; names are case-insensitive.
    """
    before: dict[str, Callable[..., Any]] = {}
    after: dict[str, Callable[..., Any]] = {}
    result: dict[str, Callbacks] = {}

    for key, value in callbacks.items():
        if isinstance(value, Callbacks):
            result[key.lower()] = value
        elif key.startswith(BEFORE_PREFIX):
            before[key[len(BEFORE_PREFIX) :].strip().lower()] = value
        else:
            after[key.lower()] = value

    for name in before.keys() | after.keys():
        current = result.get(name, Callbacks())
        result[name] = Callbacks(
            before=before.get(name, current.before),
            after=after.get(name, current.after),
        )
    return result


class Grammar:
    """A compiled ABNF grammar with a default entry rule."""

    def __init__(self, source: Source, entry: str | None = None) -> None:
        self.source = source
        self.rules: dict[str, Rule] = {}

        # Register every rule before resolving any body so that forward
        # and mutually recursive references resolve
        for i, (key, group) in enumerate(source.rules.items()):
            self.rules[key] = Rule.stub(group, source, i)
        for rule in self.rules.values():
            try:
                rule.body = parse_rule(source.rules[rule.name], self.rules)
            except RecursionError:
                raise NestingTooDeepError(f"resolving rule '{rule.original_name}'") from None

        if entry is None:
            entry = next(iter(self.rules))
        self.entry = self._require(entry).name

        logger.debug(
            "compiled %s: %d rules, entry '%s'", source.path, len(self.rules), self.entry
        )

    def _require(self, name: str) -> Rule:
        rule = self.rules.get(name.lower())
        if rule is None:
            raise GrammarError(f"undefined entry rule '{name}'")
        return rule

    def __getitem__(self, name: str) -> Rule:
        return self._require(name)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self.rules

    def test(self, code: Input, index: int = 0, rule: str | None = None) -> int | None:
        """Input length the rule consumes from *index*, or None on failure."""
        start = self._require(rule or self.entry)
        try:
            return Matcher(self.rules).test(Named(start.name), code, index)
        except RecursionError:
            raise NestingTooDeepError(f"matching rule '{start.original_name}'") from None

    def parse(
        self,
        code: Input,
        callbacks: Mapping[str, Any] | None = None,
        index: int = 0,
        rule: str | None = None,
    ) -> Match | None:
        """Match like ``test`` while invoking per-rule callbacks."""
        start = self._require(rule or self.entry)
        hooks = normalize_callbacks(callbacks or {})
        for name in hooks.keys() - self.rules.keys():
            logger.warning("callback registered for undefined rule '%s'", name)
        # Enter through a reference so the entry rule gets its callbacks too
        try:
            return Matcher(self.rules, hooks).parse(Named(start.name), code, index)
        except RecursionError:
            raise NestingTooDeepError(f"parsing rule '{start.original_name}'") from None

    def fullmatch(self, code: Input, rule: str | None = None) -> bool:
        return self.test(code, 0, rule) == len(code)


def compile(text: str, entry: str | None = None, path: str = "<grammar>") -> Grammar:
    """Compile ABNF *text*; *entry* defaults to the first rule defined."""
    return Grammar(Source.build(text, path), entry)
