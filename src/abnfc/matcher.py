"""Evaluation of combinator trees against input text or token sequences."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

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

if TYPE_CHECKING:
    from abnfc.grammar import Rule

# Either a string matched character-wise or a sequence of string tokens
Input = str | Sequence[str]


@dataclass(frozen=True, slots=True)
class Match:
    """Successful parse: input consumed and the value built for it."""

    length: int
    value: Any


@dataclass(frozen=True, slots=True)
class Callbacks:
    """Pre- and post-visit hooks for one named rule."""

    before: Callable[[Rule], Any] | None = None
    after: Callable[[Any, Any], Any] | None = None


def _match_literal(
    node: CaseSensitiveString | CaseInsensitiveString, code: Input, index: int
) -> int | None:
    expected = node.value
    folded = isinstance(node, CaseInsensitiveString)

    if isinstance(code, str):
        end = index + len(expected)
        if end > len(code):
            return None
        actual = code[index:end]
        consumed = len(expected)
    else:
        if index >= len(code):
            return None
        actual = code[index]
        consumed = 1

    if actual == expected or (folded and actual.casefold() == expected.casefold()):
        return consumed
    return None


class Matcher:
    """One top-down evaluation over a compiled grammar.

    A matcher is created per ``test``/``parse`` call; the only state it
    holds is the set of rules currently being expanded, used to fail left
    recursion instead of recursing forever.
    """

    def __init__(
        self,
        rules: Mapping[str, Rule],
        callbacks: Mapping[str, Callbacks] | None = None,
    ) -> None:
        self._rules = rules
        self._callbacks = callbacks or {}
        self._active: set[tuple[str, int]] = set()

    # ------------------------------------------------------------------
    # test: consumed length or None
    # ------------------------------------------------------------------

    def test(self, node: Node, code: Input, index: int) -> int | None:
        if isinstance(node, (CaseSensitiveString, CaseInsensitiveString)):
            return _match_literal(node, code, index)

        if isinstance(node, Named):
            key = (node.name, index)
            if key in self._active:
                return None
            self._active.add(key)
            try:
                return self.test(self._rules[node.name].body, code, index)
            finally:
                self._active.discard(key)

        if isinstance(node, And):
            total = 0
            for element in node.elements:
                n = self.test(element, code, index + total)
                if n is None:
                    return None
                total += n
            return total

        if isinstance(node, Or):
            for alternative in node.alternatives:
                n = self.test(alternative, code, index)
                if n is not None:
                    return n
            return None

        if isinstance(node, Optional):
            n = self.test(node.element, code, index)
            return 0 if n is None else n

        if isinstance(node, Repetition):
            total = 0
            count = 0
            while node.max is None or count < node.max:
                n = self.test(node.element, code, index + total)
                if n is None:
                    break
                count += 1
                if n == 0:
                    # Further rounds would match empty forever
                    return total
                total += n
            return total if count >= node.min else None

        raise AssertionError(f"unknown node: {node!r}")

    # ------------------------------------------------------------------
    # parse: Match with callback-built values, or None
    # ------------------------------------------------------------------

    def parse(self, node: Node, code: Input, index: int) -> Match | None:
        if isinstance(node, (CaseSensitiveString, CaseInsensitiveString)):
            n = _match_literal(node, code, index)
            if n is None:
                return None
            if isinstance(code, str):
                return Match(n, code[index : index + n])
            return Match(n, code[index])

        if isinstance(node, Named):
            return self._parse_named(node, code, index)

        if isinstance(node, And):
            total = 0
            values: list[Any] = []
            for element in node.elements:
                m = self.parse(element, code, index + total)
                if m is None:
                    return None
                total += m.length
                values.append(m.value)
            return Match(total, values)

        if isinstance(node, Or):
            for alternative in node.alternatives:
                m = self.parse(alternative, code, index)
                if m is not None:
                    return m
            return None

        if isinstance(node, Optional):
            m = self.parse(node.element, code, index)
            return Match(0, None) if m is None else m

        if isinstance(node, Repetition):
            total = 0
            values = []
            while node.max is None or len(values) < node.max:
                m = self.parse(node.element, code, index + total)
                if m is None:
                    break
                values.append(m.value)
                if m.length == 0:
                    return Match(total, values)
                total += m.length
            return Match(total, values) if len(values) >= node.min else None

        raise AssertionError(f"unknown node: {node!r}")

    def _parse_named(self, node: Named, code: Input, index: int) -> Match | None:
        key = (node.name, index)
        if key in self._active:
            return None

        rule = self._rules[node.name]
        hooks = self._callbacks.get(node.name)

        pre = None
        if hooks is not None and hooks.before is not None:
            pre = hooks.before(rule)

        self._active.add(key)
        try:
            child = self.parse(rule.body, code, index)
        finally:
            self._active.discard(key)

        if child is None:
            return None
        if hooks is not None and hooks.after is not None:
            return Match(child.length, hooks.after(child.value, pre))
        return child
