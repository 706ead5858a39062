"""Combinator node types for compiled ABNF rules."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Named:
    """Reference to a rule, looked up by lowercase name at match time."""

    name: str
    # Name as spelled at the reference, for display only
    display: str = field(default="", compare=False)


@dataclass(frozen=True, slots=True)
class Or:
    """Alternation — first alternative that matches wins."""

    alternatives: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class And:
    """Concatenation — every element must match, in order."""

    elements: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class Optional:
    """``[...]`` — the element, or nothing."""

    element: Node


@dataclass(frozen=True, slots=True)
class Repetition:
    """``min*max element``; ``max`` is None when unbounded."""

    min: int
    max: int | None
    element: Node


@dataclass(frozen=True, slots=True)
class CaseSensitiveString:
    """Single-quoted or numeric literal."""

    value: str


@dataclass(frozen=True, slots=True)
class CaseInsensitiveString:
    """Double-quoted literal."""

    value: str


Node = Named | Or | And | Optional | Repetition | CaseSensitiveString | CaseInsensitiveString
