"""--debug grammar dump to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

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
from abnfc.grammar import Grammar


def dump_grammar(grammar: Grammar, *, file: TextIO = sys.stderr) -> None:
    """Print every rule of *grammar* as an indented node tree to *file*."""
    file.write(f"Grammar {grammar.source.path} (entry: {grammar.entry})\n")
    for rule in grammar.rules.values():
        file.write(f"{_indent(1)}Rule {rule.original_name} = {format_node(rule.body)}\n")
        _dump_node(rule.body, 2, file)


def format_node(node: Node) -> str:
    """Render *node* back to ABNF notation, fully parenthesized where nested."""
    if isinstance(node, Named):
        return node.display or node.name
    if isinstance(node, CaseSensitiveString):
        if not node.value.isprintable():
            return _numeric(node.value)
        return "'" + node.value.replace("\\", "\\\\").replace("'", "\\'") + "'"
    if isinstance(node, CaseInsensitiveString):
        # Only caseless text keeps its meaning as a case-sensitive %x value
        if not node.value.isprintable() and node.value.lower() == node.value.upper():
            return _numeric(node.value)
        return '"' + node.value.replace("\\", "\\\\").replace('"', '\\"') + '"'
    if isinstance(node, Optional):
        return f"[{format_node(node.element)}]"
    if isinstance(node, Repetition):
        lo = str(node.min) if node.min else ""
        hi = "" if node.max is None else str(node.max)
        prefix = str(node.min) if node.max == node.min else f"{lo}*{hi}"
        return prefix + _grouped(node.element)
    if isinstance(node, And):
        return " ".join(_grouped(e) for e in node.elements)
    if isinstance(node, Or):
        return " / ".join(_grouped(a) for a in node.alternatives)
    raise AssertionError(f"unknown node: {node!r}")


def _numeric(value: str) -> str:
    return "%x" + ".".join(f"{ord(ch):02X}" for ch in value)


def _grouped(node: Node) -> str:
    if isinstance(node, (And, Or)):
        return f"({format_node(node)})"
    return format_node(node)


def _indent(depth: int) -> str:
    return "  " * depth


def _dump_node(node: Node, depth: int, f: TextIO) -> None:
    if isinstance(node, Named):
        f.write(f"{_indent(depth)}Named {node.display or node.name}\n")
    elif isinstance(node, CaseSensitiveString):
        f.write(f"{_indent(depth)}CaseSensitiveString({node.value!r})\n")
    elif isinstance(node, CaseInsensitiveString):
        f.write(f"{_indent(depth)}CaseInsensitiveString({node.value!r})\n")
    elif isinstance(node, Optional):
        f.write(f"{_indent(depth)}Optional\n")
        _dump_node(node.element, depth + 1, f)
    elif isinstance(node, Repetition):
        hi = "inf" if node.max is None else node.max
        f.write(f"{_indent(depth)}Repetition {node.min}..{hi}\n")
        _dump_node(node.element, depth + 1, f)
    elif isinstance(node, And):
        f.write(f"{_indent(depth)}And\n")
        for element in node.elements:
            _dump_node(element, depth + 1, f)
    elif isinstance(node, Or):
        f.write(f"{_indent(depth)}Or\n")
        for alternative in node.alternatives:
            _dump_node(alternative, depth + 1, f)
