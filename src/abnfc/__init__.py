"""ABNF grammar compiler and matcher."""

from __future__ import annotations

from abnfc.errors import (
    GrammarError,
    GrammarSyntaxError,
    NestingTooDeepError,
    UndefinedRuleError,
)
from abnfc.grammar import Grammar, Rule, compile
from abnfc.matcher import Callbacks, Match

__version__ = "0.1.0"

__all__ = [
    "Callbacks",
    "Grammar",
    "GrammarError",
    "GrammarSyntaxError",
    "Match",
    "NestingTooDeepError",
    "Rule",
    "UndefinedRuleError",
    "compile",
]
