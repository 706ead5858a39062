"""Error types with formatted source context."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from abnfc.source import Source
    from abnfc.tokens import Token

# Number of source lines shown above the failing one
CONTEXT_LINES = 3


class GrammarError(Exception):
    """Base class for every error raised while compiling a grammar."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class NestingTooDeepError(GrammarError):
    """Grammar or input nests deeper than the Python recursion limit allows.

    Raised instead of RecursionError, both while resolving deeply nested
    groups and while matching deeply recursive rules against long input.
    """

    def __init__(self, what: str) -> None:
        super().__init__(f"nesting too deep while {what}")


class LexError(Exception):
    """Raised by the line lexer on a character no fragment starts with."""

    def __init__(self, message: str, char: int) -> None:
        self.message = message
        self.char = char
        super().__init__(message)


class GrammarSyntaxError(GrammarError):
    """Malformed grammar text, positioned at a zero-based line and char."""

    def __init__(
        self,
        message: str,
        source: Source,
        line: int,
        char: int,
        length: int = 1,
    ) -> None:
        super().__init__(message)
        self.source = source
        self.line = line
        self.char = char
        self.length = max(1, length)

    @classmethod
    def for_token(cls, token: Token, message: str | None = None) -> GrammarSyntaxError:
        if message is None:
            message = f"unexpected token '{token.value}'"
        assert token.source is not None
        return cls(message, token.source, token.line, token.char, token.length)

    def expected(self, token: Token | str) -> GrammarSyntaxError:
        """Append an ``expected 'X'`` hint to the message and return self."""
        self.message += f", expected '{token}'"
        return self

    def __str__(self) -> str:
        return self.format()

    @property
    def path(self) -> str:
        return self.source.path

    def short_description(self) -> str:
        return f"{self.message} at {self.path}:{self.line + 1}:{self.char + 1}"

    def format(self) -> str:
        first = max(self.line - CONTEXT_LINES, 0)
        lines = self.source.lines[first : self.line + 1]

        # Gutter wide enough for the largest displayed line number
        gutter_width = len(str(self.line + 1)) + 1
        blank_gutter = " " * gutter_width + "|"

        excerpt = [
            f"{str(first + i + 1):>{gutter_width - 1}} | {text}" for i, text in enumerate(lines)
        ]
        pad = " " * self.char

        return (
            f"error: {self.message}\n"
            f"{' ' * gutter_width}--> {self.path}:{self.line + 1}:{self.char + 1}\n"
            f"{blank_gutter}\n" + "\n".join(excerpt) + f"\n{blank_gutter} {pad}^"
        )


class UndefinedRuleError(GrammarSyntaxError):
    """A rule body refers to a name no rule in the grammar defines."""

    def __init__(self, name: str, source: Source, line: int, char: int) -> None:
        super().__init__(f"undefined rule '{name}'", source, line, char, len(name))
        self.name = name
