"""Numeric literal expansion: ``%x``, ``%d`` and ``%b`` values to strings."""

from __future__ import annotations

BASES = {
    "b": 2,
    "d": 10,
    "x": 16,
}

MAX_CODE_POINT = 0x10FFFF


def _code(digits: str, base: int) -> int:
    if not digits:
        raise ValueError("empty digit group")
    code = int(digits, base)
    if code > MAX_CODE_POINT:
        raise ValueError(f"code point {digits} out of range")
    return code


def expand_numeric(text: str) -> str:
    """Expand a numeric literal token into the string it denotes.

    A range (``%x41-43``) expands to every code point from the lower to
    the upper bound concatenated, ``"ABC"``; a concatenation
    (``%d72.105``) to each listed code point, ``"Hi"``.

    Raises ValueError on a malformed literal.
    """
    if len(text) < 3 or text[0] != "%":
        raise ValueError(f"not a numeric literal: {text!r}")

    base = BASES.get(text[1].lower())
    if base is None:
        raise ValueError(f"unknown base marker {text[1]!r}")
    body = text[2:]

    if "-" in body:
        if "." in body:
            raise ValueError("cannot mix '-' ranges and '.' concatenation")
        parts = body.split("-")
        if len(parts) != 2:
            raise ValueError("range needs exactly two bounds")
        lo, hi = (_code(p, base) for p in parts)
        if lo > hi:
            raise ValueError("range lower bound exceeds upper bound")
        return "".join(chr(code) for code in range(lo, hi + 1))

    return "".join(chr(_code(p, base)) for p in body.split("."))
