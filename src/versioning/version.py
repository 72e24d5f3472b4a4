"""Version strings as ordered sequences of numeric and text tokens.

A version is split on ``.``; each segment that is entirely an unsigned integer
becomes a numeric token, anything else (``post1``, ``rc2``, ``*``) stays text.
Comparison walks both sequences position by position, padding the shorter one
with numeric ``0``. The text token ``*`` is a wildcard that compares equal to
anything at its position.

This is a simplified ordering: pre/post/dev release suffixes are compared as
plain text tokens, so ``1.7.0.post1`` sorts below ``1.7.1`` only because
``0 < 1`` at the third position. Wildcards also make equality non-transitive:
``2.*`` equals both ``2.4`` and ``2.5``, which are not equal to each other.
"""
from __future__ import annotations

from typing import Tuple, Union

WILDCARD = "*"

Token = Union[int, str]


def _to_token(part: str) -> Token:
    """Classify a single ``.``-delimited segment."""
    if part.isascii() and part.isdigit():
        return int(part)
    return part


def _compare_tokens(a: Token, b: Token) -> int:
    """Return -1, 0 or 1 comparing two tokens at the same position."""
    if a == WILDCARD or b == WILDCARD:
        return 0
    a_num = isinstance(a, int)
    b_num = isinstance(b, int)
    if a_num and b_num:
        return (a > b) - (a < b)
    if not a_num and not b_num:
        return (a > b) - (a < b)  # type: ignore[operator]
    # numbers are always greater than text
    return 1 if a_num else -1


class Version:
    """An immutable, token-wise comparable version."""

    __slots__ = ("_tokens",)

    def __init__(self, version_str: str):
        self._tokens: Tuple[Token, ...] = tuple(
            _to_token(part) for part in version_str.split(".")
        )

    @property
    def tokens(self) -> Tuple[Token, ...]:
        return self._tokens

    def _compare(self, other: "Version") -> int:
        max_len = max(len(self._tokens), len(other._tokens))
        for i in range(max_len):
            a = self._tokens[i] if i < len(self._tokens) else 0
            b = other._tokens[i] if i < len(other._tokens) else 0
            result = _compare_tokens(a, b)
            if result:
                return result
        return 0

    def is_major_compatible(self, other: "Version") -> bool:
        """Return True if both leading tokens are numeric and equal (``~=``)."""
        if not self._tokens or not other._tokens:
            return False
        a, b = self._tokens[0], other._tokens[0]
        return isinstance(a, int) and isinstance(b, int) and a == b

    def is_arbitrary_equal(self, other: "Version") -> bool:
        """Return True if both versions render to the identical string (``===``)."""
        return str(self) == str(other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._compare(other) == 0

    def __ne__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._compare(other) != 0

    def __lt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._compare(other) < 0

    def __le__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._compare(other) <= 0

    def __gt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._compare(other) > 0

    def __ge__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._compare(other) >= 0

    def __hash__(self) -> int:
        # Trailing zeros are dropped so that "1.1" and "1.1.0" hash alike.
        tokens = list(self._tokens)
        while tokens and tokens[-1] == 0:
            tokens.pop()
        return hash(tuple(tokens))

    def __str__(self) -> str:
        return ".".join(str(t) for t in self._tokens)

    def __repr__(self) -> str:
        return f"<Version: {self}>"
