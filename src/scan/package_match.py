"""Glob-like matching of package strings.

``*`` matches any run of characters (including none), ``?`` exactly one, and
``-`` and ``_`` match each other. Everything else matches literally.
"""
from __future__ import annotations

_SEPARATORS = "-_"


def _match(pattern: str, p: int, text: str, t: int) -> bool:
    while p < len(pattern):
        char = pattern[p]
        if char == "*":
            while p < len(pattern) and pattern[p] == "*":
                p += 1
            if p == len(pattern):
                return True
            return any(_match(pattern, p, text, i) for i in range(t, len(text) + 1))
        if t >= len(text):
            return False
        if char in _SEPARATORS:
            if text[t] not in _SEPARATORS:
                return False
        elif char != "?" and char != text[t]:
            return False
        p += 1
        t += 1
    return t == len(text)


def match_pattern(pattern: str, name: str, case_insensitive: bool = True) -> bool:
    """Return True if the whole of ``name`` matches ``pattern``."""
    if case_insensitive:
        pattern = pattern.lower()
        name = name.lower()
    return _match(pattern, 0, name, 0)
