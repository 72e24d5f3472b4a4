"""Dependency specifiers: ``name[extras]<op><version>[,<op><version>]*[; marker]``.

Parsing is a small recursive-descent pass over the grammar::

    specifier := name [extras] clause ("," clause)* [";" marker]
    extras    := "[" [name ("," name)*] "]"
    clause    := operator version
    operator  := "<" | "<=" | "==" | "!=" | ">" | ">=" | "~=" | "==="

Whitespace is allowed between tokens. Extras and markers are accepted but
discarded; they never take part in validation.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Tuple

from .errors import ParseError
from .package import Package, name_to_key
from .version import Version


class Operator(Enum):
    """Comparison operators accepted in a specifier clause."""

    LESS_THAN = "<"
    LESS_THAN_OR_EQ = "<="
    EQUAL = "=="
    NOT_EQUAL = "!="
    GREATER_THAN = ">"
    GREATER_THAN_OR_EQ = ">="
    COMPATIBLE = "~="
    ARBITRARY_EQUAL = "==="

    @classmethod
    def from_token(cls, token: str) -> "Operator":
        try:
            return cls(token)
        except ValueError as exc:
            raise ParseError(f"Unknown operator: {token!r}") from exc

    def evaluate(self, candidate: Version, version: Version) -> bool:
        """Return True if ``candidate`` satisfies ``<self> version``."""
        return _PREDICATES[self](candidate, version)


_PREDICATES: Dict[Operator, Callable[[Version, Version], bool]] = {
    Operator.LESS_THAN: lambda c, v: c < v,
    Operator.LESS_THAN_OR_EQ: lambda c, v: c <= v,
    Operator.EQUAL: lambda c, v: c == v,
    Operator.NOT_EQUAL: lambda c, v: c != v,
    Operator.GREATER_THAN: lambda c, v: c > v,
    Operator.GREATER_THAN_OR_EQ: lambda c, v: c >= v,
    Operator.COMPATIBLE: lambda c, v: c.is_major_compatible(v),
    # arbitrary equality validates like "=="; see Version.is_arbitrary_equal
    Operator.ARBITRARY_EQUAL: lambda c, v: c == v,
}

_RE_WS = re.compile(r"\s*")
_RE_NAME = re.compile(r"[A-Za-z0-9](?:[A-Za-z0-9._-]*[A-Za-z0-9])?")
_RE_OPERATOR = re.compile(r"[<>=!~]+")
_RE_VERSION = re.compile(r"[A-Za-z0-9_.*+!-]+")


class _Parser:
    """Single-use recursive-descent parser over one specifier string."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def error(self, expected: str) -> ParseError:
        found = self.text[self.pos:self.pos + 1] or "end of input"
        return ParseError(
            f"Parsing error at column {self.pos + 1} in {self.text!r}: "
            f"expected {expected}, found {found!r}"
        )

    def skip_ws(self) -> None:
        self.pos = _RE_WS.match(self.text, self.pos).end()

    def peek(self, literal: str) -> bool:
        return self.text.startswith(literal, self.pos)

    def expect(self, pattern: "re.Pattern", expected: str) -> str:
        self.skip_ws()
        m = pattern.match(self.text, self.pos)
        if not m:
            raise self.error(expected)
        self.pos = m.end()
        return m.group(0)

    def parse(self) -> Tuple[str, List[str], List[str]]:
        name = self.expect(_RE_NAME, "package name")
        self.skip_ws()
        if self.peek("["):
            self.extras()
        operators: List[str] = []
        versions: List[str] = []
        while True:
            operators.append(self.expect(_RE_OPERATOR, "comparison operator"))
            versions.append(self.expect(_RE_VERSION, "version"))
            self.skip_ws()
            if not self.peek(","):
                break
            self.pos += 1
        if self.peek(";"):
            self.pos += 1
            self.marker()
        self.skip_ws()
        if self.pos != len(self.text):
            raise self.error("',' or ';'")
        return name, operators, versions

    def extras(self) -> None:
        self.pos += 1  # "["
        self.skip_ws()
        if not self.peek("]"):
            while True:
                self.expect(_RE_NAME, "extra name")
                self.skip_ws()
                if not self.peek(","):
                    break
                self.pos += 1
        self.skip_ws()
        if not self.peek("]"):
            raise self.error("']'")
        self.pos += 1

    def marker(self) -> None:
        if not self.text[self.pos:].strip():
            raise self.error("environment marker")
        self.pos = len(self.text)


@dataclass(frozen=True)
class Specifier:
    """A package name with one or more conjunctive (operator, version) clauses."""

    name: str
    clauses: Tuple[Tuple[Operator, Version], ...]

    @classmethod
    def parse(cls, text: str) -> "Specifier":
        """Parse a specifier string.

        Raises:
            ParseError: On malformed input or an unknown operator.
        """
        name, op_tokens, versions = _Parser(text.strip()).parse()
        operators = [Operator.from_token(tok) for tok in op_tokens]
        if len(operators) != len(versions):
            raise ParseError(
                f"Mismatched operators ({len(operators)}) and versions ({len(versions)}) in {text!r}"
            )
        return cls(name, tuple(zip(operators, (Version(v) for v in versions))))

    @classmethod
    def from_package(cls, package: Package, operator: Operator) -> "Specifier":
        return cls(package.name, ((operator, package.version),))

    @property
    def key(self) -> str:
        return name_to_key(self.name)

    def validate_version(self, candidate: Version) -> bool:
        """Return True if ``candidate`` satisfies every clause."""
        return all(op.evaluate(candidate, version) for op, version in self.clauses)

    def __str__(self) -> str:
        return self.name + ",".join(f"{op.value}{version}" for op, version in self.clauses)

    def __repr__(self) -> str:
        return f"<Specifier: {self}>"
