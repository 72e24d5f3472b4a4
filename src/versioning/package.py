"""Installed package identity (name and version)."""
from __future__ import annotations

import functools
from dataclasses import dataclass, field
from typing import Optional

from packaging.utils import canonicalize_name

from constants import Constants

from .version import Version


def name_to_key(name: str) -> str:
    """Normalize a package name for lookups (PEP 503)."""
    return canonicalize_name(name)


def _split_dist_info(file_name: str) -> Optional[tuple]:
    """Split ``<name>-<version>.dist-info`` into ``(name, version)``."""
    suffix = Constants.DIST_INFO_SUFFIX
    trimmed = file_name[: -len(suffix)] if file_name.endswith(suffix) else file_name
    parts = trimmed.split("-")
    if len(parts) < 2 or not parts[-1]:
        return None
    return "-".join(parts[:-1]), parts[-1]


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class Package:
    """One installed release: equality and hashing by (name, version)."""

    name: str
    version: Version
    key: str = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "key", name_to_key(self.name))

    @classmethod
    def from_name_version(cls, name: str, version: str) -> "Package":
        return cls(name, Version(version))

    @classmethod
    def from_dist_info(cls, file_name: str, name: Optional[str] = None) -> Optional["Package"]:
        """Build a Package from a ``*.dist-info`` directory name.

        Args:
            file_name: Directory name such as ``numpy-2.1.2.dist-info``.
            name: Optional name to prefer over the one in the directory name.

        Returns:
            Package, or None if the name has no version segment.
        """
        parsed = _split_dist_info(file_name)
        if parsed is None:
            return None
        name_from_di, version = parsed
        return cls.from_name_version(name or name_from_di, version)

    def sort_key(self):
        return (self.name.lower(), self.version)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Package):
            return NotImplemented
        return self.name == other.name and self.version == other.version

    def __lt__(self, other: "Package") -> bool:
        if not isinstance(other, Package):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __hash__(self) -> int:
        return hash((self.name, self.version))

    def __str__(self) -> str:
        return f"{self.name}-{self.version}"

    def __repr__(self) -> str:
        return f"<Package: {self}>"
