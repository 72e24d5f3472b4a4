"""Dependency manifests: one Specifier per package name.

Manifests are built from requirement lines (requirements.txt style), from a
pyproject.toml ``[project].dependencies`` array, from already parsed
Specifiers, or derived from a set of observed packages.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional

from common.logging_utils import extra_context, is_debug_enabled
from versioning.errors import DuplicateNameError
from versioning.package import Package, name_to_key
from versioning.specifier import Operator, Specifier

logger = logging.getLogger(__name__)


class Anchor(Enum):
    """Which bound to take when deriving a manifest from observed packages."""

    LOWER = "lower"
    UPPER = "upper"
    BOTH = "both"


def _strip_requirement_lines(body: str) -> List[str]:
    """Reduce a requirements file body to specifier lines.

    Joins backslash continuations and drops blank lines, comments, and pip
    option lines (``-r``, ``--index-url``, ...).
    """
    lines: List[str] = []
    pending = ""
    for raw in body.splitlines():
        line = raw.rstrip()
        if line.endswith("\\"):
            pending += line[:-1] + " "
            continue
        line = pending + line
        pending = ""
        # inline comments require leading whitespace, as in pip
        for marker in (" #", "\t#"):
            idx = line.find(marker)
            if idx >= 0:
                line = line[:idx]
        line = line.strip()
        if not line or line.startswith("#") or line.startswith("-"):
            continue
        lines.append(line)
    if pending.strip():
        lines.append(pending.strip())
    return lines


class Manifest:
    """A read-only mapping of package name key to Specifier."""

    def __init__(self, specifiers: Dict[str, Specifier]):
        self._specifiers = dict(specifiers)

    @classmethod
    def from_specifiers(cls, specifiers: Iterable[Specifier]) -> "Manifest":
        """Build a manifest, failing on the first repeated name.

        Raises:
            DuplicateNameError: If two specifiers share a (normalized) name.
        """
        mapping: Dict[str, Specifier] = {}
        for spec in specifiers:
            if spec.key in mapping:
                raise DuplicateNameError(spec.name)
            mapping[spec.key] = spec
        return cls(mapping)

    @classmethod
    def from_iter(cls, lines: Iterable[str]) -> "Manifest":
        """Build a manifest from specifier strings.

        Raises:
            ParseError: If any line is not a valid specifier.
            DuplicateNameError: If a name repeats.
        """
        manifest = cls.from_specifiers(Specifier.parse(line) for line in lines)
        if is_debug_enabled(logger):
            logger.debug(
                "Manifest built",
                extra=extra_context(
                    event="parse",
                    component="manifest",
                    action="from_iter",
                    outcome="success",
                    count=len(manifest),
                ),
            )
        return manifest

    @classmethod
    def from_requirements(cls, path: str) -> "Manifest":
        """Load a requirements-format file."""
        with open(path, "r", encoding="utf-8") as fh:
            body = fh.read()
        logger.info("Loading requirements from %s", path)
        return cls.from_iter(_strip_requirement_lines(body))

    @classmethod
    def from_pyproject(cls, path: str) -> "Manifest":
        """Load ``[project].dependencies`` from a pyproject.toml file."""
        try:
            import tomllib as toml  # type: ignore
        except ImportError:  # Python < 3.11
            import tomli as toml  # type: ignore

        with open(path, "rb") as fh:
            data = toml.load(fh) or {}
        deps = (data.get("project") or {}).get("dependencies") or []
        if not isinstance(deps, list):
            deps = []
        logger.info("Loading pyproject dependencies from %s", path)
        return cls.from_iter(str(d) for d in deps)

    @classmethod
    def from_path(cls, path: str) -> "Manifest":
        """Dispatch on file name: pyproject.toml, otherwise requirements format."""
        if path.endswith(".toml"):
            return cls.from_pyproject(path)
        return cls.from_requirements(path)

    @classmethod
    def from_packages(cls, packages: Iterable[Package], anchor: Anchor) -> "Manifest":
        """Derive a manifest bounding each observed package name.

        Args:
            packages: Observed packages; several versions of a name may be present.
            anchor: LOWER uses ``>=`` the minimum version, UPPER ``<=`` the
                maximum, BOTH combines the two.
        """
        by_key: Dict[str, List[Package]] = {}
        for package in packages:
            by_key.setdefault(package.key, []).append(package)

        specifiers = []
        for key in sorted(by_key):
            group = sorted(by_key[key])
            pkg_min, pkg_max = group[0], group[-1]
            if anchor is Anchor.LOWER:
                spec = Specifier.from_package(pkg_min, Operator.GREATER_THAN_OR_EQ)
            elif anchor is Anchor.UPPER:
                spec = Specifier.from_package(pkg_max, Operator.LESS_THAN_OR_EQ)
            else:
                spec = Specifier(
                    pkg_min.name,
                    (
                        (Operator.GREATER_THAN_OR_EQ, pkg_min.version),
                        (Operator.LESS_THAN_OR_EQ, pkg_max.version),
                    ),
                )
            specifiers.append(spec)
        return cls.from_specifiers(specifiers)

    def get(self, name: str) -> Optional[Specifier]:
        return self._specifiers.get(name_to_key(name))

    def names(self) -> List[str]:
        """Return the original spelling of every name, sorted by key."""
        return [self._specifiers[k].name for k in sorted(self._specifiers)]

    def validate(self, package: Package) -> bool:
        """Return True if a specifier exists for the package and accepts its version."""
        spec = self._specifiers.get(package.key)
        if spec is None:
            return False
        return spec.validate_version(package.version)

    def to_lines(self) -> List[str]:
        return [str(self._specifiers[k]) for k in sorted(self._specifiers)]

    def to_requirements(self, path: str) -> None:
        with open(path, "w", encoding="utf-8") as fh:
            for line in self.to_lines():
                fh.write(line + "\n")
        logger.info("Requirements written to %s", path)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name_to_key(name) in self._specifiers

    def __iter__(self) -> Iterator[Specifier]:
        return (self._specifiers[k] for k in sorted(self._specifiers))

    def __len__(self) -> int:
        return len(self._specifiers)

    def __repr__(self) -> str:
        return f"<Manifest: {len(self)} specifiers>"
