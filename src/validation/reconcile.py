"""Reconcile observed packages against a manifest.

Each package name present in the manifest or among observed packages is
classified independently:

* in both: every observed version that fails its specifier is ``Invalid``;
* only in the manifest: ``Missing`` unless ``permit_subset``;
* only observed: every observed version is ``Disallowed`` unless ``permit_superset``.

Names are classified concurrently and the records are then sorted by name and
version so output is deterministic.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import ClassVar, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from common.logging_utils import Timer, extra_context, is_debug_enabled
from constants import Constants, Explain
from versioning.package import Package
from versioning.specifier import Specifier

from .manifest import Manifest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationFlags:
    """Permissiveness of a validation run."""

    permit_superset: bool = False
    permit_subset: bool = False


@dataclass(frozen=True)
class Invalid:
    """An observed package whose version fails its specifier."""

    package: Package
    specifier: Specifier
    sites: Tuple[str, ...]

    explain: ClassVar[str] = Explain.INVALID.value

    def sort_key(self):
        return (self.package.name.lower(), (self.package.version,))


@dataclass(frozen=True)
class Missing:
    """A specified package that was not observed."""

    specifier: Specifier

    explain: ClassVar[str] = Explain.MISSING.value

    def sort_key(self):
        return (self.specifier.name.lower(), ())


@dataclass(frozen=True)
class Disallowed:
    """An observed package with no specifier."""

    package: Package
    sites: Tuple[str, ...]

    explain: ClassVar[str] = Explain.DISALLOWED.value

    def sort_key(self):
        return (self.package.name.lower(), (self.package.version,))


Outcome = Union[Invalid, Missing, Disallowed]


def _sites(package_to_sites: Mapping[Package, Iterable[str]], package: Package) -> Tuple[str, ...]:
    return tuple(sorted({str(s) for s in package_to_sites.get(package, ())}))


def _classify(
    key: str,
    manifest: Manifest,
    observed: List[Package],
    package_to_sites: Mapping[Package, Iterable[str]],
    flags: ValidationFlags,
) -> List[Outcome]:
    """Classify every observed version of one name key."""
    spec = manifest.get(key)
    if spec is None:
        if flags.permit_superset:
            return []
        return [Disallowed(p, _sites(package_to_sites, p)) for p in observed]
    if not observed:
        return [] if flags.permit_subset else [Missing(spec)]
    return [
        Invalid(p, spec, _sites(package_to_sites, p))
        for p in observed
        if not spec.validate_version(p.version)
    ]


def reconcile(
    manifest: Manifest,
    package_to_sites: Mapping[Package, Iterable[str]],
    flags: ValidationFlags,
    max_workers: Optional[int] = None,
) -> List[Outcome]:
    """Classify observed packages against ``manifest``.

    Args:
        manifest: Specifiers keyed by package name.
        package_to_sites: Each observed Package mapped to the locations it was found in.
        flags: Which discrepancies to tolerate.
        max_workers: Thread pool size; defaults to ``Constants.MAX_WORKERS``.

    Returns:
        Outcome records sorted by package name then version.
    """
    observed: Dict[str, List[Package]] = {}
    for package in package_to_sites:
        observed.setdefault(package.key, []).append(package)
    keys = set(observed) | {spec.key for spec in manifest}

    workers = max_workers or Constants.MAX_WORKERS
    with Timer() as t:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            chunks = executor.map(
                lambda key: _classify(key, manifest, observed.get(key, []), package_to_sites, flags),
                keys,
            )
            records: List[Outcome] = [record for chunk in chunks for record in chunk]
        records.sort(key=lambda r: r.sort_key())

    if is_debug_enabled(logger):
        logger.debug(
            "Reconciliation complete",
            extra=extra_context(
                event="reconcile",
                component="validation",
                action="reconcile",
                outcome="clean" if not records else "discrepancies",
                count=len(records),
                names=len(keys),
                duration_ms=t.duration_ms(),
            ),
        )
    return records
