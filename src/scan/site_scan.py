"""Scan site-package directories for installed distributions.

Each interpreter is asked for its site directories; each directory is listed
for ``*.dist-info`` entries. Both steps fan out over a thread pool since they
are dominated by subprocess and filesystem latency.
"""
from __future__ import annotations

import logging
import os
import subprocess
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Optional

from common.logging_utils import Timer, extra_context, is_debug_enabled
from constants import Constants
from validation.manifest import Anchor, Manifest
from validation.reconcile import ValidationFlags, reconcile
from validation.report import ValidationReport
from versioning.package import Package

from .exe_search import find_exe
from .package_match import match_pattern

logger = logging.getLogger(__name__)

_SITE_PROBE = (
    "import site;"
    "print(site.ENABLE_USER_SITE);"
    "print(\"\\n\".join(site.getsitepackages()));"
    "print(site.getusersitepackages())"
)


def get_site_package_dirs(executable: str, force_usite: bool = False) -> List[str]:
    """Ask an interpreter for its site-package directories.

    The user site is kept only when the interpreter enables it or
    ``force_usite`` is set. Directories are not checked for existence.
    """
    try:
        result = subprocess.run(
            [executable, "-c", _SITE_PROBE],
            capture_output=True,
            text=True,
            timeout=Constants.SUBPROCESS_TIMEOUT,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        logger.warning("Failed to query site packages from %s: %s", executable, exc)
        return []
    if result.returncode != 0:
        logger.warning(
            "Interpreter %s exited with %s while reporting site packages",
            executable,
            result.returncode,
        )
        return []

    lines = [line.strip() for line in result.stdout.strip().splitlines()]
    if not lines:
        return []
    usite_enabled = lines[0] == "True"
    paths = [line for line in lines[1:] if line]
    if paths and not force_usite and not usite_enabled:
        paths.pop()
    return paths


def get_packages(site_packages: str) -> List[Package]:
    """Collect a Package for every ``*.dist-info`` directory in ``site_packages``.

    When the site also holds an entry named like the package (compared without
    case), that spelling is used as the package name.
    """
    packages: List[Package] = []
    try:
        entries = list(os.scandir(site_packages))
    except OSError as exc:
        logger.debug("Skipping unreadable site directory %s: %s", site_packages, exc)
        return packages
    src_names = {entry.name.lower(): entry.name for entry in entries}
    for entry in entries:
        if not entry.name.endswith(Constants.DIST_INFO_SUFFIX) or not entry.is_dir():
            continue
        name_from_di = entry.name[: -len(Constants.DIST_INFO_SUFFIX)].rpartition("-")[0]
        package = Package.from_dist_info(entry.name, name=src_names.get(name_from_di.lower()))
        if package is not None:
            packages.append(package)
    return packages


class ScanFS:
    """The result of a file-system scan.

    Attributes:
        exe_to_sites: Interpreter path to its site-package directories.
        package_to_sites: Observed Package to every site it was found in.
    """

    def __init__(self, exe_to_sites: Dict[str, List[str]], package_to_sites: Dict[Package, List[str]]):
        self.exe_to_sites = exe_to_sites
        self.package_to_sites = package_to_sites

    @classmethod
    def from_exe_to_sites(
        cls,
        exe_to_sites: Dict[str, List[str]],
        max_workers: Optional[int] = None,
    ) -> "ScanFS":
        # sites shared by several interpreters are listed once
        sites = sorted({site for dirs in exe_to_sites.values() for site in dirs})
        with ThreadPoolExecutor(max_workers=max_workers or Constants.MAX_WORKERS) as executor:
            site_packages = list(zip(sites, executor.map(get_packages, sites)))

        package_to_sites: Dict[Package, List[str]] = {}
        for site, packages in site_packages:
            for package in packages:
                package_to_sites.setdefault(package, []).append(site)
        return cls(exe_to_sites, package_to_sites)

    @classmethod
    def from_exes(
        cls,
        exes: Iterable[str],
        force_usite: bool = False,
        max_workers: Optional[int] = None,
    ) -> "ScanFS":
        """Scan the site packages of the given interpreters."""
        exe_list = [os.path.abspath(os.path.expanduser(str(e))) for e in exes]
        with Timer() as t:
            with ThreadPoolExecutor(max_workers=max_workers or Constants.MAX_WORKERS) as executor:
                dirs = executor.map(lambda exe: get_site_package_dirs(exe, force_usite), exe_list)
                exe_to_sites = dict(zip(exe_list, dirs))
            sfs = cls.from_exe_to_sites(exe_to_sites, max_workers)
        if is_debug_enabled(logger):
            logger.debug(
                "Scan complete",
                extra=extra_context(
                    event="scan",
                    component="scan",
                    action="from_exes",
                    outcome="success",
                    exes=len(exe_list),
                    count=len(sfs),
                    duration_ms=t.duration_ms(),
                ),
            )
        return sfs

    @classmethod
    def from_exe_scan(cls, force_usite: bool = False, max_workers: Optional[int] = None) -> "ScanFS":
        """Scan every discoverable interpreter."""
        return cls.from_exes(find_exe(), force_usite, max_workers)

    @classmethod
    def from_exe_site_packages(cls, exe: str, site: str, packages: Iterable[Package]) -> "ScanFS":
        """Build a scan from in-memory packages all found in one site."""
        package_to_sites: Dict[Package, List[str]] = {}
        for package in packages:
            package_to_sites.setdefault(package, []).append(site)
        return cls({exe: [site]}, package_to_sites)

    def get_packages(self) -> List[Package]:
        """Return sorted packages."""
        return sorted(self.package_to_sites)

    def __len__(self) -> int:
        return len(self.package_to_sites)

    def to_validation_report(
        self,
        manifest: Manifest,
        flags: ValidationFlags,
        max_workers: Optional[int] = None,
    ) -> ValidationReport:
        return ValidationReport(reconcile(manifest, self.package_to_sites, flags, max_workers))

    def to_manifest(self, anchor: Anchor) -> Manifest:
        return Manifest.from_packages(self.package_to_sites, anchor)

    def to_scan_rows(self) -> List[List[str]]:
        rows = []
        for package in self.get_packages():
            for site in sorted(self.package_to_sites[package]):
                rows.append([str(package), site])
        return rows

    def search(self, pattern: str, case: bool = False) -> List[List[str]]:
        """Return scan rows for packages whose ``name-version`` matches ``pattern``.

        Matching ignores case unless ``case`` is set.
        """
        rows = []
        for package in self.get_packages():
            if not match_pattern(pattern, str(package), case_insensitive=not case):
                continue
            for site in sorted(self.package_to_sites[package]):
                rows.append([str(package), site])
        return rows

    def to_count_rows(self) -> List[List[str]]:
        sites = {site for dirs in self.exe_to_sites.values() for site in dirs}
        return [
            ["Executables", str(len(self.exe_to_sites))],
            ["Packages", str(len(self))],
            ["Sites", str(len(sites))],
        ]
