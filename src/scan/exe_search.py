"""Locate Python executables on this machine."""
from __future__ import annotations

import logging
import os
import re
import sys
from typing import Iterable, List

from constants import Constants

logger = logging.getLogger(__name__)

_RE_PYTHON = re.compile(r"^python(\d+(\.\d+)*)?$")


def is_exe(path: str) -> bool:
    """Return True if ``path`` names an executable Python interpreter file."""
    if not _RE_PYTHON.match(os.path.basename(path)):
        return False
    return os.path.isfile(path) and os.access(path, os.X_OK)


def _search_origins() -> List[str]:
    origins: List[str] = []
    for entry in os.environ.get("PATH", "").split(os.pathsep):
        if entry:
            origins.append(entry)
    origins.extend(Constants.EXE_SEARCH_DIRS)
    return origins


def _venv_exes(home: str) -> Iterable[str]:
    """Yield interpreters of virtual environments directly below ``home``."""
    try:
        entries = list(os.scandir(home))
    except OSError as exc:
        logger.debug("Cannot read home directory %s: %s", home, exc)
        return
    for entry in entries:
        if entry.is_dir(follow_symlinks=False) and os.path.isfile(os.path.join(entry.path, "pyvenv.cfg")):
            candidate = os.path.join(entry.path, "bin", "python3")
            if is_exe(candidate):
                yield candidate


def find_exe() -> List[str]:
    """Return de-duplicated interpreter paths found on PATH, standard bin dirs and home venvs.

    Falls back to the running interpreter when nothing is found.
    """
    found = {}
    candidates: List[str] = []
    for origin in _search_origins():
        try:
            names = os.listdir(origin)
        except OSError:
            continue
        candidates.extend(os.path.join(origin, name) for name in names)
    home = os.environ.get("HOME")
    if home:
        candidates.extend(_venv_exes(home))

    for path in candidates:
        if not is_exe(path):
            continue
        found.setdefault(os.path.abspath(path), path)

    if not found:
        logger.warning("No Python executables found; using %s", sys.executable)
        return [sys.executable]
    exes = sorted(found.values())
    logger.info("Found %d Python executables.", len(exes))
    return exes
