"""Discovery of Python executables and their installed packages."""

from .exe_search import find_exe
from .package_match import match_pattern
from .site_scan import ScanFS, get_packages, get_site_package_dirs

__all__ = ["ScanFS", "find_exe", "get_packages", "get_site_package_dirs", "match_pattern"]
