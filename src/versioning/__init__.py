"""Version, package and specifier primitives."""

from .errors import DuplicateNameError, ParseError
from .package import Package, name_to_key
from .specifier import Operator, Specifier
from .version import Version

__all__ = [
    "DuplicateNameError",
    "Operator",
    "Package",
    "ParseError",
    "Specifier",
    "Version",
    "name_to_key",
]
