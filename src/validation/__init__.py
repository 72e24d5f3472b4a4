"""Manifest building and validation of observed packages."""

from .manifest import Anchor, Manifest
from .reconcile import Disallowed, Invalid, Missing, ValidationFlags, reconcile
from .report import DigestRecord, ValidationReport

__all__ = [
    "Anchor",
    "DigestRecord",
    "Disallowed",
    "Invalid",
    "Manifest",
    "Missing",
    "ValidationFlags",
    "ValidationReport",
    "reconcile",
]
