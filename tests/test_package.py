"""Tests for Package identity and dist-info parsing."""

from versioning.package import Package, name_to_key
from versioning.version import Version


def test_from_dist_info():
    p1 = Package.from_dist_info("matplotlib-3.9.0.dist-info")
    assert p1.name == "matplotlib"
    assert str(p1.version) == "3.9.0"
    assert str(p1) == "matplotlib-3.9.0"
    assert repr(p1) == "<Package: matplotlib-3.9.0>"


def test_from_dist_info_hyphenated_name():
    p1 = Package.from_dist_info("static-frame-2.13.0.dist-info")
    assert p1.name == "static-frame"
    assert p1.version == Version("2.13.0")


def test_from_dist_info_rejects_names_without_version():
    assert Package.from_dist_info("matplotlib3.9.0.distin") is None
    assert Package.from_dist_info("numpy-.dist-info") is None


def test_from_dist_info_prefers_given_name():
    p1 = Package.from_dist_info("pyyaml-6.0.dist-info", name="PyYAML")
    assert p1.name == "PyYAML"
    assert p1.key == "pyyaml"


def test_equality_and_ordering():
    p1 = Package.from_dist_info("xarray-0.21.1.dist-info")
    p2 = Package.from_dist_info("xarray-2024.6.0.dist-info")
    p3 = Package.from_dist_info("xarray-2024.6.0.dist-info")
    assert p2 > p1
    assert p1 < p2
    assert p1 != p3
    assert p2 == p3
    assert len({p1, p2, p3}) == 2


def test_ordering_by_name_first():
    packages = [
        Package.from_name_version("numpy", "1.0"),
        Package.from_name_version("Flask", "3.0"),
        Package.from_name_version("flask", "1.0"),
    ]
    assert [str(p) for p in sorted(packages)] == ["flask-1.0", "Flask-3.0", "numpy-1.0"]


def test_name_to_key():
    assert name_to_key("Static_Frame") == "static-frame"
    assert name_to_key("zope.interface") == "zope-interface"
