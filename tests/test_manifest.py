"""Tests for manifest construction, lookup and derivation."""

import pytest

from validation.manifest import Anchor, Manifest
from versioning.errors import DuplicateNameError, ParseError
from versioning.package import Package


class TestManifestBuild:
    """Building manifests from specifier strings and files."""

    def test_duplicate_name(self):
        with pytest.raises(DuplicateNameError) as excinfo:
            Manifest.from_iter(["pk1>=0.2,<0.3", "pk1>=1,<3"])
        assert excinfo.value.name == "pk1"
        assert "pk1" in str(excinfo.value)

    def test_duplicate_normalized_name(self):
        with pytest.raises(DuplicateNameError):
            Manifest.from_iter(["static_frame==1", "Static-Frame==2"])

    def test_parse_error_propagates(self):
        with pytest.raises(ParseError):
            Manifest.from_iter(["pk1>=0.2", "pk2=>1"])

    def test_validate(self):
        dm = Manifest.from_iter(["pk1>=0.2,<0.3", "pk2>=1,<3"])
        assert len(dm) == 2
        assert dm.validate(Package.from_name_version("pk2", "2.0"))
        assert not dm.validate(Package.from_name_version("foo", "2.0"))
        assert dm.validate(Package.from_name_version("pk1", "0.2.5"))
        assert not dm.validate(Package.from_name_version("pk1", "0.3"))

    def test_lookup_is_normalized(self):
        dm = Manifest.from_iter(["static_frame==2.13.0"])
        assert "Static-Frame" in dm
        assert "static.frame" in dm
        assert str(dm.get("STATIC-FRAME")) == "static_frame==2.13.0"
        assert dm.get("numpy") is None
        assert dm.validate(Package.from_name_version("static-frame", "2.13.0"))

    def test_names_and_lines_sorted(self):
        dm = Manifest.from_iter(["requests==2.0", "Flask>1", "numpy<2"])
        assert dm.names() == ["Flask", "numpy", "requests"]
        assert dm.to_lines() == ["Flask>1", "numpy<2", "requests==2.0"]
        assert [s.name for s in dm] == ["Flask", "numpy", "requests"]

    def test_from_requirements(self, tmp_path):
        req = tmp_path / "requirements.txt"
        req.write_text(
            "# pinned deps\n"
            "\n"
            "-r base.txt\n"
            "--index-url https://example.invalid/simple\n"
            "flask>1,<3  # web\n"
            "numpy>=1.0,\\\n"
            "    <2.0\n"
            "requests[socks]==2.31.0 ; python_version >= '3.8'\n",
            encoding="utf-8",
        )
        dm = Manifest.from_requirements(str(req))
        assert dm.to_lines() == ["flask>1,<3", "numpy>=1.0,<2.0", "requests==2.31.0"]

    def test_from_requirements_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            Manifest.from_requirements(str(tmp_path / "absent.txt"))

    def test_from_pyproject(self, tmp_path):
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(
            '[project]\n'
            'name = "demo"\n'
            'dependencies = ["numpy>=1.24", "PyYAML>=6.0,<7"]\n',
            encoding="utf-8",
        )
        dm = Manifest.from_path(str(pyproject))
        assert dm.to_lines() == ["numpy>=1.24", "PyYAML>=6.0,<7"]

    def test_from_pyproject_without_dependencies(self, tmp_path):
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text('[project]\nname = "demo"\n', encoding="utf-8")
        assert len(Manifest.from_pyproject(str(pyproject))) == 0

    def test_to_requirements(self, tmp_path):
        out = tmp_path / "bound.txt"
        Manifest.from_iter(["numpy>=1.19.3", "flask>=1.1.3"]).to_requirements(str(out))
        assert out.read_text(encoding="utf-8") == "flask>=1.1.3\nnumpy>=1.19.3\n"
        assert len(Manifest.from_requirements(str(out))) == 2


class TestManifestFromPackages:
    """Deriving bound requirements from observed packages."""

    packages = [
        Package.from_name_version("numpy", "1.20.0"),
        Package.from_name_version("numpy", "1.19.3"),
        Package.from_name_version("flask", "1.1.3"),
    ]

    def test_lower(self):
        dm = Manifest.from_packages(self.packages, Anchor.LOWER)
        assert dm.to_lines() == ["flask>=1.1.3", "numpy>=1.19.3"]

    def test_upper(self):
        dm = Manifest.from_packages(self.packages, Anchor.UPPER)
        assert dm.to_lines() == ["flask<=1.1.3", "numpy<=1.20.0"]

    def test_both(self):
        dm = Manifest.from_packages(self.packages, Anchor.BOTH)
        assert dm.to_lines() == ["flask>=1.1.3,<=1.1.3", "numpy>=1.19.3,<=1.20.0"]

    def test_derived_manifest_accepts_observed(self):
        dm = Manifest.from_packages(self.packages, Anchor.BOTH)
        assert all(dm.validate(p) for p in self.packages)

    def test_empty(self):
        assert len(Manifest.from_packages([], Anchor.LOWER)) == 0
