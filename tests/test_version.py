"""Tests for token-wise version comparison."""

from versioning.version import Version


class TestVersionEquality:
    """Equality with zero padding and wildcards."""

    def test_reflexive(self):
        for v in ["2.2", "1.0.0", "0", "1.7.0.post1", "2.*", "a.b"]:
            assert Version(v) == Version(v)

    def test_zero_padding(self):
        assert Version("1.1") == Version("1.1.0")
        assert Version("1.1.0") == Version("1.1.0.0")
        assert Version("1.1") == Version("1.1.0.0")
        assert Version("1.1") != Version("1.1.1")

    def test_wildcard_absorbs_position(self):
        assert Version("2.*") == Version("2.2")
        assert Version("2.2") == Version("2.*")
        assert Version("2.*") == Version("2.5")
        assert Version("2.*") == Version("2.5.9")

    def test_wildcard_in_middle(self):
        assert Version("2.*.1") == Version("2.2.1")
        assert Version("2.*.1") != Version("2.2.2")

    def test_number_never_equals_text(self):
        assert Version("1.0") != Version("1.a")
        assert Version("1.post1") != Version("1.0")

    def test_wildcard_equality_is_not_transitive(self):
        wild = Version("2.*")
        a = Version("2.4")
        b = Version("2.5")
        assert wild == a
        assert wild == b
        assert a != b

    def test_hash_ignores_trailing_zeros(self):
        assert hash(Version("1.1")) == hash(Version("1.1.0"))
        assert len({Version("1.1"), Version("1.1.0.0")}) == 1


class TestVersionOrdering:
    """Positional ordering rules."""

    def test_numeric_not_lexical(self):
        assert Version("1.10") > Version("1.9")
        assert Version("0.21.1") < Version("2024.6.0")

    def test_padding_in_ordering(self):
        assert Version("1.0.1") > Version("1")
        assert Version("1") < Version("1.0.1")
        assert Version("1.0") <= Version("1")
        assert Version("1.0") >= Version("1")

    def test_text_is_lexical(self):
        assert Version("1.a") < Version("1.b")

    def test_number_greater_than_text(self):
        assert Version("1.0") > Version("1.0a")
        assert Version("1.0.post1") < Version("1.0")

    def test_release_suffix_is_simplified(self):
        # post releases are ordered as plain text tokens
        assert Version("1.7.0.post1") < Version("1.7.1")
        assert Version("1.7.0.post1") > Version("1.7.0.dev1")

    def test_wildcard_gives_no_ordering_signal(self):
        assert not Version("2.*") > Version("2.2.1")
        assert Version("2.*") < Version("2.2.1")
        assert not Version("2.2") > Version("2.*")
        assert not Version("2.2") < Version("2.*")

    def test_sorting(self):
        versions = [Version(v) for v in ["1.10", "1.2", "1.9.1", "0.1"]]
        assert [str(v) for v in sorted(versions)] == ["0.1", "1.2", "1.9.1", "1.10"]


class TestVersionPredicates:
    """Compatible-release and arbitrary equality."""

    def test_major_compatible(self):
        assert Version("2.1").is_major_compatible(Version("2.9"))
        assert Version("2").is_major_compatible(Version("2.0.0.1"))
        assert not Version("2.1").is_major_compatible(Version("3.1"))

    def test_major_compatible_requires_numbers(self):
        assert not Version("a.1").is_major_compatible(Version("a.1"))
        assert not Version("*.1").is_major_compatible(Version("2.1"))

    def test_arbitrary_equal_is_textual(self):
        assert Version("1.0").is_arbitrary_equal(Version("1.0"))
        assert not Version("1.0").is_arbitrary_equal(Version("1.0.0"))
        assert Version("1.0") == Version("1.0.0")
        assert not Version("2.*").is_arbitrary_equal(Version("2.1"))

    def test_str_and_tokens(self):
        v = Version("3.9.0rc1.*")
        assert v.tokens == (3, 9, "0rc1", "*")
        assert str(v) == "3.9.0rc1.*"
        assert repr(v) == "<Version: 3.9.0rc1.*>"
