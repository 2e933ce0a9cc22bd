"""
Tests for git_changelog.core.version.

Covers:
- Parsing dotted version strings and rejecting malformed ones.
- Ordering, including the trailing-zero rule.
- Equality requiring identical length.
- Prefix, slice and in-place increment helpers.
"""

import pytest

from git_changelog.core.version import Version
from git_changelog.exceptions import MalformedVersion


class TestParse:
    """Test Version.parse"""

    @pytest.mark.parametrize(
        "value, segments",
        [
            ("1.2.3", [1, 2, 3]),
            ("0.3.8.2", [0, 3, 8, 2]),
            ("7", [7]),
        ],
    )
    def test_parse_segments(self, value, segments):
        assert Version.parse(value).segments == segments

    @pytest.mark.parametrize("value", ["v1.2.3", "1..2", "", "1.2.x", "1.-2"])
    def test_parse_malformed(self, value):
        with pytest.raises(MalformedVersion):
            Version.parse(value)

    def test_malformed_is_value_error(self):
        with pytest.raises(ValueError, match="not a number"):
            Version.parse("master")

    def test_str_has_no_padding(self):
        assert str(Version.parse("1.02.3")) == "1.2.3"


class TestCompare:
    """Test ordering"""

    @pytest.mark.parametrize(
        "a, b, expected",
        [
            ("1.2.3", "1.2.3", 0),
            ("1.2.3.0", "1.2.3", 1),
            ("1.2.3", "1.2.3.0", -1),
            ("1.2.3", "1.2.4", -1),
            ("1.3", "1.2.9", 1),
            ("2.0.0", "10.0.0", -1),
        ],
    )
    def test_compare(self, a, b, expected):
        assert Version.parse(a).compare(Version.parse(b)) == expected

    def test_compare_is_antisymmetric(self):
        a, b = Version.parse("1.4.0"), Version.parse("1.3.1")
        assert a.compare(b) == -b.compare(a)

    def test_rich_comparisons(self):
        assert Version.parse("1.3.1") < Version.parse("1.4.0")
        assert Version.parse("1.4.0") >= Version.parse("1.4.0")
        assert max([Version.parse("1.2"), Version.parse("1.10"), Version.parse("1.9.9")]) == Version.parse("1.10")


class TestEquality:
    """Test equality versus compare"""

    def test_equal_versions(self):
        assert Version.parse("1.2.3") == Version.parse("1.2.3")

    def test_different_length_is_not_equal(self):
        short, long = Version.parse("1.2"), Version.parse("1.2.0")
        assert short != long
        assert short.compare(long) == -1

    def test_hash_matches_equality(self):
        assert len({Version.parse("1.2.3"), Version.parse("1.2.3")}) == 1


class TestHelpers:
    """Test prefix, slice and increment"""

    def test_has_prefix(self):
        version = Version.parse("1.3.0")
        assert version.has_prefix(Version.parse("1.3"))
        assert version.has_prefix(Version.parse("1"))
        assert not version.has_prefix(Version.parse("1.2"))
        assert not version.has_prefix(Version.parse("1.3.0.1"))

    def test_slice(self):
        version = Version.parse("1.3.7")
        assert version.slice(2) == Version.parse("1.3")
        assert version == Version.parse("1.3.7")

    def test_increment_in_place(self):
        version = Version.parse("1.3.0")
        version.increment(2)
        assert str(version) == "1.3.1"
        version.increment(1)
        assert str(version) == "1.4.1"

    def test_copy_is_independent(self):
        version = Version.parse("1.0.0")
        copy = version.copy()
        copy.increment(0)
        assert str(version) == "1.0.0"
        assert str(copy) == "2.0.0"
