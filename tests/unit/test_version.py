"""Tests for version parsing and bumping."""

from __future__ import annotations

import pytest

from autosemver.core.version import ZERO_VERSION, BumpType, Version, parse_version
from autosemver.exceptions import NotSemverError


class TestVersionParse:
    """Tests for Version.parse()."""

    def test_parse_simple(self):
        """Parse a plain release."""
        v = Version.parse("1.2.3")

        assert v.major == 1
        assert v.minor == 2
        assert v.patch == 3
        assert v.pre_release == ""
        assert v.build_metadata == ""

    def test_parse_with_v_prefix(self):
        """A leading v is accepted."""
        assert Version.parse("v1.2.3") == Version(1, 2, 3)

    def test_parse_pre_release_and_build(self):
        """Pre-release and build metadata are split out."""
        v = Version.parse("1.2.3-alpha.1+build.5")

        assert v.pre_release == "alpha.1"
        assert v.build_metadata == "build.5"

    def test_parse_empty_is_zero(self):
        """An empty string is the zero version."""
        assert Version.parse("") == ZERO_VERSION
        assert str(Version.parse("")) == "0.0.0"

    @pytest.mark.parametrize(
        "value",
        ["1.2", "1.2.3.4", "a.b.c", "1.2.3-", "1.2.3+", "1.2.3-alpha..1", "release-1", "1.2.3\n"],
    )
    def test_parse_invalid(self, value: str):
        """Non semver strings raise NotSemverError."""
        with pytest.raises(NotSemverError, match="is not a semver compatible version"):
            Version.parse(value)

    def test_parse_version_function(self):
        """parse_version is an alias of Version.parse."""
        assert parse_version("v2.0.0-rc.1") == Version(2, 0, 0, "rc.1")

    @pytest.mark.parametrize(
        "value",
        [
            "0.0.0",
            "1.2.3",
            "1.0.0-alpha",
            "1.0.0-alpha.1",
            "1.0.0+20130313144700",
            "1.0.0-beta+exp.sha.5114f85",
        ],
    )
    def test_str_round_trip(self, value: str):
        """Rendering a parsed version gives the input back."""
        assert str(Version.parse(value)) == value

    def test_str_drops_v_prefix(self):
        """The v prefix is not rendered."""
        assert str(Version.parse("v1.0.0")) == "1.0.0"

    def test_negative_numbers_rejected(self):
        """Version numbers cannot be negative."""
        with pytest.raises(ValueError):
            Version(1, -1, 0)


class TestVersionPredicates:
    """Tests for version predicates."""

    def test_is_unstable(self):
        """Major zero is unstable."""
        assert Version(0, 9, 0).is_unstable
        assert not Version(1, 0, 0).is_unstable

    def test_is_pre_release(self):
        """A version with identifiers after the dash is a pre-release."""
        assert Version(1, 0, 0, "rc.1").is_pre_release
        assert not Version(1, 0, 0, build_metadata="abc").is_pre_release

    @pytest.mark.parametrize(
        ("version", "identifiers", "expected"),
        [
            ("1.2.0-alpha.3", "alpha", True),
            ("1.2.0-alpha", "alpha", True),
            ("1.2.0-alpha.beta.1", "alpha.beta", True),
            ("1.2.0-alpha.beta", "alpha", False),
            ("1.2.0-beta.1", "alpha", False),
            ("1.2.0", "alpha", False),
        ],
    )
    def test_has_same_pre_release_identifiers(self, version: str, identifiers: str, expected: bool):
        """The trailing numeric identifier is ignored."""
        assert Version.parse(version).has_same_pre_release_identifiers(identifiers) is expected


class TestVersionBump:
    """Tests for major, minor and patch bumps."""

    @pytest.mark.parametrize(
        ("version", "expected"),
        [
            ("1.2.3", "2.0.0"),
            ("0.1.0", "1.0.0"),
            ("1.2.3+build.1", "2.0.0"),
            ("2.0.0-rc.1", "2.0.0"),
            ("2.1.0-rc.1", "3.0.0"),
            ("2.0.1-rc.1", "3.0.0"),
        ],
    )
    def test_bump_major(self, version: str, expected: str):
        """Major bump resets minor and patch, promoting X.0.0 pre-releases."""
        assert str(Version.parse(version).bump_major()) == expected

    @pytest.mark.parametrize(
        ("version", "expected"),
        [
            ("1.2.3", "1.3.0"),
            ("1.3.0-alpha", "1.3.0"),
            ("1.3.1-alpha", "1.4.0"),
            ("1.2.3+build", "1.3.0"),
        ],
    )
    def test_bump_minor(self, version: str, expected: str):
        """Minor bump resets patch, promoting X.Y.0 pre-releases."""
        assert str(Version.parse(version).bump_minor()) == expected

    @pytest.mark.parametrize(
        ("version", "expected"),
        [
            ("1.2.3", "1.2.4"),
            ("1.2.4-alpha.1", "1.2.4"),
            ("1.2.3+build", "1.2.4"),
        ],
    )
    def test_bump_patch(self, version: str, expected: str):
        """Patch bump promotes any pre-release."""
        assert str(Version.parse(version).bump_patch()) == expected

    def test_bump_type_apply(self):
        """BumpType dispatches to the matching bump."""
        v = Version(1, 2, 3)

        assert BumpType.MAJOR.apply(v) == Version(2, 0, 0)
        assert BumpType.MINOR.apply(v) == Version(1, 3, 0)
        assert BumpType.PATCH.apply(v) == Version(1, 2, 4)
        assert BumpType.NONE.apply(v) is v
        assert v.bump(BumpType.MINOR) == Version(1, 3, 0)

    def test_bumps_do_not_mutate(self):
        """Bumping returns a new instance."""
        v = Version(1, 2, 3)
        v.bump_major()

        assert v == Version(1, 2, 3)


class TestPreReleaseBump:
    """Tests for Version.bump_pre_release()."""

    def test_new_pre_release_bumps_minor(self):
        """A release bumped to a pre-release targets the next minor."""
        v = Version.parse("1.0.0").bump_pre_release("alpha")

        assert str(v) == "1.1.0-alpha.0"

    def test_index_increments(self):
        """Bumping the same pre-release class increments the index."""
        v = Version.parse("1.0.0").bump_pre_release("alpha").bump_pre_release("alpha")

        assert str(v) == "1.1.0-alpha.1"

    def test_pre_release_without_index(self):
        """A pre-release without index gets index 1."""
        assert str(Version.parse("1.1.0-alpha").bump_pre_release("alpha")) == "1.1.0-alpha.1"

    def test_dotted_identifiers(self):
        """Identifiers may contain dots."""
        v = Version.parse("1.1.0-alpha.beta.3").bump_pre_release("alpha.beta")

        assert str(v) == "1.1.0-alpha.beta.4"

    def test_other_class_starts_at_zero(self):
        """Switching class restarts the index and keeps the numbers."""
        assert str(Version.parse("1.1.0-alpha.4").bump_pre_release("beta")) == "1.1.0-beta.0"

    def test_custom_bumper(self):
        """The bumper decides the release a new pre-release leads to."""
        v = Version.parse("1.2.3").bump_pre_release("rc", bumper=BumpType.MAJOR)

        assert str(v) == "2.0.0-rc.0"

    def test_overwrite(self):
        """Overwrite sets the identifiers without index."""
        first = Version.parse("1.0.0").bump_pre_release("SNAPSHOT", overwrite=True)
        second = first.bump_pre_release("SNAPSHOT", overwrite=True)

        assert str(first) == "1.1.0-SNAPSHOT"
        assert str(second) == "1.1.0-SNAPSHOT"

    def test_empty_template_is_identity(self):
        """An empty pre-release leaves the version unchanged."""
        v = Version.parse("1.0.0+abc")

        assert v.bump_pre_release("") is v

    def test_clears_build_metadata(self):
        """Build metadata does not survive a pre-release bump."""
        assert str(Version.parse("1.0.0+abc").bump_pre_release("alpha")) == "1.1.0-alpha.0"


class TestBuildMetadata:
    """Tests for Version.with_build_metadata()."""

    def test_replaces_metadata(self):
        """Only build metadata changes."""
        v = Version.parse("1.2.3-rc.1+old").with_build_metadata("new")

        assert str(v) == "1.2.3-rc.1+new"

    def test_empty_metadata_clears(self):
        """Empty metadata removes it."""
        assert str(Version.parse("1.2.3+old").with_build_metadata("")) == "1.2.3"


class TestVersionOrdering:
    """Tests for semver precedence."""

    def test_semver_precedence(self):
        """Ordering follows the semver.org example."""
        ordered = [
            "1.0.0-alpha",
            "1.0.0-alpha.1",
            "1.0.0-alpha.beta",
            "1.0.0-beta",
            "1.0.0-beta.2",
            "1.0.0-beta.11",
            "1.0.0-rc.1",
            "1.0.0",
            "1.0.1",
            "1.1.0",
            "2.0.0",
        ]
        versions = [Version.parse(v) for v in ordered]

        assert sorted(reversed(versions)) == versions

    def test_build_metadata_ignored(self):
        """Build metadata has no precedence but equality is structural."""
        a = Version.parse("1.0.0+a")
        b = Version.parse("1.0.0+b")

        assert a <= b
        assert a >= b
        assert not a < b
        assert a != b

    def test_comparison_operators(self):
        """All ordering operators agree."""
        low = Version(1, 0, 0)
        high = Version(1, 0, 1)

        assert low < high
        assert low <= high
        assert high > low
        assert high >= low
