"""Semantic version value type and bump operations.

Implements `Semantic Versioning 2.0.0 <https://semver.org/spec/v2.0.0.html>`_:

    MAJOR.MINOR.PATCH[-PRE_RELEASE][+BUILD_METADATA]

:class:`Version` is immutable; every bump returns a new instance. Bumping a
pre-release promotes it to its release when the release is the next version
in line, e.g. ``2.0.0-rc.1`` bumped major gives ``2.0.0``, not ``3.0.0``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import StrEnum

from autosemver.exceptions import NotSemverError

VERSION_PATTERN = re.compile(
    r"^v?(?P<major>[0-9]+)\.(?P<minor>[0-9]+)\.(?P<patch>[0-9]+)"
    r"(?:-(?P<pre_release>[0-9A-Za-z\-]+(?:\.[0-9A-Za-z\-]+)*))?"
    r"(?:\+(?P<build_metadata>[0-9A-Za-z\-]+(?:\.[0-9A-Za-z\-]+)*))?\Z"
)
IDENTIFIERS_PATTERN = re.compile(r"[0-9A-Za-z\-]+(?:\.[0-9A-Za-z\-]+)*\Z")


class BumpType(StrEnum):
    """Which part of the version to bump.

    ``NONE`` is the identity: the version is returned unchanged.
    """

    NONE = "none"
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"

    def apply(self, version: Version) -> Version:
        """Apply this bump to ``version``."""
        if self is BumpType.MAJOR:
            return version.bump_major()
        if self is BumpType.MINOR:
            return version.bump_minor()
        if self is BumpType.PATCH:
            return version.bump_patch()
        return version


def _identifier_key(identifier: str) -> tuple[int, int, str]:
    # Numeric identifiers sort numerically and always below alphanumeric ones.
    if identifier.isdigit():
        return (0, int(identifier), "")
    return (1, 0, identifier)


@dataclass(frozen=True)
class Version:
    """A semantic version.

    Equality is structural (build metadata included). Ordering follows semver
    precedence, where build metadata is ignored.

    Attributes:
        major: Major number, bumped for incompatible changes.
        minor: Minor number, bumped for backwards compatible features.
        patch: Patch number, bumped for backwards compatible fixes.
        pre_release: Dot separated pre-release identifiers (e.g. ``alpha.1``).
        build_metadata: Dot separated build metadata (e.g. ``3.abc1234``).
    """

    major: int = 0
    minor: int = 0
    patch: int = 0
    pre_release: str = ""
    build_metadata: str = ""

    def __post_init__(self) -> None:
        if self.major < 0 or self.minor < 0 or self.patch < 0:
            raise ValueError(
                f"Version numbers must be non-negative: {self.major}.{self.minor}.{self.patch}"
            )

    @classmethod
    def parse(cls, value: str) -> Version:
        """Parse a version string, with or without a leading ``v``.

        An empty string is the zero version ``0.0.0``, which is what a
        repository without any tag starts from.

        Raises:
            NotSemverError: If ``value`` is not empty and not a semver version.
        """
        if value == "":
            return cls()

        match = VERSION_PATTERN.match(value)
        if match is None:
            raise NotSemverError(value)

        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            pre_release=match.group("pre_release") or "",
            build_metadata=match.group("build_metadata") or "",
        )

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre_release:
            text += f"-{self.pre_release}"
        if self.build_metadata:
            text += f"+{self.build_metadata}"
        return text

    # -------------------------------------------------------------------------
    # Predicates
    # -------------------------------------------------------------------------

    @property
    def is_unstable(self) -> bool:
        """Initial development version (``0.y.z``)."""
        return self.major == 0

    @property
    def is_pre_release(self) -> bool:
        return self.pre_release != ""

    @property
    def pre_release_identifiers(self) -> list[str]:
        return self.pre_release.split(".") if self.pre_release else []

    def has_same_pre_release_identifiers(self, identifiers: str) -> bool:
        """Check whether this pre-release belongs to the ``identifiers`` class.

        ``1.2.0-alpha.3`` has the same identifiers as ``alpha``: the trailing
        numeric identifier is the increment and is not part of the class.
        """
        if not self.is_pre_release:
            return False
        current = self.pre_release_identifiers
        if current[-1].isdigit():
            current = current[:-1]
        return current == identifiers.split(".")

    # -------------------------------------------------------------------------
    # Bumps
    # -------------------------------------------------------------------------

    def bump_major(self) -> Version:
        """Bump the major number.

        A pre-release of ``X.0.0`` is promoted to ``X.0.0``.
        """
        if not self.is_pre_release or self.minor != 0 or self.patch != 0:
            return Version(self.major + 1, 0, 0)
        return Version(self.major, self.minor, self.patch)

    def bump_minor(self) -> Version:
        """Bump the minor number.

        A pre-release of ``X.Y.0`` is promoted to ``X.Y.0``.
        """
        if not self.is_pre_release or self.patch != 0:
            return Version(self.major, self.minor + 1, 0)
        return Version(self.major, self.minor, self.patch)

    def bump_patch(self) -> Version:
        """Bump the patch number.

        Any pre-release is promoted to its release.
        """
        if not self.is_pre_release:
            return Version(self.major, self.minor, self.patch + 1)
        return Version(self.major, self.minor, self.patch)

    def bump(self, bump_type: BumpType) -> Version:
        return bump_type.apply(self)

    def bump_pre_release(
        self,
        pre_release: str,
        overwrite: bool = False,
        bumper: BumpType | None = None,
    ) -> Version:
        """Bump the pre-release identifiers.

        When this version is not a pre-release yet, ``bumper`` (minor by
        default) computes the release the pre-release leads to. Then:

        - with ``overwrite``, the pre-release is set to ``pre_release`` as is
          (Maven-like ``SNAPSHOT`` versions);
        - otherwise an index is appended: ``alpha.0`` for a new class, or the
          next index when this version already is a pre-release of the same
          class (``alpha.3`` → ``alpha.4``).

        Args:
            pre_release: Desired pre-release identifiers, e.g. ``alpha``.
            overwrite: Do not append an index.
            bumper: Bump used when this version is not a pre-release yet.

        Returns:
            The new version, or this version if ``pre_release`` is empty.
        """
        if pre_release == "":
            return self

        if bumper is None:
            bumper = BumpType.MINOR

        desired = pre_release.split(".")
        base = self if self.is_pre_release else bumper.apply(self)

        if overwrite:
            return replace(base, pre_release=pre_release, build_metadata="")

        if self.is_pre_release:
            current = self.pre_release_identifiers
            last = current[-1]
            if current == desired or (last.isdigit() and current[:-1] == desired):
                index = int(last) if last.isdigit() else 0
                next_pre_release = ".".join([*desired, str(index + 1)])
                return replace(base, pre_release=next_pre_release, build_metadata="")

        return replace(base, pre_release=".".join([*desired, "0"]), build_metadata="")

    def with_build_metadata(self, metadata: str) -> Version:
        """Return this version with ``metadata`` as build metadata."""
        return replace(self, build_metadata=metadata)

    # -------------------------------------------------------------------------
    # Precedence
    # -------------------------------------------------------------------------

    def _precedence_key(self) -> tuple[int, int, int, int, tuple[tuple[int, int, str], ...]]:
        identifiers = tuple(_identifier_key(i) for i in self.pre_release_identifiers)
        # A release has higher precedence than any of its pre-releases.
        return (self.major, self.minor, self.patch, 0 if self.is_pre_release else 1, identifiers)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._precedence_key() < other._precedence_key()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._precedence_key() <= other._precedence_key()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._precedence_key() > other._precedence_key()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._precedence_key() >= other._precedence_key()


ZERO_VERSION = Version()


def parse_version(value: str) -> Version:
    """Parse a version string. See :meth:`Version.parse`."""
    return Version.parse(value)
