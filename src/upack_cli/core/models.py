"""Domain models for upack-cli.

Value objects are **frozen** dataclasses with no I/O and no dependencies
on external packages.  :class:`ExtractionReport` is the one mutable
model: it accumulates counters during a single extraction run.
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass


# ---------------------------------------------------------------------------
# Package identity
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class PackageId:
    """Identifier of a package: optional group plus name."""

    group: str | None
    """Slash-separated group (e.g. ``tools/build``), or ``None``."""

    name: str
    """Package name."""

    @classmethod
    def parse(cls, text: str) -> PackageId:
        """Parse ``group/name`` or ``name``.

        The group may itself contain slashes; the last segment is the
        name.
        """
        stripped = text.strip().strip("/")
        group, sep, name = stripped.rpartition("/")
        if not sep:
            return cls(group=None, name=stripped)
        return cls(group=group or None, name=name)

    def __str__(self) -> str:
        if self.group:
            return f"{self.group}/{self.name}"
        return self.name


# ---------------------------------------------------------------------------
# Semantic version
# ---------------------------------------------------------------------------

_VERSION_RE = re.compile(
    r"^(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)"
    r"(?:-(?P<prerelease>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)


def _identifier_key(identifier: str) -> tuple[int, int, str]:
    # Numeric identifiers sort before alphanumeric ones.
    if identifier.isdigit():
        return (0, int(identifier), "")
    return (1, 0, identifier)


@functools.total_ordering
@dataclass(frozen=True, slots=True)
class PackageVersion:
    """A Semantic Versioning 2.0 version.

    Ordering follows SemVer precedence.  Build metadata does not affect
    precedence and is only compared as a final tie-breaker so that
    ordering stays consistent with equality.
    """

    major: int
    minor: int
    patch: int
    prerelease: str | None = None
    build: str | None = None

    @classmethod
    def parse(cls, text: str) -> PackageVersion | None:
        """Return the parsed version, or ``None`` if *text* is malformed."""
        match = _VERSION_RE.match(text.strip())
        if match is None:
            return None
        return cls(
            major=int(match["major"]),
            minor=int(match["minor"]),
            patch=int(match["patch"]),
            prerelease=match["prerelease"],
            build=match["build"],
        )

    @property
    def is_prerelease(self) -> bool:
        return self.prerelease is not None

    def _sort_key(self) -> tuple[object, ...]:
        if self.prerelease is None:
            release_key: tuple[object, ...] = (1, ())
        else:
            release_key = (
                0,
                tuple(_identifier_key(part) for part in self.prerelease.split(".")),
            )
        build_key = tuple(
            _identifier_key(part) for part in (self.build or "").split(".") if part
        )
        return (self.major, self.minor, self.patch, release_key, build_key)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, PackageVersion):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += f"-{self.prerelease}"
        if self.build:
            text += f"+{self.build}"
        return text


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Credentials:
    """Username and secret for a feed.  ``None`` stands for anonymous."""

    username: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='***')"


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class PackageManifest:
    """Decoded package metadata, used for display."""

    group: str | None
    name: str
    version: str

    def describe(self) -> list[str]:
        """Return the ``Package:`` and ``Version:`` display lines."""
        if self.group:
            package_line = f"Package: {self.group}:{self.name}"
        else:
            package_line = f"Package: {self.name}"
        return [package_line, f"Version: {self.version}"]


# ---------------------------------------------------------------------------
# Extraction report
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class ExtractionReport:
    """Counts of files and directories written by one extraction run."""

    files: int = 0
    directories: int = 0

    def summary(self) -> str:
        return (
            f"Extracted {self.files} files and {self.directories} directories."
        )
