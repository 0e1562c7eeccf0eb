"""Version recognition for release tags.

Tags are considered versions when they follow semantic versioning,
optionally preceded by a ``v`` (``1.2.3``, ``v1.2.3-rc.1+build.5``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass

SEMVER_PATTERN = re.compile(
    r"^(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<pre>(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+(?P<build>[0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)


@dataclass(frozen=True)
class Version:
    """A semantic version as found in a release tag."""

    major: int
    minor: int
    patch: int
    pre: str | None = None
    build: str | None = None

    @classmethod
    def parse(cls, value: str) -> Version:
        """Parse a semantic version string.

        Raises:
            ValueError: If value is not a semantic version
        """
        match = SEMVER_PATTERN.match(value)
        if match is None:
            raise ValueError(f"Invalid semantic version: {value!r}")
        return cls(
            major=int(match["major"]),
            minor=int(match["minor"]),
            patch=int(match["patch"]),
            pre=match["pre"],
            build=match["build"],
        )

    def __str__(self) -> str:
        version = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre:
            version += f"-{self.pre}"
        if self.build:
            version += f"+{self.build}"
        return version


def parse_tag_version(tag_name: str, prefix: str | None = None) -> Version | None:
    """Extract the version from a tag name.

    Args:
        tag_name: Tag name without ``refs/tags/``
        prefix: Package tag prefix; the tag must then be ``<prefix>-<version>``

    Returns:
        The version, or None if the tag does not follow the convention
    """
    if prefix is not None:
        head, sep, rest = tag_name.partition(f"{prefix}-")
        if head or not sep:
            return None
        tag_name = rest

    if tag_name.startswith("v"):
        tag_name = tag_name[1:]

    try:
        return Version.parse(tag_name)
    except ValueError:
        return None
