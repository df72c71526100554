"""
Semantic version domain objects for gitsemver.

A version is either a concrete SemanticVersion or the UNKNOWN sentinel.
UNKNOWN is a distinct value (not an exception and not a magic string) so
callers have to check for it explicitly before tagging anything:

    version = next_patch(desc)
    if version is UNKNOWN:
        ...

Ordering is on (major, minor, patch) only; the commit distance and hash
fragment reported by `git describe` are advisory.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


# MAJOR.MINOR.PATCH[-DISTANCE[-gHASH]] with literal dots
DESCRIBE_PATTERN = re.compile(
    r'^(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)'
    r'(?:-(?P<distance>\d+)(?:-(?P<hash>\S+))?)?'
)


class UnknownVersion:
    """Sentinel for a description that does not resolve to a version."""

    _instance: Optional['UnknownVersion'] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return "unknown version"

    def __repr__(self) -> str:
        return "UNKNOWN"


UNKNOWN = UnknownVersion()


@dataclass(frozen=True, order=True)
class SemanticVersion:
    """
    A MAJOR.MINOR.PATCH version, optionally annotated with describe data.

    Examples:
        SemanticVersion.parse("1.2.3")            -> 1.2.3
        SemanticVersion.parse("1.2.3-4-gabcdef")  -> 1.2.3 (distance=4, hash="gabcdef")
        SemanticVersion.parse("v1.2.3")           -> UNKNOWN

    Attributes:
        major, minor, patch: Non-negative version components
        distance: Commits since the tag, rendered as a "-N" build suffix
        hash: Abbreviated commit hash from `git describe`, never rendered
    """

    major: int
    minor: int
    patch: int
    distance: Optional[int] = field(default=None, compare=False)
    hash: Optional[str] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        for name in ('major', 'minor', 'patch'):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")
        if self.distance is not None and self.distance < 0:
            raise ValueError("distance must be non-negative")

    @classmethod
    def parse(cls, desc: Optional[str]) -> Union['SemanticVersion', UnknownVersion]:
        """Parse a version or describe string; UNKNOWN when it is not one."""
        if not desc:
            return UNKNOWN
        match = DESCRIBE_PATTERN.match(desc.strip())
        if not match:
            return UNKNOWN
        distance = match.group('distance')
        return cls(
            major=int(match.group('major')),
            minor=int(match.group('minor')),
            patch=int(match.group('patch')),
            distance=int(distance) if distance is not None else None,
            hash=match.group('hash'),
        )

    @property
    def triple(self):
        return (self.major, self.minor, self.patch)

    @property
    def core(self) -> str:
        """MAJOR.MINOR.PATCH without any build suffix."""
        return f"{self.major}.{self.minor}.{self.patch}"

    def bump_major(self) -> 'SemanticVersion':
        return SemanticVersion(self.major + 1, 0, 0)

    def bump_minor(self) -> 'SemanticVersion':
        return SemanticVersion(self.major, self.minor + 1, 0)

    def bump_patch(self) -> 'SemanticVersion':
        return SemanticVersion(self.major, self.minor, self.patch + 1)

    def __str__(self) -> str:
        if self.distance is not None:
            return f"{self.core}-{self.distance}"
        return self.core


Version = Union[SemanticVersion, UnknownVersion]


class BumpKind(Enum):
    """Which component the next version increments."""
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"

    @classmethod
    def coerce(cls, value: Union['BumpKind', str, None]) -> 'BumpKind':
        """Accept a BumpKind, its name, or None (patch)."""
        if value is None:
            return cls.PATCH
        if isinstance(value, cls):
            return value
        return cls(str(value).lower())
