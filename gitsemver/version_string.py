"""
Version derivation from `git describe` output.

All functions are pure and total: malformed, empty or missing input
resolves to False / UNKNOWN instead of raising.

Components are separated by a literal dot, so "1x2x3" is not 1.2.3.
"""

import re
from typing import Optional, Union

from .domain.version import BumpKind, SemanticVersion, UNKNOWN, Version

VALID_PATTERN = re.compile(r'^\d+\.')
MAJOR_PATTERN = re.compile(r'^(\d+)\.')
MINOR_PATTERN = re.compile(r'^(\d+)\.(\d+)')
PATCH_PATTERN = re.compile(r'^(\d+)\.(\d+)\.(\d+)')
ON_TAG_PATTERN = re.compile(r'^(\d+\.\d+\.\d+)$')
BUILD_PATTERN = re.compile(r'^(\d+\.\d+\.\d+)-(\d+)')


def is_valid(version) -> bool:
    """True if `version` starts like a version (leading integer, then a dot).

    Deliberately permissive: it tells "looks like a version" apart from
    "git produced no tag at all", nothing more.
    """
    if version is None or version is UNKNOWN:
        return False
    return VALID_PATTERN.match(str(version)) is not None


def next_major(desc: Optional[str]) -> Version:
    """'1.2.3-4-gabc' -> 2.0.0"""
    match = MAJOR_PATTERN.match(desc or '')
    if not match:
        return UNKNOWN
    return SemanticVersion(int(match.group(1)) + 1, 0, 0)


def next_minor(desc: Optional[str]) -> Version:
    """'1.2.3-4-gabc' -> 1.3.0"""
    match = MINOR_PATTERN.match(desc or '')
    if not match:
        return UNKNOWN
    return SemanticVersion(int(match.group(1)), int(match.group(2)) + 1, 0)


def next_patch(desc: Optional[str]) -> Version:
    """'1.2.3-4-gabc' -> 1.2.4"""
    match = PATCH_PATTERN.match(desc or '')
    if not match:
        return UNKNOWN
    major, minor, patch = (int(g) for g in match.groups())
    return SemanticVersion(major, minor, patch + 1)


def next_build(desc: Optional[str]) -> Version:
    """
    Increment the commit distance of a describe string.

    On a tag ('1.2.3') the result is 1.2.3-1; past a tag
    ('1.2.3-4-gabcdef') the hash is dropped and the distance bumped (1.2.3-5).
    """
    desc = desc or ''
    if ON_TAG_PATTERN.match(desc):
        return SemanticVersion.parse(desc + '-1')

    match = BUILD_PATTERN.match(desc)
    if not match:
        return UNKNOWN

    base = SemanticVersion.parse(match.group(1))
    return SemanticVersion(base.major, base.minor, base.patch,
                           distance=int(match.group(2)) + 1)


def clean(desc: Optional[str]) -> Optional[str]:
    """Strip everything after the leading MAJOR.MINOR.PATCH."""
    if not desc:
        return desc
    match = PATCH_PATTERN.match(desc)
    if match:
        return match.group(0)
    return desc


_NEXT_BY_KIND = {
    BumpKind.MAJOR: next_major,
    BumpKind.MINOR: next_minor,
    BumpKind.PATCH: next_patch,
}


def compute_next_version(
    bump_kind: Union[BumpKind, str, None],
    current_description: Optional[str]
) -> Version:
    """Next version for `bump_kind` (patch when None) after `current_description`."""
    return _NEXT_BY_KIND[BumpKind.coerce(bump_kind)](current_description)
