"""
Domain layer for gitsemver.

Contains pure domain objects with no I/O or side effects:
- SemanticVersion / UNKNOWN: a parsed version or the "no version" sentinel
- BumpKind: which component the next version increments
- TagParameters: caller intent for one sync
- RepositoryState: local/remote divergence at probe time
- SyncState / SyncResult: where a sync run ended up
"""

from .version import SemanticVersion, UnknownVersion, UNKNOWN, BumpKind, Version
from .sync import TagParameters, RepositoryState, SyncState, SyncResult, StampCallback

__all__ = [
    'SemanticVersion',
    'UnknownVersion',
    'UNKNOWN',
    'BumpKind',
    'Version',
    'TagParameters',
    'RepositoryState',
    'SyncState',
    'SyncResult',
    'StampCallback',
]
