"""
Service layer for gitsemver.

Contains business logic that orchestrates domain objects and infrastructure:
- VersionService: current/next versions from tag history
- SyncService: stash/pull/stamp/commit/tag/push workflow

Services are the primary API for commands to use.
They handle coordination between infrastructure and domain layers.
"""

from .version_service import VersionService, sort_tags
from .sync_service import SyncService, run_sync

__all__ = [
    'VersionService',
    'sort_tags',
    'SyncService',
    'run_sync',
]
