"""
gitsemver - Automatic semantic-version tagging for git repositories.

Every push gets a semantic version tag. gitsemver works out the next
version from tag history, keeps it ahead of the version declared in the
package manifest, and runs the stash/pull/commit/tag/push sequence.

Quick Start:
    import gitsemver

    # Pure version arithmetic
    gitsemver.compute_next_version("minor", "1.2.3-4-gabcdef")   # 1.3.0
    gitsemver.reconcile_version("1.2.4", "2.0.0")                # "2.0.1"

    # Sync a working tree, stamping package.json on the way
    params = gitsemver.TagParameters.from_flags(words=["fix", "typo"])
    stamp = gitsemver.make_stamp_callback("~/src/app", "node")
    if gitsemver.run_sync("~/src/app", params, stamp) != 0:
        ...

Domain Objects:
    SemanticVersion - MAJOR.MINOR.PATCH with optional describe data
    UNKNOWN - the "no version" sentinel
    TagParameters - caller intent for one sync

Services:
    SyncService - the sync workflow
    VersionService - repository-backed version queries
"""

__version__ = "1.0.0"

from .domain import (
    SemanticVersion,
    UNKNOWN,
    BumpKind,
    TagParameters,
    RepositoryState,
    SyncState,
    SyncResult,
)

from .version_string import (
    is_valid,
    next_major,
    next_minor,
    next_patch,
    next_build,
    clean,
    compute_next_version,
)

from .version_manager import (
    reconcile_version,
    get_adjusted_version,
    read_manifest_version,
    write_manifest_version,
    make_stamp_callback,
)

from .services import SyncService, VersionService, run_sync

from .config import load_config

__all__ = [
    "__version__",
    # Domain objects
    "SemanticVersion",
    "UNKNOWN",
    "BumpKind",
    "TagParameters",
    "RepositoryState",
    "SyncState",
    "SyncResult",
    # Version strings
    "is_valid",
    "next_major",
    "next_minor",
    "next_patch",
    "next_build",
    "clean",
    "compute_next_version",
    # Manifests
    "reconcile_version",
    "get_adjusted_version",
    "read_manifest_version",
    "write_manifest_version",
    "make_stamp_callback",
    # Services
    "SyncService",
    "VersionService",
    "run_sync",
    # Configuration
    "load_config",
]
