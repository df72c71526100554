"""
Sync workflow domain objects for gitsemver.

TagParameters is the caller's intent for one sync, RepositoryState is the
probe result (recomputed on every run, never cached), and SyncResult records
where a run ended up.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

from .version import BumpKind

# stamp_callback(error, proposed_version) -> version to tag (None keeps proposed)
StampCallback = Callable[[Optional[Exception], str], Optional[str]]


@dataclass(frozen=True)
class TagParameters:
    """
    Caller intent for one sync operation.

    Immutable; use `without_tag()` for a tagless sync.

    Attributes:
        bump: Component to increment when tagging (patch by default)
        comment: Commit and tag message, may be empty
        branch: Optional branch selector for log views
        pull_only: Stop after integrating remote history
        notag: Commit and push without computing or creating a tag
        with_commits: Show every commit in branchlog
        all_branches: Show all branches in branchlog
    """

    bump: BumpKind = BumpKind.PATCH
    comment: str = ""
    branch: Optional[str] = None
    pull_only: bool = False
    notag: bool = False
    with_commits: bool = False
    all_branches: bool = False

    @classmethod
    def from_flags(
        cls,
        major: bool = False,
        minor: bool = False,
        words: Iterable[str] = (),
        **kwargs: Any
    ) -> 'TagParameters':
        """Build parameters from CLI-style flags and residual message words."""
        if major and minor:
            raise ValueError("--major and --minor are mutually exclusive")
        if major:
            bump = BumpKind.MAJOR
        elif minor:
            bump = BumpKind.MINOR
        else:
            bump = BumpKind.PATCH
        return cls(bump=bump, comment=" ".join(words), **kwargs)

    def without_tag(self) -> 'TagParameters':
        return replace(self, notag=True)


@dataclass(frozen=True)
class RepositoryState:
    """Local/remote divergence of a working tree at probe time."""
    has_local_changes: bool = False
    has_remote_changes: bool = False

    @property
    def any_changes(self) -> bool:
        return self.has_local_changes or self.has_remote_changes

    def blip(self, pull_only: bool = False) -> str:
        """Direction marker for the sync banner."""
        if self.has_local_changes and self.has_remote_changes and not pull_only:
            return '<=>'
        if self.has_local_changes and not pull_only:
            return '>>>'
        if self.has_remote_changes:
            return '<<<'
        return '---'


class SyncState(Enum):
    """Terminal state of one sync invocation."""
    NOOP = "noop"                      # Nothing local or remote to do
    PULLED = "pulled"                  # pull-only run stopped after integration
    PUSHED = "pushed"                  # Commit/tag (if any) and push completed
    CONNECTIVITY_FAILURE = "connectivity_failure"
    FAILED = "failed"


@dataclass
class SyncResult:
    """Outcome of SyncService.run, kept on `last_result`."""
    location: str
    state: SyncState
    repo_state: Optional[RepositoryState] = None
    proposed_version: Optional[str] = None
    tagged_version: Optional[str] = None
    committed: bool = False
    error: Optional[str] = None
    steps: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.state in (SyncState.NOOP, SyncState.PULLED, SyncState.PUSHED)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            'location': self.location,
            'state': self.state.value,
            'success': self.success,
            'committed': self.committed,
            'steps': list(self.steps),
        }
        if self.repo_state is not None:
            result['local_changes'] = self.repo_state.has_local_changes
            result['remote_changes'] = self.repo_state.has_remote_changes
        if self.proposed_version:
            result['proposed_version'] = self.proposed_version
        if self.tagged_version:
            result['tagged_version'] = self.tagged_version
        if self.error:
            result['error'] = self.error
        return result
