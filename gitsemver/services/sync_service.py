"""
Sync orchestration for gitsemver.

One sync brings a working tree and its upstream together and publishes
local work under the next semantic version tag:

    probe -> [stash] -> [pull --rebase] -> [stash pop] -> (pull-only stop)
          -> next version -> stamp callback -> commit -> tag -> push

The next version is only resolved after remote history has been
integrated, since unseen remote tags change what "next" means.

Nothing is rolled back on failure. A run that stops mid-stash or
mid-rebase leaves the repository as-is for manual resolution; running the
sync again re-probes from scratch.
"""

import logging
import os
from typing import Any, Dict, Optional

from ..config import load_config
from ..domain.sync import (
    RepositoryState,
    StampCallback,
    SyncResult,
    SyncState,
    TagParameters,
)
from ..exit_codes import SYNC_FAILED, SYNC_OK, VersionError
from ..infra.git_client import GitClient
from .. import version_string
from .version_service import VersionService

logger = logging.getLogger(__name__)

BANNER = '-' * 34


class SyncService:
    """
    Stash/pull/commit/tag/push workflow for a single repository.

    The service holds no state between runs apart from `last_result`,
    which describes how the most recent run ended.

    Example:
        service = SyncService()
        params = TagParameters.from_flags(minor=True, words=["add", "export"])
        if service.run("/path/to/repo", params) != 0:
            print(service.last_result.error)
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        git_client: Optional[GitClient] = None,
        version_service: Optional[VersionService] = None
    ):
        """
        Initialize SyncService.

        Args:
            config: Configuration dict (loads default if None)
            git_client: GitClient instance (creates new if None)
            version_service: VersionService sharing the same git client
        """
        self.config = config if config is not None else load_config()
        self.git = git_client or GitClient()
        self.versions = version_service or VersionService(self.config, self.git)
        self.last_result: Optional[SyncResult] = None

    def probe(self, location: str) -> RepositoryState:
        """
        Query local and remote divergence.

        Raises:
            ConnectivityError: the remote refresh failed
            GitCommandError: status or log could not be read
        """
        has_local = self.git.has_local_changes(location)
        self.git.remote_update(location)
        has_remote = self.git.has_remote_changes(location)
        return RepositoryState(has_local_changes=has_local, has_remote_changes=has_remote)

    def run(
        self,
        location: str,
        params: TagParameters,
        stamp_callback: Optional[StampCallback] = None
    ) -> int:
        """
        Sync the repository at `location`.

        Args:
            location: Repository working tree
            params: Caller intent (bump kind, message, pull-only, notag)
            stamp_callback: Called as `stamp_callback(None, version)` before
                the commit; its return value is the version that gets
                tagged (None keeps the proposed version)

        Returns:
            0 on success (including the no-op case), -1 on any failure
        """
        location = os.path.normpath(os.path.expanduser(str(location)))
        result = SyncResult(location=location, state=SyncState.FAILED)
        self.last_result = result
        connected = False

        try:
            repo_state = self.probe(location)
            result.repo_state = repo_state
            connected = True

            if not repo_state.any_changes:
                result.state = SyncState.NOOP
                return SYNC_OK

            logger.info(BANNER)
            logger.info(f"{repo_state.blip(params.pull_only)} {location}")
            logger.info(BANNER)

            self._integrate_remote(location, repo_state, result)

            if params.pull_only:
                result.state = SyncState.PULLED
                return SYNC_OK

            if repo_state.has_local_changes:
                if params.notag:
                    self._step(result, 'commit')
                    self.git.commit_all(location, params.comment)
                    result.committed = True
                else:
                    version = self._stamp(location, params, stamp_callback, result)
                    self._step(result, 'commit')
                    self.git.commit_all(location, params.comment)
                    result.committed = True
                    self._step(result, 'tag')
                    self.git.tag_annotated(location, version, params.comment)
                    result.tagged_version = version

            # Earlier steps may have rewritten history even without a commit
            self._step(result, 'push')
            self.git.push_follow_tags(location)

            result.state = SyncState.PUSHED
            return SYNC_OK

        except Exception as e:
            result.error = str(e)
            logger.error(str(e))
            logger.info(BANNER)
            if not connected:
                result.state = SyncState.CONNECTIVITY_FAILURE
                logger.warning(f"*** [{location}] WARNING: sync could not connect to this repo...")
            else:
                result.state = SyncState.FAILED
                logger.warning(f"*** [{location}] WARNING: sync did not complete, check repo for conflicts...")
            logger.info(BANNER)
            return SYNC_FAILED

    def _step(self, result: SyncResult, name: str) -> None:
        result.steps.append(name)

    def _integrate_remote(self, location: str, repo_state: RepositoryState,
                          result: SyncResult) -> None:
        """Stash local edits around a rebase pull when both sides changed."""
        protect_local = repo_state.has_local_changes and repo_state.has_remote_changes

        if protect_local:
            self._step(result, 'stash')
            self.git.stash(location)

        if repo_state.has_remote_changes:
            self._step(result, 'pull')
            self.git.pull_rebase(location)

        if protect_local:
            self._step(result, 'stash_pop')
            self.git.stash_pop(location)

    def _stamp(self, location: str, params: TagParameters,
               stamp_callback: Optional[StampCallback], result: SyncResult) -> str:
        """Resolve the next version and let the callback stamp it."""
        next_version = self.versions.next_version(location, params.bump)
        if not version_string.is_valid(next_version):
            raise VersionError("Can't determine 'next' version of current tag...")

        version = str(next_version)
        result.proposed_version = version

        if stamp_callback:
            self._step(result, 'stamp')
            stamped = stamp_callback(None, version)
            if stamped is not None:
                stamped = str(stamped)
                if not version_string.is_valid(stamped):
                    raise VersionError(f"Stamp callback returned invalid version '{stamped}'")
                version = stamped

        return version


def run_sync(
    location: str,
    params: TagParameters,
    stamp_callback: Optional[StampCallback] = None,
    git_client: Optional[GitClient] = None,
    config: Optional[Dict[str, Any]] = None
) -> int:
    """Sync `location` once; 0 on success, -1 on failure."""
    return SyncService(config=config, git_client=git_client).run(location, params, stamp_callback)
