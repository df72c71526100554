"""
Repository version queries for gitsemver.

Resolves the current `git describe` version of a repository (creating the
initial tag when there is none yet) and derives "next" versions from it.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from packaging.version import InvalidVersion, Version as PackagingVersion

from ..config import load_config
from ..domain.version import BumpKind, UNKNOWN, UnknownVersion, Version
from ..exit_codes import GitCommandError
from ..infra.git_client import GitClient, GitTag
from .. import version_string

logger = logging.getLogger(__name__)


class VersionService:
    """
    Version queries against a repository's tag history.

    Example:
        service = VersionService()
        service.current_version("/path/to/repo")       # "1.2.3-4-gabcdef"
        service.next_version("/path/to/repo", "minor")  # 1.3.0
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        git_client: Optional[GitClient] = None
    ):
        self.config = config if config is not None else load_config()
        self.git = git_client or GitClient()

    def current_version(self, path: str) -> Union[str, UnknownVersion]:
        """
        `git describe` output for the repository, or UNKNOWN.

        When no version tag exists yet an annotated initial tag is created
        (sync.initial_tag, default 0.0.0). A repository without any commit
        cannot be tagged; that case logs a warning and yields UNKNOWN.
        """
        desc = self.git.describe(path)
        if version_string.is_valid(desc):
            return desc

        sync_config = self.config.get('sync', {})
        initial_tag = sync_config.get('initial_tag', '0.0.0')
        logger.info(f"No semantic version tag found, creating {initial_tag}...")
        try:
            self.git.tag_annotated(path, initial_tag,
                                   sync_config.get('initial_tag_message') or 'initial tag')
        except GitCommandError as e:
            logger.warning(
                f"Unable to tag - perhaps you need to make an initial commit first "
                f"to actually create HEAD.\n{e}"
            )
            return UNKNOWN

        desc = self.git.describe(path)
        if not version_string.is_valid(desc):
            logger.warning(f"Tagged {initial_tag} but describe still reports '{desc}'")
            return UNKNOWN
        return desc

    def clean_version(self, path: str):
        """Current version stripped to MAJOR.MINOR.PATCH."""
        desc = self.current_version(path)
        if desc is UNKNOWN:
            return UNKNOWN
        return version_string.clean(desc)

    def next_version(self, path: str, bump: Union[BumpKind, str, None] = None) -> Version:
        """Next major/minor/patch version after the current tag."""
        desc = self.current_version(path)
        if desc is UNKNOWN:
            return UNKNOWN
        return version_string.compute_next_version(bump, desc)

    def next_build(self, path: str) -> Version:
        desc = self.current_version(path)
        if desc is UNKNOWN:
            return UNKNOWN
        return version_string.next_build(desc)

    def tag_list(self, path: str, count: Optional[int] = 10) -> List[GitTag]:
        """Tags newest version first; tags that are not versions go last."""
        tags = sort_tags(self.git.tag_list(path))
        return tags[:count] if count else tags


def _as_version(name: str) -> Optional[PackagingVersion]:
    try:
        return PackagingVersion(name)
    except InvalidVersion:
        return None


def sort_tags(tags: List[GitTag]) -> List[GitTag]:
    """Sort tags by version, newest first, like `sort -V -r`."""
    versioned = [(v, t) for t in tags if (v := _as_version(t.name)) is not None]
    others = [t for t in tags if _as_version(t.name) is None]
    versioned.sort(key=lambda pair: pair[0], reverse=True)
    others.sort(key=lambda t: t.name, reverse=True)
    return [t for _, t in versioned] + others
