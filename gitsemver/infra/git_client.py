"""
Git client infrastructure for gitsemver.

Provides a clean abstraction over git command execution.
All git operations go through this client, making them:
- Easy to mock for testing
- Consistent in error handling
- Isolated from business logic

Every method takes the repository location explicitly; the client never
changes the process working directory.
"""

import subprocess
from dataclasses import dataclass
from typing import List, Optional, Tuple
import logging

from ..exit_codes import ConflictError, ConnectivityError, GitCommandError

logger = logging.getLogger(__name__)


@dataclass
class GitTag:
    """A git tag with the first line of its annotation."""
    name: str
    message: str = ""


@dataclass
class GitResult:
    """Captured result of one git invocation."""
    args: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class GitClient:
    """
    Abstraction over git commands.

    Query methods return parsed values; mutating methods raise a
    GitCommandError subclass when git exits non-zero, so a caller
    sequencing several steps stops at the first failure.

    Example:
        client = GitClient()
        if client.has_local_changes("/path/to/repo"):
            client.commit_all("/path/to/repo", "fix typo")
    """

    def __init__(self, timeout: Optional[int] = None):
        """
        Initialize GitClient.

        Args:
            timeout: Command timeout in seconds (default: wait indefinitely)
        """
        self.timeout = timeout

    def _run(self, args: List[str], cwd: str, check: bool = False,
             error_cls=GitCommandError, capture: bool = True) -> GitResult:
        """
        Run a git command.

        Args:
            args: Arguments after `git`
            cwd: Repository location
            check: Raise `error_cls` on non-zero exit
            error_cls: GitCommandError subclass raised when check fails
            capture: Capture output; False hands the terminal to git (editor prompts)

        Returns:
            GitResult with stripped stdout/stderr
        """
        logger.debug(f"Running in '{cwd}': git {' '.join(args)}")
        try:
            proc = subprocess.run(
                ['git'] + list(args),
                cwd=cwd,
                capture_output=capture,
                text=True,
                timeout=self.timeout
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            if check:
                raise error_cls(args, -1, str(e)) from e
            logger.warning(f"git {' '.join(args)} could not run: {e}")
            return GitResult(args, -1, "", str(e))

        result = GitResult(args, proc.returncode,
                           (proc.stdout or "").strip(), (proc.stderr or "").strip())
        if result.stdout:
            logger.debug(result.stdout)
        if check and not result.ok:
            raise error_cls(args, result.returncode, result.stderr or result.stdout)
        return result

    # ----------------------------------------------------------------- queries

    def has_local_changes(self, path: str) -> bool:
        """Uncommitted changes to tracked files (untracked files excluded)."""
        result = self._run(['status', '-uno', '--porcelain'], cwd=path, check=True)
        return bool(result.stdout)

    def remote_update(self, path: str) -> None:
        """Refresh remote metadata without touching the working tree.

        Raises:
            ConnectivityError: the remote could not be reached
        """
        self._run(['remote', 'update'], cwd=path, check=True,
                  error_cls=ConnectivityError)

    def has_remote_changes(self, path: str) -> bool:
        """True if the upstream has commits HEAD does not."""
        result = self._run(['log', 'HEAD..HEAD@{u}', '--oneline'], cwd=path, check=True)
        return bool(result.stdout)

    def describe(self, path: str) -> Optional[str]:
        """`git describe --always --tags`, None if git fails."""
        result = self._run(['describe', '--always', '--tags'], cwd=path)
        if result.ok and result.stdout:
            return result.stdout
        return None

    def stash_list(self, path: str) -> List[str]:
        result = self._run(['stash', 'list'], cwd=path)
        if not result.ok or not result.stdout:
            return []
        return result.stdout.splitlines()

    def tag_list(self, path: str) -> List[GitTag]:
        """All tags with the first line of their annotation (`git tag -n`)."""
        result = self._run(['tag', '-n'], cwd=path, check=True)
        tags = []
        for line in result.stdout.splitlines():
            if not line.strip():
                continue
            parts = line.split(None, 1)
            tags.append(GitTag(
                name=parts[0],
                message=parts[1].strip() if len(parts) > 1 else ""
            ))
        return tags

    def log(self, path: str, args: List[str]) -> str:
        """Run `git log` with the given arguments and return its output."""
        return self._run(['log'] + list(args), cwd=path, check=True).stdout

    def skiplist(self, path: str) -> List[str]:
        """Files flagged skip-worktree (`git ls-files -v` lines starting with S)."""
        result = self._run(['ls-files', '-v', '.'], cwd=path, check=True)
        return [line[2:] for line in result.stdout.splitlines() if line.startswith('S ')]

    # --------------------------------------------------------------- mutations

    def stash(self, path: str) -> None:
        self._run(['stash'], cwd=path, check=True)

    def stash_pop(self, path: str) -> None:
        """Restore the most recent stash.

        Raises:
            ConflictError: the stash does not apply cleanly. Git keeps the
                entry in `git stash list` in that case.
        """
        self._run(['stash', 'pop'], cwd=path, check=True, error_cls=ConflictError)

    def pull_rebase(self, path: str) -> None:
        """Replay local commits on top of the upstream.

        Raises:
            ConflictError: the rebase stopped on a conflict
        """
        self._run(['pull', '--rebase'], cwd=path, check=True, error_cls=ConflictError)

    def commit_all(self, path: str, message: str = "") -> None:
        """`git commit -a`; without a message git opens the editor."""
        args = ['commit', '-a']
        if message:
            args += ['-m', message]
        self._run(args, cwd=path, check=True, capture=bool(message))

    def tag_annotated(self, path: str, name: str, message: str = "") -> None:
        """Annotated tag at HEAD; without a message git opens the editor."""
        args = ['tag', '-a']
        if message:
            args += ['-m', message]
        args.append(name)
        self._run(args, cwd=path, check=True, capture=bool(message))

    def push_follow_tags(self, path: str) -> None:
        self._run(['push', '--follow-tags'], cwd=path, check=True)

    def skip_worktree(self, path: str, file: str, skip: bool = True) -> None:
        flag = '--skip-worktree' if skip else '--no-skip-worktree'
        self._run(['update-index', flag, file], cwd=path, check=True)


def run_shell(command: str, cwd: str) -> Tuple[str, int]:
    """
    Run a caller-configured shell command (post-stamp hook, publish).

    Returns:
        Tuple of (stdout, returncode)
    """
    logger.info(f"Running: {command}")
    proc = subprocess.run(command, shell=True, cwd=cwd, capture_output=True, text=True)
    if proc.returncode != 0 and proc.stderr and proc.stderr.strip():
        logger.error(proc.stderr.strip())
    return (proc.stdout or "").strip(), proc.returncode
