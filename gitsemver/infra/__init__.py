"""
Infrastructure layer for gitsemver.

Contains abstractions for external systems:
- GitClient: Git command execution
- run_shell: caller-configured hook commands (post-stamp, publish)

These provide clean interfaces that can be mocked for testing.
"""

from .git_client import GitClient, GitResult, GitTag, run_shell

__all__ = [
    'GitClient',
    'GitResult',
    'GitTag',
    'run_shell',
]
