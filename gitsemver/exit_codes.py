"""
Standard exit codes for gitsemver commands.

Following Unix/POSIX conventions for command-line tools.
"""
from typing import List, Optional

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
GIT_ERROR = 64           # A git invocation failed
NETWORK_ERROR = 68       # Remote could not be reached
VERSION_ERROR = 70       # Next version could not be determined
CONFLICT_ERROR = 72      # Stash restore or rebase left conflicts
MANIFEST_ERROR = 73      # Manifest could not be read or written
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Signal returned by the sync orchestrator
SYNC_OK = 0
SYNC_FAILED = -1


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code

class GitCommandError(CommandError):
    """Raised when a git invocation exits non-zero."""
    def __init__(self, args: List[str], returncode: int, stderr: str = "",
                 exit_code: int = GIT_ERROR):
        detail = (stderr or "").strip()
        message = f"git {' '.join(args)} failed with exit code {returncode}"
        if detail:
            message += f": {detail}"
        super().__init__(message, exit_code)
        self.git_args = list(args)
        self.returncode = returncode
        self.stderr = stderr

class ConnectivityError(GitCommandError):
    """Raised when remote metadata could not be refreshed."""
    def __init__(self, args: List[str], returncode: int, stderr: str = ""):
        super().__init__(args, returncode, stderr, exit_code=NETWORK_ERROR)

class ConflictError(GitCommandError):
    """Raised when restoring a stash or rebasing leaves conflicts behind."""
    def __init__(self, args: List[str], returncode: int, stderr: str = ""):
        super().__init__(args, returncode, stderr, exit_code=CONFLICT_ERROR)

class VersionError(CommandError):
    """Raised when a bump request cannot resolve to a concrete version."""
    def __init__(self, message: str):
        super().__init__(message, VERSION_ERROR)

class ManifestError(CommandError):
    """Raised when a manifest cannot be read, parsed or written."""
    def __init__(self, message: str, filename: Optional[str] = None):
        super().__init__(message, MANIFEST_ERROR)
        self.filename = filename

