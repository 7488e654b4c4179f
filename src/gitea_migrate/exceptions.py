"""Migration error taxonomy."""

from typing import List, Optional


class MigrationError(Exception):
    """Base exception for repository migration errors."""

    pass


class FetchError(MigrationError):
    """Listing repositories on the source service failed.

    This is the only error that aborts a whole run.
    """

    pass


class TempDirError(MigrationError):
    """The temporary working directory for an attempt could not be created."""

    pass


class CreateError(MigrationError):
    """The destination repository could not be created."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class GitCommandError(MigrationError):
    """A git invocation exited with a non-zero status."""

    def __init__(
        self,
        message: str,
        command: Optional[List[str]] = None,
        returncode: Optional[int] = None,
        stderr: str = '',
    ):
        """Initialize git command error.

        Args:
            message: Error message
            command: Masked git command line
            returncode: Process exit status, None on timeout
            stderr: Captured standard error
        """
        super().__init__(message)
        self.command = command or []
        self.returncode = returncode
        self.stderr = stderr


class CloneError(GitCommandError):
    """Cloning the source repository failed."""

    pass


class PushError(GitCommandError):
    """Pushing to the destination repository failed."""

    pass
