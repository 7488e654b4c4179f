"""Git operations module for repository migration."""

from .operations import GitOperations
from .clone import GitCloner
from .push import GitPusher, PushResult
from .command import GitCommandResult, run_git_command

__all__ = [
    'GitOperations',
    'GitCloner',
    'GitPusher',
    'PushResult',
    'GitCommandResult',
    'run_git_command',
]
