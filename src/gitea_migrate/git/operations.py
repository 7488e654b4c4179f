"""Transport between the source and destination services via local clones."""

from typing import Optional

from loguru import logger

from ..config.config import GitConfig
from .clone import GitCloner
from .command import run_git_command
from .push import GitPusher, PushResult


class GitOperations:
    """Runs the git level steps of a repository migration.

    Every call is a blocking subprocess invocation; no state is kept between
    calls.
    """

    def __init__(self, config: Optional[GitConfig] = None):
        """Initialize Git operations.

        Args:
            config: Git configuration options
        """
        self.config = config or GitConfig()

        self.cloner = GitCloner(self.config)
        self.pusher = GitPusher(self.config)

        self.logger = logger.bind(component='GitOperations')

    def clone(self, url: str, destination_path: str) -> None:
        """Plain clone; raises ``CloneError``."""
        self.cloner.clone(url, destination_path)

    def mirror_clone(self, url: str, destination_path: str) -> None:
        """Bare mirror clone of every ref; raises ``CloneError``."""
        self.cloner.mirror_clone(url, destination_path)

    def push(self, repository_path: str, remote_url: str) -> PushResult:
        """Three-stage push; raises ``PushError``."""
        return self.pusher.push(repository_path, remote_url)

    def is_available(self) -> bool:
        """Check if git command is available.

        Returns:
            True if git is available, False otherwise
        """
        result = run_git_command(['git', '--version'], timeout=30)
        if result.success:
            self.logger.debug(result.stdout.strip())
        return result.success
