"""Git repository pushing operations."""

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from ..config.config import GitConfig
from ..exceptions import PushError
from .command import GitCommandResult, run_git_command


@dataclass
class PushResult:
    """Result of a git push operation."""

    branches_pushed_all: bool = True
    fallback_branch: Optional[str] = None
    tags_pushed: bool = False


class GitPusher:
    """Pushes a local repository to a remote in three stages."""

    def __init__(self, config: GitConfig):
        """Initialize git pusher.

        Args:
            config: Git configuration
        """
        self.config = config
        self.logger = logger.bind(component='GitPusher')

    def push(self, repository_path: str, remote_url: str) -> PushResult:
        """Push branches and tags of a local repository.

        1. ``origin`` is pointed at ``remote_url``.
        2. All branches are pushed at once; if that is rejected, only the
           current branch is pushed with upstream tracking.
        3. Tags are pushed; a failure here is only logged.

        Args:
            repository_path: Local repository, bare or with a checkout
            remote_url: Authenticated destination URL

        Returns:
            Push operation result

        Raises:
            PushError: If the remote cannot be configured or no branch could
                be pushed
        """
        result = PushResult()

        self._set_origin(repository_path, remote_url)

        self.logger.info('Pushing all branches to destination...')
        branches = self._git(['git', 'push', '--all', 'origin'], repository_path)
        if not branches.success:
            self.logger.warning(
                f'Pushing all branches failed ({branches.error}), '
                'falling back to the current branch'
            )
            result.branches_pushed_all = False
            result.fallback_branch = self._push_current_branch(repository_path)

        self.logger.info('Pushing all tags to destination...')
        tags = self._git(['git', 'push', '--tags', 'origin'], repository_path)
        if tags.success:
            result.tags_pushed = True
        else:
            self.logger.warning(f'Failed to push tags: {tags.error}')

        return result

    def current_branch(self, repository_path: str) -> str:
        """Return the branch HEAD points to.

        Raises:
            PushError: If the branch cannot be determined
        """
        head = self._git(
            ['git', 'rev-parse', '--abbrev-ref', 'HEAD'], repository_path
        )
        branch = head.stdout.strip()
        if not head.success or not branch or branch == 'HEAD':
            raise self._error('Could not determine current branch', head)
        return branch

    def _set_origin(self, repository_path: str, remote_url: str) -> None:
        set_url = self._git(
            ['git', 'remote', 'set-url', 'origin', remote_url], repository_path
        )
        if set_url.success:
            return

        add = self._git(['git', 'remote', 'add', 'origin', remote_url], repository_path)
        if not add.success:
            raise self._error('Failed to configure origin remote', add)

    def _push_current_branch(self, repository_path: str) -> str:
        branch = self.current_branch(repository_path)
        self.logger.info(f'Pushing branch {branch} to destination...')

        pushed = self._git(['git', 'push', '-u', 'origin', branch], repository_path)
        if not pushed.success:
            raise self._error(f'Failed to push branch {branch}', pushed)
        return branch

    def _git(self, cmd: list, work_dir: str) -> GitCommandResult:
        return run_git_command(cmd, work_dir=work_dir, timeout=self.config.timeout)

    @staticmethod
    def _error(message: str, result: GitCommandResult) -> PushError:
        return PushError(
            f'{message}: {result.error}',
            command=result.command,
            returncode=result.returncode,
            stderr=result.stderr,
        )
