"""Git repository cloning operations."""

import os
import shutil

from loguru import logger

from ..config.config import GitConfig
from ..exceptions import CloneError
from ..utils.logging import mask_url
from .command import GitCommandResult, run_git_command


class GitCloner:
    """Handles git repository cloning operations."""

    def __init__(self, config: GitConfig):
        """Initialize git cloner.

        Args:
            config: Git configuration
        """
        self.config = config
        self.logger = logger.bind(component='GitCloner')

    def clone(self, url: str, destination_path: str) -> None:
        """Clone a repository with a working checkout.

        Args:
            url: URL to clone from
            destination_path: Local destination path

        Raises:
            CloneError: If git exits with a non-zero status
        """
        self.logger.info(f'Cloning {mask_url(url)}...')
        result = run_git_command(
            ['git', 'clone', '--no-hardlinks', url, destination_path],
            timeout=self.config.timeout,
        )
        self._check(result, 'Clone')

    def mirror_clone(self, url: str, destination_path: str) -> None:
        """Clone every ref of a repository into a bare mirror.

        Leftovers of a failed clone at ``destination_path`` are removed first.
        After the clone the remote is no longer marked as a mirror, so the
        repository accepts ``push --all`` once its origin is repointed.

        Args:
            url: URL to clone from
            destination_path: Local destination path

        Raises:
            CloneError: If git exits with a non-zero status
        """
        self.logger.info(f'Mirror cloning {mask_url(url)}...')
        if os.path.exists(destination_path):
            shutil.rmtree(destination_path)

        result = run_git_command(
            ['git', 'clone', '--mirror', url, destination_path],
            timeout=self.config.timeout,
        )
        self._check(result, 'Mirror clone')

        unset = run_git_command(
            ['git', 'config', '--unset', 'remote.origin.mirror'],
            work_dir=destination_path,
            timeout=self.config.timeout,
        )
        if not unset.success:
            self.logger.warning(f'Could not unset mirror flag: {unset.error}')

    def _check(self, result: GitCommandResult, operation: str) -> None:
        if result.success:
            return
        raise CloneError(
            f'{operation} failed: {result.error}',
            command=result.command,
            returncode=result.returncode,
            stderr=result.stderr,
        )
