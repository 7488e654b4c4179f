"""Migration orchestrator driving per-repository attempts."""

import os
import shutil
import tempfile
import time
from datetime import datetime
from typing import List, Optional

from loguru import logger

from ..config.config import GitConfig
from ..exceptions import CloneError, PushError, TempDirError
from ..git.operations import GitOperations
from ..models.repository import RepoDescriptor, filter_forks
from ..models.stats import MigrationStats
from .interfaces import DestinationRepoManager, SourceRepoProvider

DEFAULT_RETRY_DELAY = 2.0


class MigrationOrchestrator:
    """Migrates every repository of a source account, one at a time."""

    def __init__(
        self,
        source: SourceRepoProvider,
        destination: Optional[DestinationRepoManager] = None,
        runner: Optional[GitOperations] = None,
        git_config: Optional[GitConfig] = None,
        retry_delay: float = DEFAULT_RETRY_DELAY,
    ):
        """Initialize migration orchestrator.

        Args:
            source: Lists the repositories to migrate
            destination: Creates and addresses destination repositories;
                without one, repositories are only cloned
            runner: Git transport, built from ``git_config`` if omitted
            git_config: Git configuration for repository operations
            retry_delay: Seconds to wait before each retry of a repository
        """
        self.source = source
        self.destination = destination
        self.git_config = git_config or GitConfig()
        self.runner = runner or GitOperations(self.git_config)
        self.retry_delay = retry_delay
        self.stats = MigrationStats()
        self.logger = logger.bind(component='MigrationOrchestrator')

    def run(self, include_forks: bool = False, max_attempts: int = 2) -> MigrationStats:
        """Migrate the working set of repositories.

        Repository failures are counted, never raised. Only a failure to list
        the source repositories aborts the run.

        Args:
            include_forks: Migrate forks as well
            max_attempts: Attempts per repository, at least 1

        Returns:
            Final migration statistics

        Raises:
            FetchError: If the source repositories cannot be listed
            ValueError: If ``max_attempts`` is below 1
        """
        if max_attempts < 1:
            raise ValueError('max_attempts must be at least 1')

        self.stats = MigrationStats(started_at=datetime.now())

        repositories = self.source.list_repos()
        if not repositories:
            self.logger.info('No repos found')
            self.stats.completed_at = datetime.now()
            return self.stats

        working_set = filter_forks(repositories, include_forks)
        skipped = len(repositories) - len(working_set)
        if skipped:
            self.logger.info(f'Skipping {skipped} forks')
        self.stats.total = len(working_set)

        for index, repository in enumerate(working_set, start=1):
            self.logger.info(
                f'[{index}/{len(working_set)}] Repo: {repository.name}'
            )
            self._migrate_with_retries(repository, max_attempts)

        self.stats.completed_at = datetime.now()
        self.logger.info(
            f'Migration completed: {self.stats.success} successful, '
            f'{self.stats.failed} failed out of {self.stats.total}'
        )
        return self.stats

    def dry_run(self, include_forks: bool = False) -> List[RepoDescriptor]:
        """List what a run would migrate without cloning or creating anything.

        Raises:
            FetchError: If the source repositories cannot be listed
        """
        working_set = filter_forks(self.source.list_repos(), include_forks)
        for repository in working_set:
            visibility = 'private' if repository.private else 'public'
            self.logger.info(
                f'Dry run: would migrate {repository.name} ({visibility})'
            )
        return working_set

    def _migrate_with_retries(self, repository: RepoDescriptor, max_attempts: int) -> None:
        for attempt in range(1, max_attempts + 1):
            if attempt > 1:
                self.logger.info(f'Retry {attempt}...')
                time.sleep(self.retry_delay)

            if self._attempt(repository):
                self.stats.record_success(repository.name, attempts=attempt)
                self.logger.info(f'{repository.name} migrated OK')
                return

            self.stats.record_failed_attempt()

        self.stats.record_failure(repository.name)
        self.logger.error(
            f'{repository.name} failed after {max_attempts} attempt(s)'
        )

    def _attempt(self, repository: RepoDescriptor) -> bool:
        """Run the whole workflow for one repository once.

        Returns:
            True if the repository was cloned and, with a destination, pushed
        """
        try:
            temp_dir = self._create_temp_directory(repository.name)
        except TempDirError as e:
            self.logger.error(str(e))
            return False

        try:
            return self._migrate_in(temp_dir, repository)
        except Exception as e:
            self.logger.exception(
                f'Unexpected error migrating {repository.name}: {e}'
            )
            return False
        finally:
            self._cleanup_temp_directory(temp_dir)

    def _migrate_in(self, temp_dir: str, repository: RepoDescriptor) -> bool:
        repo_path = os.path.join(temp_dir, repository.name)

        if self.destination is not None:
            self._ensure_destination(repository)

        try:
            self.runner.clone(repository.clone_url, repo_path)
        except CloneError as e:
            self.logger.warning(f'Clone failed: {e}, trying mirror...')
            try:
                self.runner.mirror_clone(repository.clone_url, repo_path)
            except CloneError as e:
                self.logger.error(f'Mirror clone failed: {e}')
                return False

        if self.destination is not None:
            try:
                result = self.runner.push(
                    repo_path, self.destination.push_url(repository.name)
                )
            except PushError as e:
                self.logger.error(f'Push failed: {e}')
                return False

            if result.fallback_branch:
                self.logger.warning(
                    f'Only branch {result.fallback_branch} of {repository.name} '
                    'was pushed'
                )
            if not result.tags_pushed:
                self.logger.warning(f'Tags of {repository.name} were not pushed')
            self.logger.info('Pushed to destination')

        return True

    def _ensure_destination(self, repository: RepoDescriptor) -> None:
        if self.destination.repo_exists(repository.name):
            self.logger.debug(f'Repo {repository.name} already exists on destination')
            return

        created = self.destination.create_repo(
            repository.name,
            repository.truncated_description,
            repository.private,
        )
        if not created:
            self.logger.warning(
                f'Could not create {repository.name} on destination, '
                'continuing with push'
            )

    def _create_temp_directory(self, name: str) -> str:
        """Create an isolated working directory for one attempt.

        Raises:
            TempDirError: If the directory cannot be created
        """
        try:
            temp_dir = tempfile.mkdtemp(prefix=f'mig_{name}_', dir=self.git_config.temp_dir)
        except OSError as e:
            raise TempDirError(f'Failed to create temporary directory for {name}: {e}') from e

        self.logger.debug(f'Created temporary directory: {temp_dir}')
        return temp_dir

    def _cleanup_temp_directory(self, temp_path: str) -> None:
        try:
            shutil.rmtree(temp_path)
            self.logger.debug(f'Cleaned up temporary directory: {temp_path}')
        except OSError as e:
            self.logger.warning(
                f'Failed to cleanup temporary directory {temp_path}: {e}'
            )
