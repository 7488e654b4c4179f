"""Migration engine - main entry point for migration operations."""

from typing import List

from loguru import logger

from ..api.client import APIClient
from ..api.gitea import GiteaClient
from ..api.github import GitHubClient
from ..config.config import Config
from ..git.operations import GitOperations
from ..models.repository import RepoDescriptor
from ..models.stats import MigrationStats
from .orchestrator import MigrationOrchestrator


class MigrationEngine:
    """Builds the service clients from configuration and runs the orchestrator."""

    def __init__(self, config: Config):
        """Initialize migration engine.

        Args:
            config: Migration configuration
        """
        self.config = config
        self.logger = logger.bind(component='MigrationEngine')

        self.source_client = self._create_source_client()
        self.destination_client = GiteaClient.from_config(config.destination)
        self.git_operations = GitOperations(config.git)

        self.orchestrator = MigrationOrchestrator(
            source=self.source_client,
            destination=self.destination_client,
            runner=self.git_operations,
            git_config=config.git,
            retry_delay=config.migration.retry_delay,
        )

    def _create_source_client(self) -> APIClient:
        source = self.config.source
        if source.kind == 'gitea':
            return GiteaClient.from_config(source)
        return GitHubClient.from_config(source)

    def migrate(self) -> MigrationStats:
        """Execute the migration.

        Returns:
            Migration statistics

        Raises:
            FetchError: If the source repositories cannot be listed
        """
        self.logger.info(
            f'Starting migration from {self.config.source.kind} '
            f'user {self.config.source.user} to {self.config.destination.url}'
        )

        try:
            return self.orchestrator.run(
                include_forks=self.config.migration.include_forks,
                max_attempts=self.config.migration.max_attempts,
            )
        finally:
            self.close()

    def dry_run(self) -> List[RepoDescriptor]:
        """List the repositories a migration would copy.

        Returns:
            Working set of repositories
        """
        self.logger.info('Starting migration dry run')

        try:
            return self.orchestrator.dry_run(
                include_forks=self.config.migration.include_forks
            )
        finally:
            self.close()

    def test_connectivity(self) -> None:
        """Test connectivity to both services and git availability.

        Raises:
            ConnectionError: If any check fails
        """
        self.logger.info('Testing connectivity to source and destination')

        if not self.source_client.test_connection():
            raise ConnectionError(
                f'Cannot connect to source {self.config.source.kind} service'
            )

        if not self.destination_client.test_connection():
            raise ConnectionError('Cannot connect to destination Gitea instance')

        if not self.git_operations.is_available():
            raise ConnectionError('git not found')

        self.logger.info('Connectivity tests passed')

    def close(self) -> None:
        self.source_client.close()
        self.destination_client.close()
