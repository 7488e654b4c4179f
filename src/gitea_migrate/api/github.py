"""GitHub source client."""

from typing import List, Optional

from loguru import logger
from pydantic import ValidationError

from ..config.config import GITHUB_API_URL, SourceConfig
from ..exceptions import FetchError
from ..migration.interfaces import SourceRepoProvider
from ..models.repository import RepoDescriptor
from .client import APIClient
from .exceptions import APIError


class GitHubClient(APIClient, SourceRepoProvider):
    """Lists the public repositories of a GitHub user."""

    def __init__(
        self,
        user: str,
        token: Optional[str] = None,
        base_url: str = GITHUB_API_URL,
        timeout: int = 30,
        rate_limit_per_second: float = 10.0,
    ):
        super().__init__(
            base_url,
            token=token,
            timeout=timeout,
            rate_limit_per_second=rate_limit_per_second,
        )
        self.user = user
        self.session.headers.update({'Accept': 'application/vnd.github+json'})
        self.logger = logger.bind(component='GitHubClient')

    @classmethod
    def from_config(cls, config: SourceConfig) -> 'GitHubClient':
        return cls(
            config.user,
            token=config.token,
            base_url=config.url,
            timeout=config.timeout,
            rate_limit_per_second=config.rate_limit_per_second,
        )

    @property
    def connection_endpoint(self) -> str:
        return f'/users/{self.user}'

    def list_repos(self) -> List[RepoDescriptor]:
        """List every repository of the user, most recently updated first.

        Returns:
            Repository descriptors

        Raises:
            FetchError: If a page could not be fetched or decoded
        """
        self.logger.info(f'Fetching repos for {self.user}...')

        try:
            items = self.get_paginated(
                f'/users/{self.user}/repos',
                params={'type': 'all', 'sort': 'updated'},
            )
            repositories = [RepoDescriptor.from_api(item) for item in items]
        except APIError as e:
            raise FetchError(f'Failed to list GitHub repos for {self.user}: {e}') from e
        except (ValidationError, AttributeError) as e:
            raise FetchError(
                f'Unexpected repository data from GitHub for {self.user}: {e}'
            ) from e

        self.logger.info(f'Total: {len(repositories)} repos')
        return repositories
