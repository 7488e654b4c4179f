"""Gitea client, usable both as migration source and destination."""

from typing import List, Optional, Union
from urllib.parse import quote, urlsplit, urlunsplit

from loguru import logger
from pydantic import ValidationError

from ..config.config import DestinationConfig, SourceConfig
from ..exceptions import CreateError, FetchError
from ..migration.interfaces import DestinationRepoManager, SourceRepoProvider
from ..models.repository import RepoDescriptor, MAX_DESCRIPTION_LENGTH
from .client import APIClient
from .exceptions import APIError, ConflictError, NotFoundError


class GiteaClient(APIClient, SourceRepoProvider, DestinationRepoManager):
    """Gitea API v1 client bound to one user account."""

    def __init__(
        self,
        url: str,
        user: str,
        token: Optional[str] = None,
        timeout: int = 30,
        rate_limit_per_second: float = 10.0,
    ):
        """Initialize Gitea client.

        Args:
            url: Instance URL, e.g. ``https://gitea.example.com``
            user: Account owning the repositories
            token: API token
            timeout: Request timeout in seconds
            rate_limit_per_second: Maximum requests per second
        """
        self.url = url.rstrip('/')
        super().__init__(
            self.url + '/api/v1',
            token=token,
            timeout=timeout,
            rate_limit_per_second=rate_limit_per_second,
        )
        self.user = user
        self.logger = logger.bind(component='GiteaClient')

    @classmethod
    def from_config(
        cls, config: Union[DestinationConfig, SourceConfig]
    ) -> 'GiteaClient':
        """Create a client from a destination or Gitea source configuration."""
        return cls(
            config.url,
            config.user,
            token=config.token,
            timeout=config.timeout,
            rate_limit_per_second=config.rate_limit_per_second,
        )

    @property
    def connection_endpoint(self) -> str:
        return '/user' if self.token else '/version'

    def list_repos(self) -> List[RepoDescriptor]:
        """List the repositories of the authenticated user.

        Raises:
            FetchError: If a page could not be fetched or decoded
        """
        if not self.token:
            raise FetchError('Listing Gitea repositories requires a token')

        self.logger.info(f'Fetching repos for {self.user}...')
        try:
            items = self.get_paginated('/user/repos')
            repositories = [
                self._with_source_credentials(RepoDescriptor.from_api(item))
                for item in items
            ]
        except APIError as e:
            raise FetchError(f'Failed to list Gitea repos for {self.user}: {e}') from e
        except (ValidationError, AttributeError) as e:
            raise FetchError(
                f'Unexpected repository data from Gitea for {self.user}: {e}'
            ) from e

        self.logger.info(f'Total: {len(repositories)} repos')
        return repositories

    def _with_source_credentials(self, repository: RepoDescriptor) -> RepoDescriptor:
        # git runs without a terminal prompt, so private clones need the token
        return repository.model_copy(
            update={'clone_url': self._with_credentials(repository.clone_url)}
        )

    def repo_exists(self, name: str) -> bool:
        if not self.token or not self.user:
            return False

        try:
            response = self.get(f'/repos/{self.user}/{name}')
        except NotFoundError:
            return False
        except APIError as e:
            self.logger.warning(f'Could not check whether {name} exists: {e}')
            return False

        return response.status_code == 200

    def create_repo(self, name: str, description: str, private: bool) -> bool:
        """Create a repository owned by the user.

        An existing repository counts as created, so the call can be repeated.

        Args:
            name: Repository name
            description: Description, cut to 255 characters
            private: Repository visibility

        Returns:
            True if the repository was created or already exists
        """
        if not self.token:
            self.logger.warning(f'Cannot create {name}: no Gitea token configured')
            return False

        try:
            self._create(name, description, private)
        except CreateError as e:
            self.logger.warning(f'Failed to create repo {name}: {e}')
            return False

        return True

    def _create(self, name: str, description: str, private: bool) -> None:
        payload = {
            'name': name,
            'description': (description or '')[:MAX_DESCRIPTION_LENGTH],
            'private': private,
            'auto_init': False,
            'default_branch': 'main',
        }

        try:
            response = self.post('/user/repos', data=payload)
        except ConflictError:
            self.logger.info(f'Repo {name} exists')
            return
        except APIError as e:
            raise CreateError(str(e), status_code=e.status_code) from e

        if response.status_code != 201:
            raise CreateError(
                f'Unexpected status {response.status_code} creating {name}',
                status_code=response.status_code,
            )

        self.logger.info(f'Created repo {name}')

    def push_url(self, name: str) -> str:
        return self._with_credentials(f'{self.url}/{self.user}/{name}.git')

    def _with_credentials(self, url: str) -> str:
        """Embed the user and token into an HTTP(S) git URL.

        Without a token, or for URLs of another scheme, ``url`` is returned
        unchanged.
        """
        parts = urlsplit(url)
        if not (self.token and self.user) or parts.scheme not in ('http', 'https'):
            return url

        credentials = f"{quote(self.user, safe='')}:{quote(self.token, safe='')}"
        host = parts.netloc.rsplit('@', 1)[-1]
        return urlunsplit(
            (parts.scheme, f'{credentials}@{host}', parts.path, parts.query, '')
        )
