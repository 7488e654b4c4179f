"""Capabilities the orchestrator needs from the hosting services."""

from abc import ABC, abstractmethod
from typing import List

from ..models.repository import RepoDescriptor


class SourceRepoProvider(ABC):
    """Lists the repositories owned by an account on the source service."""

    @abstractmethod
    def list_repos(self) -> List[RepoDescriptor]:
        """List every repository of the configured account.

        Implementations page internally and return the complete set.

        Returns:
            Repository descriptors in the order the service returns them

        Raises:
            FetchError: If any page could not be fetched
        """
        pass


class DestinationRepoManager(ABC):
    """Creates repositories on the destination service and addresses them."""

    @abstractmethod
    def repo_exists(self, name: str) -> bool:
        """Check whether the repository already exists.

        Returns False instead of raising when the check itself fails.
        """
        pass

    @abstractmethod
    def create_repo(self, name: str, description: str, private: bool) -> bool:
        """Create the repository.

        Returns:
            True if it was created or already existed, False otherwise
        """
        pass

    @abstractmethod
    def push_url(self, name: str) -> str:
        """Return an authenticated URL suitable for a non-interactive push."""
        pass
