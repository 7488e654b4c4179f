"""Repository descriptor model."""

from typing import Any, Dict, List

from pydantic import BaseModel, Field, field_validator


MAX_DESCRIPTION_LENGTH = 255


class RepoDescriptor(BaseModel):
    """Normalized view of a remote repository.

    GitHub and Gitea both produce descriptors of this shape, so the
    orchestrator never needs to know which service a repository came from.
    """

    name: str = Field(..., description='Repository name, reused on the destination')
    clone_url: str = Field(..., description='Fetch URL on the source service')
    description: str = Field(default='', description='Free text description')
    private: bool = Field(default=False, description='Repository is private')
    fork: bool = Field(default=False, description='Repository is a fork')

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Validate the name can be used as a directory name."""
        if not v or not v.strip():
            raise ValueError('Repository name must not be empty')
        if '/' in v or '\\' in v or v in ('.', '..'):
            raise ValueError(f'Repository name is not directory safe: {v!r}')
        return v

    @field_validator('description', mode='before')
    @classmethod
    def normalize_description(cls, v):
        return v or ''

    @property
    def truncated_description(self) -> str:
        """Description cut to the length the destination API accepts."""
        return self.description[:MAX_DESCRIPTION_LENGTH]

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'RepoDescriptor':
        """Build a descriptor from a GitHub or Gitea repository object.

        Args:
            data: Repository JSON object returned by the listing endpoint

        Returns:
            Repository descriptor
        """
        return cls(
            name=data.get('name', ''),
            clone_url=data.get('clone_url') or '',
            description=data.get('description'),
            private=bool(data.get('private', False)),
            fork=bool(data.get('fork', False)),
        )


def filter_forks(repositories, include_forks: bool) -> List[RepoDescriptor]:
    """Return the working set, dropping forks unless they are included.

    Args:
        repositories: Descriptors as listed by the source
        include_forks: Keep forks in the working set

    Returns:
        List of descriptors to migrate, in source order
    """
    if include_forks:
        return list(repositories)
    return [repository for repository in repositories if not repository.fork]
