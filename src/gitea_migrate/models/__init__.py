"""Data models for migrated repositories and run results."""

from .repository import RepoDescriptor, MAX_DESCRIPTION_LENGTH, filter_forks
from .stats import MigrationStats

__all__ = [
    'RepoDescriptor',
    'MAX_DESCRIPTION_LENGTH',
    'filter_forks',
    'MigrationStats',
]
