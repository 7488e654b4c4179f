"""Migration orchestration."""

from .interfaces import SourceRepoProvider, DestinationRepoManager
from .orchestrator import MigrationOrchestrator

__all__ = [
    'SourceRepoProvider',
    'DestinationRepoManager',
    'MigrationOrchestrator',
]
