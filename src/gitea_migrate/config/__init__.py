"""Configuration models."""

from .config import (
    Config,
    SourceConfig,
    DestinationConfig,
    MigrationConfig,
    GitConfig,
    LoggingConfig,
)

__all__ = [
    'Config',
    'SourceConfig',
    'DestinationConfig',
    'MigrationConfig',
    'GitConfig',
    'LoggingConfig',
]
