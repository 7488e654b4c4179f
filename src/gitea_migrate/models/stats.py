"""Aggregate results of a migration run."""

from datetime import datetime, timedelta
from typing import List, Optional

from pydantic import BaseModel, Field


class MigrationStats(BaseModel):
    """Counters and failure lists accumulated by the orchestrator.

    ``failed_names`` holds every repository whose final attempt failed,
    once each, so ``failed == len(failed_names)``. Repositories that failed
    an attempt and later succeeded are listed in ``recovered_names``;
    ``failed_attempts`` counts every failing attempt across the run.
    """

    total: int = Field(default=0, description='Repositories in the working set')
    success: int = Field(default=0, description='Repositories migrated')
    failed: int = Field(default=0, description='Repositories whose last attempt failed')
    failed_names: List[str] = Field(
        default_factory=list, description='Names of failed repositories, in order'
    )
    recovered_names: List[str] = Field(
        default_factory=list, description='Names that succeeded after a retry'
    )
    failed_attempts: int = Field(default=0, description='Failing attempts in total')

    started_at: Optional[datetime] = Field(default=None, description='Run start time')
    completed_at: Optional[datetime] = Field(
        default=None, description='Run completion time'
    )

    def record_failed_attempt(self) -> None:
        self.failed_attempts += 1

    def record_success(self, name: str, attempts: int = 1) -> None:
        """Count a repository whose final attempt succeeded.

        Args:
            name: Repository name
            attempts: Number of attempts it took
        """
        self.success += 1
        if attempts > 1 and name not in self.recovered_names:
            self.recovered_names.append(name)

    def record_failure(self, name: str) -> None:
        """Count a repository whose final attempt failed."""
        self.failed += 1
        if name not in self.failed_names:
            self.failed_names.append(name)

    @property
    def duration(self) -> Optional[timedelta]:
        if self.started_at and self.completed_at:
            return self.completed_at - self.started_at
        return None
