"""Per-snippet migration state and batch summary."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.repository import MirrorPair, MirrorTarget
from ..models.snippet import Snippet


class MigrationState(str, Enum):
    """Lifecycle of a single snippet migration."""

    MATCHED = 'matched'
    RESOLVED = 'resolved'
    TARGET_CHECKED = 'target_checked'
    TRANSFERRED = 'transferred'
    SOURCE_RETIRED = 'source_retired'
    REPORTED = 'reported'
    ABORTED = 'aborted'


# Allowed forward transitions; any non-terminal state may also abort
TRANSITIONS = {
    MigrationState.MATCHED: MigrationState.RESOLVED,
    MigrationState.RESOLVED: MigrationState.TARGET_CHECKED,
    MigrationState.TARGET_CHECKED: MigrationState.TRANSFERRED,
    MigrationState.TRANSFERRED: MigrationState.SOURCE_RETIRED,
    MigrationState.SOURCE_RETIRED: MigrationState.REPORTED,
}


class SnippetMigration(BaseModel):
    """Record carried through the pipeline for one snippet."""

    snippet: Snippet = Field(..., description='Source snippet, full once resolved')
    state: MigrationState = Field(default=MigrationState.MATCHED)
    target: Optional[MirrorTarget] = Field(default=None, description='Target')

    started_at: datetime = Field(default_factory=datetime.now)
    completed_at: Optional[datetime] = Field(default=None)

    failed_state: Optional[MigrationState] = Field(
        default=None, description='State the migration was in when it aborted'
    )
    error_message: Optional[str] = Field(default=None)

    @property
    def finished(self) -> bool:
        return self.state in (MigrationState.REPORTED, MigrationState.ABORTED)

    def advance(self, state: MigrationState) -> None:
        """Move to the next state.

        Raises:
            ValueError: If ``state`` does not follow the current one
        """
        if TRANSITIONS.get(self.state) != state:
            raise ValueError(f'Invalid transition {self.state.value} -> {state.value}')
        self.state = state
        if state == MigrationState.REPORTED:
            self.completed_at = datetime.now()

    def abort(self, error: Exception) -> None:
        """Terminate with an error, remembering where it happened."""
        self.failed_state = self.state
        self.state = MigrationState.ABORTED
        self.error_message = f'{type(error).__name__}: {error}'
        self.completed_at = datetime.now()

    def pair(self) -> MirrorPair:
        return MirrorPair(source=self.snippet, target=self.target)


class MirrorSummary(BaseModel):
    """Outcome of a batch, in input order."""

    pairs: List[MirrorPair] = Field(default_factory=list)
    migrations: List[SnippetMigration] = Field(default_factory=list)

    started_at: datetime = Field(default_factory=datetime.now)
    completed_at: Optional[datetime] = Field(default=None)

    @property
    def failures(self) -> List[SnippetMigration]:
        return [m for m in self.migrations if m.state == MigrationState.ABORTED]

    @property
    def total(self) -> int:
        return len(self.migrations)

    @property
    def successful(self) -> int:
        return len(self.pairs)

    @property
    def failed(self) -> int:
        return len(self.failures)
