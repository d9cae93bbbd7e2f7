"""Discovery, naming and mirror orchestration."""

from .discovery import Discovery
from .naming import NameTransform
from .state import MigrationState, MirrorSummary, SnippetMigration
from .orchestrator import MirrorOrchestrator
from .engine import MirrorEngine

__all__ = [
    'Discovery',
    'NameTransform',
    'MigrationState',
    'MirrorSummary',
    'SnippetMigration',
    'MirrorOrchestrator',
    'MirrorEngine',
]
