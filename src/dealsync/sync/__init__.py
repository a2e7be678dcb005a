"""Cross-module data synchronization.

Propagates field-level updates between modules along a declared
relationship graph, one hop per update, and reports sync health.
"""

from dealsync.sync.analytics import (
    EXPECTED_MODULE_FIELDS,
    CrossModuleAnalytics,
    PerformanceMetrics,
    completeness_quality,
)
from dealsync.sync.factory import create_mediator
from dealsync.sync.insights import AnalysisHook, ModuleInsight, ModuleInsightEngine
from dealsync.sync.journal import (
    InMemorySyncJournal,
    JsonlSyncJournal,
    SyncEvent,
    SyncEventType,
    SyncJournal,
    SyncJournalError,
    replay_records,
)
from dealsync.sync.mediator import SyncMediator
from dealsync.sync.models import (
    FieldMapping,
    ModuleName,
    ModuleStatus,
    Relationship,
    RelationshipType,
    SyncStatus,
)
from dealsync.sync.paths import PathError, get_path, parse_path, set_path
from dealsync.sync.relationships import DEFAULT_MODULES, DEFAULT_RELATIONSHIPS
from dealsync.sync.store import InMemoryModuleStore, ModuleStateStore

__all__ = [
    "AnalysisHook",
    "CrossModuleAnalytics",
    "DEFAULT_MODULES",
    "DEFAULT_RELATIONSHIPS",
    "EXPECTED_MODULE_FIELDS",
    "FieldMapping",
    "InMemoryModuleStore",
    "InMemorySyncJournal",
    "JsonlSyncJournal",
    "ModuleInsight",
    "ModuleInsightEngine",
    "ModuleName",
    "ModuleStateStore",
    "ModuleStatus",
    "PathError",
    "PerformanceMetrics",
    "Relationship",
    "RelationshipType",
    "SyncEvent",
    "SyncEventType",
    "SyncJournal",
    "SyncJournalError",
    "SyncMediator",
    "SyncStatus",
    "completeness_quality",
    "create_mediator",
    "get_path",
    "parse_path",
    "replay_records",
    "set_path",
]
