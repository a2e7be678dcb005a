"""Process-level construction of the synchronization mediator."""

from __future__ import annotations

import logging

from dealsync.config import SyncConfig, load_config
from dealsync.sync.insights import ModuleInsightEngine
from dealsync.sync.journal import JsonlSyncJournal, replay_records
from dealsync.sync.mediator import SyncMediator
from dealsync.sync.relationships import DEFAULT_MODULES, DEFAULT_RELATIONSHIPS
from dealsync.sync.store import InMemoryModuleStore, ModuleStateStore

logger = logging.getLogger(__name__)


def create_mediator(
    config: SyncConfig | None = None,
    *,
    store: ModuleStateStore | None = None,
) -> SyncMediator:
    """Build the mediator for the reference deployment.

    Call once at process start and inject the result into consumers.

    With a journal configured and no store supplied, module records are
    restored by replaying the journal into a fresh in-memory store.

    Args:
        config: Configuration. If None, loads from environment.
        store: Record storage. Defaults to an in-memory store.

    Returns:
        SyncMediator wired with the default modules and relationships.

    Raises:
        ConfigError: If environment configuration is invalid.
        SyncJournalError: If the configured journal cannot be replayed.
    """
    if config is None:
        config = load_config()

    journal: JsonlSyncJournal | None = None
    if config.journal_path is not None:
        journal = JsonlSyncJournal(config.journal_path)
        if store is None:
            records = replay_records(journal.read_events())
            store = InMemoryModuleStore(records)
            logger.info("Restored %d module records from %s", len(records), journal.path)

    analysis_hook = (
        ModuleInsightEngine(history=config.insight_history) if config.analysis_enabled else None
    )

    logger.info(
        "Creating sync mediator: %d modules, %d relationships, analysis=%s, journal=%s",
        len(DEFAULT_MODULES),
        len(DEFAULT_RELATIONSHIPS),
        config.analysis_enabled,
        config.journal_path or "disabled",
    )
    return SyncMediator(
        DEFAULT_MODULES,
        DEFAULT_RELATIONSHIPS,
        store=store,
        analysis_hook=analysis_hook,
        journal=journal,
    )
