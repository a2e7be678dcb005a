"""Pytest configuration and fixtures for dealsync tests.

This module provides common fixtures and configuration for all tests.
"""

from __future__ import annotations

import pytest

from dealsync.config import ENV_ANALYSIS_ENABLED, ENV_INSIGHT_HISTORY, ENV_JOURNAL_PATH
from dealsync.sync.journal import InMemorySyncJournal
from dealsync.sync.mediator import SyncMediator


@pytest.fixture(autouse=True)
def clear_dealsync_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test against default configuration.

    Tests that exercise environment loading set the variables they need.
    """
    for env_var in (ENV_JOURNAL_PATH, ENV_ANALYSIS_ENABLED, ENV_INSIGHT_HISTORY):
        monkeypatch.delenv(env_var, raising=False)


@pytest.fixture
def sync_journal() -> InMemorySyncJournal:
    return InMemorySyncJournal()


@pytest.fixture
def mediator(sync_journal: InMemorySyncJournal) -> SyncMediator:
    """Mediator over the reference modules and relationships with an in-memory journal."""
    return SyncMediator(journal=sync_journal)
