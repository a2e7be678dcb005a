"""Sync journal.

Each committed module write is journaled as a SyncEvent holding the
top-level keys it set. Replaying MODULE_UPDATED events in order rebuilds
every module record without re-running propagation, because propagated
writes are journaled as updates of their own target module. Skipped
mappings are journaled for diagnosis and ignored on replay.

Values are stored as JSON. Values JSON cannot represent are written as
their str() form, so a replayed record may hold strings where the live
record held richer objects.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from enum import StrEnum
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from dealsync.sync.models import ModuleRecord

logger = logging.getLogger(__name__)


class SyncEventType(StrEnum):
    MODULE_UPDATED = "sync.module.updated"
    MAPPING_SKIPPED = "sync.mapping.skipped"


class SyncEvent(BaseModel):
    """One journaled step of the synchronization layer.

    MODULE_UPDATED events carry the merged keys in changes and the source
    module in origin (None for caller writes). MAPPING_SKIPPED events name
    the relationship, the mapping and the error instead.
    """

    model_config = ConfigDict(frozen=True)

    event_type: SyncEventType
    module: str
    changes: dict[str, Any] = Field(default_factory=dict)
    origin: str | None = None
    relationship: str | None = None
    mapping: str | None = None
    error: str | None = None
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def module_updated(
        cls, module: str, changes: dict[str, Any], origin: str | None
    ) -> SyncEvent:
        return cls(
            event_type=SyncEventType.MODULE_UPDATED,
            module=module,
            changes=changes,
            origin=origin,
        )

    @classmethod
    def mapping_skipped(
        cls, module: str, relationship: str, mapping: str, error: str
    ) -> SyncEvent:
        return cls(
            event_type=SyncEventType.MAPPING_SKIPPED,
            module=module,
            relationship=relationship,
            mapping=mapping,
            error=error,
        )

    @property
    def keys(self) -> list[str]:
        return sorted(self.changes)


class SyncJournalError(Exception):
    """Raised when the journal cannot be written or read back."""


@runtime_checkable
class SyncJournal(Protocol):
    """Destination for sync events."""

    def record(self, event: SyncEvent) -> None: ...


def replay_records(events: Iterable[SyncEvent]) -> dict[str, ModuleRecord]:
    """Rebuild module records by shallow-merging MODULE_UPDATED changes in order."""
    records: dict[str, ModuleRecord] = {}
    for event in events:
        if event.event_type is SyncEventType.MODULE_UPDATED:
            records[event.module] = {**records.get(event.module, {}), **event.changes}
    return records


class JsonlSyncJournal:
    """Journal kept as one JSON document per line in a local file.

    The file and its directory are created on first write. Existing lines
    are never rewritten.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def record(self, event: SyncEvent) -> None:
        """Append event to the journal.

        Raises:
            SyncJournalError: If the line cannot be written.
        """
        payload = event.model_dump()
        payload["occurred_at"] = event.occurred_at.isoformat()
        line = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, mode="a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            raise SyncJournalError(f"Cannot append to journal {self._path}: {e}") from e

    def read_events(self) -> list[SyncEvent]:
        """Load every journaled event, oldest first.

        A journal that was never written yields no events.

        Raises:
            SyncJournalError: If the file is unreadable or a line is malformed.
        """
        if not self._path.exists():
            return []
        try:
            lines = self._path.read_text(encoding="utf-8").splitlines()
        except OSError as e:
            raise SyncJournalError(f"Cannot read journal {self._path}: {e}") from e

        events: list[SyncEvent] = []
        for lineno, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                events.append(SyncEvent.model_validate_json(line))
            except ValidationError as e:
                raise SyncJournalError(
                    f"Malformed journal entry at {self._path}:{lineno}: {e}"
                ) from e
        logger.debug("Read %d events from %s", len(events), self._path)
        return events


class InMemorySyncJournal:
    """Journal held in process memory."""

    def __init__(self) -> None:
        self._events: list[SyncEvent] = []

    def record(self, event: SyncEvent) -> None:
        self._events.append(event)

    @property
    def events(self) -> list[SyncEvent]:
        return list(self._events)

    def of_type(self, event_type: SyncEventType) -> list[SyncEvent]:
        return [e for e in self._events if e.event_type is event_type]

    def read_events(self) -> list[SyncEvent]:
        return self.events
