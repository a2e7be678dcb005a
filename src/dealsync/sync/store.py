"""Module state stores.

The mediator is storage-agnostic: any object satisfying ModuleStateStore
can back it. InMemoryModuleStore keeps records resident; the factory
seeds it from the sync journal when one is configured.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from dealsync.sync.models import ModuleRecord


@runtime_checkable
class ModuleStateStore(Protocol):
    """Protocol for per-module record storage."""

    def get(self, module: str) -> ModuleRecord | None:
        """Return the current record, or None if the module was never written."""
        ...

    def put(self, module: str, record: ModuleRecord) -> None:
        """Replace the module's record."""
        ...

    def modules(self) -> list[str]:
        """Return every module with a stored record."""
        ...


class InMemoryModuleStore:
    """Process-resident store. Not synchronized; callers serialize writes."""

    def __init__(self, records: Mapping[str, ModuleRecord] | None = None) -> None:
        """Initialize the store.

        Args:
            records: Records to start from, copied one level deep.
        """
        self._records: dict[str, ModuleRecord] = {
            module: dict(record) for module, record in (records or {}).items()
        }

    def get(self, module: str) -> ModuleRecord | None:
        return self._records.get(module)

    def put(self, module: str, record: ModuleRecord) -> None:
        self._records[module] = record

    def modules(self) -> list[str]:
        return list(self._records)
