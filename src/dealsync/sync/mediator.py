"""Cross-module synchronization mediator.

Keeps derived metrics consistent across independently-owned modules:
1. Shallow-merge a partial update into the module's record (last write wins per key)
2. Optionally hand the partial update to the analysis hook
3. Propagate mapped fields along every outgoing relationship, one hop only
4. Notify the module's listeners with its post-merge record

Propagated writes are applied with propagate=False, so an update never
cascades past its direct targets even when the relationship graph has
cycles.

Failure isolation:
- A mapping whose transform raises, or whose target path collides with a
  non-mapping value, is skipped; remaining mappings still run
- A listener that raises is logged; other listeners still run and the
  write stays committed
- Analysis hook and journal failures are logged, never raised

Not thread-safe: records are read-modified-written without locking.
Callers serialize updates externally.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from dealsync.sync.analytics import (
    CrossModuleAnalytics,
    DataQualityCalculator,
    SyncTelemetry,
    build_cross_module_analytics,
    completeness_quality,
)
from dealsync.sync.insights import AnalysisHook, RecommendationSource
from dealsync.sync.journal import SyncEvent, SyncJournal
from dealsync.sync.models import (
    ModuleRecord,
    ModuleStatus,
    Relationship,
    UpdateListener,
)
from dealsync.sync.paths import get_path, set_path
from dealsync.sync.relationships import DEFAULT_MODULES, DEFAULT_RELATIONSHIPS, outgoing
from dealsync.sync.store import InMemoryModuleStore, ModuleStateStore

logger = logging.getLogger(__name__)

_MISSING = object()


class SyncMediator:
    """Applies module updates and propagates them along declared relationships.

    Construct one per process and pass it to every consumer; there is no
    module-level instance.
    """

    def __init__(
        self,
        modules: Iterable[str] = DEFAULT_MODULES,
        relationships: Sequence[Relationship] = DEFAULT_RELATIONSHIPS,
        *,
        store: ModuleStateStore | None = None,
        analysis_hook: AnalysisHook | None = None,
        journal: SyncJournal | None = None,
        quality_calculator: DataQualityCalculator = completeness_quality,
    ) -> None:
        """Initialize the mediator.

        Args:
            modules: Module names known at start; each gets an empty record.
                Modules already held by store are registered as well.
            relationships: Static relationship graph.
            store: Record storage. Defaults to an in-memory store.
            analysis_hook: Called for updates requesting analysis.
            journal: Records a SyncEvent after each committed write.
            quality_calculator: Data quality computation for analytics.
        """
        self._modules: list[str] = list(dict.fromkeys(modules))
        self._relationships: tuple[Relationship, ...] = tuple(relationships)
        self._store: ModuleStateStore = store if store is not None else InMemoryModuleStore()
        self._analysis_hook = analysis_hook
        self._journal = journal
        self._quality_calculator = quality_calculator
        self._listeners: dict[str, list[UpdateListener]] = {}
        self._status: dict[str, ModuleStatus] = {}
        self._telemetry = SyncTelemetry()

        for module in [*self._modules, *self._store.modules()]:
            self._register(module)

    @property
    def modules(self) -> list[str]:
        return list(self._modules)

    @property
    def relationships(self) -> tuple[Relationship, ...]:
        return self._relationships

    def _register(self, module: str) -> None:
        if module not in self._status:
            restored = bool(self._store.get(module))
            self._status[module] = ModuleStatus.READY if restored else ModuleStatus.UNINITIALIZED
            if module not in self._modules:
                self._modules.append(module)
        if self._store.get(module) is None:
            self._store.put(module, {})

    def get_module_status(self, module: str) -> ModuleStatus:
        """Return UNINITIALIZED until the module holds data, READY after."""
        return self._status.get(module, ModuleStatus.UNINITIALIZED)

    def get_module_data(self, module: str) -> ModuleRecord:
        """Return the module's current record.

        The record is not copied; callers must treat it as read-only.
        Unknown modules yield an empty record.
        """
        record = self._store.get(module)
        return record if record is not None else {}

    def update_module_data(
        self,
        module: str,
        partial_data: Mapping[str, Any],
        *,
        propagate: bool = True,
        ai_analysis: bool = False,
    ) -> ModuleRecord:
        """Merge a partial update into a module and propagate it.

        Args:
            module: Module receiving the update. Unknown modules are
                initialized with an empty record.
            partial_data: Top-level keys to set. Nested values replace the
                stored value wholesale.
            propagate: Push mapped fields to related modules (one hop).
            ai_analysis: Hand partial_data to the analysis hook.

        Returns:
            The module's record after the merge.
        """
        return self._apply(
            module, partial_data, propagate=propagate, ai_analysis=ai_analysis, origin=None
        )

    def _apply(
        self,
        module: str,
        partial_data: Mapping[str, Any],
        *,
        propagate: bool,
        ai_analysis: bool,
        origin: str | None,
    ) -> ModuleRecord:
        self._register(module)
        current = self._store.get(module) or {}
        record = {**current, **partial_data}
        self._store.put(module, record)
        self._status[module] = ModuleStatus.READY
        self._telemetry.record_update(propagated=origin is not None)
        logger.debug(
            "Updated %s keys=%s origin=%s",
            module,
            sorted(map(str, partial_data)),
            origin or "caller",
        )
        self._record(
            lambda: SyncEvent.module_updated(
                module, {str(k): v for k, v in partial_data.items()}, origin
            )
        )

        if ai_analysis:
            self._analyze(module, partial_data)

        if propagate:
            self._propagate(module, partial_data)

        self._notify(module)
        return self.get_module_data(module)

    def _analyze(self, module: str, partial_data: Mapping[str, Any]) -> None:
        if self._analysis_hook is None:
            return
        try:
            self._analysis_hook(module, partial_data)
        except Exception:
            logger.exception("Analysis hook failed for module %s", module)

    def _propagate(self, source_module: str, partial_data: Mapping[str, Any]) -> None:
        for relationship in outgoing(self._relationships, source_module):
            started = time.perf_counter()
            transformed, applied, failed = self._transform(partial_data, relationship)
            if transformed:
                self._apply(
                    relationship.target_module,
                    transformed,
                    propagate=False,
                    ai_analysis=True,
                    origin=source_module,
                )
            self._telemetry.record_propagation(
                relationship.key, applied, failed, time.perf_counter() - started
            )

    def _transform(
        self,
        partial_data: Mapping[str, Any],
        relationship: Relationship,
    ) -> tuple[dict[str, Any], int, int]:
        """Build the target update for one relationship.

        Returns:
            (target update, mappings applied, mappings skipped on error).
            Mappings whose source value is absent count as neither.
        """
        transformed: dict[str, Any] = {}
        applied = 0
        failed = 0
        for mapping in relationship.mappings:
            value = get_path(partial_data, mapping.source_path, _MISSING)
            if value is _MISSING:
                continue
            try:
                if mapping.transform is not None:
                    value = mapping.transform(value)
                set_path(transformed, mapping.target_path, value)
            except Exception as e:
                failed += 1
                logger.warning(
                    "Skipping mapping %s on %s: %s", mapping.describe(), relationship.key, e
                )
                self._record(
                    lambda: SyncEvent.mapping_skipped(
                        relationship.target_module,
                        relationship.key,
                        mapping.describe(),
                        str(e),
                    )
                )
                continue
            applied += 1
        return transformed, applied, failed

    def on_module_update(self, module: str, listener: UpdateListener) -> Callable[[], None]:
        """Register a listener for updates to module.

        Listeners run in registration order after every update to the
        module, including propagated ones.

        Returns:
            Function that unregisters this listener. Calling it again is a no-op.
        """
        listeners = self._listeners.setdefault(module, [])
        listeners.append(listener)
        active = True

        def unsubscribe() -> None:
            nonlocal active
            if not active:
                return
            active = False
            if listener in listeners:
                listeners.remove(listener)

        return unsubscribe

    def _notify(self, module: str) -> None:
        record = self.get_module_data(module)
        for listener in list(self._listeners.get(module, ())):
            try:
                listener(record)
            except Exception:
                logger.exception("Listener %r failed for module %s", listener, module)

    def _record(self, build: Callable[[], SyncEvent]) -> None:
        if self._journal is None:
            return
        try:
            self._journal.record(build())
        except Exception:
            logger.exception("Failed to journal sync event")

    def get_cross_module_analytics(self) -> CrossModuleAnalytics:
        """Return a read-only analytics snapshot of the synchronization layer."""
        records = {
            module: self._store.get(module) if self._status[module] is ModuleStatus.READY else None
            for module in self._modules
        }
        recommendations = (
            self._analysis_hook.recommendations()
            if isinstance(self._analysis_hook, RecommendationSource)
            else []
        )
        return build_cross_module_analytics(
            records,
            self._relationships,
            self._telemetry,
            quality=self._quality_calculator,
            recommendations=recommendations,
        )
