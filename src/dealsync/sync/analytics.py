"""Cross-module analytics reporter.

Read-only summary of module records and propagation telemetry:
- data_quality: pluggable per-module score in [0, 1]
- sync_status: last propagation outcome per declared relationship
- ai_recommendations: aggregated insight-engine recommendations
- performance_metrics: propagation latency, mapping accuracy, update counts
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field

from dealsync.sync.insights import InsightRecommendation
from dealsync.sync.models import ModuleName, ModuleRecord, Relationship, SyncStatus

DataQualityCalculator = Callable[[str, ModuleRecord | None], float]

# Top-level fields each reference module is expected to carry once populated.
EXPECTED_MODULE_FIELDS: dict[str, tuple[str, ...]] = {
    ModuleName.DEAL_SCREENING: ("opportunities", "metrics", "aiInsights"),
    ModuleName.DUE_DILIGENCE: ("projects", "metrics", "aiPredictions"),
    ModuleName.PORTFOLIO: ("assets", "metrics", "analytics"),
    ModuleName.WORKFLOW_AUTOMATION: ("workflows", "executions", "metrics", "aiOptimizations"),
    ModuleName.MARKET_INTELLIGENCE: ("sectors", "trends", "metrics", "predictions"),
}


def _is_populated(value: object) -> bool:
    if value is None:
        return False
    if isinstance(value, (str, bytes, Mapping, Sequence)):
        return len(value) > 0
    return True


def completeness_quality(module: str, record: ModuleRecord | None) -> float:
    """Ratio of expected top-level fields present and non-empty.

    Modules without declared expectations score 1.0 once they hold any
    data. Unwritten or empty records score 0.0.
    """
    if not record:
        return 0.0
    expected = EXPECTED_MODULE_FIELDS.get(module)
    if not expected:
        return 1.0
    present = sum(1 for name in expected if _is_populated(record.get(name)))
    return present / len(expected)


@dataclass
class SyncTelemetry:
    """Mutable propagation counters owned by the mediator."""

    updates: int = 0
    propagated_updates: int = 0
    mappings_attempted: int = 0
    mappings_applied: int = 0
    propagations: int = 0
    propagation_seconds: float = 0.0
    relationship_status: dict[str, SyncStatus] = field(default_factory=dict)

    def record_update(self, *, propagated: bool) -> None:
        self.updates += 1
        if propagated:
            self.propagated_updates += 1

    def record_propagation(self, key: str, applied: int, failed: int, elapsed: float) -> None:
        """Record one relationship's propagation attempt.

        Attempts where no mapping found a source value leave the status untouched.
        """
        attempted = applied + failed
        if attempted == 0:
            return
        self.mappings_attempted += attempted
        self.mappings_applied += applied
        self.propagations += 1
        self.propagation_seconds += elapsed
        self.relationship_status[key] = SyncStatus.ERROR if failed else SyncStatus.SYNCED

    @property
    def mappings_failed(self) -> int:
        return self.mappings_attempted - self.mappings_applied

    def status_for(self, key: str) -> SyncStatus:
        return self.relationship_status.get(key, SyncStatus.PENDING)


class PerformanceMetrics(BaseModel):
    """Propagation performance summary."""

    model_config = ConfigDict(frozen=True)

    data_flow_latency: float = Field(..., ge=0.0, description="Mean propagation time, seconds")
    sync_accuracy: float = Field(..., ge=0.0, le=1.0, description="Applied / attempted mappings")
    total_updates: int = Field(..., ge=0)
    propagated_updates: int = Field(..., ge=0)
    failed_mappings: int = Field(..., ge=0)


class CrossModuleAnalytics(BaseModel):
    """Observability snapshot of the synchronization layer."""

    model_config = ConfigDict(frozen=True)

    data_quality: dict[str, float]
    sync_status: dict[str, SyncStatus]
    ai_recommendations: list[InsightRecommendation]
    performance_metrics: PerformanceMetrics


def build_cross_module_analytics(
    records: Mapping[str, ModuleRecord | None],
    relationships: Sequence[Relationship],
    telemetry: SyncTelemetry,
    *,
    quality: DataQualityCalculator = completeness_quality,
    recommendations: Sequence[InsightRecommendation] = (),
) -> CrossModuleAnalytics:
    """Assemble the analytics snapshot.

    Args:
        records: Current record per module (None for never-written modules).
        relationships: Declared relationship graph.
        telemetry: Mediator propagation counters.
        quality: Per-module data quality calculator.
        recommendations: Recommendations from the analysis hook, if any.

    Returns:
        CrossModuleAnalytics snapshot.
    """
    data_quality = {
        module: max(0.0, min(1.0, quality(module, record))) for module, record in records.items()
    }
    sync_status = {r.key: telemetry.status_for(r.key) for r in relationships}

    latency = (
        telemetry.propagation_seconds / telemetry.propagations if telemetry.propagations else 0.0
    )
    accuracy = (
        telemetry.mappings_applied / telemetry.mappings_attempted
        if telemetry.mappings_attempted
        else 1.0
    )

    return CrossModuleAnalytics(
        data_quality=data_quality,
        sync_status=sync_status,
        ai_recommendations=list(recommendations),
        performance_metrics=PerformanceMetrics(
            data_flow_latency=latency,
            sync_accuracy=accuracy,
            total_updates=telemetry.updates,
            propagated_updates=telemetry.propagated_updates,
            failed_mappings=telemetry.mappings_failed,
        ),
    )
