"""Analysis hook for module updates.

The mediator calls the hook with (module, partial_data) when an update
requests analysis. Hooks produce side-channel insights only and never
touch stored module state.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


@runtime_checkable
class AnalysisHook(Protocol):
    """Callable invoked with the module name and the partial update."""

    def __call__(self, module: str, partial_data: Mapping[str, Any]) -> None: ...


@runtime_checkable
class RecommendationSource(Protocol):
    """Hook that can summarize its findings as recommendations."""

    def recommendations(self) -> list[InsightRecommendation]: ...


class ModuleInsight(BaseModel):
    """Insight generated from one analysed update."""

    model_config = ConfigDict(frozen=True)

    module: str
    fields: tuple[str, ...] = Field(..., description="Top-level keys touched by the update")
    summary: str
    recommendation: str
    created_at: datetime


class InsightRecommendation(BaseModel):
    """Aggregated recommendation surfaced through cross-module analytics."""

    model_config = ConfigDict(frozen=True)

    type: str
    module: str
    priority: str
    description: str
    occurrences: int = Field(..., ge=1)


# Updates touching this many top-level keys at once are treated as bulk loads.
_BULK_FIELD_COUNT = 5


class ModuleInsightEngine:
    """Default analysis hook.

    Records a bounded history of insights describing which fields each
    analysed update touched, and aggregates them into per-module
    workflow recommendations.
    """

    def __init__(self, history: int = 100) -> None:
        """Initialize the engine.

        Args:
            history: Maximum number of insights retained (oldest dropped first).
        """
        self._insights: deque[ModuleInsight] = deque(maxlen=history)

    def __call__(self, module: str, partial_data: Mapping[str, Any]) -> None:
        fields = tuple(sorted(map(str, partial_data)))
        priority = "high" if len(fields) >= _BULK_FIELD_COUNT else "medium"
        insight = ModuleInsight(
            module=module,
            fields=fields,
            summary=f"{module} data updated with {len(fields)} fields",
            recommendation=(
                f"Review {module} workflow for {priority}-impact changes to "
                f"{', '.join(fields) or 'no fields'}"
            ),
            created_at=datetime.now(UTC),
        )
        self._insights.append(insight)
        logger.debug("Recorded insight for %s (%d fields)", module, len(fields))

    @property
    def recent_insights(self) -> list[ModuleInsight]:
        """Return retained insights, oldest first."""
        return list(self._insights)

    def recommendations(self) -> list[InsightRecommendation]:
        """Aggregate retained insights into one recommendation per module.

        Ordered by occurrence count (descending), then module name.
        """
        counts: dict[str, int] = {}
        touched: dict[str, set[str]] = {}
        for insight in self._insights:
            counts[insight.module] = counts.get(insight.module, 0) + 1
            touched.setdefault(insight.module, set()).update(insight.fields)

        ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        return [
            InsightRecommendation(
                type="workflow",
                module=module,
                priority="high" if len(touched[module]) >= _BULK_FIELD_COUNT else "medium",
                description=(
                    f"Optimize {module} workflow based on {count} recent updates to "
                    f"{', '.join(sorted(touched[module])) or 'no fields'}"
                ),
                occurrences=count,
            )
            for module, count in ordered
        ]

    def clear(self) -> None:
        self._insights.clear()
