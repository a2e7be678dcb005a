"""Relationship graph of the reference deployment.

Static for the process lifetime. The graph may contain cycles; the
mediator's single-hop propagation keeps every update finite.
"""

from __future__ import annotations

from collections.abc import Iterable

from dealsync.sync.models import FieldMapping, ModuleName, Relationship, RelationshipType

DEFAULT_MODULES: tuple[str, ...] = tuple(m.value for m in ModuleName)

DEFAULT_RELATIONSHIPS: tuple[Relationship, ...] = (
    Relationship(
        source_module=ModuleName.DEAL_SCREENING,
        target_module=ModuleName.DUE_DILIGENCE,
        relationship_type=RelationshipType.DATA_FLOW,
        strength=0.9,
        mappings=(
            FieldMapping("opportunities.approved", "projects.pipeline"),
            FieldMapping("opportunities.riskScore", "projects.initialRisk"),
            FieldMapping("opportunities.valuation", "projects.baselineValue"),
        ),
    ),
    Relationship(
        source_module=ModuleName.DUE_DILIGENCE,
        target_module=ModuleName.PORTFOLIO,
        relationship_type=RelationshipType.DATA_FLOW,
        strength=0.95,
        mappings=(
            FieldMapping("projects.completed", "assets.new"),
            FieldMapping("projects.riskAssessment", "assets.riskProfile"),
            FieldMapping("projects.valuation", "assets.acquisitionValue"),
        ),
    ),
    Relationship(
        source_module=ModuleName.MARKET_INTELLIGENCE,
        target_module=ModuleName.DEAL_SCREENING,
        relationship_type=RelationshipType.TRIGGER,
        strength=0.8,
        mappings=(
            FieldMapping("trends.sectorGrowth", "opportunities.sectorScore"),
            FieldMapping("predictions.marketOutlook", "opportunities.timingScore"),
        ),
    ),
    Relationship(
        source_module=ModuleName.PORTFOLIO,
        target_module=ModuleName.MARKET_INTELLIGENCE,
        relationship_type=RelationshipType.CORRELATION,
        strength=0.7,
        mappings=(
            FieldMapping("assets.sectors", "sectors.portfolioExposure"),
            FieldMapping("assets.performance", "trends.realizedReturns"),
        ),
    ),
    Relationship(
        source_module=ModuleName.WORKFLOW_AUTOMATION,
        target_module=ModuleName.DEAL_SCREENING,
        relationship_type=RelationshipType.DEPENDENCY,
        strength=0.6,
        mappings=(FieldMapping("workflows.dealScreening", "opportunities.workflow"),),
    ),
)


def outgoing(relationships: Iterable[Relationship], module: str) -> list[Relationship]:
    """Return the relationships whose source is module, in declaration order."""
    return [r for r in relationships if r.source_module == module]
