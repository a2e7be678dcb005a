"""Scoring domain models.

Defines the deal screening scorecard models:
- CriterionCategory: category a criterion is declared under
- ScoreBucket: closed set of breakdown buckets (esg, impact and custom fold into OTHER)
- Criterion / ScreeningTemplate: the criterion catalog supplied by callers
- CriterionScore: mutable per-session input (human or AI)
- DealScore / ScoringResult: derived, immutable output
- Recommendation / InteractionMode: decision category and screening mode
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class CriterionCategory(StrEnum):
    """Category a screening criterion belongs to."""

    FINANCIAL = "financial"
    OPERATIONAL = "operational"
    STRATEGIC = "strategic"
    RISK = "risk"
    ESG = "esg"
    IMPACT = "impact"
    CUSTOM = "custom"


class ScoreBucket(StrEnum):
    """Breakdown bucket used in ScoringResult.score_breakdown."""

    FINANCIAL = "financial"
    OPERATIONAL = "operational"
    STRATEGIC = "strategic"
    RISK = "risk"
    OTHER = "other"


_BUCKET_BY_CATEGORY: dict[str, ScoreBucket] = {
    CriterionCategory.FINANCIAL: ScoreBucket.FINANCIAL,
    CriterionCategory.OPERATIONAL: ScoreBucket.OPERATIONAL,
    CriterionCategory.STRATEGIC: ScoreBucket.STRATEGIC,
    CriterionCategory.RISK: ScoreBucket.RISK,
}


def bucket_for(category: CriterionCategory | str) -> ScoreBucket:
    """Resolve the breakdown bucket for a category.

    Total over all inputs: ESG, IMPACT and CUSTOM criteria report under
    OTHER. Criterion rejects category strings outside CriterionCategory, so
    arbitrary strings only reach the OTHER fallback through direct calls.
    """
    return _BUCKET_BY_CATEGORY.get(str(category).lower(), ScoreBucket.OTHER)


class Recommendation(StrEnum):
    """Discrete recommendation derived from a total score."""

    HIGHLY_RECOMMENDED = "highly_recommended"
    RECOMMENDED = "recommended"
    NEUTRAL = "neutral"
    NOT_RECOMMENDED = "not_recommended"
    REJECTED = "rejected"


class InteractionMode(StrEnum):
    """Screening interaction mode. Changes process, never decision thresholds."""

    TRADITIONAL = "traditional"
    ASSISTED = "assisted"
    AUTONOMOUS = "autonomous"


class Criterion(BaseModel):
    """A named, weighted evaluation dimension with numeric bounds."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Criterion identifier, unique per template")
    name: str = Field(..., min_length=1, description="Display name")
    category: CriterionCategory = Field(..., description="Declared category")
    weight: float = Field(..., gt=0.0, le=1.0, description="Relative importance (0, 1]")
    min_value: float = Field(..., description="Lowest valid raw value")
    max_value: float = Field(..., description="Highest valid raw value")
    required: bool = Field(default=False, description="Must be scored before submission")
    description: str = Field(default="", description="Guidance for the scorer")

    @field_validator("category", mode="before")
    @classmethod
    def _lowercase_category(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @model_validator(mode="after")
    def _check_bounds(self) -> Criterion:
        if self.min_value > self.max_value:
            raise ValueError(
                f"Criterion '{self.id}' min_value {self.min_value} exceeds "
                f"max_value {self.max_value}"
            )
        return self


class ScreeningTemplate(BaseModel):
    """Ordered criterion catalog used for one screening."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    description: str = Field(default="")
    criteria: tuple[Criterion, ...] = Field(default=())

    @model_validator(mode="after")
    def _unique_criterion_ids(self) -> ScreeningTemplate:
        ids = [c.id for c in self.criteria]
        duplicates = sorted({cid for cid in ids if ids.count(cid) > 1})
        if duplicates:
            raise ValueError(f"Template '{self.id}' has duplicate criterion ids: {duplicates}")
        return self


class CriterionScore(BaseModel):
    """Raw score recorded for one criterion during a scoring session.

    Mutable until the session is finalized. A None value means the
    criterion has not been scored yet.
    """

    criterion_id: str = Field(..., min_length=1)
    value: float | None = Field(default=None)
    notes: str | None = Field(default=None)
    ai_generated: bool = Field(default=False)
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)

    @property
    def is_scored(self) -> bool:
        return self.value is not None


class AISuggestion(BaseModel):
    """An AI-proposed value for a single criterion."""

    model_config = ConfigDict(frozen=True)

    score: float
    reasoning: str = Field(default="")
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)


class DealScore(BaseModel):
    """Normalized and weighted score for one criterion."""

    model_config = ConfigDict(frozen=True)

    criterion_id: str
    value: float
    normalized_score: float = Field(..., ge=0.0, le=1.0)
    weighted_score: float = Field(..., ge=0.0)
    notes: str | None = None
    ai_generated: bool = False
    confidence: float | None = None


class ScoringResult(BaseModel):
    """Aggregate scoring output for one input snapshot."""

    model_config = ConfigDict(frozen=True)

    total_score: int = Field(..., ge=0, le=100, description="Weighted score on a 0-100 scale")
    criteria_scores: tuple[DealScore, ...] = Field(default=())
    completion_rate: float = Field(..., ge=0.0, le=1.0)
    average_score: float = Field(..., description="Mean raw value, one decimal")
    weighted_average: int = Field(..., ge=0, le=100)
    scored_criteria: int = Field(..., ge=0)
    total_criteria: int = Field(..., ge=0)
    score_breakdown: dict[ScoreBucket, int] = Field(default_factory=dict)


class CategoryProgress(BaseModel):
    """Completion counters for one criterion category."""

    completed: int = 0
    total: int = 0
    rate: float = 0.0


class ScoringProgress(BaseModel):
    """Progress snapshot used to drive guided data entry."""

    model_config = ConfigDict(frozen=True)

    completed_count: int
    total_count: int
    completion_rate: float
    category_progress: dict[str, CategoryProgress]
    next_criterion: Criterion | None = None
