"""Scoring engine.

Pure functions that turn partially-completed criterion scores into a
comparable decision score:
1. Normalize each raw value into [0, 1] against its criterion bounds
2. Weight by criterion importance
3. Aggregate as a weighted ratio (self-normalizing by total weight)
4. Derive the recommendation from fixed thresholds

total_score and the recommendation thresholds are an external contract:
identical (scores, template) pairs must yield identical outputs.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence

from dealsync.scoring.models import (
    AISuggestion,
    Criterion,
    CriterionScore,
    DealScore,
    InteractionMode,
    Recommendation,
    ScoreBucket,
    ScoringResult,
    ScreeningTemplate,
    bucket_for,
)

logger = logging.getLogger(__name__)

# Inclusive lower bounds, checked in order.
RECOMMENDATION_THRESHOLDS: tuple[tuple[int, Recommendation], ...] = (
    (80, Recommendation.HIGHLY_RECOMMENDED),
    (65, Recommendation.RECOMMENDED),
    (45, Recommendation.NEUTRAL),
    (25, Recommendation.NOT_RECOMMENDED),
)

TemplateLike = ScreeningTemplate | Sequence[Criterion]
ScoreMap = Mapping[str, CriterionScore]


def template_criteria(template: TemplateLike) -> tuple[Criterion, ...]:
    """Return the ordered criteria of a template or a bare criterion list."""
    if isinstance(template, ScreeningTemplate):
        return template.criteria
    return tuple(template)


def recorded_value(scores: ScoreMap, criterion_id: str) -> float | None:
    """Return the recorded raw value for a criterion, or None if unscored."""
    score = scores.get(criterion_id)
    if score is None:
        return None
    return score.value


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (72.5 -> 73)."""
    return math.floor(value + 0.5)


def normalize_score(value: float, min_value: float, max_value: float) -> float:
    """Rescale a raw value into [0, 1] relative to its bounds.

    Args:
        value: Raw criterion value.
        min_value: Lower bound of the criterion.
        max_value: Upper bound of the criterion.

    Returns:
        Clamped normalized score. Degenerate bounds (max == min) yield 1.0.
    """
    if max_value == min_value:
        return 1.0
    normalized = (value - min_value) / (max_value - min_value)
    return max(0.0, min(1.0, normalized))


class _Accumulator:
    """Running weighted totals for one bucket."""

    __slots__ = ("weighted", "weight", "count")

    def __init__(self) -> None:
        self.weighted = 0.0
        self.weight = 0.0
        self.count = 0

    def add(self, weighted: float, weight: float) -> None:
        self.weighted += weighted
        self.weight += weight
        self.count += 1

    @property
    def ratio(self) -> float:
        return self.weighted / self.weight if self.weight > 0 else 0.0


def calculate_final_scores(scores: ScoreMap, template: TemplateLike) -> ScoringResult:
    """Compute the aggregate scoring result for a snapshot of scores.

    Only template criteria with a recorded value contribute. Scores for
    criteria not in the template are ignored.

    Args:
        scores: Criterion scores keyed by criterion id.
        template: Screening template or ordered criterion list.

    Returns:
        ScoringResult. total_score is 0 when nothing is scored.
    """
    criteria = template_criteria(template)
    criteria_scores: list[DealScore] = []
    overall = _Accumulator()
    buckets = {bucket: _Accumulator() for bucket in ScoreBucket}
    total_raw = 0.0

    for criterion in criteria:
        score = scores.get(criterion.id)
        if score is None or score.value is None:
            continue

        normalized = normalize_score(score.value, criterion.min_value, criterion.max_value)
        weighted = normalized * criterion.weight

        criteria_scores.append(
            DealScore(
                criterion_id=criterion.id,
                value=score.value,
                normalized_score=normalized,
                weighted_score=weighted,
                notes=score.notes,
                ai_generated=score.ai_generated,
                confidence=score.confidence,
            )
        )

        overall.add(weighted, criterion.weight)
        buckets[bucket_for(criterion.category)].add(weighted, criterion.weight)
        total_raw += score.value

    scored = overall.count
    total = len(criteria)
    weighted_average = overall.ratio
    average_raw = total_raw / scored if scored > 0 else 0.0

    result = ScoringResult(
        total_score=round_half_up(weighted_average * 100),
        criteria_scores=tuple(criteria_scores),
        completion_rate=scored / total if total > 0 else 0.0,
        average_score=round_half_up(average_raw * 10) / 10,
        weighted_average=round_half_up(weighted_average * 100),
        scored_criteria=scored,
        total_criteria=total,
        score_breakdown={
            bucket: round_half_up(acc.ratio * 100) for bucket, acc in buckets.items()
        },
    )
    logger.debug(
        "Scored %d/%d criteria, total_score=%d", scored, total, result.total_score
    )
    return result


def calculate_recommendation(
    total_score: float,
    mode: InteractionMode | str | None = None,
) -> Recommendation:
    """Classify a total score into a recommendation category.

    Args:
        total_score: Score on the 0-100 scale.
        mode: Interaction mode. Accepted for interface stability only; it
            never alters the threshold table.

    Returns:
        Recommendation for the score.
    """
    del mode
    for threshold, recommendation in RECOMMENDATION_THRESHOLDS:
        if total_score >= threshold:
            return recommendation
    return Recommendation.REJECTED


def merge_ai_suggestions(
    existing: ScoreMap,
    suggestions: Mapping[str, AISuggestion],
    override_existing: bool = False,
) -> dict[str, CriterionScore]:
    """Merge AI suggestions into a copy of the existing scores.

    A suggestion is written only when the criterion has no recorded value,
    or when override_existing is set.

    Args:
        existing: Current criterion scores.
        suggestions: AI suggestions keyed by criterion id.
        override_existing: Replace values already recorded.

    Returns:
        New score mapping; the inputs are not mutated.
    """
    merged = dict(existing)
    for criterion_id, suggestion in suggestions.items():
        if recorded_value(merged, criterion_id) is not None and not override_existing:
            continue
        merged[criterion_id] = CriterionScore(
            criterion_id=criterion_id,
            value=suggestion.score,
            notes=suggestion.reasoning or None,
            ai_generated=True,
            confidence=suggestion.confidence,
        )
    return merged


def create_empty_score_record(template: TemplateLike) -> dict[str, CriterionScore]:
    """Create an unscored entry for every criterion in the template."""
    return {
        criterion.id: CriterionScore(criterion_id=criterion.id)
        for criterion in template_criteria(template)
    }


def convert_scores_for_api(scores: ScoreMap, template: TemplateLike) -> list[DealScore]:
    """Return the per-criterion DealScores for persistence by callers."""
    return list(calculate_final_scores(scores, template).criteria_scores)
