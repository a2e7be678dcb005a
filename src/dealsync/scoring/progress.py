"""Scoring progress tracking for guided data-entry flows."""

from __future__ import annotations

from dealsync.scoring.engine import ScoreMap, TemplateLike, recorded_value, template_criteria
from dealsync.scoring.models import CategoryProgress, ScoringProgress


def get_scoring_progress(scores: ScoreMap, template: TemplateLike) -> ScoringProgress:
    """Summarize how far a scoring session has progressed.

    Category progress is keyed by each criterion's declared category.
    next_criterion is the first criterion, in template order, without a
    recorded value.
    """
    criteria = template_criteria(template)
    completed_ids = {c.id for c in criteria if recorded_value(scores, c.id) is not None}

    category_progress: dict[str, CategoryProgress] = {}
    for criterion in criteria:
        progress = category_progress.setdefault(criterion.category.value, CategoryProgress())
        progress.total += 1
        if criterion.id in completed_ids:
            progress.completed += 1

    for progress in category_progress.values():
        progress.rate = progress.completed / progress.total if progress.total > 0 else 0.0

    total_count = len(criteria)
    completed_count = len(completed_ids)
    next_criterion = next((c for c in criteria if c.id not in completed_ids), None)

    return ScoringProgress(
        completed_count=completed_count,
        total_count=total_count,
        completion_rate=completed_count / total_count if total_count > 0 else 0.0,
        category_progress=category_progress,
        next_criterion=next_criterion,
    )
