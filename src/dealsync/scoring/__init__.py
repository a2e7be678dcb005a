"""Deal screening scoring engine.

Turns partially-completed human/AI criterion scores into:
- per-criterion normalized and weighted scores
- a total score (0-100, weighted ratio)
- a recommendation category from fixed thresholds

Pure functions only; callers own persistence of templates and scores.
"""

from dealsync.scoring.engine import (
    RECOMMENDATION_THRESHOLDS,
    calculate_final_scores,
    calculate_recommendation,
    convert_scores_for_api,
    create_empty_score_record,
    merge_ai_suggestions,
    normalize_score,
)
from dealsync.scoring.models import (
    AISuggestion,
    CategoryProgress,
    Criterion,
    CriterionCategory,
    CriterionScore,
    DealScore,
    InteractionMode,
    Recommendation,
    ScoreBucket,
    ScoringProgress,
    ScoringResult,
    ScreeningTemplate,
    bucket_for,
)
from dealsync.scoring.progress import get_scoring_progress
from dealsync.scoring.templates import (
    TemplateLoadError,
    TemplateNotFoundError,
    get_template,
    list_templates,
    load_template,
)
from dealsync.scoring.validation import ScoringIssue, ScoringValidationReport, validate_scoring

__all__ = [
    "AISuggestion",
    "CategoryProgress",
    "Criterion",
    "CriterionCategory",
    "CriterionScore",
    "DealScore",
    "InteractionMode",
    "RECOMMENDATION_THRESHOLDS",
    "Recommendation",
    "ScoreBucket",
    "ScoringIssue",
    "ScoringProgress",
    "ScoringResult",
    "ScoringValidationReport",
    "ScreeningTemplate",
    "TemplateLoadError",
    "TemplateNotFoundError",
    "bucket_for",
    "calculate_final_scores",
    "calculate_recommendation",
    "convert_scores_for_api",
    "create_empty_score_record",
    "get_scoring_progress",
    "get_template",
    "list_templates",
    "load_template",
    "merge_ai_suggestions",
    "normalize_score",
    "validate_scoring",
]
