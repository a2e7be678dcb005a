"""Scoring input validation.

Out-of-range values and incomplete scoring are reported as structured
issues, never raised: screening workflows decide whether to block on
valid=False.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from dealsync.scoring.engine import (
    ScoreMap,
    TemplateLike,
    recorded_value,
    round_half_up,
    template_criteria,
)

MIN_COMPLETION_RATE = 0.5
LOW_AI_CONFIDENCE = 0.70


@dataclass(frozen=True)
class ScoringIssue:
    """A single validation error or warning."""

    code: str
    message: str
    criterion_id: str | None = None


@dataclass
class ScoringValidationReport:
    """Result of validating a scoring session."""

    valid: bool
    errors: list[ScoringIssue] = field(default_factory=list)
    warnings: list[ScoringIssue] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        """Deterministic dict form for JSON output."""
        return {
            "errors": [_issue_to_dict(e) for e in self.errors],
            "valid": self.valid,
            "warnings": [_issue_to_dict(w) for w in self.warnings],
        }


def _issue_to_dict(issue: ScoringIssue) -> dict[str, str | None]:
    return {
        "code": issue.code,
        "criterion_id": issue.criterion_id,
        "message": issue.message,
    }


def validate_scoring(
    scores: ScoreMap,
    template: TemplateLike,
    require_complete: bool = False,
) -> ScoringValidationReport:
    """Validate recorded scores against the template.

    Errors:
        SCORE_OUT_OF_BOUNDS: a recorded value lies outside [min_value, max_value].
        INCOMPLETE_SCORING: require_complete is set and some criterion is unscored.

    Warnings:
        LOW_COMPLETION: fewer than half of the criteria are scored.
        LOW_AI_CONFIDENCE: an AI-generated score has confidence below 0.70.

    Args:
        scores: Criterion scores keyed by criterion id.
        template: Screening template or ordered criterion list.
        require_complete: Treat any unscored criterion as an error.

    Returns:
        ScoringValidationReport with valid == (no errors).
    """
    criteria = template_criteria(template)
    errors: list[ScoringIssue] = []
    warnings: list[ScoringIssue] = []

    total = len(criteria)
    scored = sum(1 for c in criteria if recorded_value(scores, c.id) is not None)
    completion_rate = scored / total if total > 0 else 0.0

    if require_complete and completion_rate < 1.0:
        errors.append(
            ScoringIssue(
                code="INCOMPLETE_SCORING",
                message=f"All {total} criteria must be scored before completing screening",
            )
        )

    if completion_rate < MIN_COMPLETION_RATE:
        warnings.append(
            ScoringIssue(
                code="LOW_COMPLETION",
                message=(
                    f"Only {round_half_up(completion_rate * 100)}% of criteria have been scored"
                ),
            )
        )

    for criterion in criteria:
        score = scores.get(criterion.id)
        if score is None or score.value is None:
            continue

        if score.value < criterion.min_value or score.value > criterion.max_value:
            errors.append(
                ScoringIssue(
                    code="SCORE_OUT_OF_BOUNDS",
                    message=(
                        f'Score for "{criterion.name}" must be between '
                        f"{criterion.min_value:g} and {criterion.max_value:g}"
                    ),
                    criterion_id=criterion.id,
                )
            )

        if (
            score.ai_generated
            and score.confidence is not None
            and score.confidence < LOW_AI_CONFIDENCE
        ):
            warnings.append(
                ScoringIssue(
                    code="LOW_AI_CONFIDENCE",
                    message=(
                        f'AI confidence for "{criterion.name}" is low '
                        f"({round_half_up(score.confidence * 100)}%)"
                    ),
                    criterion_id=criterion.id,
                )
            )

    return ScoringValidationReport(valid=not errors, errors=errors, warnings=warnings)
