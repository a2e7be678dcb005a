"""Built-in screening templates.

Deterministic criterion catalogs for the standard screening flows.
Callers own their templates; these are the defaults shipped with the
platform and the loader for templates kept on disk as JSON.

Fail-closed: unknown template ids raise TemplateNotFoundError.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from dealsync.scoring.models import Criterion, CriterionCategory, ScreeningTemplate


class TemplateNotFoundError(Exception):
    """Raised when no template exists for the requested id."""


class TemplateLoadError(Exception):
    """Raised when a template file cannot be read or fails validation."""


def _criterion(
    criterion_id: str,
    name: str,
    category: CriterionCategory,
    weight: float,
    description: str,
    *,
    required: bool = True,
    min_value: float = 0.0,
    max_value: float = 100.0,
) -> Criterion:
    return Criterion(
        id=criterion_id,
        name=name,
        category=category,
        weight=weight,
        min_value=min_value,
        max_value=max_value,
        required=required,
        description=description,
    )


_COMPREHENSIVE = ScreeningTemplate(
    id="comprehensive",
    name="Comprehensive Deal Screening",
    description="Standard template for evaluating private equity opportunities",
    criteria=(
        _criterion(
            "financial-metrics",
            "Financial Performance",
            CriterionCategory.FINANCIAL,
            0.35,
            "Evaluation of revenue, EBITDA, and growth metrics",
        ),
        _criterion(
            "market-position",
            "Market Position",
            CriterionCategory.STRATEGIC,
            0.25,
            "Competitive positioning and market share",
        ),
        _criterion(
            "management-team",
            "Management Quality",
            CriterionCategory.OPERATIONAL,
            0.20,
            "Leadership team experience and track record",
        ),
        _criterion(
            "risk-factors",
            "Risk Assessment",
            CriterionCategory.RISK,
            0.15,
            "Industry, operational, and financial risks",
        ),
        _criterion(
            "esg-score",
            "ESG Factors",
            CriterionCategory.ESG,
            0.05,
            "Environmental, social, and governance considerations",
            required=False,
        ),
    ),
)

_TECHNOLOGY = ScreeningTemplate(
    id="technology",
    name="Technology Sector Focus",
    description="Specialized template for technology investments",
    criteria=(
        _criterion(
            "tech-innovation",
            "Technology & Innovation",
            CriterionCategory.STRATEGIC,
            0.30,
            "IP portfolio, R&D capabilities, and technical moat",
        ),
        _criterion(
            "market-scalability",
            "Market Scalability",
            CriterionCategory.STRATEGIC,
            0.25,
            "Addressable market size and growth potential",
        ),
        _criterion(
            "recurring-revenue",
            "Revenue Model",
            CriterionCategory.FINANCIAL,
            0.25,
            "Recurring revenue streams and customer retention",
        ),
        _criterion(
            "digital-moat",
            "Competitive Moat",
            CriterionCategory.STRATEGIC,
            0.20,
            "Network effects, switching costs, and barriers to entry",
        ),
    ),
)

# Impact weights favour measurable outcomes over pure returns.
_IMPACT = ScreeningTemplate(
    id="impact",
    name="Impact Investment Screening",
    description="Template for funds with a dual financial and impact mandate",
    criteria=(
        _criterion(
            "impact-thesis",
            "Impact Thesis Alignment",
            CriterionCategory.IMPACT,
            0.30,
            "Fit between the business model and the fund's impact objectives",
        ),
        _criterion(
            "impact-measurement",
            "Impact Measurement",
            CriterionCategory.IMPACT,
            0.20,
            "Quality of KPIs and reporting on social or environmental outcomes",
        ),
        _criterion(
            "unit-economics",
            "Unit Economics",
            CriterionCategory.FINANCIAL,
            0.25,
            "Path to profitability and margin structure",
        ),
        _criterion(
            "governance",
            "Governance",
            CriterionCategory.ESG,
            0.15,
            "Board composition, controls, and stakeholder representation",
        ),
        _criterion(
            "execution-risk",
            "Execution Risk",
            CriterionCategory.RISK,
            0.10,
            "Likelihood that operational risks derail the plan",
            required=False,
            max_value=10.0,
        ),
    ),
)

_TEMPLATES: dict[str, ScreeningTemplate] = {
    t.id: t for t in (_COMPREHENSIVE, _TECHNOLOGY, _IMPACT)
}

DEFAULT_TEMPLATE_ID = _COMPREHENSIVE.id


def list_templates() -> list[ScreeningTemplate]:
    """Return the built-in templates ordered by id."""
    return [_TEMPLATES[tid] for tid in sorted(_TEMPLATES)]


def get_template(template_id: str) -> ScreeningTemplate:
    """Retrieve a built-in template. Fail-closed.

    Args:
        template_id: Template identifier.

    Returns:
        The matching ScreeningTemplate.

    Raises:
        TemplateNotFoundError: If no built-in template has this id.
    """
    template = _TEMPLATES.get(template_id)
    if template is None:
        raise TemplateNotFoundError(f"No screening template defined for id: {template_id}")
    return template


def load_template(path: Path | str) -> ScreeningTemplate:
    """Load a template from a JSON file.

    Raises:
        TemplateLoadError: If the file is unreadable, not JSON, or invalid.
    """
    template_path = Path(path)
    try:
        with template_path.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError as e:
        raise TemplateLoadError(f"Template file not found: {template_path}") from e
    except json.JSONDecodeError as e:
        raise TemplateLoadError(f"Invalid JSON in {template_path}: {e}") from e
    except OSError as e:
        raise TemplateLoadError(f"Cannot read {template_path}: {e}") from e

    try:
        return ScreeningTemplate.model_validate(raw)
    except ValidationError as e:
        raise TemplateLoadError(f"Invalid template in {template_path}: {e}") from e
