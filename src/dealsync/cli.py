"""dealsync CLI - deterministic command-line interface for deal scoring.

Usage:
    python -m dealsync score --template <ID|PATH> --scores PATH [--mode MODE]
    python -m dealsync validate --template <ID|PATH> --scores PATH [--require-complete]
    python -m dealsync progress --template <ID|PATH> --scores PATH
    python -m dealsync templates

--template accepts a built-in template id or a path to a template JSON file.
--scores is a JSON object keyed by criterion id; each value is either a
number (or null) or an object with value/notes/ai_generated/confidence.

Exit codes:
    0: Success / validation passed
    1: Internal error
    2: Validation failed / invalid input
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from dealsync.scoring import (
    CriterionScore,
    InteractionMode,
    ScreeningTemplate,
    calculate_final_scores,
    calculate_recommendation,
    get_scoring_progress,
    get_template,
    list_templates,
    load_template,
    validate_scoring,
)
from dealsync.scoring.templates import TemplateLoadError, TemplateNotFoundError


class InputError(Exception):
    """Raised when CLI input cannot be loaded."""


def _output_json(data: dict[str, Any]) -> None:
    """Output JSON to stdout with deterministic ordering."""
    print(json.dumps(data, sort_keys=True, indent=2))


def _make_error_result(code: str, message: str) -> dict[str, Any]:
    return {
        "errors": [{"code": code, "criterion_id": None, "message": message}],
        "valid": False,
        "warnings": [],
    }


def _resolve_template(ref: str) -> ScreeningTemplate:
    """Resolve a built-in template id, falling back to a JSON file path."""
    try:
        return get_template(ref)
    except TemplateNotFoundError:
        if not Path(ref).exists():
            raise
    return load_template(ref)


def _load_scores(path: str) -> dict[str, CriterionScore]:
    """Load a score map from a JSON file.

    Raises:
        InputError: If the file is unreadable or malformed.
    """
    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError as e:
        raise InputError(f"File not found: {path}") from e
    except json.JSONDecodeError as e:
        raise InputError(f"Invalid JSON: {e}") from e
    except OSError as e:
        raise InputError(f"Cannot read input: {e}") from e

    if not isinstance(raw, dict):
        raise InputError("Scores must be a JSON object keyed by criterion id")

    scores: dict[str, CriterionScore] = {}
    try:
        for criterion_id, entry in raw.items():
            if isinstance(entry, dict):
                scores[criterion_id] = CriterionScore(criterion_id=criterion_id, **entry)
            else:
                scores[criterion_id] = CriterionScore(criterion_id=criterion_id, value=entry)
    except (ValidationError, TypeError) as e:
        raise InputError(f"Invalid score entry: {e}") from e
    return scores


def _load_inputs(args: argparse.Namespace) -> tuple[ScreeningTemplate, dict[str, CriterionScore]]:
    try:
        template = _resolve_template(args.template)
    except (TemplateNotFoundError, TemplateLoadError) as e:
        raise InputError(str(e)) from e
    return template, _load_scores(args.scores)


def cmd_score(args: argparse.Namespace) -> int:
    """Execute score command.

    Exit codes:
        0: Scores computed
        2: Invalid input
    """
    template, scores = _load_inputs(args)
    result = calculate_final_scores(scores, template)
    output = result.model_dump(mode="json")
    output["recommendation"] = calculate_recommendation(result.total_score, args.mode).value
    output["template_id"] = template.id
    _output_json(output)
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Execute validate command.

    Exit codes:
        0: valid=True
        2: valid=False
    """
    template, scores = _load_inputs(args)
    report = validate_scoring(scores, template, require_complete=args.require_complete)
    _output_json(report.to_dict())
    return 0 if report.valid else 2


def cmd_progress(args: argparse.Namespace) -> int:
    """Execute progress command."""
    template, scores = _load_inputs(args)
    progress = get_scoring_progress(scores, template)
    _output_json(progress.model_dump(mode="json"))
    return 0


def cmd_templates(args: argparse.Namespace) -> int:
    """List built-in templates."""
    _output_json(
        {
            "templates": [
                {
                    "criteria": len(t.criteria),
                    "description": t.description,
                    "id": t.id,
                    "name": t.name,
                }
                for t in list_templates()
            ]
        }
    )
    return 0


def _add_input_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--template",
        required=True,
        metavar="ID|PATH",
        help="Built-in template id or path to a template JSON file",
    )
    parser.add_argument(
        "--scores",
        required=True,
        metavar="PATH",
        help="Path to a JSON object of criterion scores",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="dealsync",
        description="dealsync - deal screening scoring CLI",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    score_parser = subparsers.add_parser("score", help="Compute total score and recommendation")
    _add_input_arguments(score_parser)
    score_parser.add_argument(
        "--mode",
        choices=[m.value for m in InteractionMode],
        default=InteractionMode.TRADITIONAL.value,
        help="Interaction mode (does not change thresholds)",
    )

    validate_parser = subparsers.add_parser("validate", help="Validate scores against a template")
    _add_input_arguments(validate_parser)
    validate_parser.add_argument(
        "--require-complete",
        action="store_true",
        default=False,
        help="Treat unscored criteria as errors",
    )

    progress_parser = subparsers.add_parser("progress", help="Show scoring progress")
    _add_input_arguments(progress_parser)

    subparsers.add_parser("templates", help="List built-in templates")

    return parser


_COMMANDS = {
    "score": cmd_score,
    "validate": cmd_validate,
    "progress": cmd_progress,
    "templates": cmd_templates,
}


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Exit codes:
        0: Success / validation passed
        1: Internal error (unexpected)
        2: Validation failed / invalid input
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        return _COMMANDS[args.command](args)
    except InputError as e:
        _output_json(_make_error_result("INVALID_INPUT", str(e)))
        return 2
    except Exception as e:
        _output_json(_make_error_result("INTERNAL_ERROR", str(e)))
        return 1


if __name__ == "__main__":
    sys.exit(main())
