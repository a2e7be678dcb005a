"""Tests for the dealsync CLI.

Tests cover:
1. score: total score and recommendation for built-in and file templates
2. validate: exit code 0 when valid, 2 when invalid
3. progress and templates output
4. FAIL: unreadable or malformed inputs (exit code 2, INVALID_INPUT)
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from dealsync.cli import main


def _write(path: Path, data: Any) -> str:
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def _run(argv: list[str], capsys: pytest.CaptureFixture[str]) -> tuple[int, dict[str, Any]]:
    exit_code = main(argv)
    return exit_code, json.loads(capsys.readouterr().out)


@pytest.fixture
def template_file(tmp_path: Path) -> str:
    return _write(
        tmp_path / "template.json",
        {
            "id": "two-criteria",
            "name": "Two Criteria",
            "criteria": [
                {
                    "id": "c1",
                    "name": "Growth",
                    "category": "financial",
                    "weight": 0.6,
                    "min_value": 0,
                    "max_value": 10,
                    "required": True,
                },
                {
                    "id": "c2",
                    "name": "Team",
                    "category": "operational",
                    "weight": 0.4,
                    "min_value": 0,
                    "max_value": 5,
                    "required": True,
                },
            ],
        },
    )


class TestCliScore:
    def test_score_with_file_template(
        self, tmp_path: Path, template_file: str, capsys: pytest.CaptureFixture[str]
    ) -> None:
        scores = _write(tmp_path / "scores.json", {"c1": 8, "c2": {"value": 2.5}})

        exit_code, output = _run(
            ["score", "--template", template_file, "--scores", scores], capsys
        )

        assert exit_code == 0
        assert output["template_id"] == "two-criteria"
        assert output["total_score"] == 68
        assert output["recommendation"] == "recommended"
        assert output["completion_rate"] == 1.0

    def test_score_with_builtin_template(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        criteria = [
            "financial-metrics",
            "market-position",
            "management-team",
            "risk-factors",
            "esg-score",
        ]
        scores = _write(tmp_path / "scores.json", {cid: 80 for cid in criteria})

        exit_code, output = _run(
            ["score", "--template", "comprehensive", "--scores", scores, "--mode", "autonomous"],
            capsys,
        )

        assert exit_code == 0
        assert output["total_score"] == 80
        assert output["recommendation"] == "highly_recommended"

    def test_unknown_template(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        scores = _write(tmp_path / "scores.json", {})

        exit_code, output = _run(
            ["score", "--template", "no-such-template", "--scores", scores], capsys
        )

        assert exit_code == 2
        assert output["errors"][0]["code"] == "INVALID_INPUT"

    def test_missing_scores_file(
        self, tmp_path: Path, template_file: str, capsys: pytest.CaptureFixture[str]
    ) -> None:
        exit_code, output = _run(
            ["score", "--template", template_file, "--scores", str(tmp_path / "nope.json")],
            capsys,
        )

        assert exit_code == 2
        assert "File not found" in output["errors"][0]["message"]

    def test_invalid_json_scores(
        self, tmp_path: Path, template_file: str, capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = tmp_path / "scores.json"
        path.write_text("{broken", encoding="utf-8")

        exit_code, output = _run(
            ["score", "--template", template_file, "--scores", str(path)], capsys
        )

        assert exit_code == 2
        assert "Invalid JSON" in output["errors"][0]["message"]

    def test_scores_must_be_object(
        self, tmp_path: Path, template_file: str, capsys: pytest.CaptureFixture[str]
    ) -> None:
        scores = _write(tmp_path / "scores.json", [1, 2])

        exit_code, output = _run(
            ["score", "--template", template_file, "--scores", scores], capsys
        )

        assert exit_code == 2
        assert output["valid"] is False


class TestCliValidate:
    def test_valid_scores(
        self, tmp_path: Path, template_file: str, capsys: pytest.CaptureFixture[str]
    ) -> None:
        scores = _write(tmp_path / "scores.json", {"c1": 5, "c2": 5})

        exit_code, output = _run(
            ["validate", "--template", template_file, "--scores", scores, "--require-complete"],
            capsys,
        )

        assert exit_code == 0
        assert output == {"errors": [], "valid": True, "warnings": []}

    def test_out_of_bounds_fails(
        self, tmp_path: Path, template_file: str, capsys: pytest.CaptureFixture[str]
    ) -> None:
        scores = _write(tmp_path / "scores.json", {"c1": 5, "c2": 9})

        exit_code, output = _run(
            ["validate", "--template", template_file, "--scores", scores], capsys
        )

        assert exit_code == 2
        assert output["errors"][0]["code"] == "SCORE_OUT_OF_BOUNDS"
        assert output["errors"][0]["criterion_id"] == "c2"

    def test_require_complete(
        self, tmp_path: Path, template_file: str, capsys: pytest.CaptureFixture[str]
    ) -> None:
        scores = _write(tmp_path / "scores.json", {"c1": 5, "c2": None})

        exit_code, output = _run(
            ["validate", "--template", template_file, "--scores", scores, "--require-complete"],
            capsys,
        )

        assert exit_code == 2
        assert [e["code"] for e in output["errors"]] == ["INCOMPLETE_SCORING"]


class TestCliProgressAndTemplates:
    def test_progress(
        self, tmp_path: Path, template_file: str, capsys: pytest.CaptureFixture[str]
    ) -> None:
        scores = _write(tmp_path / "scores.json", {"c2": 3})

        exit_code, output = _run(
            ["progress", "--template", template_file, "--scores", scores], capsys
        )

        assert exit_code == 0
        assert output["completed_count"] == 1
        assert output["next_criterion"]["id"] == "c1"
        assert output["category_progress"]["operational"]["rate"] == 1.0

    def test_templates(self, capsys: pytest.CaptureFixture[str]) -> None:
        exit_code, output = _run(["templates"], capsys)

        assert exit_code == 0
        ids = [t["id"] for t in output["templates"]]
        assert ids == sorted(ids)
        assert "comprehensive" in ids

    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([]) == 0
        assert "dealsync" in capsys.readouterr().out
