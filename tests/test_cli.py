"""CLI tests for quantaquirk-ignition."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from quantaquirk_ignition.cli import _format_solution, main
from quantaquirk_ignition.models import Solution
from quantaquirk_ignition.solutions import BUILTIN_SOLUTION_PROVIDERS


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


# ---------------------------------------------------------------------------
# main group tests
# ---------------------------------------------------------------------------


class TestMainGroup:
    def test_version_flag(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_help_flag(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        for command in ("providers", "solve", "suggest", "config"):
            assert command in result.output


# ---------------------------------------------------------------------------
# providers command tests
# ---------------------------------------------------------------------------


class TestProvidersCommand:
    def test_lists_builtin_providers(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["providers"])
        assert result.exit_code == 0
        assert "RouteNotDefinedSolutionProvider" in result.output
        assert "active" in result.output

    def test_json_output(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["providers", "--json"])
        data = json.loads(result.output)
        assert [row["provider"] for row in data] == BUILTIN_SOLUTION_PROVIDERS
        assert all(row["ignored"] is False for row in data)


# ---------------------------------------------------------------------------
# solve command tests
# ---------------------------------------------------------------------------


class TestSolveCommand:
    def test_route_suggestion(self, runner: CliRunner) -> None:
        result = runner.invoke(
            main,
            ["solve", "Route [test.typoo] not defined.", "--type", "route", "--route", "test.typo"],
        )
        assert result.exit_code == 0
        assert "Did you mean `test.typo`?" in result.output

    def test_route_without_close_match(self, runner: CliRunner) -> None:
        result = runner.invoke(
            main,
            ["solve", "Route [test.is-too-different] not defined.", "--type", "route", "--route", "test.typo"],
        )
        assert result.exit_code == 0
        assert "Did you mean" not in result.output

    def test_mix_manifest_json(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["solve", "Mix manifest not found.", "--json"])
        data = json.loads(result.output)
        assert data[0]["title"] == "Missing Mix Manifest File"

    def test_view_suggestion(self, runner: CliRunner) -> None:
        result = runner.invoke(
            main, ["solve", "View [welcom] not found.", "--type", "view", "--view", "welcome"]
        )
        assert "Did you mean `welcome`?" in result.output

    def test_no_solution(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["solve", "Something unrelated"])
        assert result.exit_code == 0
        assert "No solutions found" in result.output

    def test_invalid_type(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["solve", "x", "--type", "database"])
        assert result.exit_code != 0


# ---------------------------------------------------------------------------
# suggest command tests
# ---------------------------------------------------------------------------


class TestSuggestCommand:
    def test_close_candidate(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["suggest", "users.shw", "users.index", "users.show"])
        assert result.exit_code == 0
        assert "users.show" in result.output

    def test_no_close_candidate_exits_nonzero(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["suggest", "test.is-too-different", "test.typo"])
        assert result.exit_code == 1
        assert "No candidate" in result.output

    def test_threshold_option(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["suggest", "abcd", "wxyz", "--threshold", "0"])
        assert result.exit_code == 0
        assert "wxyz" in result.output

    def test_requires_candidates(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["suggest", "abcd"])
        assert result.exit_code != 0


# ---------------------------------------------------------------------------
# config command tests
# ---------------------------------------------------------------------------


class TestConfigCommand:
    def test_plain_output(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["config"])
        assert result.exit_code == 0
        assert "flareapp.io" in result.output
        assert "add_queries" in result.output

    def test_json_output(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["config", "--json"])
        data = json.loads(result.output)
        assert data["ignition"]["similarity_threshold"] == 0.7
        assert data["flare"]["log_level"] == "error"


class TestFormatSolution:
    def test_includes_description_and_links(self) -> None:
        text = _format_solution(
            Solution(title="T", description="D", documentation_links={"Docs": "https://x"})
        )
        assert "T" in text
        assert "D" in text
        assert "https://x" in text
