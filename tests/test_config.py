"""Tests for quantaquirk_ignition.config."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from quantaquirk_ignition.config import (
    RECORDER_NAMES,
    AddQueriesConfig,
    FlareConfig,
    IgnitionConfig,
    Settings,
    get_log_level,
    load_settings,
)
from quantaquirk_ignition.exceptions import InvalidConfig
from quantaquirk_ignition.solutions import BUILTIN_SOLUTION_PROVIDERS


class TestDefaults:
    def test_default_settings(self) -> None:
        settings = load_settings()
        assert settings.flare.base_url == "https://flareapp.io/api"
        assert settings.flare.key is None
        assert settings.flare.log_level == "error"

    def test_default_middleware_is_enabled(self) -> None:
        middleware = load_settings().flare.flare_middleware
        assert middleware.add_queries is not None
        assert middleware.add_queries.maximum_number_of_collected_queries == 200
        assert middleware.add_queries.report_query_bindings is True
        assert middleware.add_logs is not None
        assert middleware.add_jobs is not None
        assert middleware.add_jobs.max_chained_job_reporting_depth == 5
        assert middleware.add_solutions is True

    def test_default_ignition_settings(self) -> None:
        ignition = load_settings().ignition
        assert ignition.solution_providers == BUILTIN_SOLUTION_PROVIDERS
        assert ignition.ignored_solution_providers == []
        assert ignition.recorders == list(RECORDER_NAMES)
        assert ignition.similarity_threshold == 0.7


class TestLoadSettings:
    def test_nested_override_keeps_siblings(self) -> None:
        settings = load_settings(
            {"flare": {"flare_middleware": {"add_queries": {"report_query_bindings": False}}}}
        )
        queries = settings.flare.flare_middleware.add_queries
        assert queries is not None
        assert queries.report_query_bindings is False
        assert queries.maximum_number_of_collected_queries == 200

    def test_none_disables_middleware(self) -> None:
        settings = load_settings({"flare": {"flare_middleware": {"add_logs": None}}})
        assert settings.flare.flare_middleware.add_logs is None
        assert settings.flare.flare_middleware.add_jobs is not None

    def test_lists_are_replaced(self) -> None:
        settings = load_settings({"ignition": {"recorders": ["logs"]}})
        assert settings.ignition.recorders == ["logs"]

    def test_active_solution_providers_excludes_ignored(self) -> None:
        ignored = BUILTIN_SOLUTION_PROVIDERS[1]
        settings = load_settings({"ignition": {"ignored_solution_providers": [ignored]}})
        active = settings.active_solution_providers()
        assert ignored not in active
        assert len(active) == len(BUILTIN_SOLUTION_PROVIDERS) - 1

    @pytest.mark.parametrize(
        "overrides",
        [
            {"flare": {"flare_middleware": {"add_queries": {"maximum_number_of_collected_queries": 0}}}},
            {"flare": {"flare_middleware": {"add_logs": {"maximum_number_of_collected_logs": -5}}}},
            {"flare": {"log_level": "loud"}},
            {"ignition": {"recorders": ["queries", "requests"]}},
            {"ignition": {"similarity_threshold": 1.5}},
            {"ignition": {"maximum_number_of_collected_dumps": 0}},
            {"flare": {"flare_midleware": {"add_queries": None}}},
            {"ignition": {"recorder": ["logs"]}},
        ],
    )
    def test_invalid_overrides_raise_invalid_config(self, overrides: dict) -> None:
        with pytest.raises(InvalidConfig):
            load_settings(overrides)

    def test_overrides_are_not_mutated(self) -> None:
        overrides = {"flare": {"key": "secret"}}
        load_settings(overrides)
        assert overrides == {"flare": {"key": "secret"}}


class TestModels:
    def test_log_level_is_normalised(self) -> None:
        assert FlareConfig(log_level="WARNING").log_level == "warning"

    def test_invalid_log_level_is_validation_error(self) -> None:
        with pytest.raises(ValidationError):
            FlareConfig(log_level="shouty")

    def test_query_capacity_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            AddQueriesConfig(maximum_number_of_collected_queries=0)

    def test_unknown_recorder_rejected(self) -> None:
        with pytest.raises(ValidationError):
            IgnitionConfig(recorders=["sessions"])

    def test_notice_log_level_accepted(self) -> None:
        assert load_settings({"flare": {"log_level": "notice"}}).flare.log_level == "notice"

    def test_unknown_field_is_validation_error(self) -> None:
        with pytest.raises(ValidationError):
            AddQueriesConfig(maximum_number_of_collected_querys=10)

    def test_settings_round_trip(self) -> None:
        settings = Settings()
        assert Settings.model_validate(settings.model_dump()) == settings


class TestGetLogLevel:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("debug", logging.DEBUG),
            ("INFO", logging.INFO),
            ("warning", logging.WARNING),
            ("error", logging.ERROR),
            ("critical", logging.CRITICAL),
            ("notice", logging.INFO + 5),
            ("alert", logging.CRITICAL),
            ("EMERGENCY", logging.CRITICAL),
        ],
    )
    def test_known_levels(self, name: str, expected: int) -> None:
        assert get_log_level(name) == expected

    def test_unknown_level_raises(self) -> None:
        with pytest.raises(InvalidConfig, match="Invalid log level `loud`"):
            get_log_level("loud")
