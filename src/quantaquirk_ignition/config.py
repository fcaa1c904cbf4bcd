"""Configuration models and merging for quantaquirk-ignition."""

from __future__ import annotations

import logging
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from quantaquirk_ignition.exceptions import InvalidConfig
from quantaquirk_ignition.similarity import SIMILARITY_THRESHOLD
from quantaquirk_ignition.solutions import BUILTIN_SOLUTION_PROVIDERS

RECORDER_NAMES: Final[tuple[str, ...]] = ("dumps", "jobs", "logs", "queries")

# Level names accepted on top of the stdlib ones.
_LEVEL_ALIASES: Final[dict[str, int]] = {
    "notice": logging.INFO + 5,
    "alert": logging.CRITICAL,
    "emergency": logging.CRITICAL,
}


def get_log_level(name: str) -> int:
    """Return the numeric stdlib logging level for *name*.

    Besides the stdlib names, ``notice`` sits between info and warning, and
    ``alert`` and ``emergency`` map to critical.

    Raises:
        InvalidConfig: If *name* is not a known level.
    """
    alias = _LEVEL_ALIASES.get(str(name).lower())
    if alias is not None:
        return alias
    level = logging.getLevelName(str(name).upper())
    if not isinstance(level, int):
        raise InvalidConfig.invalid_log_level(name)
    return level


class _ConfigModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


# ---------------------------------------------------------------------------
# Flare (report collection)
# ---------------------------------------------------------------------------


class AddQueriesConfig(_ConfigModel):
    report_query_bindings: bool = True
    maximum_number_of_collected_queries: int = Field(default=200, gt=0)


class AddLogsConfig(_ConfigModel):
    maximum_number_of_collected_logs: int = Field(default=200, gt=0)


class AddJobsConfig(_ConfigModel):
    max_chained_job_reporting_depth: int = Field(default=5, ge=0)
    maximum_number_of_collected_jobs: int = Field(default=100, gt=0)


class FlareMiddlewareConfig(_ConfigModel):
    """Report middleware switches.  ``None`` disables a middleware."""

    add_queries: AddQueriesConfig | None = Field(default_factory=AddQueriesConfig)
    add_logs: AddLogsConfig | None = Field(default_factory=AddLogsConfig)
    add_jobs: AddJobsConfig | None = Field(default_factory=AddJobsConfig)
    add_solutions: bool = True


class FlareConfig(_ConfigModel):
    key: str | None = Field(default=None, description="Project API key")
    base_url: str = "https://flareapp.io/api"
    log_level: str = Field(
        default="error", description="Minimum level at which logged exceptions are reported"
    )
    flare_middleware: FlareMiddlewareConfig = Field(default_factory=FlareMiddlewareConfig)

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, value: str) -> str:
        """Accept only level names known to :func:`get_log_level`."""
        try:
            get_log_level(value)
        except InvalidConfig as exc:
            raise ValueError(str(exc)) from exc
        return value.lower()


# ---------------------------------------------------------------------------
# Ignition (solutions and recorders)
# ---------------------------------------------------------------------------


class IgnitionConfig(_ConfigModel):
    solution_providers: list[str] = Field(
        default_factory=lambda: list(BUILTIN_SOLUTION_PROVIDERS),
        description="Dotted paths of solution providers, in probing order",
    )
    ignored_solution_providers: list[str] = Field(default_factory=list)
    recorders: list[str] = Field(
        default_factory=lambda: list(RECORDER_NAMES),
        description="Recorders started when the integration boots",
    )
    maximum_number_of_collected_dumps: int = Field(default=300, gt=0)
    similarity_threshold: float = Field(default=SIMILARITY_THRESHOLD, ge=0.0, le=1.0)
    settings_file_path: str = ""

    @field_validator("recorders")
    @classmethod
    def recorders_must_be_known(cls, value: list[str]) -> list[str]:
        """Restrict recorder names to the bundled recorders."""
        unknown = [name for name in value if name not in RECORDER_NAMES]
        if unknown:
            raise ValueError(f"unknown recorders {unknown}, expected a subset of {list(RECORDER_NAMES)}")
        return value


class Settings(_ConfigModel):
    flare: FlareConfig = Field(default_factory=FlareConfig)
    ignition: IgnitionConfig = Field(default_factory=IgnitionConfig)

    def active_solution_providers(self) -> list[str]:
        """Configured provider paths minus the ignored ones."""
        ignored = set(self.ignition.ignored_solution_providers)
        return [p for p in self.ignition.solution_providers if p not in ignored]


def _deep_merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_settings(overrides: dict[str, Any] | None = None) -> Settings:
    """Merge *overrides* onto the default settings and validate the result.

    Nested dicts are merged key by key; any other value replaces the default.
    An explicit ``None`` for a middleware disables it.

    Raises:
        InvalidConfig: If the merged settings fail validation.
    """
    defaults = Settings().model_dump()
    merged = _deep_merge(defaults, overrides or {})
    try:
        return Settings.model_validate(merged)
    except ValidationError as exc:
        raise InvalidConfig(f"Invalid ignition configuration: {exc}") from exc


__all__ = [
    "RECORDER_NAMES",
    "AddQueriesConfig",
    "AddLogsConfig",
    "AddJobsConfig",
    "FlareMiddlewareConfig",
    "FlareConfig",
    "IgnitionConfig",
    "Settings",
    "get_log_level",
    "load_settings",
]
