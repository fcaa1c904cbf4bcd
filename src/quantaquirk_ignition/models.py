"""Pydantic models for quantaquirk-ignition."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class EventKind(str, Enum):
    """Kind of framework event captured by a recorder."""

    query = "query"
    log = "log"
    job = "job"
    dump = "dump"


class RecordedEvent(BaseModel):
    """A single immutable event captured during a unit of work."""

    model_config = ConfigDict(frozen=True)

    kind: EventKind = Field(description="Which recorder produced the event")
    timestamp: datetime = Field(default_factory=_utcnow, description="UTC capture time")
    payload: dict[str, Any] = Field(
        default_factory=dict, description="Kind-specific structured data"
    )


class Solution(BaseModel):
    """A human-readable suggested fix for an exception."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(description="Short headline shown above the description")
    description: str = Field(default="", description="Suggested fix, may contain markdown")
    documentation_links: dict[str, str] = Field(
        default_factory=dict, description="Mapping of link label to URL"
    )

    @field_validator("title")
    @classmethod
    def title_must_not_be_blank(cls, value: str) -> str:
        """Reject empty titles."""
        if not value.strip():
            raise ValueError("title must not be blank")
        return value


class Report(BaseModel):
    """Structured payload describing one captured exception."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    exception_class: str = Field(description="Fully qualified exception class name")
    message: str = Field(default="", description="Exception message")
    stage: str = Field(default="production", description="Application environment")
    timestamp: datetime = Field(default_factory=_utcnow)
    groups: dict[str, list[dict[str, Any]]] = Field(
        default_factory=dict, description="Context groups: queries, logs, jobs, dumps"
    )
    solutions: list[Solution] = Field(default_factory=list)

    def group(self, name: str, items: list[dict[str, Any]]) -> Report:
        """Set the context group *name* and return the report."""
        self.groups[name] = list(items)
        return self

    def add_solutions(self, solutions: list[Solution]) -> Report:
        """Append *solutions* to the report and return it."""
        self.solutions.extend(solutions)
        return self


__all__ = [
    "EventKind",
    "RecordedEvent",
    "Solution",
    "Report",
]
