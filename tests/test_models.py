"""Tests for quantaquirk_ignition.models."""

from __future__ import annotations

from datetime import timezone

import pytest
from pydantic import BaseModel, ValidationError

from quantaquirk_ignition.models import EventKind, RecordedEvent, Report, Solution


class TestRecordedEvent:
    def test_defaults(self) -> None:
        event = RecordedEvent(kind=EventKind.log)
        assert event.payload == {}
        assert event.timestamp.tzinfo == timezone.utc

    def test_is_frozen(self) -> None:
        event = RecordedEvent(kind=EventKind.query, payload={"sql": "select 1"})
        with pytest.raises(ValidationError):
            event.kind = EventKind.log  # type: ignore[misc]

    def test_kind_from_string(self) -> None:
        assert RecordedEvent(kind="dump").kind is EventKind.dump  # type: ignore[arg-type]


class TestSolution:
    def test_create_with_all_fields(self) -> None:
        solution = Solution(
            title="Missing key",
            description="Run key:generate.",
            documentation_links={"Docs": "https://example.com"},
        )
        assert solution.title == "Missing key"
        assert solution.documentation_links == {"Docs": "https://example.com"}

    def test_defaults(self) -> None:
        solution = Solution(title="Only a title")
        assert solution.description == ""
        assert solution.documentation_links == {}

    def test_blank_title_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Solution(title="   ")

    def test_is_frozen(self) -> None:
        solution = Solution(title="x")
        with pytest.raises(ValidationError):
            solution.title = "y"  # type: ignore[misc]

    def test_is_pydantic_model(self) -> None:
        assert issubclass(Solution, BaseModel)


class TestReport:
    def test_ids_are_unique(self) -> None:
        assert Report(exception_class="E").id != Report(exception_class="E").id

    def test_group_sets_context(self) -> None:
        report = Report(exception_class="E").group("queries", [{"sql": "select 1"}])
        assert report.groups == {"queries": [{"sql": "select 1"}]}

    def test_add_solutions(self) -> None:
        report = Report(exception_class="E").add_solutions([Solution(title="a")])
        report.add_solutions([Solution(title="b")])
        assert [s.title for s in report.solutions] == ["a", "b"]

    def test_model_dump_is_serialisable(self) -> None:
        report = Report(exception_class="E", solutions=[Solution(title="a")])
        data = report.model_dump(mode="json")
        assert data["solutions"][0]["title"] == "a"
        assert isinstance(data["timestamp"], str)
