"""Bounded recorders that collect queries, logs, jobs and dumps for reports."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from typing import Any

from quantaquirk_ignition.exceptions import InvalidConfig
from quantaquirk_ignition.models import EventKind, RecordedEvent

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Generic recorder
# ---------------------------------------------------------------------------


class BoundedRecorder:
    """Capped FIFO buffer of :class:`RecordedEvent` values.

    Recording only happens between :meth:`start` and :meth:`stop`.  Once the
    buffer holds ``capacity`` events each new event evicts the oldest one.
    :meth:`reset` empties the buffer without touching the active flag, so
    the owner can clear it at every unit-of-work boundary.

    Args:
        kind: The :class:`EventKind` this recorder accepts.
        capacity: Maximum number of events kept.  Must be a positive int.

    Raises:
        InvalidConfig: If *capacity* is not a positive integer.
    """

    def __init__(self, kind: EventKind, capacity: int) -> None:
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise InvalidConfig(
                f"{kind.value} recorder capacity must be a positive integer, got {capacity!r}"
            )
        self._kind = kind
        self._capacity = capacity
        self._events: deque[RecordedEvent] = deque(maxlen=capacity)
        self._active = False

    @property
    def kind(self) -> EventKind:
        return self._kind

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def is_active(self) -> bool:
        return self._active

    def __len__(self) -> int:
        return len(self._events)

    def start(self) -> None:
        """Begin accepting events."""
        self._active = True

    def stop(self) -> None:
        """Stop accepting events; already recorded events are kept."""
        self._active = False

    def reset(self) -> None:
        """Drop every recorded event."""
        self._events.clear()

    def record(self, event: RecordedEvent) -> None:
        """Append *event*, evicting the oldest one when at capacity.

        Silently ignored while the recorder is not active.
        """
        if not self._active:
            return
        self._events.append(event)

    def all(self) -> list[RecordedEvent]:
        """Return the recorded events, oldest first."""
        return list(self._events)

    def payloads(self) -> list[dict[str, Any]]:
        """Return the payload of every event merged with its timestamp."""
        return [
            {**event.payload, "microtime": event.timestamp.timestamp()}
            for event in self._events
        ]

    def _record_payload(self, payload_factory: Callable[[], dict[str, Any]]) -> None:
        if not self._active:
            return
        try:
            payload = payload_factory()
            self.record(RecordedEvent(kind=self._kind, payload=payload))
        except Exception as exc:
            logger.warning("Dropping %s event that could not be recorded: %s", self._kind.value, exc)


# ---------------------------------------------------------------------------
# Typed recorders
# ---------------------------------------------------------------------------


class QueryRecorder(BoundedRecorder):
    """Collects executed database queries.

    Args:
        capacity: Maximum number of queries kept.
        report_bindings: When ``False`` query bindings are never stored.
    """

    def __init__(self, capacity: int = 200, report_bindings: bool = True) -> None:
        super().__init__(EventKind.query, capacity)
        self.report_bindings = report_bindings

    def record_query(
        self,
        sql: str,
        bindings: list[Any] | None = None,
        time_ms: float | None = None,
        connection_name: str | None = None,
    ) -> None:
        def build() -> dict[str, Any]:
            payload: dict[str, Any] = {
                "sql": sql,
                "time": time_ms,
                "connection_name": connection_name,
                "bindings": None,
            }
            if self.report_bindings and bindings is not None:
                payload["bindings"] = list(bindings)
            return payload

        self._record_payload(build)

    def get_queries(self) -> list[dict[str, Any]]:
        return self.payloads()


class LogRecorder(BoundedRecorder):
    """Collects log messages written during the unit of work."""

    def __init__(self, capacity: int = 200) -> None:
        super().__init__(EventKind.log, capacity)

    def record_log(
        self,
        message: str,
        level: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        self._record_payload(
            lambda: {
                "message": str(message),
                "level": level.lower(),
                "context": dict(context or {}),
            }
        )

    def get_log_messages(self) -> list[dict[str, Any]]:
        return self.payloads()


class JobRecorder(BoundedRecorder):
    """Collects queued jobs processed by the worker.

    Args:
        capacity: Maximum number of jobs kept.
        max_chained_job_reporting_depth: How many levels of chained jobs are
            kept in each payload.  ``0`` drops chained jobs entirely.
    """

    def __init__(self, capacity: int = 100, max_chained_job_reporting_depth: int = 5) -> None:
        super().__init__(EventKind.job, capacity)
        if max_chained_job_reporting_depth < 0:
            raise InvalidConfig(
                "max_chained_job_reporting_depth must be >= 0, "
                f"got {max_chained_job_reporting_depth}"
            )
        self.max_chained_job_reporting_depth = max_chained_job_reporting_depth

    def record_job(
        self,
        name: str,
        connection: str | None = None,
        queue: str | None = None,
        data: dict[str, Any] | None = None,
        chained: list[dict[str, Any]] | None = None,
    ) -> None:
        self._record_payload(
            lambda: {
                "name": name,
                "connection": connection,
                "queue": queue,
                "data": dict(data or {}),
                "chained": _truncate_chain(chained or [], self.max_chained_job_reporting_depth),
            }
        )

    def get_jobs(self) -> list[dict[str, Any]]:
        return self.payloads()


class DumpRecorder(BoundedRecorder):
    """Collects values dumped while debugging."""

    def __init__(self, capacity: int = 300) -> None:
        super().__init__(EventKind.dump, capacity)

    def record_dump(self, value: Any, file: str | None = None, line: int | None = None) -> None:
        self._record_payload(
            lambda: {"html_dump": repr(value), "file": file, "line_number": line}
        )

    def get_dumps(self) -> list[dict[str, Any]]:
        return self.payloads()


def _truncate_chain(chained: list[dict[str, Any]], depth: int) -> list[dict[str, Any]]:
    if depth <= 0:
        return []
    truncated = []
    for job in chained:
        copy = dict(job)
        copy["chained"] = _truncate_chain(copy.get("chained") or [], depth - 1)
        truncated.append(copy)
    return truncated


__all__ = [
    "BoundedRecorder",
    "QueryRecorder",
    "LogRecorder",
    "JobRecorder",
    "DumpRecorder",
]
