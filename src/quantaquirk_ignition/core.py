"""Core wiring for quantaquirk-ignition: recorders, solutions and reporting."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from enum import Enum
from typing import TYPE_CHECKING

from quantaquirk_ignition.config import Settings, get_log_level, load_settings
from quantaquirk_ignition.middleware import (
    AddDumps,
    AddJobs,
    AddLogs,
    AddQueries,
    AddSolutions,
    Middleware,
    run_pipeline,
)
from quantaquirk_ignition.models import Report
from quantaquirk_ignition.recorders import (
    BoundedRecorder,
    DumpRecorder,
    JobRecorder,
    LogRecorder,
    QueryRecorder,
)
from quantaquirk_ignition.solutions import (
    SolutionProviderRepository,
    exception_message,
    resolve_providers,
)

if TYPE_CHECKING:
    from quantaquirk_ignition.log_handler import IgnitionLogHandler

logger = logging.getLogger(__name__)

Transport = Callable[[Report], None]


class LifecycleEvent(str, Enum):
    """Unit-of-work boundaries signalled by the host framework."""

    request_received = "request_received"
    request_terminated = "request_terminated"
    task_received = "task_received"
    tick_received = "tick_received"
    job_before = "job_before"
    job_after = "job_after"


class SentReports:
    """Reports produced during the current unit of work."""

    def __init__(self) -> None:
        self._reports: list[Report] = []

    def add(self, report: Report) -> Report:
        self._reports.append(report)
        return report

    def all(self) -> list[Report]:
        return list(self._reports)

    def ids(self) -> list[str]:
        return [report.id for report in self._reports]

    def latest_id(self) -> str | None:
        return self._reports[-1].id if self._reports else None

    def clear(self) -> None:
        self._reports = []


class Ignition:
    """Explicit context object owning the recorders and the report pipeline.

    One instance is built when the host application boots and is then shared
    by every unit of work the process handles.  The host calls
    :meth:`handle_event` (or wraps each unit in :meth:`unit_of_work`) so that
    recorded queries, logs, jobs and dumps never leak between requests.

    Args:
        settings: Validated :class:`Settings`.  Defaults to :func:`load_settings`.
        transport: Callable that delivers a :class:`Report` to the collection
            service.  When ``None`` reports are built but never delivered.
        route_names: Zero-argument callable returning the registered route
            names, consulted by the route solution provider.
        view_names: Zero-argument callable returning the known view names.
        stage: Application environment recorded on each report.

    Example::

        ignition = Ignition(transport=client.send)
        ignition.start_recorders()
        with ignition.unit_of_work():
            handle_request()
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: Transport | None = None,
        route_names: Callable[[], Iterable[str]] | None = None,
        view_names: Callable[[], Iterable[str]] | None = None,
        stage: str = "production",
    ) -> None:
        self.settings = settings if settings is not None else load_settings()
        self.transport = transport
        self.stage = stage
        self.sent_reports = SentReports()
        self._queue: list[Report] = []
        self._send_immediately = False
        self._reported: list[BaseException] = []

        flare_middleware = self.settings.flare.flare_middleware
        queries = flare_middleware.add_queries
        logs = flare_middleware.add_logs
        jobs = flare_middleware.add_jobs

        self.query_recorder = QueryRecorder(
            capacity=queries.maximum_number_of_collected_queries if queries else 200,
            report_bindings=queries.report_query_bindings if queries else True,
        )
        self.log_recorder = LogRecorder(
            capacity=logs.maximum_number_of_collected_logs if logs else 200,
        )
        self.job_recorder = JobRecorder(
            capacity=jobs.maximum_number_of_collected_jobs if jobs else 100,
            max_chained_job_reporting_depth=jobs.max_chained_job_reporting_depth if jobs else 5,
        )
        self.dump_recorder = DumpRecorder(
            capacity=self.settings.ignition.maximum_number_of_collected_dumps,
        )

        self.solution_repository = SolutionProviderRepository(
            resolve_providers(
                self.settings.ignition.solution_providers,
                ignored=self.settings.ignition.ignored_solution_providers,
                name_sources={
                    "routes": route_names or list,
                    "views": view_names or list,
                },
                threshold=self.settings.ignition.similarity_threshold,
            )
        )
        self.minimum_report_level = get_log_level(self.settings.flare.log_level)

    # ------------------------------------------------------------------
    # Recorders
    # ------------------------------------------------------------------

    @property
    def recorders(self) -> dict[str, BoundedRecorder]:
        return {
            "dumps": self.dump_recorder,
            "jobs": self.job_recorder,
            "logs": self.log_recorder,
            "queries": self.query_recorder,
        }

    def start_recorders(self) -> None:
        """Start every recorder listed in ``ignition.recorders``."""
        for name in self.settings.ignition.recorders:
            self.recorders[name].start()
            logger.debug("Started %s recorder", name)

    # ------------------------------------------------------------------
    # Unit-of-work lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Clear per-unit-of-work state.

        Recorders whose middleware is disabled are left untouched; the dump
        recorder is always cleared.  Queued reports survive a reset.
        """
        self.sent_reports.clear()
        self._reported = []
        flare_middleware = self.settings.flare.flare_middleware
        if flare_middleware.add_logs is not None:
            self.log_recorder.reset()
        if flare_middleware.add_queries is not None:
            self.query_recorder.reset()
        if flare_middleware.add_jobs is not None:
            self.job_recorder.reset()
        self.dump_recorder.reset()

    @contextmanager
    def unit_of_work(self) -> Iterator[Ignition]:
        """Reset before and after the wrapped unit of work, even on error."""
        self.reset()
        try:
            yield self
        finally:
            self.reset()

    def handle_event(self, event: LifecycleEvent | str) -> None:
        """React to a lifecycle boundary signalled by the host framework.

        Unknown event names are ignored.
        """
        try:
            event = LifecycleEvent(event)
        except ValueError:
            logger.debug("Ignoring unknown lifecycle event %r", event)
            return

        self.reset()
        if event is LifecycleEvent.job_before:
            self.send_reports_immediately()

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def middleware_for(self, exc: BaseException) -> list[Middleware]:
        """Return the report middleware enabled in configuration, in order."""
        flare_middleware = self.settings.flare.flare_middleware
        middleware: list[Middleware] = []
        if flare_middleware.add_queries is not None:
            middleware.append(AddQueries(self.query_recorder))
        if flare_middleware.add_logs is not None:
            middleware.append(AddLogs(self.log_recorder))
        if flare_middleware.add_jobs is not None:
            middleware.append(AddJobs(self.job_recorder))
        middleware.append(AddDumps(self.dump_recorder))
        if flare_middleware.add_solutions:
            middleware.append(AddSolutions(self.solution_repository, exc))
        return middleware

    def create_report(self, exc: BaseException) -> Report:
        """Build a report for *exc* without sending or queueing it."""
        exc_type = type(exc)
        report = Report(
            exception_class=f"{exc_type.__module__}.{exc_type.__qualname__}",
            message=exception_message(exc),
            stage=self.stage,
        )
        return run_pipeline(report, self.middleware_for(exc))

    def report(self, exc: BaseException) -> Report:
        """Build a report for *exc* and send or queue it."""
        report = self.create_report(exc)
        self._reported.append(exc)
        self.sent_reports.add(report)
        if self._send_immediately:
            self._send(report)
        else:
            self._queue.append(report)
        return report

    def has_reported(self, exc: BaseException) -> bool:
        """Return ``True`` if *exc* was reported during this unit of work."""
        return any(reported is exc for reported in self._reported)

    @property
    def queued_reports(self) -> list[Report]:
        return list(self._queue)

    def send_reports_immediately(self) -> None:
        """Deliver future reports as soon as they are built, and flush the queue."""
        self._send_immediately = True
        self.flush()

    def flush(self) -> int:
        """Send every queued report and return how many were delivered."""
        queued, self._queue = self._queue, []
        return sum(1 for report in queued if self._send(report))

    def _send(self, report: Report) -> bool:
        if self.transport is None:
            logger.debug("No transport configured, dropping report %s", report.id)
            return False
        try:
            self.transport(report)
        except Exception as exc:
            logger.warning("Failed to send report %s: %s", report.id, exc)
            return False
        return True

    def log_handler(self) -> IgnitionLogHandler:
        """Return a logging handler feeding this instance."""
        from quantaquirk_ignition.log_handler import IgnitionLogHandler

        return IgnitionLogHandler(self, level=logging.DEBUG)


__all__ = [
    "Ignition",
    "LifecycleEvent",
    "SentReports",
    "Transport",
]
