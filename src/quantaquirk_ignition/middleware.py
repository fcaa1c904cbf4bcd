"""Report middleware that attaches recorder snapshots and solutions."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from quantaquirk_ignition.models import Report
from quantaquirk_ignition.recorders import DumpRecorder, JobRecorder, LogRecorder, QueryRecorder
from quantaquirk_ignition.solutions import SolutionProviderRepository

logger = logging.getLogger(__name__)

Next = Callable[[Report], Report]
Middleware = Callable[[Report, Next], Report]


class AddQueries:
    def __init__(self, recorder: QueryRecorder) -> None:
        self.recorder = recorder

    def __call__(self, report: Report, next_: Next) -> Report:
        report.group("queries", self.recorder.get_queries())
        return next_(report)


class AddLogs:
    def __init__(self, recorder: LogRecorder) -> None:
        self.recorder = recorder

    def __call__(self, report: Report, next_: Next) -> Report:
        report.group("logs", self.recorder.get_log_messages())
        return next_(report)


class AddJobs:
    def __init__(self, recorder: JobRecorder) -> None:
        self.recorder = recorder

    def __call__(self, report: Report, next_: Next) -> Report:
        report.group("jobs", self.recorder.get_jobs())
        return next_(report)


class AddDumps:
    def __init__(self, recorder: DumpRecorder) -> None:
        self.recorder = recorder

    def __call__(self, report: Report, next_: Next) -> Report:
        report.group("dumps", self.recorder.get_dumps())
        return next_(report)


class AddSolutions:
    """Attaches the solutions found for the reported exception.

    Args:
        repository: Repository probed for solutions.
        exc: The exception being reported.
    """

    def __init__(self, repository: SolutionProviderRepository, exc: BaseException) -> None:
        self.repository = repository
        self.exc = exc

    def __call__(self, report: Report, next_: Next) -> Report:
        report.add_solutions(self.repository.get_solutions_for_exception(self.exc))
        return next_(report)


def run_pipeline(report: Report, middleware: Sequence[Middleware]) -> Report:
    """Pass *report* through *middleware* in order.

    A middleware that raises is skipped; the rest of the chain still runs.
    """

    def dispatch(index: int) -> Next:
        def handle(current: Report) -> Report:
            if index >= len(middleware):
                return current
            step = middleware[index]
            try:
                return step(current, dispatch(index + 1))
            except Exception as exc:
                logger.warning("Report middleware %s failed: %s", type(step).__name__, exc)
                return dispatch(index + 1)(current)

        return handle

    return dispatch(0)(report)


__all__ = [
    "AddQueries",
    "AddLogs",
    "AddJobs",
    "AddDumps",
    "AddSolutions",
    "run_pipeline",
]
