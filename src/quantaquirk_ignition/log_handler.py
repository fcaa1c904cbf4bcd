"""Logging handler that records log lines and reports logged exceptions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Final

if TYPE_CHECKING:
    from quantaquirk_ignition.core import Ignition

_STANDARD_ATTRIBUTES: Final[frozenset[str]] = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime"}

_OWN_LOGGER_PREFIX: Final[str] = "quantaquirk_ignition"


class IgnitionLogHandler(logging.Handler):
    """Feed log records into the log recorder of an :class:`Ignition`.

    Every record is stored in the log recorder.  Records at or above the
    configured minimum report level that carry exception info are also
    reported, unless that exception was already reported during the current
    unit of work.  Records emitted by this package itself are ignored.
    """

    def __init__(self, ignition: Ignition, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.ignition = ignition

    @property
    def minimum_report_level(self) -> int:
        return self.ignition.minimum_report_level

    def emit(self, record: logging.LogRecord) -> None:
        if record.name.startswith(_OWN_LOGGER_PREFIX):
            return
        try:
            self.ignition.log_recorder.record_log(
                record.getMessage(),
                record.levelname,
                context=_record_context(record),
            )
            exc = record.exc_info[1] if record.exc_info else None
            if (
                exc is not None
                and record.levelno >= self.minimum_report_level
                and not self.ignition.has_reported(exc)
            ):
                self.ignition.report(exc)
        except Exception:
            self.handleError(record)


def _record_context(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_ATTRIBUTES and not key.startswith("_")
    }


def attach_log_handler(ignition: Ignition, target: logging.Logger | None = None) -> IgnitionLogHandler:
    """Add a handler for *ignition* to *target* (the root logger by default)."""
    handler = ignition.log_handler()
    (target or logging.getLogger()).addHandler(handler)
    return handler


__all__ = [
    "IgnitionLogHandler",
    "attach_log_handler",
]
