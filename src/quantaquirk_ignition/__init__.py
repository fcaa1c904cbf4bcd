"""QuantaQuirk Ignition: recorders, solutions and error reports for QuantaQuirk apps."""

from quantaquirk_ignition.config import Settings, load_settings
from quantaquirk_ignition.core import Ignition, LifecycleEvent, SentReports
from quantaquirk_ignition.exceptions import InvalidConfig, RouteNotFoundError, ViewNotFoundError
from quantaquirk_ignition.log_handler import IgnitionLogHandler, attach_log_handler
from quantaquirk_ignition.models import EventKind, RecordedEvent, Report, Solution
from quantaquirk_ignition.recorders import (
    BoundedRecorder,
    DumpRecorder,
    JobRecorder,
    LogRecorder,
    QueryRecorder,
)
from quantaquirk_ignition.similarity import SIMILARITY_THRESHOLD, find_closest_match
from quantaquirk_ignition.solutions import (
    ProvidesSolution,
    SolutionProvider,
    SolutionProviderRepository,
)

__version__ = "0.1.0"

__all__ = [
    # Wiring
    "Ignition",
    "LifecycleEvent",
    "SentReports",
    "Settings",
    "load_settings",
    "IgnitionLogHandler",
    "attach_log_handler",
    # Errors
    "InvalidConfig",
    "RouteNotFoundError",
    "ViewNotFoundError",
    # Models
    "EventKind",
    "RecordedEvent",
    "Report",
    "Solution",
    # Recorders
    "BoundedRecorder",
    "DumpRecorder",
    "JobRecorder",
    "LogRecorder",
    "QueryRecorder",
    # Solutions
    "SIMILARITY_THRESHOLD",
    "find_closest_match",
    "ProvidesSolution",
    "SolutionProvider",
    "SolutionProviderRepository",
]
