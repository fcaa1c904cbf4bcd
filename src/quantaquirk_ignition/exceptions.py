"""Exception types for quantaquirk-ignition."""

from __future__ import annotations


class InvalidConfig(Exception):
    """Raised at wiring time when the integration is misconfigured."""

    @classmethod
    def invalid_log_level(cls, log_level: str) -> InvalidConfig:
        return cls(f"Invalid log level `{log_level}` specified.")

    @classmethod
    def unknown_solution_provider(cls, path: str) -> InvalidConfig:
        return cls(f"Solution provider `{path}` could not be resolved.")


class RouteNotFoundError(LookupError):
    """Raised by the host router when a named route does not exist.

    The message follows the template ``Route [<name>] not defined.``
    """

    @classmethod
    def for_route(cls, name: str) -> RouteNotFoundError:
        return cls(f"Route [{name}] not defined.")


class ViewNotFoundError(LookupError):
    """Raised by the host view finder, message ``View [<name>] not found.``"""

    @classmethod
    def for_view(cls, name: str) -> ViewNotFoundError:
        return cls(f"View [{name}] not found.")


__all__ = [
    "InvalidConfig",
    "RouteNotFoundError",
    "ViewNotFoundError",
]
