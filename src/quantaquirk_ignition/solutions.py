"""Solution providers: turn recognised exceptions into suggested fixes."""

from __future__ import annotations

import importlib
import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from typing import ClassVar, Final

from quantaquirk_ignition.exceptions import InvalidConfig, RouteNotFoundError
from quantaquirk_ignition.models import Solution
from quantaquirk_ignition.similarity import SIMILARITY_THRESHOLD, find_closest_match

logger = logging.getLogger(__name__)

NameSource = Callable[[], Iterable[str]]


def exception_message(exc: BaseException) -> str:
    """Return ``str(exc)``, or ``""`` when the message is missing or unprintable."""
    try:
        if exc.args and exc.args[0] is None:
            return ""
        return str(exc)
    except Exception:
        return ""


# ---------------------------------------------------------------------------
# Contracts
# ---------------------------------------------------------------------------


class SolutionProvider(ABC):
    """A rule that recognises one exception shape and proposes fixes.

    :meth:`get_solutions` is only called after :meth:`can_solve` returned
    ``True`` for the same exception.
    """

    @abstractmethod
    def can_solve(self, exc: BaseException) -> bool:
        """Return ``True`` when this provider understands *exc*."""

    @abstractmethod
    def get_solutions(self, exc: BaseException) -> list[Solution]:
        """Return the solutions for *exc* (possibly empty)."""


class ProvidesSolution(ABC):
    """Mixin for exceptions that know how to explain themselves."""

    @abstractmethod
    def get_solution(self) -> Solution:
        """Return the solution attached to this exception."""


# ---------------------------------------------------------------------------
# Static solutions
# ---------------------------------------------------------------------------


class MissingMixManifestSolution(Solution):
    title: str = "Missing Mix Manifest File"
    description: str = "Did you forget to run `npm install && npm run dev`?"


class MissingAppKeySolution(Solution):
    title: str = "Your app key is missing"
    description: str = (
        "Generate your application encryption key using `quantaquirk key:generate`."
    )
    documentation_links: dict[str, str] = {
        "Configuration docs": "https://quantaquirk.dev/docs/configuration#encryption-key",
    }


# ---------------------------------------------------------------------------
# Providers
# ---------------------------------------------------------------------------


class MissingMixManifestSolutionProvider(SolutionProvider):
    """Suggests building front-end assets when the Mix manifest is missing."""

    def can_solve(self, exc: BaseException) -> bool:
        return "Mix manifest not found" in exception_message(exc)

    def get_solutions(self, exc: BaseException) -> list[Solution]:
        return [MissingMixManifestSolution()]


class MissingAppKeySolutionProvider(SolutionProvider):
    _MESSAGE: Final[str] = "No application encryption key has been specified."

    def can_solve(self, exc: BaseException) -> bool:
        return exception_message(exc) == self._MESSAGE

    def get_solutions(self, exc: BaseException) -> list[Solution]:
        return [MissingAppKeySolution()]


class NamedEntitySolutionProvider(SolutionProvider):
    """Base for "<entity> [name] not defined" style exceptions.

    Subclasses set :attr:`pattern` (with a ``name`` group), :attr:`name_source`
    and the description templates.  The missing name is ranked against the
    names returned by *names* at solve time, so names registered after
    wiring are still considered.

    Args:
        names: Zero-argument callable returning the currently valid names.
        threshold: Minimum similarity for a candidate to be suggested.
    """

    pattern: ClassVar[re.Pattern[str]]
    name_source: ClassVar[str]
    exception_type: ClassVar[type[BaseException]] = BaseException
    title_template: ClassVar[str] = "{name} was not defined."
    suggestion_template: ClassVar[str] = "Did you mean `{candidate}`?"
    fallback_description: ClassVar[str] = ""

    def __init__(self, names: NameSource | None = None, threshold: float = SIMILARITY_THRESHOLD) -> None:
        self._names: NameSource = names if names is not None else list
        self.threshold = threshold

    def missing_name(self, exc: BaseException) -> str | None:
        match = self.pattern.search(exception_message(exc))
        return match.group("name") if match else None

    def can_solve(self, exc: BaseException) -> bool:
        if not isinstance(exc, self.exception_type):
            return False
        return self.missing_name(exc) is not None

    def find_related_name(self, missing: str) -> str | None:
        try:
            names = [name for name in self._names() if isinstance(name, str)]
        except Exception as err:
            logger.warning("%s could not list %s: %s", type(self).__name__, self.name_source, err)
            return None
        return find_closest_match(missing, names, self.threshold)

    def get_solutions(self, exc: BaseException) -> list[Solution]:
        missing = self.missing_name(exc)
        if missing is None:
            return []
        candidate = self.find_related_name(missing)
        if candidate is None:
            description = self.fallback_description
        else:
            description = self.suggestion_template.format(candidate=candidate)
        return [
            Solution(
                title=self.title_template.format(name=missing),
                description=description,
            )
        ]


class RouteNotDefinedSolutionProvider(NamedEntitySolutionProvider):
    pattern = re.compile(r"Route \[(?P<name>.*)\] not defined\.")
    name_source = "routes"
    exception_type = RouteNotFoundError
    fallback_description = "Are you sure that the route is defined"


class ViewNotFoundSolutionProvider(NamedEntitySolutionProvider):
    pattern = re.compile(r"View \[(?P<name>.*)\] not found\.")
    name_source = "views"
    fallback_description = "Are you sure the view exists and is a `.html` file?"


BUILTIN_SOLUTION_PROVIDERS: Final[list[str]] = [
    f"{__name__}.MissingMixManifestSolutionProvider",
    f"{__name__}.MissingAppKeySolutionProvider",
    f"{__name__}.RouteNotDefinedSolutionProvider",
    f"{__name__}.ViewNotFoundSolutionProvider",
]


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class SolutionProviderRepository:
    """Ordered collection of :class:`SolutionProvider` instances.

    Providers are probed in registration order.  A provider that raises is
    logged and treated as having produced nothing, so it can never mask the
    exception being reported.
    """

    def __init__(self, providers: Iterable[SolutionProvider] = ()) -> None:
        self._providers: list[SolutionProvider] = list(providers)

    @property
    def providers(self) -> list[SolutionProvider]:
        return list(self._providers)

    def register_provider(self, provider: SolutionProvider) -> SolutionProviderRepository:
        self._providers.append(provider)
        return self

    def register_providers(self, providers: Iterable[SolutionProvider]) -> SolutionProviderRepository:
        for provider in providers:
            self.register_provider(provider)
        return self

    def get_solutions_for_exception(self, exc: BaseException) -> list[Solution]:
        """Return every solution available for *exc*.

        A solution carried by the exception itself (:class:`ProvidesSolution`)
        comes first, followed by those of each matching provider.
        """
        solutions: list[Solution] = []
        if isinstance(exc, ProvidesSolution):
            try:
                solutions.append(exc.get_solution())
            except Exception as err:
                logger.warning("Exception %s failed to provide its solution: %s", type(exc).__name__, err)

        for provider in self._providers:
            name = type(provider).__name__
            try:
                if not provider.can_solve(exc):
                    continue
                solutions.extend(provider.get_solutions(exc))
            except Exception as err:
                logger.warning("Solution provider %s failed: %s", name, err)
        return solutions

    def get_solution_for_class(self, path: str) -> Solution | None:
        """Instantiate the :class:`Solution` subclass at dotted *path*.

        Returns ``None`` when the path cannot be imported, is not a
        :class:`Solution` subclass, or cannot be built without arguments.
        """
        try:
            solution_class = import_string(path)
        except ImportError:
            return None
        if not isinstance(solution_class, type) or not issubclass(solution_class, Solution):
            return None
        try:
            return solution_class()
        except ValueError:
            return None


# ---------------------------------------------------------------------------
# Wiring helpers
# ---------------------------------------------------------------------------


def import_string(path: str) -> object:
    """Import the attribute named by dotted *path*.

    Raises:
        ImportError: If the module or attribute does not exist.
    """
    module_path, _, attribute = path.rpartition(".")
    if not module_path:
        raise ImportError(f"{path!r} is not a dotted path")
    module = importlib.import_module(module_path)
    try:
        return getattr(module, attribute)
    except AttributeError as exc:
        raise ImportError(f"Module {module_path!r} has no attribute {attribute!r}") from exc


def resolve_providers(
    paths: Iterable[str],
    ignored: Iterable[str] = (),
    name_sources: dict[str, NameSource] | None = None,
    threshold: float = SIMILARITY_THRESHOLD,
) -> list[SolutionProvider]:
    """Build provider instances from configured dotted *paths*.

    Paths listed in *ignored* are skipped.  Providers deriving from
    :class:`NamedEntitySolutionProvider` receive the callable registered
    under their ``name_source`` in *name_sources*.

    Raises:
        InvalidConfig: If a path cannot be imported or is not a provider.
    """
    skipped = set(ignored)
    sources = name_sources or {}
    providers: list[SolutionProvider] = []
    for path in paths:
        if path in skipped:
            logger.debug("Skipping ignored solution provider %s", path)
            continue
        try:
            provider_class = import_string(path)
        except ImportError as exc:
            raise InvalidConfig.unknown_solution_provider(path) from exc
        if not isinstance(provider_class, type) or not issubclass(provider_class, SolutionProvider):
            raise InvalidConfig.unknown_solution_provider(path)
        if issubclass(provider_class, NamedEntitySolutionProvider):
            if not hasattr(provider_class, "pattern") or not hasattr(provider_class, "name_source"):
                raise InvalidConfig.unknown_solution_provider(path)
            providers.append(
                provider_class(sources.get(provider_class.name_source), threshold=threshold)
            )
        else:
            providers.append(provider_class())
    return providers


__all__ = [
    "BUILTIN_SOLUTION_PROVIDERS",
    "SolutionProvider",
    "ProvidesSolution",
    "NamedEntitySolutionProvider",
    "MissingMixManifestSolution",
    "MissingMixManifestSolutionProvider",
    "MissingAppKeySolution",
    "MissingAppKeySolutionProvider",
    "RouteNotDefinedSolutionProvider",
    "ViewNotFoundSolutionProvider",
    "SolutionProviderRepository",
    "exception_message",
    "import_string",
    "resolve_providers",
]
