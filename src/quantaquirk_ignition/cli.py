"""CLI entry point for quantaquirk-ignition."""

from __future__ import annotations

import json
import sys

import click

from quantaquirk_ignition.config import load_settings
from quantaquirk_ignition.exceptions import InvalidConfig, RouteNotFoundError, ViewNotFoundError
from quantaquirk_ignition.models import Solution
from quantaquirk_ignition.similarity import SIMILARITY_THRESHOLD, find_closest_match, similarity
from quantaquirk_ignition.solutions import SolutionProviderRepository, resolve_providers

_EXCEPTION_TYPES: dict[str, type[Exception]] = {
    "generic": RuntimeError,
    "route": RouteNotFoundError,
    "view": ViewNotFoundError,
}


def _format_solution(solution: Solution) -> str:
    """Return a short multi-line rendering of *solution*."""
    lines = [click.style(solution.title, fg="green", bold=True)]
    if solution.description:
        lines.append(f"  {solution.description}")
    for label, url in solution.documentation_links.items():
        lines.append("  " + click.style(label, fg="cyan") + f": {url}")
    return "\n".join(lines)


@click.group()
@click.version_option(package_name="quantaquirk-ignition")
def main() -> None:
    """QuantaQuirk Ignition CLI: inspect solution providers and suggestions."""


@main.command("providers")
@click.option("--json", "output_json", is_flag=True, default=False, help="Output as JSON.")
def providers_command(output_json: bool) -> None:
    """List the configured solution providers in probing order."""
    settings = load_settings()
    ignored = set(settings.ignition.ignored_solution_providers)
    rows = [
        {"provider": path, "ignored": path in ignored}
        for path in settings.ignition.solution_providers
    ]

    if output_json:
        click.echo(json.dumps(rows, indent=2))
        return

    for row in rows:
        label = click.style("ignored", fg="yellow") if row["ignored"] else click.style("active", fg="green")
        click.echo(f"[{label}] {row['provider']}")


@main.command("solve")
@click.argument("message")
@click.option(
    "--type",
    "exception_type",
    type=click.Choice(sorted(_EXCEPTION_TYPES), case_sensitive=False),
    default="generic",
    help="Shape of the exception to build from MESSAGE.",
)
@click.option("--route", "routes", multiple=True, help="A registered route name.")
@click.option("--view", "views", multiple=True, help="A known view name.")
@click.option("--json", "output_json", is_flag=True, default=False, help="Output as JSON.")
def solve_command(
    message: str,
    exception_type: str,
    routes: tuple[str, ...],
    views: tuple[str, ...],
    output_json: bool,
) -> None:
    """Show the solutions offered for an exception with MESSAGE.

    Example: quantaquirk-ignition solve "Route [test.typoo] not defined." --type route --route test.typo
    """
    settings = load_settings()
    try:
        providers = resolve_providers(
            settings.ignition.solution_providers,
            ignored=settings.ignition.ignored_solution_providers,
            name_sources={"routes": lambda: routes, "views": lambda: views},
            threshold=settings.ignition.similarity_threshold,
        )
    except InvalidConfig as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    exc_instance = _EXCEPTION_TYPES[exception_type.lower()](message)
    solutions = SolutionProviderRepository(providers).get_solutions_for_exception(exc_instance)

    if output_json:
        click.echo(json.dumps([s.model_dump() for s in solutions], indent=2))
        return

    if not solutions:
        click.echo("No solutions found for the given exception.")
        return

    for solution in solutions:
        click.echo(_format_solution(solution))


@main.command("suggest")
@click.argument("target")
@click.argument("candidates", nargs=-1, required=True)
@click.option(
    "--threshold",
    type=click.FloatRange(0.0, 1.0),
    default=SIMILARITY_THRESHOLD,
    show_default=True,
    help="Minimum similarity score for a suggestion.",
)
def suggest_command(target: str, candidates: tuple[str, ...], threshold: float) -> None:
    """Suggest which of CANDIDATES was meant by TARGET."""
    match = find_closest_match(target, candidates, threshold)
    if match is None:
        click.echo(f"No candidate is close enough to '{target}'.")
        sys.exit(1)
    click.echo(
        f"Did you mean {click.style(match, bold=True)}? "
        f"(similarity {similarity(target, match):.2f})"
    )


@main.command("config")
@click.option("--json", "output_json", is_flag=True, default=False, help="Output as JSON.")
def config_command(output_json: bool) -> None:
    """Print the default settings."""
    settings = load_settings()
    if output_json:
        click.echo(settings.model_dump_json(indent=2))
        return

    flare = settings.flare
    click.echo(click.style("flare", bold=True))
    click.echo(f"  base_url  : {flare.base_url}")
    click.echo(f"  log_level : {flare.log_level}")
    for name, middleware in flare.flare_middleware.model_dump().items():
        state = "disabled" if middleware in (None, False) else "enabled"
        click.echo(f"  {name:<14}: {state}")
    click.echo(click.style("ignition", bold=True))
    click.echo(f"  recorders            : {', '.join(settings.ignition.recorders)}")
    click.echo(f"  similarity_threshold : {settings.ignition.similarity_threshold}")


if __name__ == "__main__":
    main()
