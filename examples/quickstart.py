"""Quickstart examples for quantaquirk-ignition.

Demonstrates the four main use cases:
  1. Wiring an Ignition instance and wrapping units of work
  2. Recording queries, logs and dumps into bounded recorders
  3. Getting solutions for common exceptions
  4. Reporting exceptions logged through the standard logging module

Run this file directly to see all demos:

    python examples/quickstart.py
"""

from __future__ import annotations

import json
import logging

from quantaquirk_ignition import (
    Ignition,
    LifecycleEvent,
    Report,
    RouteNotFoundError,
    attach_log_handler,
    find_closest_match,
    load_settings,
)

ROUTES = ["home", "users.index", "users.show", "test.typo"]


def _print_report(report: Report) -> None:
    print(json.dumps(report.model_dump(mode="json"), indent=2))


def demo_unit_of_work(ignition: Ignition) -> None:
    """Demo 1: recorders are cleared before and after every unit of work."""
    print("=" * 60)
    print("DEMO 1: Unit of work")
    print("=" * 60)

    with ignition.unit_of_work():
        ignition.query_recorder.record_query("select * from users where id = ?", [1], 0.42, "sqlite")
        print(f"  queries during request: {len(ignition.query_recorder)}")
    print(f"  queries after request : {len(ignition.query_recorder)}")

    ignition.handle_event(LifecycleEvent.tick_received)
    print()


def demo_recorders(ignition: Ignition) -> None:
    """Demo 2: only the most recent events are kept."""
    print("=" * 60)
    print("DEMO 2: Bounded recorders")
    print("=" * 60)

    with ignition.unit_of_work():
        for index in range(ignition.query_recorder.capacity + 5):
            ignition.query_recorder.record_query(f"select {index}")
        ignition.dump_recorder.record_dump({"cart": [1, 2, 3]}, file="shop.py", line=12)
        queries = ignition.query_recorder.get_queries()
        print(f"  kept {len(queries)} queries, oldest is {queries[0]['sql']!r}")
        print(f"  dumps: {[d['html_dump'] for d in ignition.dump_recorder.get_dumps()]}")
    print()


def demo_solutions(ignition: Ignition) -> None:
    """Demo 3: solutions for a mistyped route name and a missing asset manifest."""
    print("=" * 60)
    print("DEMO 3: Solutions")
    print("=" * 60)

    for exc in (
        RouteNotFoundError.for_route("users.shw"),
        RouteNotFoundError.for_route("completely.unrelated.name"),
        RuntimeError("Mix manifest not found."),
    ):
        for solution in ignition.solution_repository.get_solutions_for_exception(exc):
            print(f"  {exc!s:<50} -> {solution.title}: {solution.description}")

    print(f"\n  find_closest_match('test.typoo') -> {find_closest_match('test.typoo', ROUTES)!r}")
    print()


def demo_logging(ignition: Ignition) -> None:
    """Demo 4: exceptions logged at error level become reports."""
    print("=" * 60)
    print("DEMO 4: Logging integration")
    print("=" * 60)

    app_logger = logging.getLogger("shop")
    app_logger.setLevel(logging.INFO)
    app_logger.propagate = False
    attach_log_handler(ignition, app_logger)

    with ignition.unit_of_work():
        app_logger.info("Checkout started")
        try:
            raise RouteNotFoundError.for_route("test.typoo")
        except RouteNotFoundError:
            app_logger.exception("Checkout failed")
        ignition.flush()
    print()


def main() -> None:
    settings = load_settings(
        {"flare": {"flare_middleware": {"add_queries": {"maximum_number_of_collected_queries": 10}}}}
    )
    ignition = Ignition(settings, transport=_print_report, route_names=lambda: ROUTES, stage="local")
    ignition.start_recorders()

    demo_unit_of_work(ignition)
    demo_recorders(ignition)
    demo_solutions(ignition)
    demo_logging(ignition)


if __name__ == "__main__":
    main()
