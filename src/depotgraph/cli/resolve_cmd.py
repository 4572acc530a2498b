"""``depotgraph resolve | transitive | validate`` commands.

All three read dependency data from a version store selected with
``--store FILE`` or ``--store-url URL``.

Exit Codes:
    0 - Clean result (no conflicts, no missing data, no rule violations).
    1 - Conflicts, an incomplete graph, rule violations, or a store failure.
    2 - Usage error (malformed GAV, bad option combination).
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import NoReturn

import click

from depotgraph.cli.output import (
    console,
    print_resolution_report,
    print_transitive_report,
    print_validation,
)
from depotgraph.cli.sources import (
    concurrency_option,
    open_store,
    parse_gav,
    parse_gavs,
    run_async,
    with_store_options,
)
from depotgraph.core.dependency import ProjectVersion
from depotgraph.exceptions import ResolutionError, StoreError
from depotgraph.service import DependencyService


def _fail(exc: Exception) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {exc}")
    sys.exit(1)


@click.command("resolve")
@click.argument("gavs", nargs=-1, required=True, callback=parse_gavs, metavar="GAV...")
@with_store_options
@concurrency_option
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON.")
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Also write the JSON report to this path.",
)
def resolve_command(
    gavs: list[ProjectVersion],
    store_path: str | None,
    store_url: str | None,
    timeout: float,
    concurrency: int,
    as_json: bool,
    output: str | None,
) -> None:
    """Build the dependency graph of one or more versions and report conflicts.

    Each GAV is written ``group:artifact:version``. Exit code 0 when the
    graph is complete and conflict-free, 1 otherwise.
    """
    store = open_store(store_path, store_url, timeout)
    service = DependencyService(store, max_concurrency=concurrency)
    try:
        report = run_async(service.resolve(gavs))
    except (StoreError, ResolutionError) as exc:
        _fail(exc)

    if output:
        report.write(Path(output))
    if as_json:
        click.echo(report.to_json())
    else:
        print_resolution_report(report)
        if output:
            console.print(f"[dim]Report written to {output}[/dim]")

    sys.exit(0 if report.valid and not report.conflicts else 1)


@click.command("transitive")
@click.argument("gav", nargs=1, callback=parse_gav)
@with_store_options
@concurrency_option
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON.")
def transitive_command(
    gav: ProjectVersion,
    store_path: str | None,
    store_url: str | None,
    timeout: float,
    concurrency: int,
    as_json: bool,
) -> None:
    """List every transitive dependency of GAV.

    Exit code 1 when dependency data is missing or a cycle was found.
    """
    store = open_store(store_path, store_url, timeout)
    service = DependencyService(store, max_concurrency=concurrency)
    try:
        report = run_async(service.resolve_transitive(gav))
    except (StoreError, ResolutionError) as exc:
        _fail(exc)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2, sort_keys=True))
    else:
        print_transitive_report(report)
    sys.exit(0 if report.valid else 1)


@click.command("validate")
@click.argument("gav", nargs=1, callback=parse_gav)
@with_store_options
def validate_command(
    gav: ProjectVersion,
    store_path: str | None,
    store_url: str | None,
    timeout: float,
) -> None:
    """Check that a release version declares no snapshot dependencies."""
    store = open_store(store_path, store_url, timeout)
    service = DependencyService(store)
    try:
        errors = run_async(service.validate(gav))
    except (StoreError, ResolutionError) as exc:
        _fail(exc)

    print_validation(gav.gav, errors)
    sys.exit(1 if errors else 0)
