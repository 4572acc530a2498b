"""``depotgraph reconcile [COORDINATE...]`` - Diff store against repository.

Compares the versions each coordinate has in the version store with the
versions its artifact repository serves. With no COORDINATE arguments,
every coordinate known to the store is checked.

Exit Codes:
    0 - Store and repository agree for every coordinate.
    1 - At least one mismatch or probe error, or a store failure.
    2 - Usage error.
"""

from __future__ import annotations

import json
import logging
import sys

import click

from depotgraph.cli.output import console, print_mismatches
from depotgraph.cli.sources import (
    concurrency_option,
    open_repository,
    open_store,
    parse_coordinates,
    run_async,
    with_store_options,
)
from depotgraph.core.dependency import Coordinate
from depotgraph.exceptions import StoreError
from depotgraph.service import DependencyService

logger = logging.getLogger(__name__)


@click.command("reconcile")
@click.argument("coordinates", nargs=-1, callback=parse_coordinates, metavar="[COORDINATE...]")
@with_store_options
@concurrency_option
@click.option(
    "--repository", "repo_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML/JSON file mapping group:artifact to published versions.",
)
@click.option("--maven-url", default=None, help="Base URL of a Maven 2 layout repository.")
@click.option("--json", "as_json", is_flag=True, help="Print mismatches as JSON.")
def reconcile_command(
    coordinates: list[Coordinate],
    store_path: str | None,
    store_url: str | None,
    timeout: float,
    concurrency: int,
    repo_path: str | None,
    maven_url: str | None,
    as_json: bool,
) -> None:
    """Report versions missing from the store or from the repository.

    Each COORDINATE is written ``group:artifact``.
    """
    store = open_store(store_path, store_url, timeout)
    repository = open_repository(repo_path, maven_url, timeout)
    service = DependencyService(store, repository, max_concurrency=concurrency)
    try:
        mismatches = run_async(service.find_mismatches(coordinates or None))
    except StoreError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        sys.exit(1)

    logger.info("Reconciled against %s: %d mismatch(es)", repository.repository_name, len(mismatches))
    if as_json:
        click.echo(json.dumps([m.to_dict() for m in mismatches], indent=2, sort_keys=True))
    else:
        print_mismatches(mismatches)
    sys.exit(1 if mismatches else 0)
