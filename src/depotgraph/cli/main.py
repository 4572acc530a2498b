"""depotgraph CLI - Dependency graphs and version reconciliation for a project depot.

Entry point for the ``depotgraph`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    resolve    - Build the dependency graph of versions and report conflicts.
    transitive - List the transitive dependencies of one version.
    validate   - Check a release version for snapshot dependencies.
    reconcile  - Diff store versions against an artifact repository.

Usage::

    depotgraph resolve --store depot.yaml org.acme:app:1.0.0
    depotgraph resolve --store-url https://depot.example.com org.acme:app:1.0.0 --json
    depotgraph transitive --store depot.yaml org.acme:app:1.0.0
    depotgraph validate --store depot.yaml org.acme:app:1.0.0
    depotgraph reconcile --store depot.yaml --repository published.yaml
    depotgraph reconcile --store depot.yaml --maven-url https://repo1.maven.org/maven2 org.acme:app
"""

from __future__ import annotations

import logging

import click

from depotgraph import __version__
from depotgraph.cli.reconcile_cmd import reconcile_command
from depotgraph.cli.resolve_cmd import resolve_command, transitive_command, validate_command


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """depotgraph: dependency graphs for versioned projects.

    Resolve transitive dependencies, detect version conflicts, and
    reconcile the version store with its artifact repository.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register all subcommands
cli.add_command(resolve_command)
cli.add_command(transitive_command)
cli.add_command(validate_command)
cli.add_command(reconcile_command)
