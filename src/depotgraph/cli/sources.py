"""Shared option handling for CLI commands: stores, repositories, GAVs."""

from __future__ import annotations

import asyncio
from pathlib import Path

import click

from depotgraph.core.dependency import DEFAULT_MAX_CONCURRENCY, Coordinate, ProjectVersion
from depotgraph.exceptions import InvalidCoordinateError, SerializationError
from depotgraph.store import (
    ArtifactRepository,
    InMemoryArtifactRepository,
    InMemoryProjectVersionStore,
    ProjectVersionStore,
)
from depotgraph.store.http_client import DEFAULT_TIMEOUT


def run_async(coro: object) -> object:
    """Run an async coroutine in a synchronous context."""
    return asyncio.run(coro)  # type: ignore[arg-type]


def parse_gavs(ctx: click.Context, param: click.Parameter, values: tuple[str, ...]) -> list[ProjectVersion]:
    """Click callback turning GAV arguments into ProjectVersions."""
    try:
        return [ProjectVersion.parse(v) for v in values]
    except InvalidCoordinateError as exc:
        raise click.BadParameter(str(exc), ctx=ctx, param=param) from exc


def parse_gav(ctx: click.Context, param: click.Parameter, value: str) -> ProjectVersion:
    """Click callback for a single GAV argument."""
    return parse_gavs(ctx, param, (value,))[0]


def parse_coordinates(ctx: click.Context, param: click.Parameter, values: tuple[str, ...]) -> list[Coordinate]:
    """Click callback turning ``group:artifact`` arguments into Coordinates."""
    try:
        return [Coordinate.parse(v) for v in values]
    except InvalidCoordinateError as exc:
        raise click.BadParameter(str(exc), ctx=ctx, param=param) from exc


def open_store(store_path: str | None, store_url: str | None, timeout: float) -> ProjectVersionStore:
    """Build the store selected by ``--store`` or ``--store-url``.

    Raises:
        click.UsageError: If neither or both options were given, or the
            store file is malformed.
    """
    if bool(store_path) == bool(store_url):
        raise click.UsageError("Give exactly one of --store or --store-url.")
    if store_url:
        from depotgraph.store.depot import HttpProjectVersionStore

        return HttpProjectVersionStore(store_url, timeout=timeout)
    try:
        return InMemoryProjectVersionStore.from_file(Path(store_path))
    except (SerializationError, InvalidCoordinateError) as exc:
        raise click.UsageError(f"Invalid store file: {exc}") from exc


def open_repository(repo_path: str | None, maven_url: str | None, timeout: float) -> ArtifactRepository:
    """Build the repository probe selected by ``--repository`` or ``--maven-url``."""
    if bool(repo_path) == bool(maven_url):
        raise click.UsageError("Give exactly one of --repository or --maven-url.")
    if maven_url:
        from depotgraph.store.maven import MavenArtifactRepository

        return MavenArtifactRepository(maven_url, timeout=timeout)
    try:
        return InMemoryArtifactRepository.from_file(Path(repo_path))
    except (SerializationError, InvalidCoordinateError) as exc:
        raise click.UsageError(f"Invalid repository file: {exc}") from exc


concurrency_option = click.option(
    "--concurrency", type=click.IntRange(min=1), default=DEFAULT_MAX_CONCURRENCY,
    show_default=True, help="Maximum concurrent store lookups or repository probes.",
)


def with_store_options(func):
    """Attach ``--store``, ``--store-url`` and ``--timeout``."""
    func = click.option(
        "--timeout", type=float, default=DEFAULT_TIMEOUT, show_default=True,
        help="Per-request timeout for remote stores (seconds).",
    )(func)
    func = click.option(
        "--store-url", default=None, help="Base URL of a remote metadata store API.",
    )(func)
    func = click.option(
        "--store", "store_path", type=click.Path(exists=True, dir_okay=False), default=None,
        help="YAML/JSON file describing the version store.",
    )(func)
    return func
