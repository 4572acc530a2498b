"""Rich output formatting helpers for the depotgraph CLI.

Provides consistent terminal output for resolution reports, transitive
dependency lists, reconciliation mismatches, and validation results.

Color Mapping:
    conflicts / invalid / mismatches = bold red, warnings = yellow,
    clean results = green
"""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from depotgraph.core.dependency import (
    ProjectDependencyReport,
    VersionDependencyReport,
    project_version_key,
    sort_versions,
)
from depotgraph.core.reconcile import VersionMismatch

console = Console()


def print_resolution_report(report: ProjectDependencyReport) -> None:
    """Print graph summary, conflicts, and traversal issues.

    Args:
        report: Report produced by ``DependencyService.resolve``.
    """
    graph = report.graph
    edge_count = sum(len(n.forward_edges) for n in graph.nodes.values())
    status = (
        Text("VALID", style="bold green") if report.valid else Text("INVALID", style="bold red")
    )
    header = Text.assemble(
        ("Roots: ", "bold"), (", ".join(sorted(graph.root_nodes)), ""),
        ("  Status: ", "bold"), status,
    )
    console.print(Panel(header, title="Dependency Resolution"))
    console.print(f"  Nodes: [bold]{len(graph.nodes)}[/bold]  Edges: [bold]{edge_count}[/bold]")

    if report.conflicts:
        table = Table(title="Version Conflicts", show_header=True, header_style="bold")
        table.add_column("Coordinates", style="bold")
        table.add_column("Versions", style="red")
        for conflict in report.conflicts:
            table.add_row(conflict.coordinates, ", ".join(sort_versions(conflict.versions)))
        console.print(table)
    else:
        console.print("[green]No version conflicts.[/green]")

    for issue in report.issues:
        console.print(f"  [yellow]- {issue.kind.value}: {issue.message}[/yellow]")


def print_transitive_report(report: VersionDependencyReport) -> None:
    """Print a flat transitive dependency list.

    Args:
        report: Report produced by ``DependencyService.resolve_transitive``.
    """
    title = "Transitive Dependencies"
    if not report.valid:
        console.print(Panel("[bold red]Resolution incomplete[/bold red]", title=title))
    if not report.transitive_dependencies:
        console.print("[dim]No transitive dependencies.[/dim]")
        return
    table = Table(title=title, show_header=True)
    table.add_column("Group", style="bold")
    table.add_column("Artifact")
    table.add_column("Version")
    for version in sorted(report.transitive_dependencies, key=project_version_key):
        table.add_row(version.group_id, version.artifact_id, version.version_id)
    console.print(table)


def print_mismatches(mismatches: list[VersionMismatch]) -> None:
    """Print reconciliation results, one row per coordinate."""
    if not mismatches:
        console.print("[green]Store and repository agree.[/green]")
        return
    table = Table(title="Version Mismatches", show_header=True, header_style="bold")
    table.add_column("Coordinates", style="bold")
    table.add_column("Project", style="dim")
    table.add_column("Not in store", style="yellow")
    table.add_column("Not in repository", style="red")
    table.add_column("Errors", style="dim")
    for m in mismatches:
        table.add_row(
            m.coordinates,
            m.project_id or "-",
            ", ".join(m.versions_not_in_store) or "-",
            ", ".join(m.versions_not_in_repository) or "-",
            "; ".join(m.errors) or "-",
        )
    console.print(table)


def print_validation(gav: str, errors: list[str]) -> None:
    """Print dependency validation output for one version."""
    if not errors:
        console.print(f"[green]{gav}: dependencies are valid.[/green]")
        return
    console.print(Panel(f"[bold red]{gav}: invalid dependencies[/bold red]", title="Validation"))
    for error in errors:
        console.print(f"  [red]- {error}[/red]")
