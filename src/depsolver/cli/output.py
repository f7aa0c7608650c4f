"""Rich output formatting helpers for the depsolver CLI."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from depsolver.core.dependency import ModuleRelease
from depsolver.core.semver import Version, VersionRange

console = Console()


def print_resolution(releases: list[ModuleRelease]) -> None:
    """Print the chosen releases as a table, sorted by module name.

    Args:
        releases: The releases returned by ``Resolver.resolve``.
    """
    console.print(
        Panel("[bold green]Resolution successful[/bold green]",
              title="Dependency Resolution")
    )
    if not releases:
        console.print("[dim]No modules to resolve.[/dim]")
        return

    table = Table(show_header=True)
    table.add_column("Module", style="bold")
    table.add_column("Version")
    table.add_column("Source", style="dim")
    for release in sorted(releases):
        style = "" if release.version is None or release.version.stable else "yellow"
        table.add_row(
            release.name,
            f"[{style}]{release.version}[/{style}]" if style else str(release.version),
            repr(release.source),
        )
    console.print(table)


def print_failure(message: str) -> None:
    console.print(
        Panel("[bold red]Resolution failed[/bold red]", title="Dependency Resolution")
    )
    console.print(f"  [red]- {message}[/red]")


def print_range(version_range: VersionRange, versions: list[Version]) -> None:
    """Print the bounds of *version_range* and membership of each version."""
    table = Table(title=f"Range {str(version_range)!r}", show_header=True)
    table.add_column("Bound", style="bold")
    table.add_column("Version")
    table.add_column("Inclusive")
    if version_range.is_empty:
        console.print(table)
        console.print("[red]The range is empty.[/red]")
        return

    table.add_row("begin", _bound(version_range.begin), str(not version_range.exclude_begin))
    table.add_row("end", _bound(version_range.end), str(not version_range.exclude_end))
    console.print(table)

    for version in versions:
        if version in version_range:
            console.print(f"  [green]includes[/green] {version}")
        else:
            console.print(f"  [red]excludes[/red] {version}")


def _bound(version: Version) -> str:
    if version == Version.MIN:
        return "(minimum)"
    if version == Version.MAX:
        return "(maximum)"
    if version.prerelease == ():
        return f"{version} (first prerelease)"
    return str(version)
