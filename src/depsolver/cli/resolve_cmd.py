"""``depsolver resolve NAME=RANGE...`` - Resolve requirements into releases.

Builds a resolver from the given release sources, queries the dependency
graph for the requirements and prints the chosen releases.

Exit Codes:
    0 - Resolution succeeded.
    1 - No consistent set of releases exists.
    2 - Invalid input (bad requirement, bad range, no sources) or a source
        failed.
"""

from __future__ import annotations

import json
import sys

import click

from depsolver.core.dependency import Resolver
from depsolver.exceptions import SourceError, UnsatisfiableGraph, ValidationFailure
from depsolver.sources import IndexFileSource
from depsolver.sources.forge import DEFAULT_FORGE_URL, ForgeSource, normalize_name


def parse_requirements(
    requirements: tuple[str, ...], *, forge_names: bool = False
) -> dict[str, str]:
    """Split ``NAME=RANGE`` arguments; a bare ``NAME`` accepts any version.

    With *forge_names*, ``owner/name`` is rewritten to the ``owner-name``
    spelling Forge releases carry.

    Raises:
        click.BadParameter: If a name is empty or repeated.
    """
    parsed: dict[str, str] = {}
    for requirement in requirements:
        name, _, expression = requirement.partition("=")
        name = name.strip()
        if forge_names:
            name = normalize_name(name)
        if not name:
            raise click.BadParameter(
                f"missing module name in {requirement!r}", param_hint="REQUIREMENTS"
            )
        if name in parsed:
            raise click.BadParameter(
                f"module {name!r} requested twice", param_hint="REQUIREMENTS"
            )
        parsed[name] = expression.strip() or "*"
    return parsed


@click.command("resolve")
@click.argument("requirements", nargs=-1, required=True)
@click.option(
    "--index", "-i", "indexes",
    type=click.Path(exists=True, dir_okay=False),
    multiple=True,
    help="YAML/JSON release index to use as a source (repeatable).",
)
@click.option(
    "--forge",
    metavar="URL",
    default=None,
    help=f"Query a Forge registry, e.g. {DEFAULT_FORGE_URL}.",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def resolve_command(
    requirements: tuple[str, ...],
    indexes: tuple[str, ...],
    forge: str | None,
    output_format: str,
) -> None:
    """Resolve REQUIREMENTS (``NAME=RANGE``) into one release per module.

    Sources are consulted in the order given: index files first, then the
    Forge registry.

    Exit code 0 on success, 1 if unsatisfiable, 2 on invalid input.
    """
    modules = parse_requirements(requirements, forge_names=bool(forge))

    resolver = Resolver(IndexFileSource(path) for path in indexes)
    forge_source = ForgeSource(forge) if forge else None
    if forge_source is not None:
        resolver.add_source(forge_source)

    if not resolver.sources:
        _fail("No release sources given; use --index or --forge.", output_format)

    try:
        graph = resolver.query(modules)
        releases = resolver.resolve(graph)
    except UnsatisfiableGraph as exc:
        _fail(str(exc), output_format, code=1)
    except (ValidationFailure, SourceError) as exc:
        _fail(str(exc), output_format)
    finally:
        if forge_source is not None:
            forge_source.close()

    if output_format == "json":
        click.echo(json.dumps(
            {
                "success": True,
                "releases": [
                    {"name": rel.name, "version": str(rel.version)}
                    for rel in sorted(releases)
                ],
            },
            indent=2,
        ))
    else:
        from depsolver.cli.output import print_resolution
        print_resolution(releases)
    sys.exit(0)


def _fail(message: str, output_format: str, code: int = 2) -> None:
    if output_format == "json":
        click.echo(json.dumps({"success": False, "error": message}))
    elif code == 1:
        from depsolver.cli.output import print_failure
        print_failure(message)
    else:
        click.echo(f"Error: {message}")
    sys.exit(code)
