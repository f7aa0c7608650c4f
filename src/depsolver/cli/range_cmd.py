"""``depsolver range EXPR [VERSION...]`` - Inspect a version range.

Prints the interval a range expression denotes and, for each VERSION
given, whether the range includes it.

Exit Codes:
    0 - Every given version is included (or none were given).
    1 - At least one given version is excluded.
    2 - The expression or a version is malformed.
"""

from __future__ import annotations

import sys

import click

from depsolver.core.semver import Version, VersionRange
from depsolver.exceptions import ValidationFailure


@click.command("range")
@click.argument("expression")
@click.argument("versions", nargs=-1)
def range_command(expression: str, versions: tuple[str, ...]) -> None:
    """Show the interval denoted by EXPRESSION and test VERSIONS against it."""
    try:
        version_range = VersionRange.parse(expression)
        parsed = [Version.parse(v) for v in versions]
    except ValidationFailure as exc:
        click.echo(f"Error: {exc}")
        sys.exit(2)

    from depsolver.cli.output import print_range
    print_range(version_range, parsed)
    sys.exit(0 if all(v in version_range for v in parsed) else 1)
