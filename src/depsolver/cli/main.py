"""depsolver CLI: resolve module requirements against release sources.

Entry point for the ``depsolver`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    resolve  Resolve NAME=RANGE requirements into a list of releases.
    range    Show the interval a range expression denotes.

Usage::

    depsolver resolve -i index.yaml foo=1.x "bar=>=2.1 <3"
    depsolver resolve --forge https://forgeapi.puppet.com puppetlabs-stdlib=9.x
    depsolver range "1.2 - 1.4" 1.4.7 1.5.0-rc.1
"""

from __future__ import annotations

import logging

import click

from depsolver import __version__
from depsolver.cli.range_cmd import range_command
from depsolver.cli.resolve_cmd import resolve_command


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Log fetches and backtracking.")
def cli(verbose: bool) -> None:
    """depsolver: Semantic version ranges and dependency resolution.

    Pick one release per module so that every declared version range,
    transitively, holds at once.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )


cli.add_command(resolve_command)
cli.add_command(range_command)
