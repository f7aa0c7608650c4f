"""Dependency graphs of module releases and their backtracking resolution.

Public API::

    from depsolver.core.dependency import Resolver, Source, ModuleRelease

    resolver = Resolver([my_source])
    graph = resolver.query({"foo": "1.x", "bar": ">=2.1 <3"})
    releases = resolver.resolve(graph)   # raises UnsatisfiableGraph

The module-level ``add_source``, ``clear_sources``, ``sources``, ``query``
and ``resolve`` functions operate on a process-wide default resolver.
"""

from __future__ import annotations

from depsolver.core.dependency.graph_node import Graph, GraphNode
from depsolver.core.dependency.module_release import ModuleRelease
from depsolver.core.dependency.resolver import (
    Resolver,
    add_source,
    clear_sources,
    query,
    resolve,
    sources,
)
from depsolver.core.dependency.source import RootSource, Source
from depsolver.exceptions import UnsatisfiableGraph

__all__ = [
    "Graph",
    "GraphNode",
    "ModuleRelease",
    "Resolver",
    "RootSource",
    "Source",
    "UnsatisfiableGraph",
    "add_source",
    "clear_sources",
    "query",
    "resolve",
    "sources",
]
