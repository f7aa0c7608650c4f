"""depsolver exception hierarchy.

All public exceptions inherit from DepSolverError, giving callers a single
base class to catch when they want to handle any depsolver-specific failure
without swallowing unrelated errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from depsolver.core.dependency.graph_node import Graph


class DepSolverError(Exception):
    """Base exception for all depsolver errors."""


class ValidationFailure(DepSolverError, ValueError):
    """Raised when a version or version range string is malformed.

    Covers leading zeroes, empty identifiers, characters outside
    ``[0-9A-Za-z-]`` and strings that do not begin with ``X.Y.Z``.
    """


class UnparsableRange(ValidationFailure):
    """Raised when a range expression matches none of the known grammars."""


class SourceError(DepSolverError):
    """Raised by the bundled release sources for their own failures.

    Covers unreadable or malformed index files and HTTP registry errors.
    The resolver never catches this; it reaches the caller of ``query``.
    """


class ResolutionError(DepSolverError):
    """Raised when dependency resolution fails."""


class UnsatisfiableGraph(ResolutionError):
    """Raised when no assignment of releases satisfies the dependency graph.

    Attributes:
        graph: The root of the graph that could not be resolved.
        modules: The module names originally requested.
    """

    def __init__(self, graph: Graph) -> None:
        self.graph = graph
        self.modules = list(graph.modules)

        deps = list(self.modules)
        if len(deps) == 2:
            deps = [" and ".join(deps)]
        elif len(deps) > 2:
            deps[-1] = f"and {deps[-1]}"

        super().__init__(
            f"Could not find satisfying releases for {', '.join(deps)}"
        )
