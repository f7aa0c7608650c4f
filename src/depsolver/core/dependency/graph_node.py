"""Dependency graph nodes.

Every participant in a dependency graph is a ``GraphNode``: it has a name,
decides which candidate releases may fill each of its dependency slots, and
owns the per-slot lists of candidates discovered so far. Two concrete node
kinds exist:

- ``ModuleRelease``: one version of one module, published by a source.
- ``Graph``: the synthetic root standing for the caller's request.

Candidate releases are shared by reference between every node they satisfy.
Nodes never define value equality, so set membership and intersection of
candidate lists are identity based.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Mapping
from operator import attrgetter
from types import MappingProxyType
from typing import TYPE_CHECKING

from depsolver.core.semver import Version, VersionRange

if TYPE_CHECKING:
    from depsolver.core.dependency.module_release import ModuleRelease

logger = logging.getLogger(__name__)

Predicate = Callable[["ModuleRelease"], bool]


# ---------------------------------------------------------------------------
# GraphNode: shared node contract
# ---------------------------------------------------------------------------


class GraphNode(ABC):
    """Abstract base class for dependency graph nodes.

    Subclasses set ``name`` and ``version`` and implement ``satisfied_by``.
    Dependency slots are declared with ``add_dependency`` and populated with
    ``satisfy_dependencies``.
    """

    name: str
    version: Version | None

    def __init__(self) -> None:
        self._dependencies: dict[str, list[ModuleRelease]] = {}

    @abstractmethod
    def satisfied_by(self, node: ModuleRelease) -> bool:
        """Return True if *node* is an acceptable filler for one of our slots."""

    @property
    def dependencies(self) -> Mapping[str, list[ModuleRelease]]:
        """Read-only view of dependency name -> candidates, ascending by version."""
        return MappingProxyType(self._dependencies)

    @property
    def dependency_names(self) -> list[str]:
        return list(self._dependencies)

    def add_dependency(self, name: str) -> None:
        """Declare a dependency slot for *name* (no-op if already declared)."""
        self._dependencies.setdefault(name, [])

    @property
    def satisfied(self) -> bool:
        """True if every declared dependency has at least one candidate."""
        return all(self._dependencies.values())

    def satisfy_dependencies(
        self, releases: ModuleRelease | Iterable[ModuleRelease]
    ) -> None:
        """Link acceptable *releases* into the matching dependency slots.

        Releases for undeclared names, or rejected by ``satisfied_by``, are
        ignored. Each slot holds at most one release per version (the first
        one linked wins) and stays sorted ascending by version.

        Args:
            releases: A single release or an iterable of releases.
        """
        if isinstance(releases, GraphNode):
            releases = [releases]

        for release in releases:
            slot = self._dependencies.get(release.name)
            if slot is None or not self.satisfied_by(release):
                continue
            if any(existing.version == release.version for existing in slot):
                continue
            slot.append(release)
            slot.sort(key=attrgetter("version"))

    def sort_key(self) -> tuple[str, Version]:
        return (self.name, self.version if self.version is not None else Version.MIN)

    def __lt__(self, other: GraphNode) -> bool:
        if not isinstance(other, GraphNode):
            return NotImplemented
        return self.sort_key() < other.sort_key()


# ---------------------------------------------------------------------------
# Graph: the synthetic root node
# ---------------------------------------------------------------------------


class Graph(GraphNode):
    """The root of a dependency graph, standing for the caller's request.

    Each requested module gets one dependency slot, constrained by the
    requested version range. Callers may narrow a slot further with
    ``add_constraint``; this is how already-installed modules are pinned.

    Example::

        graph = resolver.query({"foo": "1.x"})
        graph.add_constraint("installed", "foo", lambda rel: rel.version == pinned)

    Attributes:
        modules: Requested module names, in request order.
        ranges: Requested module name -> ``VersionRange``.
    """

    def __init__(self, modules: Mapping[str, VersionRange] | None = None) -> None:
        super().__init__()
        self.name = ""
        self.version = None
        self.ranges: Mapping[str, VersionRange] = MappingProxyType(dict(modules or {}))
        self.modules: list[str] = list(self.ranges)
        self._constraints: dict[str, list[tuple[str, Predicate]]] = {}

        for key, version_range in self.ranges.items():
            self.add_constraint(
                "initialize", key, lambda node, r=version_range: node.version in r
            )
            self.add_dependency(key)

    @property
    def constraints(self) -> Mapping[str, list[tuple[str, Predicate]]]:
        """Module name -> list of (origin, predicate) pairs."""
        return MappingProxyType(self._constraints)

    def add_constraint(self, origin: str, module: str, predicate: Predicate) -> None:
        """Restrict the releases acceptable for *module*.

        Candidates already linked into the slot that fail *predicate* are
        removed immediately.

        Args:
            origin: Short label describing where the constraint came from.
            module: The module name to constrain.
            predicate: Called with a candidate release; returns True to accept.
        """
        self._constraints.setdefault(module, []).append((origin, predicate))
        slot = self._dependencies.get(module)
        if slot:
            kept = [node for node in slot if predicate(node)]
            if len(kept) != len(slot):
                logger.debug(
                    "Constraint %r on %s removed %d candidate(s)",
                    origin, module, len(slot) - len(kept),
                )
            self._dependencies[module] = kept

    def satisfied_by(self, node: ModuleRelease) -> bool:
        if node.name not in self._dependencies:
            return False
        return all(check(node) for _, check in self._constraints.get(node.name, []))

    def __repr__(self) -> str:
        return f"<Graph {', '.join(self.modules) or '(empty)'}>"
