"""Backtracking dependency resolution over a graph of module releases.

Resolution runs in two phases:

1. ``Resolver.query`` builds the graph. Starting from a synthetic root that
   depends on the requested modules, every reachable module name is fetched
   once from each registered source, and every node's dependency slots are
   linked to the releases that satisfy them.
2. ``Resolver.resolve`` walks the graph depth-first, choosing one release
   per module name. Higher versions are tried first and stable versions are
   preferred over prereleases. Choosing a release merges its own dependency
   slots into the pending set, intersecting slots that several parents
   share. The first complete assignment found is returned.

Open names become choice points on an explicit stack rather than Python
frames, so long dependency chains resolve without deep recursion. A dead
branch resumes the innermost choice point with an untried candidate; only
exhausting every choice point raises ``UnsatisfiableGraph``.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass

from depsolver.core.dependency.graph_node import Graph, GraphNode
from depsolver.core.dependency.module_release import ModuleRelease
from depsolver.core.dependency.source import Source
from depsolver.core.semver import Version, VersionRange
from depsolver.exceptions import UnsatisfiableGraph

logger = logging.getLogger(__name__)

Pending = dict[str, tuple[ModuleRelease, ...]]


@dataclass
class _Choice:
    """A module name awaiting a release, with the candidates not yet tried."""

    name: str
    rest: Pending
    considering: tuple[ModuleRelease, ...]
    options: Iterator[ModuleRelease]


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


class Resolver:
    """Builds and resolves dependency graphs against a list of sources.

    Sources are consulted in registration order. When two sources publish
    the same version of a module, the release from the earlier source wins.

    Thread safety: This class is NOT thread-safe. Each ``query`` and
    ``resolve`` call keeps its state on the stack, but ``add_source`` and
    ``clear_sources`` mutate the shared source list.

    Args:
        sources: Initial sources, in priority order.
    """

    def __init__(self, sources: Iterable[Source] | None = None) -> None:
        self._sources: list[Source] = list(sources or [])

    # -- sources ------------------------------------------------------------

    @property
    def sources(self) -> tuple[Source, ...]:
        """An immutable snapshot of the registered sources."""
        return tuple(self._sources)

    def add_source(self, source: Source) -> None:
        """Append *source* to the end of the source list."""
        self._sources.append(source)

    def clear_sources(self) -> None:
        self._sources.clear()

    # -- graph construction -------------------------------------------------

    def query(self, modules: Mapping[str, str | VersionRange]) -> Graph:
        """Build a fully linked dependency graph for the requested modules.

        Args:
            modules: Module name -> range expression or ``VersionRange``.

        Returns:
            The graph root. Requested modules with no acceptable release are
            left with empty slots; that only fails at ``resolve`` time.

        Raises:
            ValidationFailure: If a range expression is malformed.
            Exception: Whatever a source raises while fetching.
        """
        ranges = {
            name: rng if isinstance(rng, VersionRange) else VersionRange.parse(rng)
            for name, rng in modules.items()
        }
        graph = Graph(ranges)

        pool = self.fetch(graph)
        self.link(graph, pool)
        logger.debug(
            "Queried %d module(s): %d candidate release(s) across %d name(s)",
            len(ranges), sum(len(v) for v in pool.values()), len(pool),
        )
        return graph

    def fetch(self, node: GraphNode) -> dict[str, list[ModuleRelease]]:
        """Collect every release transitively reachable from *node*.

        Each module name is fetched at most once, from every source in
        order. Releases are merged by version with the first source winning.

        Args:
            node: The node whose dependencies seed the search.

        Returns:
            Module name -> releases of that module, in discovery order.
        """
        cache: dict[str, dict[Version, ModuleRelease]] = {}
        queue: deque[GraphNode] = deque([node])

        while queue:
            current = queue.popleft()
            for name in current.dependency_names:
                if name in cache:
                    continue
                releases = cache[name] = {}
                for source in self._sources:
                    fetched = source.fetch(name)
                    logger.debug(
                        "Fetched %d release(s) of %s from %r",
                        len(fetched), name, source,
                    )
                    for release in fetched:
                        releases.setdefault(release.version, release)
                        queue.append(release)

        return {name: list(releases.values()) for name, releases in cache.items()}

    @staticmethod
    def link(graph: Graph, pool: Mapping[str, Sequence[ModuleRelease]]) -> None:
        """Populate the dependency slots of *graph* and every release in *pool*."""
        nodes: list[GraphNode] = [rel for rels in pool.values() for rel in rels]
        nodes.append(graph)
        for node in nodes:
            for name in node.dependency_names:
                node.satisfy_dependencies(pool.get(name, ()))

    # -- resolution ---------------------------------------------------------

    def resolve(self, graph: Graph) -> list[ModuleRelease]:
        """Choose one release per module so that every constraint holds.

        Args:
            graph: A root returned by ``query``.

        Returns:
            The chosen releases, in the order they were committed.

        Raises:
            UnsatisfiableGraph: If no consistent assignment exists.
        """
        pending: Pending = {
            name: tuple(candidates) for name, candidates in graph.dependencies.items()
        }
        result = self._walk(pending)
        if result is None:
            raise UnsatisfiableGraph(graph)
        logger.debug(
            "Resolved %s", ", ".join(str(release) for release in result) or "nothing"
        )
        return result

    def _walk(self, pending: Pending) -> list[ModuleRelease] | None:
        """Search for a complete assignment of the *pending* names.

        Pending names are taken in insertion order: request order first,
        then the declaration order of each chosen release's dependencies.
        Every open name pushes a choice point holding its remaining
        candidates, highest first. A dead branch resumes the innermost
        choice point that still has a candidate left.

        Returns:
            The committed releases, or None if every branch is dead.
        """
        choices: list[_Choice] = []
        considering: tuple[ModuleRelease, ...] = ()

        while True:
            step = self._next_open(pending, considering)
            if step is not None:
                name, candidates, rest = step
                if name is None:
                    return list(considering)
                choices.append(_Choice(
                    name, rest, considering,
                    iter(reversed(self.preferred_releases(candidates))),
                ))

            while choices:
                choice = choices[-1]
                merged = None
                for release in choice.options:
                    merged = self._merge(choice.rest, release)
                    if merged is not None:
                        break
                    logger.debug("%s leaves a shared dependency empty; skipping", release)
                if merged is not None:
                    pending = merged
                    considering = choice.considering + (release,)
                    break
                logger.debug("No viable release of %s; backtracking", choice.name)
                choices.pop()
            else:
                return None

    @staticmethod
    def _next_open(
        pending: Pending, considering: tuple[ModuleRelease, ...]
    ) -> tuple[str | None, tuple[ModuleRelease, ...], Pending] | None:
        """Pop pending names until one without a committed release remains.

        Returns:
            ``(name, candidates, rest)`` for the first uncommitted name,
            ``(None, (), {})`` if nothing is left, or None if a committed
            release falls outside a later slot for its name.
        """
        committed = {release.name: release for release in considering}
        rest = dict(pending)
        while rest:
            name = next(iter(rest))
            candidates = rest.pop(name)
            chosen = committed.get(name)
            if chosen is None:
                return name, candidates, rest
            if not any(candidate is chosen for candidate in candidates):
                logger.debug("%s already committed to %s; backtracking", name, chosen)
                return None
        return None, (), rest

    @staticmethod
    def _merge(pending: Pending, release: ModuleRelease) -> Pending | None:
        """Add *release*'s dependency slots to *pending*.

        Slots already pending are intersected by identity. Returns None if
        any intersection is empty.
        """
        merged = dict(pending)
        for dep_name, options in release.dependencies.items():
            if dep_name in merged:
                allowed = set(options)
                narrowed = tuple(c for c in merged[dep_name] if c in allowed)
                if not narrowed:
                    return None
                merged[dep_name] = narrowed
            else:
                merged[dep_name] = tuple(options)
        return merged

    @staticmethod
    def preferred_releases(
        releases: Iterable[ModuleRelease],
    ) -> list[ModuleRelease]:
        """Filter *releases* down to those worth exploring.

        Only satisfied releases are kept. If any of them is stable, the
        prereleases are dropped as well. Input order is preserved.
        """
        satisfied = [rel for rel in releases if rel.satisfied]
        stable = [rel for rel in satisfied if rel.version is not None and rel.version.stable]
        return stable or satisfied


# ---------------------------------------------------------------------------
# Module-level default resolver
# ---------------------------------------------------------------------------

_default = Resolver()


def sources() -> tuple[Source, ...]:
    """Return the sources registered with the default resolver."""
    return _default.sources


def add_source(source: Source) -> None:
    _default.add_source(source)


def clear_sources() -> None:
    _default.clear_sources()


def query(modules: Mapping[str, str | VersionRange]) -> Graph:
    """``Resolver.query`` on the default resolver."""
    return _default.query(modules)


def resolve(graph: Graph) -> list[ModuleRelease]:
    """``Resolver.resolve`` on the default resolver."""
    return _default.resolve(graph)
