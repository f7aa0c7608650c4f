"""A concrete release of a module: the graph node every source produces."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from depsolver.core.dependency.graph_node import GraphNode
from depsolver.core.semver import Version, VersionRange

if TYPE_CHECKING:
    from depsolver.core.dependency.source import Source


class ModuleRelease(GraphNode):
    """One version of one module, as published by a ``Source``.

    The release's dependency declaration is ``constraints``: a frozen mapping
    of dependency name to ``VersionRange``. A slot is opened for every
    declared dependency at construction time.

    Attributes:
        source: The source that published this release.
        name: Module name.
        version: Release version.
        constraints: Dependency name -> acceptable ``VersionRange``.
    """

    def __init__(
        self,
        source: Source,
        name: str,
        version: Version | None,
        constraints: Mapping[str, VersionRange] | None = None,
    ) -> None:
        super().__init__()
        self.source = source
        self.name = name
        self.version = version
        self.constraints: Mapping[str, VersionRange] = MappingProxyType(
            dict(constraints or {})
        )
        for dep_name in self.constraints:
            self.add_dependency(dep_name)

    def satisfied_by(self, node: ModuleRelease) -> bool:
        """True if *node* is a release of a dependency within its declared range."""
        version_range = self.constraints.get(node.name)
        if version_range is None or node.version is None:
            return False
        return node.version in version_range

    def __str__(self) -> str:
        return f"{self.name}@{self.version}"

    def __repr__(self) -> str:
        return f"<ModuleRelease {self.name}@{self.version}>"
