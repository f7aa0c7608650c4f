"""In-memory release source.

Useful for embedding a fixed catalogue of releases and for tests::

    source = InMemorySource()
    source.add("foo", "1.0.0", {"bar": "1.x"})
    source.add("bar", "1.2.0")
"""

from __future__ import annotations

from collections.abc import Mapping

from depsolver.core.dependency import ModuleRelease, Source
from depsolver.core.semver import Version, VersionRange


class InMemorySource(Source):
    """A source backed by releases registered at runtime."""

    def __init__(self) -> None:
        self._releases: dict[str, list[ModuleRelease]] = {}

    def add(
        self,
        name: str,
        version: Version | str,
        dependencies: Mapping[str, VersionRange | str] | None = None,
    ) -> ModuleRelease:
        """Register a release and return it.

        Raises:
            ValidationFailure: If the version or a range is malformed.
        """
        release = self.create_release(name, version, dependencies)
        self._releases.setdefault(name, []).append(release)
        return release

    @property
    def module_names(self) -> list[str]:
        return sorted(self._releases)

    def fetch(self, name: str) -> list[ModuleRelease]:
        return list(self._releases.get(name, []))

    def __repr__(self) -> str:
        return f"<InMemorySource {len(self._releases)} module(s)>"
