"""The release-source contract consumed by the resolver.

A source answers one question: given a module name, which releases of it
exist? Network access, file layout, caching and authentication all belong to
the concrete source. Bundled implementations live in ``depsolver.sources``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import ClassVar

from depsolver.core.dependency.module_release import ModuleRelease
from depsolver.core.semver import Version, VersionRange


class Source(ABC):
    """Abstract base class for release sources.

    Subclasses must implement ``fetch``. It may be called once per module
    name during a query and must return the same answer if called again.
    Exceptions raised by ``fetch`` propagate to the caller of the query.
    """

    ROOT_CAUSE: ClassVar[Source]

    @abstractmethod
    def fetch(self, name: str) -> list[ModuleRelease]:
        """Return every known release of module *name* (empty if unknown)."""

    def create_release(
        self,
        name: str,
        version: Version | str | None,
        dependencies: Mapping[str, VersionRange | str] | None = None,
    ) -> ModuleRelease:
        """Build a ``ModuleRelease`` attributed to this source.

        Args:
            name: Module name.
            version: A ``Version`` or version string.
            dependencies: Dependency name -> ``VersionRange`` or range
                expression.

        Raises:
            ValidationFailure: If a version or range string is malformed.
        """
        if isinstance(version, str):
            version = Version.parse(version)
        constraints = {
            dep: rng if isinstance(rng, VersionRange) else VersionRange.parse(rng)
            for dep, rng in (dependencies or {}).items()
        }
        return ModuleRelease(self, name, version, constraints)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"


class RootSource(Source):
    """Pseudo-source for releases that no real source publishes.

    Never registered with a resolver: it only manufactures standalone
    releases through ``create_release``.
    """

    def fetch(self, name: str) -> list[ModuleRelease]:
        return []


Source.ROOT_CAUSE = RootSource()
