"""Release source backed by a YAML or JSON index file.

The index maps module names to versions, and each version to its
dependency ranges::

    foo:
      1.0.0:
        bar: "1.x"
      1.1.0:
        bar: ">=1.2 <2"
    bar:
      1.2.0: {}
      1.3.0-rc.1:

JSON is a subset of YAML, so ``.json`` files use the same loader. Range
expressions that YAML would read as numbers (``1`` or ``1.2``) should be
quoted; integers are accepted, floats are rejected.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from depsolver.core.dependency import ModuleRelease, Source
from depsolver.exceptions import SourceError, ValidationFailure

logger = logging.getLogger(__name__)


def _scalar_text(value: Any, what: str, path: Path) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    raise SourceError(
        f"{path}: {what} {value!r} must be a string; quote it in the index"
    )


class IndexFileSource(Source):
    """A source reading releases from a YAML/JSON index file.

    The file is read lazily on the first ``fetch`` and its releases are
    created once, so repeated fetches return the same objects.

    Args:
        path: Path to the index file.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._releases: dict[str, list[ModuleRelease]] | None = None

    def fetch(self, name: str) -> list[ModuleRelease]:
        if self._releases is None:
            self._releases = self._load()
        return list(self._releases.get(name, []))

    def _load(self) -> dict[str, list[ModuleRelease]]:
        """Read and validate the index file.

        Raises:
            SourceError: If the file is unreadable or structurally invalid.
        """
        try:
            data = yaml.safe_load(self.path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise SourceError(f"Cannot read release index {self.path}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise SourceError(f"Malformed release index {self.path}: {exc}") from exc

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise SourceError(f"{self.path}: top level must be a mapping of modules")

        releases: dict[str, list[ModuleRelease]] = {}
        for module, versions in data.items():
            module = _scalar_text(module, "module name", self.path)
            if versions is None:
                versions = {}
            if not isinstance(versions, dict):
                raise SourceError(f"{self.path}: {module} must map versions to dependencies")

            for version, deps in versions.items():
                version = _scalar_text(version, "version", self.path)
                if deps is None:
                    deps = {}
                if not isinstance(deps, dict):
                    raise SourceError(
                        f"{self.path}: {module}@{version} dependencies must be a mapping"
                    )
                ranges = {
                    _scalar_text(dep, "dependency name", self.path):
                        _scalar_text("*" if rng is None else rng, "range", self.path)
                    for dep, rng in deps.items()
                }
                try:
                    release = self.create_release(module, version, ranges)
                except ValidationFailure as exc:
                    raise SourceError(f"{self.path}: {module}@{version}: {exc}") from exc
                releases.setdefault(module, []).append(release)

        logger.debug(
            "Loaded %d module(s) from release index %s", len(releases), self.path
        )
        return releases

    def __repr__(self) -> str:
        return f"<IndexFileSource {self.path}>"
