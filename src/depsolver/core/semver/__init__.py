"""Semantic versions and version ranges.

Public API::

    from depsolver.core.semver import Version, VersionRange
"""

from __future__ import annotations

from depsolver.core.semver.version import Version
from depsolver.core.semver.version_range import VersionRange

__all__ = [
    "Version",
    "VersionRange",
]
