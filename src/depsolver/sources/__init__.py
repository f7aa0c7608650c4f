"""Bundled release sources.

Public API::

    from depsolver.sources import InMemorySource, IndexFileSource
    from depsolver.sources.forge import ForgeSource
"""

from __future__ import annotations

from depsolver.sources.index_file import IndexFileSource
from depsolver.sources.memory import InMemorySource

__all__ = [
    "IndexFileSource",
    "InMemorySource",
]
