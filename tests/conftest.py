"""Shared fixtures for depsolver tests."""

from __future__ import annotations

import pathlib

import pytest

from depsolver.core.dependency import Resolver
from depsolver.sources import InMemorySource


@pytest.fixture
def source() -> InMemorySource:
    """An empty in-memory release catalogue."""
    return InMemorySource()


@pytest.fixture
def resolver(source: InMemorySource) -> Resolver:
    """A resolver consulting only the ``source`` fixture."""
    return Resolver([source])


@pytest.fixture
def index_file(tmp_path: pathlib.Path) -> pathlib.Path:
    """Write a small YAML release index with a shared transitive dependency."""
    path = tmp_path / "index.yaml"
    path.write_text(
        "foo:\n"
        "  1.1.0:\n"
        "    bar: '1.0.0'\n"
        "    baz: '1.0.0'\n"
        "bar:\n"
        "  1.0.0:\n"
        "    quxx: '1.x'\n"
        "baz:\n"
        "  1.0.0:\n"
        "    quxx: '1.1.x'\n"
        "quxx:\n"
        "  0.9.0:\n"
        "  1.0.0:\n"
        "  1.1.0:\n"
        "  1.1.1:\n"
        "  1.2.0:\n"
        "  2.0.0:\n"
    )
    return path

