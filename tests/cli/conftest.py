"""Shared fixtures for CLI tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


@pytest.fixture
def conflicting_index(tmp_path: Path) -> Path:
    """An index where foo's two dependencies want disjoint quxx majors."""
    path = tmp_path / "conflict.yaml"
    path.write_text(
        "foo:\n"
        "  1.0.0:\n"
        "    bar: '1.x'\n"
        "    baz: '1.x'\n"
        "bar:\n"
        "  1.0.0:\n"
        "    quxx: '1.x'\n"
        "baz:\n"
        "  1.0.0:\n"
        "    quxx: '2.x'\n"
        "quxx:\n"
        "  1.0.0:\n"
        "  2.0.0:\n"
    )
    return path
