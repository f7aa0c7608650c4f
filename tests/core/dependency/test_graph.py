"""Tests for the Graph root node and its caller-supplied constraints."""

from __future__ import annotations

import pytest

from depsolver.core.dependency import Graph, ModuleRelease, Source
from depsolver.core.semver import Version, VersionRange
from depsolver.exceptions import UnsatisfiableGraph


def _release(name: str, version: str) -> ModuleRelease:
    return Source.ROOT_CAUSE.create_release(name, version)


@pytest.fixture
def graph() -> Graph:
    return Graph({"foo": VersionRange.parse("1.x"), "bar": VersionRange.parse(">=2")})


class TestGraphRoot:
    def test_is_nameless_and_versionless(self, graph: Graph) -> None:
        assert graph.name == ""
        assert graph.version is None

    def test_modules_in_request_order(self, graph: Graph) -> None:
        assert graph.modules == ["foo", "bar"]
        assert graph.dependency_names == ["foo", "bar"]

    def test_unsatisfied_until_linked(self, graph: Graph) -> None:
        assert not graph.satisfied
        graph.satisfy_dependencies([_release("foo", "1.2.0"), _release("bar", "2.0.0")])
        assert graph.satisfied

    def test_satisfied_by_checks_ranges(self, graph: Graph) -> None:
        assert graph.satisfied_by(_release("foo", "1.9.9"))
        assert not graph.satisfied_by(_release("foo", "2.0.0"))
        assert not graph.satisfied_by(_release("baz", "1.0.0"))

    def test_empty_request(self) -> None:
        empty = Graph()
        assert empty.modules == []
        assert empty.satisfied
        assert repr(empty) == "<Graph (empty)>"


class TestAddConstraint:
    def test_initial_constraints_recorded(self, graph: Graph) -> None:
        assert [origin for origin, _ in graph.constraints["foo"]] == ["initialize"]

    def test_restricts_future_links(self, graph: Graph) -> None:
        pinned = Version.parse("1.1.0")
        graph.add_constraint("installed", "foo", lambda rel: rel.version == pinned)
        graph.satisfy_dependencies([_release("foo", "1.2.0"), _release("foo", "1.1.0")])
        assert [str(r.version) for r in graph.dependencies["foo"]] == ["1.1.0"]

    def test_prunes_existing_candidates(self, graph: Graph) -> None:
        graph.satisfy_dependencies([_release("foo", v) for v in ["1.0.0", "1.1.0", "1.2.0"]])
        graph.add_constraint("policy", "foo", lambda rel: rel.version.minor != 1)
        assert [str(r.version) for r in graph.dependencies["foo"]] == ["1.0.0", "1.2.0"]

    def test_constraint_on_unrequested_module_is_inert(self, graph: Graph) -> None:
        graph.add_constraint("policy", "baz", lambda rel: False)
        assert "baz" not in graph.dependencies
        assert not graph.satisfied_by(_release("baz", "1.0.0"))


class TestUnsatisfiableMessage:
    @pytest.mark.parametrize(
        ("names", "message"),
        [
            (["a"], "Could not find satisfying releases for a"),
            (["a", "b"], "Could not find satisfying releases for a and b"),
            (["a", "b", "c"], "Could not find satisfying releases for a, b, and c"),
        ],
    )
    def test_lists_requested_modules(self, names: list[str], message: str) -> None:
        error = UnsatisfiableGraph(Graph({n: VersionRange.ANY for n in names}))
        assert str(error) == message
        assert error.modules == names
