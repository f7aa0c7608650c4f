"""Tests for VersionRange parsing, membership and intersection.

Each expression family is checked against versions just inside and just
outside its bounds, including the prerelease edges that partial versions
admit at the bottom and exclude at the top.
"""

from __future__ import annotations

import pytest

from depsolver.core.semver import Version, VersionRange
from depsolver.exceptions import UnparsableRange, ValidationFailure


def _check(expressions: list[str], includes: list[str], excludes: list[str]) -> None:
    for expr in expressions:
        rng = VersionRange.parse(expr)
        for text in includes:
            assert Version.parse(text) in rng, f"{expr!r} should include {text}"
        for text in excludes:
            assert Version.parse(text) not in rng, f"{expr!r} should exclude {text}"


# ===========================================================================
# Bare versions
# ===========================================================================


class TestBareVersions:
    def test_full_version(self) -> None:
        _check(["1.2.3"], ["1.2.3-alpha", "1.2.3"], ["1.2.2", "1.2.4-alpha"])

    def test_full_prerelease_is_exact(self) -> None:
        _check(["1.2.3-alpha"], ["1.2.3-alpha"], ["1.2.3-999", "1.2.3-beta"])

    def test_major_minor(self) -> None:
        _check(
            ["1.2", "1.2.x", "1.2.X", "1.2.*"],
            ["1.2.0-alpha", "1.2.0", "1.2.999"],
            ["1.1.999", "1.3.0-0"],
        )

    def test_major_only(self) -> None:
        _check(
            ["1", "1.x", "1.X", "1.*", "1.x.x"],
            ["1.0.0-alpha", "1.999.0"],
            ["0.999.999", "2.0.0-0"],
        )

    @pytest.mark.parametrize("expr", ["*", "x", "X", "", "   "])
    def test_wildcards_accept_anything(self, expr: str) -> None:
        _check([expr], ["0.0.0-0", "0.0.0", "1.2.3-rc.1", "999.0.0"], [])

    def test_build_metadata_in_full_version(self) -> None:
        _check(["1.2.3+build.1"], ["1.2.3", "1.2.3-rc.1"], ["1.2.4"])


# ===========================================================================
# Open-ended expressions
# ===========================================================================


class TestInequalities:
    def test_greater_than(self) -> None:
        _check([">1", "> 1"], ["2.0.0-0", "999.0.0"], ["1.999.999"])
        _check([">1.2", "> 1.2"], ["1.3.0-0", "999.0.0"], ["1.2.999"])
        _check([">1.2.3", "> 1.2.3"], ["1.2.4-0", "999.0.0"], ["1.2.3"])
        _check(
            [">1.2.3-alpha", "> 1.2.3-alpha"],
            ["1.2.3-alpha.0", "1.2.3-alpha0", "999.0.0"],
            ["1.2.3-alpha"],
        )

    def test_greater_or_equal(self) -> None:
        _check([">=1", ">= 1"], ["1.0.0-0", "999.0.0"], ["0.999.999"])
        _check([">=1.2", ">= 1.2"], ["1.2.0-0", "999.0.0"], ["1.1.999"])
        _check([">=1.2.3", ">= 1.2.3"], ["1.2.3-0", "999.0.0"], ["1.2.2"])
        _check(
            [">=1.2.3-alpha", ">= 1.2.3-alpha"],
            ["1.2.3-alpha", "1.2.3-alpha0", "999.0.0"],
            ["1.2.3-alph"],
        )

    def test_less_than(self) -> None:
        _check(["<1", "< 1"], ["0.0.0-0", "0.999.999"], ["1.0.0-0", "2.0.0"])
        _check(["<1.2", "< 1.2"], ["0.0.0-0", "1.1.0"], ["1.2.0-0", "2.0.0"])
        _check(["<1.2.3", "< 1.2.3"], ["0.0.0-0", "1.2.2"], ["1.2.3-0", "2.0.0"])
        _check(
            ["<1.2.3-alpha", "< 1.2.3-alpha"],
            ["0.0.0-0", "1.2.3-alph"],
            ["1.2.3-alpha", "2.0.0"],
        )

    def test_less_or_equal(self) -> None:
        _check(["<=1", "<= 1"], ["0.0.0-0", "1.999.999"], ["2.0.0-0"])
        _check(["<=1.2", "<= 1.2"], ["0.0.0-0", "1.2.999"], ["1.3.0-0"])
        _check(["<=1.2.3", "<= 1.2.3"], ["0.0.0-0", "1.2.3"], ["1.2.4-0"])
        _check(
            ["<=1.2.3-alpha", "<= 1.2.3-alpha"],
            ["0.0.0-0", "1.2.3-alpha"],
            ["1.2.3-alpha0", "1.2.3-alpha.0"],
        )

    def test_open_ends_use_sentinels(self) -> None:
        assert VersionRange.parse(">=1").end == Version.MAX
        assert VersionRange.parse("<1").begin == Version.MIN

    def test_less_than_zero_is_empty(self) -> None:
        assert VersionRange.parse("<0") == VersionRange.EMPTY


# ===========================================================================
# Tilde and hyphen expressions
# ===========================================================================


class TestReasonablyClose:
    def test_tilde(self) -> None:
        _check(["~1"], ["1.0.0-0", "1.999.999"], ["0.999.999", "2.0.0-0"])
        _check(["~1.2"], ["1.2.0-0", "1.2.999"], ["1.1.999", "1.3.0-0"])
        _check(["~1.2.3"], ["1.2.3-0", "1.2.3"], ["1.2.2", "1.2.4-0"])

    def test_tilde_prerelease_extends_to_next_patch(self) -> None:
        _check(["~1.2.3-alpha"], ["1.2.3-alpha", "1.2.3"], ["1.2.3-alph", "1.2.4-0"])


class TestInclusiveRanges:
    @pytest.mark.parametrize(
        ("expr", "includes", "excludes"),
        [
            ("1 - 2", ["1.0.0-0", "2.999.999"], ["0.999.999", "3.0.0-0"]),
            ("1 - 2.4", ["1.0.0-0", "2.4.999"], ["0.999.999", "2.5.0-0"]),
            ("1 - 2.3.4", ["1.0.0-0", "2.3.4"], ["0.999.999", "2.3.5-0"]),
            ("1 - 2.3.4-alpha", ["1.0.0-0", "2.3.4-alpha"],
             ["0.999.999", "2.3.4-alpha0", "2.3.4"]),
            ("1.2 - 2", ["1.2.0-0", "2.999.999"], ["1.1.999", "3.0.0-0"]),
            ("1.2 - 1.4", ["1.2.0-0", "1.4.999"], ["1.1.999", "1.5.0-0"]),
            ("1.2 - 1.2.3", ["1.2.0-0", "1.2.3"], ["1.1.999", "1.2.4-0"]),
            ("1.2 - 1.2.3-alpha", ["1.2.0-0", "1.2.3-alpha"],
             ["1.1.999", "1.2.3-alpha0", "1.2.4"]),
            ("1.2.3 - 2", ["1.2.3-0", "2.999.999"], ["1.2.2", "3.0.0-0"]),
            ("1.2.3 - 1.4", ["1.2.3-0", "1.4.999"], ["1.2.2", "1.5.0-0"]),
            ("1.2.3 - 1.3.4", ["1.2.3-0", "1.3.4"], ["1.2.2", "1.3.5-0"]),
            ("1.2.3 - 1.3.4-alpha", ["1.2.3-0", "1.3.4-alpha"],
             ["1.2.2", "1.3.4-alpha0", "1.3.5"]),
            ("1.2.3-alpha - 2", ["1.2.3-alpha", "2.999.999"], ["1.2.3-alph", "3.0.0-0"]),
            ("1.2.3-alpha - 1.4", ["1.2.3-alpha", "1.4.999"], ["1.2.3-alph", "1.5.0-0"]),
            ("1.2.3-alpha - 1.3.4", ["1.2.3-alpha", "1.3.4"], ["1.2.3-alph", "1.3.5-0"]),
            ("1.2.3-alpha - 1.3.4-alpha", ["1.2.3-alpha", "1.3.4-alpha"],
             ["1.2.3-alph", "1.3.4-alpha0", "1.3.5"]),
        ],
    )
    def test_inclusive_range(
        self, expr: str, includes: list[str], excludes: list[str]
    ) -> None:
        _check([expr], includes, excludes)

    def test_reversed_bounds_are_empty(self) -> None:
        assert VersionRange.parse("2 - 1").is_empty


# ===========================================================================
# Compound expressions
# ===========================================================================


class TestCompound:
    def test_conjunction(self) -> None:
        _check([">1.0.0 <=2.3"], ["1.0.1", "2.3.999"], ["1.0.0", "2.4.0-0"])

    def test_spaced_operators(self) -> None:
        _check([">= 4.13.1 < 10.0.0"], ["4.13.1", "9.9.9"], ["4.13.0", "10.0.0"])

    def test_hyphen_range_inside_compound(self) -> None:
        _check(["1 - 3 <2.5"], ["1.0.0", "2.4.9"], ["2.5.0", "3.0.0"])

    def test_disjoint_conjunction_is_empty(self) -> None:
        assert VersionRange.parse(">2 <1") == VersionRange.EMPTY

    def test_expression_is_remembered_but_not_compared(self) -> None:
        rng = VersionRange.parse(">=1.2 <1.3")
        assert str(rng) == ">=1.2 <1.3"
        assert rng == VersionRange.parse("1.2.x")


# ===========================================================================
# Errors
# ===========================================================================


class TestParseErrors:
    @pytest.mark.parametrize(
        "expr", ["foo", "01", "1.02", "^1.2.3", "=1.2.3", ">", "1 -", "1.x.3", "-1"]
    )
    def test_unparsable(self, expr: str) -> None:
        with pytest.raises(UnparsableRange):
            VersionRange.parse(expr)

    def test_unparsable_is_validation_failure(self) -> None:
        assert issubclass(UnparsableRange, ValidationFailure)

    def test_malformed_full_version(self) -> None:
        with pytest.raises(ValidationFailure, match="leading zeroes"):
            VersionRange.parse("1.2.3-01")


# ===========================================================================
# Construction and intersection
# ===========================================================================


class TestIntersection:
    def test_overlap(self) -> None:
        result = VersionRange.parse("1.x").intersection(VersionRange.parse("1.1.x"))
        assert result == VersionRange.parse("1.1.x")

    def test_partial_overlap_takes_inner_bounds(self) -> None:
        result = VersionRange.parse(">=1.2 <3").intersection(VersionRange.parse(">=2.5 <=4"))
        assert result.begin == Version.parse("2.5.0").first_prerelease()
        assert not result.exclude_begin
        assert result.end == Version.parse("3.0.0").first_prerelease()
        assert result.exclude_end

    def test_adjacent_ranges_do_not_overlap(self) -> None:
        result = VersionRange.parse(">=1.2 <3").intersection(VersionRange.parse(">2 <=4"))
        assert result == VersionRange.EMPTY

    def test_disjoint_is_empty(self) -> None:
        assert VersionRange.parse("1.x") & VersionRange.parse("2.x") == VersionRange.EMPTY

    def test_exclusive_flag_wins_on_shared_end(self) -> None:
        inclusive = VersionRange.interval(Version.parse("1.0.0"), Version.parse("2.0.0"))
        exclusive = VersionRange.interval(
            Version.parse("1.0.0"), Version.parse("2.0.0"), exclude_end=True
        )
        result = inclusive.intersection(exclusive)
        assert result.exclude_end
        assert Version.parse("2.0.0") not in result

    def test_touching_bounds(self) -> None:
        closed = VersionRange.parse("<=1.2.3")
        assert closed.intersection(VersionRange.parse(">=1.2.3")).contains(
            Version.parse("1.2.3")
        )
        assert closed.intersection(VersionRange.parse(">1.2.3")).is_empty

    def test_empty_absorbs(self) -> None:
        assert VersionRange.EMPTY.intersection(VersionRange.ANY) == VersionRange.EMPTY
        assert Version.parse("0.0.0") not in VersionRange.EMPTY

    def test_interval_collapses_empty(self) -> None:
        one = Version.parse("1.0.0")
        assert VersionRange.interval(one, one, exclude_begin=True) is VersionRange.EMPTY
        assert VersionRange.interval(Version.parse("2.0.0"), one) is VersionRange.EMPTY

    def test_direct_construction_rejects_inverted_bounds(self) -> None:
        with pytest.raises(ValueError):
            VersionRange(Version.parse("2.0.0"), Version.parse("1.0.0"))

    def test_contains_rejects_non_versions(self) -> None:
        assert "1.0.0" not in VersionRange.ANY

    def test_interval_rendering(self) -> None:
        rng = VersionRange.interval(
            Version.parse("1.0.0"), Version.parse("2.0.0"), exclude_end=True
        )
        assert str(rng) == "[1.0.0, 2.0.0)"
        assert str(VersionRange.EMPTY) == "<empty>"
