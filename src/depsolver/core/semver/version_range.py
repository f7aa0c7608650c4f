"""Version ranges: textual range expressions parsed into version intervals.

A ``VersionRange`` is an interval over ``Version`` with independently
inclusive or exclusive bounds. Every supported expression reduces to such an
interval, and compound expressions reduce to the intersection of their parts.

Supported grammar (whitespace separates compound terms):

=====================  ==================================================
Expression             Interval
=====================  ==================================================
``*`` / ``x`` / ``""``  any version
``1`` / ``1.x``        ``>=1.0.0-  <2.0.0-``
``1.2`` / ``1.2.x``    ``>=1.2.0-  <1.3.0-``
``1.2.3``              ``>=1.2.3-  <=1.2.3``
``1.2.3-alpha``        exactly ``1.2.3-alpha``
``>X`` ``>=X``         open-ended above, relative to X's interval
``<X`` ``<=X``         open-ended below, relative to X's interval
``~X``                 same as X; ``~1.2.3-pre`` extends to ``<1.2.4-``
``A - B``              from the start of A to the end of B
``>1.0.0 <=2.3``       intersection of both terms
=====================  ==================================================

Here ``1.2.0-`` denotes ``Version(1, 2, 0).first_prerelease()``: stable
partial ranges still admit prereleases at their lower edge while excluding
the prereleases of the next increment.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import ClassVar

from depsolver.core.semver.version import Version
from depsolver.exceptions import UnparsableRange

# ---------------------------------------------------------------------------
# Expression patterns
# ---------------------------------------------------------------------------

_NUM = r"(0|[1-9][0-9]*)"
_WILD = r"(?:\.[xX*])"

_ANY_RE = re.compile(r"^[xX*]?\Z")
_MAJOR_RE = re.compile(rf"^{_NUM}{_WILD}?{_WILD}?\Z")
_MINOR_RE = re.compile(rf"^{_NUM}\.{_NUM}{_WILD}?\Z")
_FULL_RE = re.compile(r"^[0-9]+\.[0-9]+\.[0-9]+(?:[-+].*)?\Z")
_OPERATOR_RE = re.compile(r"^(>=|<=|>|<|~)?(.*)\Z")
_OPERATOR_SPACE_RE = re.compile(r"(>=|<=|>|<|~)\s+")


@dataclass(frozen=True)
class VersionRange:
    """An interval of versions with inclusive or exclusive bounds.

    Attributes:
        begin: Lower bound.
        end: Upper bound.
        exclude_begin: True if ``begin`` itself is outside the range.
        exclude_end: True if ``end`` itself is outside the range.
        expression: The text this range was parsed from, if any. Ignored by
            equality.
    """

    begin: Version
    end: Version
    exclude_begin: bool = False
    exclude_end: bool = False
    expression: str | None = field(default=None, compare=False)

    EMPTY: ClassVar[VersionRange]
    ANY: ClassVar[VersionRange]

    def __post_init__(self) -> None:
        if self.begin > self.end:
            raise ValueError(
                f"Range begin {self.begin} must not exceed its end {self.end}"
            )

    # -- construction -------------------------------------------------------

    @classmethod
    def parse(cls, expression: str) -> VersionRange:
        """Parse a range expression into a ``VersionRange``.

        Args:
            expression: Range text such as ``"1.x"``, ``">=1.2 <2"`` or
                ``"1.0.0 - 1.4"``.

        Returns:
            The interval described by *expression*. Compound expressions
            whose terms do not overlap yield ``VersionRange.EMPTY``.

        Raises:
            UnparsableRange: If a term matches none of the known grammars.
            ValidationFailure: If a term contains a malformed full version.
        """
        normalized = _OPERATOR_SPACE_RE.sub(r"\1", expression.strip())
        tokens = normalized.split()

        terms: list[VersionRange] = []
        idx = 0
        while idx < len(tokens):
            if idx + 2 < len(tokens) and tokens[idx + 1] == "-":
                terms.append(_hyphen_range(tokens[idx], tokens[idx + 2]))
                idx += 3
            else:
                terms.append(_simple_range(tokens[idx]))
                idx += 1

        result = cls.ANY
        for term in terms:
            result = result.intersection(term)

        if result.is_empty:
            return cls.EMPTY
        return cls(
            result.begin,
            result.end,
            result.exclude_begin,
            result.exclude_end,
            expression=expression,
        )

    @classmethod
    def interval(
        cls,
        begin: Version,
        end: Version,
        exclude_begin: bool = False,
        exclude_end: bool = False,
    ) -> VersionRange:
        """Build a range from explicit bounds, collapsing empty ones to EMPTY."""
        if begin > end or (begin == end and (exclude_begin or exclude_end)):
            return cls.EMPTY
        return cls(begin, end, exclude_begin, exclude_end)

    # -- membership ---------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        if self.begin == self.end:
            return self.exclude_begin or self.exclude_end
        return False

    def contains(self, version: Version) -> bool:
        """Return True if *version* lies within this range."""
        if self.exclude_begin:
            if version <= self.begin:
                return False
        elif version < self.begin:
            return False
        if self.exclude_end:
            return version < self.end
        return version <= self.end

    def __contains__(self, version: object) -> bool:
        if not isinstance(version, Version):
            return False
        return self.contains(version)

    # -- set operations -----------------------------------------------------

    def intersection(self, other: VersionRange) -> VersionRange:
        """Return the range of versions contained in both ranges.

        The result starts at the larger lower bound and stops at the smaller
        upper bound. When bounds coincide the exclusive flag wins. Ranges
        that do not overlap produce ``VersionRange.EMPTY``.
        """
        if self.is_empty or other.is_empty:
            return VersionRange.EMPTY

        if self.begin == other.begin:
            begin = self.begin
            exclude_begin = self.exclude_begin or other.exclude_begin
        elif self.begin > other.begin:
            begin, exclude_begin = self.begin, self.exclude_begin
        else:
            begin, exclude_begin = other.begin, other.exclude_begin

        if self.end == other.end:
            end = self.end
            exclude_end = self.exclude_end or other.exclude_end
        elif self.end < other.end:
            end, exclude_end = self.end, self.exclude_end
        else:
            end, exclude_end = other.end, other.exclude_end

        return VersionRange.interval(begin, end, exclude_begin, exclude_end)

    __and__ = intersection

    # -- rendering ----------------------------------------------------------

    def __str__(self) -> str:
        if self.expression is not None:
            return self.expression
        if self.is_empty:
            return "<empty>"
        opening = "(" if self.exclude_begin else "["
        closing = ")" if self.exclude_end else "]"
        return f"{opening}{self.begin}, {self.end}{closing}"


VersionRange.ANY = VersionRange(Version.MIN, Version.MAX, exclude_end=True)
VersionRange.EMPTY = VersionRange(Version.MIN, Version.MIN, exclude_end=True)


# ---------------------------------------------------------------------------
# Term parsers
# ---------------------------------------------------------------------------


def _loose_range(text: str) -> VersionRange:
    """Interpret a bare, possibly partial, version as the interval it names."""
    match = _MAJOR_RE.match(text)
    if match:
        lower = Version(int(match.group(1)), 0, 0)
        return VersionRange(
            lower.first_prerelease(),
            lower.next("major").first_prerelease(),
            exclude_end=True,
        )

    match = _MINOR_RE.match(text)
    if match:
        lower = Version(int(match.group(1)), int(match.group(2)), 0)
        return VersionRange(
            lower.first_prerelease(),
            lower.next("minor").first_prerelease(),
            exclude_end=True,
        )

    if _FULL_RE.match(text):
        version = Version.parse(text)
        if version.stable:
            return VersionRange(version.first_prerelease(), version)
        return VersionRange(version, version)

    raise UnparsableRange(f"Unparsable version range: {text!r}")


def _simple_range(token: str) -> VersionRange:
    if _ANY_RE.match(token):
        return VersionRange.ANY

    match = _OPERATOR_RE.match(token)
    assert match is not None
    operator, operand = match.groups()
    if not operand:
        raise UnparsableRange(f"Unparsable version range: {token!r}")
    loose = _loose_range(operand)

    if operator is None:
        return loose
    if operator == ">":
        return VersionRange.interval(
            loose.end, Version.MAX, not loose.exclude_end, True
        )
    if operator == ">=":
        return VersionRange.interval(
            loose.begin, Version.MAX, loose.exclude_begin, True
        )
    if operator == "<":
        return VersionRange.interval(
            Version.MIN, loose.begin, False, not loose.exclude_begin
        )
    if operator == "<=":
        return VersionRange.interval(
            Version.MIN, loose.end, False, loose.exclude_end
        )

    # "~": reasonably close to the operand.
    if loose.begin == loose.end and not loose.begin.stable:
        return VersionRange(
            loose.begin,
            loose.begin.next("patch").first_prerelease(),
            exclude_end=True,
        )
    return loose


def _hyphen_range(first: str, last: str) -> VersionRange:
    lower = _loose_range(first)
    upper = _loose_range(last)
    return VersionRange.interval(
        lower.begin, upper.end, lower.exclude_begin, upper.exclude_end
    )
