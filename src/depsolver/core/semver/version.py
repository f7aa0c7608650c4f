"""Semantic version values and their total ordering.

Implements SemVer 2.0.0 parsing and precedence. Versions are immutable:
``major.minor.patch`` plus optional prerelease and build identifiers.

Build metadata is carried for display only. It participates in neither
ordering nor equality, so ``1.0.0+a == 1.0.0+b`` and both hash alike.

Two sentinels bound the version space: ``Version.MIN`` (``0.0.0`` with an
explicitly *empty* prerelease, lower than every parseable version) and
``Version.MAX`` (infinite major, higher than every parseable version).

References
----------
.. [SemVer] Preston-Werner, T. (2013). "Semantic Versioning 2.0.0."
   https://semver.org/
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from functools import total_ordering
from typing import ClassVar, Union

from depsolver.exceptions import ValidationFailure

Identifier = Union[int, str]

# ---------------------------------------------------------------------------
# Parsing patterns
# ---------------------------------------------------------------------------

_CORE_RE = re.compile(r"^([0-9]+)\.([0-9]+)\.([0-9]+)(?=[-+]|\Z)")
_IDENTIFIER_RE = re.compile(r"^[0-9A-Za-z-]+\Z")
_NUMERIC_RE = re.compile(r"^[0-9]+\Z")

_PARTS = ("major", "minor", "patch")


def _has_leading_zero(text: str) -> bool:
    return len(text) > 1 and text.startswith("0")


def _check_identifiers(idents: Sequence[str], kind: str) -> None:
    if any(not ident for ident in idents):
        raise ValidationFailure(f"{kind} identifiers MUST NOT be empty")
    if any(not _IDENTIFIER_RE.match(ident) for ident in idents):
        raise ValidationFailure(
            f"{kind} identifiers MUST use only ASCII alphanumerics and hyphens"
        )


def _prerelease_identifiers(idents: Iterable[Identifier]) -> tuple[Identifier, ...]:
    """Validate prerelease identifiers, storing numeric ones as ints."""
    idents = tuple(idents)
    for ident in idents:
        if isinstance(ident, bool) or not isinstance(ident, (int, str)):
            raise ValidationFailure(
                f"Prerelease identifiers MUST be strings or integers (got {ident!r})"
            )
        if isinstance(ident, int) and ident < 0:
            raise ValidationFailure("Prerelease identifiers MUST NOT be negative")

    texts = [ident for ident in idents if isinstance(ident, str)]
    _check_identifiers(texts, "Prerelease")
    if any(_NUMERIC_RE.match(x) and _has_leading_zero(x) for x in texts):
        raise ValidationFailure("Prerelease identifiers MUST NOT contain leading zeroes")
    return tuple(
        int(x) if isinstance(x, str) and _NUMERIC_RE.match(x) else x for x in idents
    )


def _build_identifiers(idents: Iterable[str]) -> tuple[str, ...]:
    idents = tuple(idents)
    if not all(isinstance(ident, str) for ident in idents):
        raise ValidationFailure("Build identifiers MUST be strings")
    _check_identifiers(idents, "Build")
    return idents


def _compare_identifiers(mine: Identifier, yours: Identifier) -> int:
    if isinstance(mine, int):
        if isinstance(yours, int):
            return (mine > yours) - (mine < yours)
        return -1
    if isinstance(yours, int):
        return 1
    return (mine > yours) - (mine < yours)


# ---------------------------------------------------------------------------
# Version
# ---------------------------------------------------------------------------


@total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """An immutable semantic version.

    Attributes:
        major: Major version number (``math.inf`` only for ``Version.MAX``).
        minor: Minor version number.
        patch: Patch version number.
        prerelease: Tuple of prerelease identifiers, ``None`` for a stable
            release. An empty tuple is the "first prerelease" marker that
            sorts below every real prerelease of the same triple.
        build: Tuple of build identifiers, or ``None``.

    Identifiers are validated on construction with the same rules ``parse``
    applies. All-digit string prerelease identifiers are stored as ints, so
    ``Version(1, 0, 0, ("1",)) == Version.parse("1.0.0-1")``.
    """

    major: int | float
    minor: int
    patch: int
    prerelease: tuple[Identifier, ...] | None = None
    build: tuple[str, ...] | None = None

    MIN: ClassVar[Version]
    MAX: ClassVar[Version]

    def __post_init__(self) -> None:
        if self.major < 0 or self.minor < 0 or self.patch < 0:
            raise ValidationFailure("Version numbers MUST be non-negative")
        if self.prerelease is not None:
            object.__setattr__(
                self, "prerelease", _prerelease_identifiers(self.prerelease)
            )
        if self.build is not None:
            object.__setattr__(self, "build", _build_identifiers(self.build))

    # -- construction -------------------------------------------------------

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse a semantic version string.

        Args:
            text: A version such as ``"1.2.3"``, ``"1.0.0-rc.1"`` or
                ``"2.0.0+build.5"``.

        Returns:
            The parsed ``Version``.

        Raises:
            ValidationFailure: If the string is not a valid semantic version.
        """
        match = _CORE_RE.match(text)
        if match is None:
            raise ValidationFailure(
                f"Version numbers MUST begin with X.Y.Z (got {text!r})"
            )
        if any(_has_leading_zero(part) for part in match.groups()):
            raise ValidationFailure(
                f"Version numbers MUST NOT contain leading zeroes (got {text!r})"
            )

        rest = text[match.end():]
        prerelease_text: str | None = None
        build_text: str | None = None
        if rest.startswith("-"):
            prerelease_text, plus, build = rest[1:].partition("+")
            if plus:
                build_text = build
        elif rest.startswith("+"):
            build_text = rest[1:]

        # Identifier rules are enforced by __post_init__.
        major, minor, patch = (int(x) for x in match.groups())
        return cls(
            major,
            minor,
            patch,
            None if prerelease_text is None else tuple(prerelease_text.split(".")),
            None if build_text is None else tuple(build_text.split(".")),
        )

    @classmethod
    def is_valid(cls, text: str) -> bool:
        """Return True if *text* parses as a semantic version."""
        try:
            cls.parse(text)
        except ValidationFailure:
            return False
        return True

    # -- derived versions ---------------------------------------------------

    def next(self, part: str) -> Version:
        """Increment *part* and reset every lower component.

        Prerelease and build identifiers are dropped from the result.

        Args:
            part: One of ``"major"``, ``"minor"`` or ``"patch"``.
        """
        if part == "major":
            return Version(self.major + 1, 0, 0)
        if part == "minor":
            return Version(self.major, self.minor + 1, 0)
        if part == "patch":
            return Version(self.major, self.minor, self.patch + 1)
        raise ValueError(f"Unknown version part {part!r}; expected one of {_PARTS}")

    def first_prerelease(self) -> Version:
        """Return the lowest version sharing this ``major.minor.patch``."""
        return Version(self.major, self.minor, self.patch, ())

    # -- accessors ----------------------------------------------------------

    @property
    def stable(self) -> bool:
        """True if this version has no prerelease component."""
        return not self.prerelease

    @property
    def prerelease_string(self) -> str | None:
        if not self.prerelease:
            return None
        return ".".join(str(x) for x in self.prerelease)

    @property
    def build_string(self) -> str | None:
        if not self.build:
            return None
        return ".".join(self.build)

    # -- ordering -----------------------------------------------------------

    def _compare_prerelease(self, other: Version) -> int:
        mine, yours = self.prerelease, other.prerelease
        if mine is None:
            return 0 if yours is None else 1
        if yours is None:
            return -1
        for x, y in zip(mine, yours):
            cmp = _compare_identifiers(x, y)
            if cmp:
                return cmp
        return (len(mine) > len(yours)) - (len(mine) < len(yours))

    def compare(self, other: Version) -> int:
        """Return -1, 0 or 1 as this version is lower, equal or higher."""
        for mine, yours in (
            (self.major, other.major),
            (self.minor, other.minor),
            (self.patch, other.patch),
        ):
            if mine != yours:
                return -1 if mine < yours else 1
        return self._compare_prerelease(other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) < 0

    def __hash__(self) -> int:
        return hash((self.major, self.minor, self.patch, self.prerelease))

    # -- rendering ----------------------------------------------------------

    def __str__(self) -> str:
        major = "inf" if math.isinf(self.major) else str(self.major)
        text = f"{major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += f"-{self.prerelease_string}"
        if self.build:
            text += f"+{self.build_string}"
        return text

    def __repr__(self) -> str:
        return f"Version({str(self)!r})"


Version.MIN = Version(0, 0, 0, ())
Version.MAX = Version(math.inf, 0, 0)
