"""
pnlock.lockfile.version — Version parsing and comparison.

Lockfile format versions are written in a compact "comver" form
(major.minor, sometimes just major, sometimes a bare YAML number).
They are expanded to full semantic versions before comparing:

    "6"    → 6.0.0
    "6.0"  → 6.0.0
    5.4    → 5.4.0
    None   → 0.0.0

Package versions inside the lockfile are full semver
("1.2.3", "2.0.0-rc.1", "1.0.0_react@17.0.2" with a peer suffix).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

_SEMVER_RE = re.compile(
    r"^v?(\d+)\.(\d+)\.(\d+)"
    r"(?:-([0-9A-Za-z.-]+))?"
    r"(?:\+[0-9A-Za-z.-]+)?$"
)
_COMVER_RE = re.compile(r"^(\d+)(?:\.(\d+))?$")


@dataclass(frozen=True)
class LockfileVersion:
    """A parsed semantic version."""

    major: int
    minor: int = 0
    patch: int = 0
    prerelease: tuple[str, ...] = ()

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            base += "-" + ".".join(self.prerelease)
        return base

    def as_tuple(self) -> tuple:
        """Sort key. Pre-releases sort before the release they precede;
        numeric identifiers sort before alphanumeric ones."""
        if not self.prerelease:
            pre: tuple = ((1,),)
        else:
            pre = tuple(
                (0, int(p), "") if p.isdigit() else (1, 0, p)
                for p in self.prerelease
            )
            pre = ((0,),) + pre
        return (self.major, self.minor, self.patch, pre)

    def __lt__(self, other: LockfileVersion) -> bool:
        return self.as_tuple() < other.as_tuple()

    def __le__(self, other: LockfileVersion) -> bool:
        return self.as_tuple() <= other.as_tuple()

    def __gt__(self, other: LockfileVersion) -> bool:
        return self.as_tuple() > other.as_tuple()

    def __ge__(self, other: LockfileVersion) -> bool:
        return self.as_tuple() >= other.as_tuple()


def parse_semver(text: str) -> LockfileVersion | None:
    """Parse a full semver string; None if it is not one.

    >>> parse_semver("1.2.3-rc.1")
    LockfileVersion(major=1, minor=2, patch=3, prerelease=('rc', '1'))
    >>> parse_semver("link:../foo") is None
    True
    """
    m = _SEMVER_RE.match(text.strip())
    if not m:
        return None
    major, minor, patch, pre = m.groups()
    return LockfileVersion(
        major=int(major),
        minor=int(minor),
        patch=int(patch),
        prerelease=tuple(pre.split(".")) if pre else (),
    )


def comver_to_semver(token: Any) -> LockfileVersion:
    """Expand a format-version token to a full version.

    Raises:
        ValueError: token is not of the form N or N.N
    """
    text = "0" if token is None else str(token).strip()
    m = _COMVER_RE.match(text)
    if not m:
        raise ValueError(f"Invalid lockfileVersion: {text!r}")
    major, minor = m.groups()
    return LockfileVersion(major=int(major), minor=int(minor or 0))
