"""
pnlock.lockfile.compat — Format-version compatibility gate.

Policy:
  - No wanted versions → Accept (nothing was requested).
  - A wanted version is eligible when its major equals the
    lockfile's major. No eligible entry → Reject.
  - Eligible, and the lockfile is newer than every eligible wanted
    version → AcceptWithWarning (it may get downgraded on write),
    except for the transitional 6.1 format.
  - Otherwise → Accept.

A major bump means the layout changed in a way this reader cannot
consume; same-major skew is still readable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Union

from pnlock.constants import TRANSITIONAL_LOCKFILE_VERSION, WANTED_LOCKFILE
from pnlock.lockfile.version import LockfileVersion, comver_to_semver


@dataclass(frozen=True)
class Accept:
    pass


@dataclass(frozen=True)
class AcceptWithWarning:
    message: str


@dataclass(frozen=True)
class Reject:
    reason: str


CompatibilityVerdict = Union[Accept, AcceptWithWarning, Reject]


class CompatibilityGate:
    """Evaluate a format-version token against wanted versions."""

    def __init__(
        self,
        expand: Callable[[Any], LockfileVersion] = comver_to_semver,
        transitional_version: str = TRANSITIONAL_LOCKFILE_VERSION,
    ):
        self.expand = expand
        self.transitional_version = transitional_version

    def evaluate(
        self,
        token: Any,
        wanted_versions: Iterable[str] | None = None,
    ) -> CompatibilityVerdict:
        """Return the verdict for ``token``.

        Raises:
            ValueError: token or a wanted version cannot be expanded
        """
        wanted = [str(w) for w in (wanted_versions or [])]
        if not wanted:
            return Accept()

        current = self.expand(token)
        expanded = [(w, self.expand(w)) for w in wanted]
        eligible = [(w, v) for w, v in expanded if v.major == current.major]
        if not eligible:
            return Reject(
                f"lockfileVersion {token} (major {current.major}) is not "
                f"compatible with {', '.join(wanted)}"
            )

        raw = "0" if token is None else str(token)
        if raw == self.transitional_version:
            return Accept()

        newest, newest_version = max(eligible, key=lambda e: e[1].as_tuple())
        if current > newest_version:
            return AcceptWithWarning(
                f"Your {WANTED_LOCKFILE} was generated by a newer version of pnpm. "
                f"It is a compatible version but it might get downgraded "
                f"to version {newest}"
            )
        return Accept()


def evaluate(token: Any, wanted_versions: Iterable[str] | None = None) -> CompatibilityVerdict:
    """Module-level shortcut using the default gate."""
    return CompatibilityGate().evaluate(token, wanted_versions)
