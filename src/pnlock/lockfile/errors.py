"""
pnlock.lockfile.errors — Lockfile error taxonomy.

Every error carries a stable ``code`` so that callers (the CLI,
install tooling) can print a specific remediation message.
"""

from __future__ import annotations

from pathlib import Path

from pnlock.constants import WANTED_LOCKFILE


class LockfileError(Exception):
    """Base class for lockfile errors."""

    code = "LOCKFILE_ERROR"

    def __init__(self, message: str, hint: str | None = None):
        super().__init__(message)
        self.hint = hint


class BrokenLockfileError(LockfileError):
    """The lockfile could not be parsed or its merge conflicts not resolved."""

    code = "BROKEN_LOCKFILE"

    def __init__(self, lockfile_path: str | Path, reason: str):
        self.lockfile_path = str(lockfile_path)
        self.reason = reason
        super().__init__(
            f'The lockfile at "{self.lockfile_path}" is broken: {reason}'
        )


class LockfileBreakingChangeError(LockfileError):
    """The lockfile format has a major version the reader cannot consume."""

    code = "LOCKFILE_BREAKING_CHANGE"

    def __init__(self, lockfile_path: str | Path):
        self.lockfile_path = str(lockfile_path)
        super().__init__(
            f"Lockfile {self.lockfile_path} not compatible with current pnpm",
            hint=(
                f"Run with --ignore-incompatible to skip it, "
                f"or remove {WANTED_LOCKFILE} and let it be regenerated."
            ),
        )


class InvalidWantedVersionError(LockfileError):
    """A requested format version is not a lockfileVersion token."""

    code = "INVALID_WANTED_VERSION"

    def __init__(self, version: str):
        self.version = version
        super().__init__(
            f"Invalid wanted lockfile version: {version!r}",
            hint="Wanted versions look like 6 or 6.0 (--wanted, "
                 "PNLOCK_WANTED_VERSIONS or wanted_versions in config).",
        )


class ConflictResolutionError(ValueError):
    """Merge-conflicted text could not be turned into a single document."""
    pass
