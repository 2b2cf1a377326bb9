"""
pnlock — Read pnpm lockfiles from Python.

Finds pnpm-lock.yaml, repairs git merge conflicts, migrates older
layouts and checks the format version before handing the document
to the caller.
"""

from pnlock.lockfile import (
    LockfileDocument,
    ProjectSnapshot,
    ReadOutcome,
    LockfileReader,
    LockfileError,
    BrokenLockfileError,
    LockfileBreakingChangeError,
    read_wanted_lockfile,
    read_wanted_lockfile_and_autofix_conflicts,
    read_current_lockfile,
    exists_wanted_lockfile,
)
from pnlock.reporter import Reporter, ClickReporter, CollectingReporter

__version__ = "0.1.0"

__all__ = [
    # documents
    "LockfileDocument",
    "ProjectSnapshot",
    "ReadOutcome",
    # reading
    "LockfileReader",
    "read_wanted_lockfile",
    "read_wanted_lockfile_and_autofix_conflicts",
    "read_current_lockfile",
    "exists_wanted_lockfile",
    # errors
    "LockfileError",
    "BrokenLockfileError",
    "LockfileBreakingChangeError",
    # output
    "Reporter",
    "ClickReporter",
    "CollectingReporter",
]
