"""pnlock.lockfile — Lockfile reading, repair and compatibility checks."""

from pnlock.lockfile.model import (
    LockfileDocument, ProjectSnapshot, ReadOutcome, CandidatePath,
)
from pnlock.lockfile.errors import (
    LockfileError, BrokenLockfileError, LockfileBreakingChangeError,
    ConflictResolutionError, InvalidWantedVersionError,
)
from pnlock.lockfile.compat import (
    CompatibilityGate, Accept, AcceptWithWarning, Reject, evaluate,
)
from pnlock.lockfile.normalize import normalize_lockfile, revert_inline_specifiers
from pnlock.lockfile.conflicts import (
    ConflictRecoverer, is_diff, autofix_merge_conflicts,
)
from pnlock.lockfile.merger import merge_lockfile_changes
from pnlock.lockfile.read import (
    LockfileReader,
    read_wanted_lockfile,
    read_wanted_lockfile_and_autofix_conflicts,
    read_current_lockfile,
    exists_wanted_lockfile,
)

__all__ = [
    "LockfileDocument", "ProjectSnapshot", "ReadOutcome", "CandidatePath",
    "LockfileError", "BrokenLockfileError", "LockfileBreakingChangeError",
    "ConflictResolutionError", "InvalidWantedVersionError",
    "CompatibilityGate", "Accept", "AcceptWithWarning", "Reject", "evaluate",
    "normalize_lockfile", "revert_inline_specifiers",
    "ConflictRecoverer", "is_diff", "autofix_merge_conflicts",
    "merge_lockfile_changes",
    "LockfileReader",
    "read_wanted_lockfile",
    "read_wanted_lockfile_and_autofix_conflicts",
    "read_current_lockfile",
    "exists_wanted_lockfile",
]
