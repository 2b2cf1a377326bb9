"""
pnlock.git — Git branch lockfile naming.

With git-branch lockfiles enabled every branch writes its own
lockfile next to the main one:

    pnpm-lock.yaml
    pnpm-lock.feature!login.yaml     ← branch "feature/login"

"/" is not allowed in a file name, so it is replaced by "!".
"""

from __future__ import annotations

import subprocess
from pathlib import Path

from pnlock.constants import WANTED_LOCKFILE

_STEM, _SUFFIX = WANTED_LOCKFILE.rsplit(".", 1)


def current_branch(cwd: str | Path | None = None) -> str | None:
    """Return the checked-out branch, or None outside a git work tree
    (or on a detached HEAD)."""
    try:
        result = subprocess.run(
            ["git", "symbolic-ref", "--short", "HEAD"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=True,
        )
    except (subprocess.CalledProcessError, FileNotFoundError):
        return None
    branch = result.stdout.strip()
    return branch or None


def branch_lockfile_name(branch: str | None) -> str:
    """
    >>> branch_lockfile_name("feature/login")
    'pnpm-lock.feature!login.yaml'
    >>> branch_lockfile_name(None)
    'pnpm-lock.yaml'
    """
    if not branch:
        return WANTED_LOCKFILE
    return f"{_STEM}.{branch.replace('/', '!')}.{_SUFFIX}"


def list_branch_lockfiles(project_dir: str | Path) -> list[Path]:
    """All pnpm-lock.<branch>.yaml files in a directory, sorted by name."""
    return sorted(Path(project_dir).glob(f"{_STEM}.*.{_SUFFIX}"))
