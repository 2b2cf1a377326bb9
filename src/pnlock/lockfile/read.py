"""
pnlock.lockfile.read — Lockfile read pipeline.

For each candidate lockfile (branch lockfile first when enabled,
then pnpm-lock.yaml):

    load raw text (missing → next candidate)
      → resolve merge conflicts (if markers and autofix allowed)
      → parse YAML
      → normalize schema (shared layout, inline specifiers)
      → compatibility gate (accept / warn / reject)

The first accepted candidate wins. No candidate on disk means no
lockfile yet, which is not an error.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Iterable, Mapping

import yaml

from pnlock.constants import CURRENT_LOCKFILE, WANTED_LOCKFILE
from pnlock.git import branch_lockfile_name, current_branch, list_branch_lockfiles
from pnlock.lockfile.compat import (
    AcceptWithWarning, CompatibilityGate, Reject,
)
from pnlock.lockfile.conflicts import ConflictRecoverer
from pnlock.lockfile.errors import (
    BrokenLockfileError, InvalidWantedVersionError, LockfileBreakingChangeError,
)
from pnlock.lockfile.loader import load_raw
from pnlock.lockfile.merger import merge_lockfile_changes
from pnlock.lockfile.model import CandidatePath, LockfileDocument, ReadOutcome
from pnlock.lockfile.normalize import normalize_lockfile, revert_inline_specifiers
from pnlock.reporter import ClickReporter, Reporter


def parse_yaml(text: str) -> Any:
    """Parse YAML text; syntax errors are raised as ValueError."""
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValueError(str(e)) from e


def wanted_lockfile_candidates(
    project_dir: str | Path,
    branch: str | None = None,
) -> list[CandidatePath]:
    """Candidate lockfile paths in the order they are tried."""
    ws = Path(project_dir)
    candidates = [CandidatePath(str(ws / WANTED_LOCKFILE), rank=1)]
    branch_name = branch_lockfile_name(branch)
    if branch_name != WANTED_LOCKFILE:
        candidates.append(CandidatePath(str(ws / branch_name), rank=0))
    return sorted(candidates, key=lambda c: c.rank)


class LockfileReader:
    """Reads lockfiles through the load/recover/normalize/gate pipeline.

    Holds no state between calls; every read goes to disk.
    """

    def __init__(
        self,
        reporter: Reporter | None = None,
        parse: Callable[[str], Any] = parse_yaml,
        conflicts: ConflictRecoverer | None = None,
        gate: CompatibilityGate | None = None,
        branch_resolver: Callable[[Path], str | None] = current_branch,
    ):
        self.reporter = reporter or ClickReporter()
        self.parse = parse
        self.conflicts = conflicts or ConflictRecoverer()
        self.gate = gate or CompatibilityGate()
        self.branch_resolver = branch_resolver

    def _check_wanted(self, wanted_versions: Iterable[str] | None) -> list[str]:
        wanted = [str(w) for w in (wanted_versions or [])]
        for version in wanted:
            try:
                self.gate.expand(version)
            except ValueError as e:
                raise InvalidWantedVersionError(version) from e
        return wanted

    # ── single file ───────────────────────────
    def _load_document(
        self, lockfile_path: str, raw: str, autofix: bool,
    ) -> tuple[dict[str, Any], bool]:
        try:
            merged, had_conflicts = self.conflicts.recover(raw, autofix)
        except ValueError as e:
            raise BrokenLockfileError(lockfile_path, str(e)) from e

        try:
            if merged is None:
                data = self.parse(raw)
                if not isinstance(data, Mapping):
                    raise ValueError("lockfile must be a YAML mapping")
            else:
                data = merged
            data = revert_inline_specifiers(normalize_lockfile(data))
            LockfileDocument.from_dict(data)
        except ValueError as e:
            raise BrokenLockfileError(lockfile_path, str(e)) from e
        return data, had_conflicts

    def _read(
        self,
        lockfile_path: str | Path,
        prefix: str,
        autofix: bool,
        wanted_versions: Iterable[str] | None,
        ignore_incompatible: bool,
    ) -> tuple[dict[str, Any] | None, bool]:
        lockfile_path = str(lockfile_path)
        raw = load_raw(lockfile_path)
        if raw is None:
            return None, False

        data, had_conflicts = self._load_document(lockfile_path, raw, autofix)
        if had_conflicts:
            self.reporter.info(
                f"Merge conflict detected in {Path(lockfile_path).name} "
                f"and successfully merged",
                prefix,
            )

        try:
            verdict = self.gate.evaluate(data.get("lockfileVersion"), wanted_versions)
        except ValueError as e:
            raise BrokenLockfileError(lockfile_path, str(e)) from e

        if not isinstance(verdict, Reject):
            if isinstance(verdict, AcceptWithWarning):
                self.reporter.warn(verdict.message, prefix)
            return data, had_conflicts

        if ignore_incompatible:
            self.reporter.warn(
                f"Ignoring not compatible lockfile at {lockfile_path}", prefix,
            )
            return None, False
        raise LockfileBreakingChangeError(lockfile_path)

    # ── wanted lockfile ───────────────────────
    def candidates(
        self, project_dir: str | Path, use_git_branch_lockfile: bool = False,
    ) -> list[CandidatePath]:
        branch = None
        if use_git_branch_lockfile:
            branch = self.branch_resolver(Path(project_dir))
        return wanted_lockfile_candidates(project_dir, branch)

    def _merge_branch_lockfiles(
        self,
        data: dict[str, Any],
        project_dir: str | Path,
        wanted_versions: Iterable[str] | None,
        ignore_incompatible: bool,
    ) -> dict[str, Any]:
        prefix = str(project_dir)
        for path in list_branch_lockfiles(project_dir):
            branch_data, _ = self._read(
                path, prefix, True, wanted_versions, ignore_incompatible,
            )
            if branch_data is None:
                continue
            try:
                data = merge_lockfile_changes(data, branch_data)
            except ValueError as e:
                raise BrokenLockfileError(path, str(e)) from e
        return data

    def read_wanted_and_autofix_conflicts(
        self,
        project_dir: str | Path,
        wanted_versions: Iterable[str] | None = None,
        ignore_incompatible: bool = False,
        use_git_branch_lockfile: bool = False,
        merge_git_branch_lockfiles: bool = False,
    ) -> ReadOutcome:
        """Read the wanted lockfile of a project.

        Args:
            project_dir: Directory holding pnpm-lock.yaml
            wanted_versions: Acceptable format versions (empty = any)
            ignore_incompatible: Return no lockfile instead of raising
                on a major-version mismatch
            use_git_branch_lockfile: Try pnpm-lock.<branch>.yaml first
            merge_git_branch_lockfiles: Fold every branch lockfile into
                the result

        Raises:
            BrokenLockfileError: Unparseable or unresolvable lockfile
            LockfileBreakingChangeError: Incompatible format version
            InvalidWantedVersionError: A wanted version is not N or N.N
        """
        wanted = self._check_wanted(wanted_versions)
        prefix = str(project_dir)
        data: dict[str, Any] | None = None
        had_conflicts = False
        lockfile_path = None

        for candidate in self.candidates(project_dir, use_git_branch_lockfile):
            data, had_conflicts = self._read(
                candidate.path, prefix, True, wanted, ignore_incompatible,
            )
            if data is None:
                continue
            lockfile_path = candidate.path
            if merge_git_branch_lockfiles:
                data = self._merge_branch_lockfiles(
                    data, project_dir, wanted, ignore_incompatible,
                )
            break

        if data is None:
            return ReadOutcome(document=None, had_conflicts=had_conflicts)
        return ReadOutcome(
            document=LockfileDocument.from_dict(data),
            had_conflicts=had_conflicts,
            lockfile_path=lockfile_path,
        )

    def read_wanted(
        self, project_dir: str | Path, **opts: Any,
    ) -> LockfileDocument | None:
        return self.read_wanted_and_autofix_conflicts(project_dir, **opts).document

    # ── current lockfile ──────────────────────
    def read_current(
        self,
        virtual_store_dir: str | Path,
        wanted_versions: Iterable[str] | None = None,
        ignore_incompatible: bool = False,
    ) -> LockfileDocument | None:
        """Read node_modules/.pnpm/lock.yaml (no conflict autofix)."""
        data, _ = self._read(
            Path(virtual_store_dir) / CURRENT_LOCKFILE,
            str(virtual_store_dir),
            False,
            self._check_wanted(wanted_versions),
            ignore_incompatible,
        )
        return LockfileDocument.from_dict(data) if data is not None else None


def read_wanted_lockfile(
    project_dir: str | Path,
    wanted_versions: Iterable[str] | None = None,
    ignore_incompatible: bool = False,
    use_git_branch_lockfile: bool = False,
    merge_git_branch_lockfiles: bool = False,
    reporter: Reporter | None = None,
) -> LockfileDocument | None:
    """Read pnpm-lock.yaml from a project directory (None if missing)."""
    return LockfileReader(reporter=reporter).read_wanted(
        project_dir,
        wanted_versions=wanted_versions,
        ignore_incompatible=ignore_incompatible,
        use_git_branch_lockfile=use_git_branch_lockfile,
        merge_git_branch_lockfiles=merge_git_branch_lockfiles,
    )


def read_wanted_lockfile_and_autofix_conflicts(
    project_dir: str | Path,
    wanted_versions: Iterable[str] | None = None,
    ignore_incompatible: bool = False,
    use_git_branch_lockfile: bool = False,
    merge_git_branch_lockfiles: bool = False,
    reporter: Reporter | None = None,
) -> ReadOutcome:
    return LockfileReader(reporter=reporter).read_wanted_and_autofix_conflicts(
        project_dir,
        wanted_versions=wanted_versions,
        ignore_incompatible=ignore_incompatible,
        use_git_branch_lockfile=use_git_branch_lockfile,
        merge_git_branch_lockfiles=merge_git_branch_lockfiles,
    )


def read_current_lockfile(
    virtual_store_dir: str | Path,
    wanted_versions: Iterable[str] | None = None,
    ignore_incompatible: bool = False,
    reporter: Reporter | None = None,
) -> LockfileDocument | None:
    return LockfileReader(reporter=reporter).read_current(
        virtual_store_dir, wanted_versions, ignore_incompatible,
    )


def exists_wanted_lockfile(project_dir: str | Path) -> bool:
    return (Path(project_dir) / WANTED_LOCKFILE).exists()
