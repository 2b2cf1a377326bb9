"""
pnlock.lockfile.conflicts — Git merge-conflict recovery.

A lockfile committed on two branches often ends up with conflict
markers after a merge:

    importers:
      .:
        specifiers:
    <<<<<<< HEAD
          foo: ^1.0.0
    ||||||| base            (diff3 style only)
          foo: ^0.9.0
    =======
          foo: ^1.1.0
    >>>>>>> feature

The text is split into "ours" and "theirs" (lines outside conflict
blocks go to both, the base block is dropped), each side is parsed
and normalized, and the two documents are merged.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Mapping

import yaml

from pnlock.lockfile.errors import ConflictResolutionError
from pnlock.lockfile.merger import merge_lockfile_changes
from pnlock.lockfile.normalize import normalize_lockfile, revert_inline_specifiers

_OURS = re.compile(r"^<<<<<<< ?.*$", re.MULTILINE)
_SEPARATOR = re.compile(r"^=======\r?$", re.MULTILINE)
_THEIRS = re.compile(r"^>>>>>>> ?.*$", re.MULTILINE)


def is_diff(text: str) -> bool:
    """True when the text contains an unresolved conflict block."""
    return bool(
        _OURS.search(text) and _SEPARATOR.search(text) and _THEIRS.search(text)
    )


def parse_merge_file(text: str) -> tuple[str, str]:
    """Split conflicted text into (ours, theirs).

    Raises:
        ConflictResolutionError: markers are unbalanced
    """
    ours: list[str] = []
    theirs: list[str] = []
    state = "common"

    for line in text.splitlines(keepends=True):
        if line.startswith("<<<<<<<"):
            if state != "common":
                raise ConflictResolutionError("nested conflict marker")
            state = "ours"
        elif line.startswith("|||||||") and state == "ours":
            state = "base"
        elif line.rstrip("\r\n") == "=======" and state in ("ours", "base"):
            state = "theirs"
        elif line.startswith(">>>>>>>") and state == "theirs":
            state = "common"
        elif state == "common":
            ours.append(line)
            theirs.append(line)
        elif state == "ours":
            ours.append(line)
        elif state == "theirs":
            theirs.append(line)

    if state != "common":
        raise ConflictResolutionError("unterminated conflict block")
    return "".join(ours), "".join(theirs)


def _load_side(text: str, side: str) -> dict[str, Any]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConflictResolutionError(f"{side} side is not valid YAML: {e}") from e
    if not isinstance(data, Mapping):
        raise ConflictResolutionError(f"{side} side is not a YAML mapping")
    try:
        return revert_inline_specifiers(normalize_lockfile(data))
    except ValueError as e:
        raise ConflictResolutionError(f"{side} side: {e}") from e


def autofix_merge_conflicts(text: str) -> dict[str, Any]:
    """Resolve conflict markers into one canonical lockfile mapping.

    Raises:
        ConflictResolutionError: the conflict cannot be resolved
    """
    ours_text, theirs_text = parse_merge_file(text)
    ours = _load_side(ours_text, "ours")
    theirs = _load_side(theirs_text, "theirs")
    try:
        return merge_lockfile_changes(ours, theirs)
    except ValueError as e:
        raise ConflictResolutionError(str(e)) from e


@dataclass
class ConflictRecoverer:
    """Detect and (optionally) resolve merge conflicts.

    ``detect`` and ``merge`` are swappable for tests.
    """
    detect: Callable[[str], bool] = is_diff
    merge: Callable[[str], Mapping[str, Any]] = autofix_merge_conflicts

    def recover(
        self, raw_text: str, allow_autofix: bool,
    ) -> tuple[Mapping[str, Any] | None, bool]:
        """Return (merged document, had_conflicts).

        The document is None when there is nothing to recover (no
        markers, or autofix disabled); the caller parses the raw text.
        """
        if not allow_autofix or not self.detect(raw_text):
            return None, False
        return self.merge(raw_text), True
