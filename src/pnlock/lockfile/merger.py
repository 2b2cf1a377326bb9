"""
pnlock.lockfile.merger — Merge two lockfile documents.

Used for both sides of a git merge conflict and for folding
git-branch lockfiles (pnpm-lock.<branch>.yaml) into the main one.

Merge strategy:
  - lockfileVersion: the higher of the two
  - importers: union by project id; specifiers and dependency maps
    are merged key by key, conflicting versions resolve to the
    higher semver (theirs when either side is not a semver)
  - packages: union by dependency path, entries deep-merged
    (theirs wins)
  - any other top-level field: deep-merged, theirs wins

Both inputs must already be in the importers layout.
"""

from __future__ import annotations

import copy
from typing import Any, Callable, Mapping

from pnlock.constants import DEPENDENCIES_FIELDS
from pnlock.lockfile.version import comver_to_semver, parse_semver

ValueMerger = Callable[[Any, Any], Any]


def deep_merge(base: Mapping, override: Mapping) -> dict:
    """Recursively merge ``override`` into a copy of ``base``.

    Nested mappings merge key by key; anything else is replaced.

    >>> deep_merge(
    ...     {"/foo@1.0.0": {"dev": False, "resolution": {"integrity": "sha512-a"}}},
    ...     {"/foo@1.0.0": {"dev": True}},
    ... )
    {'/foo@1.0.0': {'dev': True, 'resolution': {'integrity': 'sha512-a'}}}
    """
    merged = copy.deepcopy(dict(base))
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def merge_versions(ours: Any, theirs: Any) -> Any:
    """Pick the higher of two resolved versions.

    >>> merge_versions("1.0.0", "1.2.0")
    '1.2.0'
    >>> merge_versions("2.0.0_react@17.0.2", "1.9.0")
    '2.0.0_react@17.0.2'
    """
    if ours == theirs or theirs is None:
        return ours
    if ours is None:
        return theirs
    if not isinstance(ours, str) or not isinstance(theirs, str):
        return theirs
    # "1.0.0_react@17.0.2" → compare "1.0.0" only
    our_version = parse_semver(ours.split("_")[0])
    their_version = parse_semver(theirs.split("_")[0])
    if our_version is None or their_version is None:
        return theirs
    if our_version > their_version:
        return ours
    return theirs


def take_changed_value(ours: Any, theirs: Any) -> Any:
    if ours == theirs or theirs is None:
        return ours
    return theirs


def _merge_entries(ours: Any, theirs: Any) -> Any:
    if isinstance(ours, Mapping) and isinstance(theirs, Mapping):
        return deep_merge(ours, theirs)
    return take_changed_value(ours, theirs)


def merge_dict(
    ours: Mapping[str, Any] | None,
    theirs: Mapping[str, Any] | None,
    merge_value: ValueMerger,
) -> dict[str, Any]:
    """Union of keys; each value resolved by ``merge_value``.

    Keys whose merged value is None are dropped.
    """
    ours = ours or {}
    theirs = theirs or {}
    result: dict[str, Any] = {}
    for key in list(ours) + [k for k in theirs if k not in ours]:
        value = merge_value(copy.deepcopy(ours.get(key)), copy.deepcopy(theirs.get(key)))
        if value is not None:
            result[key] = value
    return result


def _merge_snapshots(ours: Mapping | None, theirs: Mapping | None) -> dict[str, Any]:
    ours = ours or {}
    theirs = theirs or {}
    result = deep_merge(ours, theirs)
    for key in ("specifiers",) + DEPENDENCIES_FIELDS:
        if key not in ours and key not in theirs:
            continue
        merger = take_changed_value if key == "specifiers" else merge_versions
        merged = merge_dict(ours.get(key), theirs.get(key), merger)
        if merged or key == "specifiers":
            result[key] = merged
        else:
            result.pop(key, None)
    return result


def _higher_lockfile_version(ours: Any, theirs: Any) -> Any:
    if theirs is None:
        return ours
    if ours is None:
        return theirs
    if comver_to_semver(theirs) > comver_to_semver(ours):
        return theirs
    return ours


def merge_lockfile_changes(
    ours: Mapping[str, Any],
    theirs: Mapping[str, Any],
) -> dict[str, Any]:
    """Merge two canonical lockfile mappings into a new one.

    Raises:
        ValueError: a lockfileVersion cannot be expanded
    """
    result = deep_merge(
        {k: v for k, v in ours.items() if k not in ("importers", "packages")},
        {k: v for k, v in theirs.items() if k not in ("importers", "packages")},
    )

    version = _higher_lockfile_version(
        ours.get("lockfileVersion"), theirs.get("lockfileVersion"),
    )
    if version is not None:
        result["lockfileVersion"] = version

    result["importers"] = merge_dict(
        ours.get("importers"), theirs.get("importers"), _merge_snapshots,
    )

    if "packages" in ours or "packages" in theirs:
        result["packages"] = merge_dict(
            ours.get("packages"), theirs.get("packages"), _merge_entries,
        )

    return result
