"""
pnlock.lockfile.normalize — Schema normalization.

Two older on-disk layouts are brought to the canonical one:

1. Shared (flat) layout: a single-project lockfile with the
   dependency maps on the document root:

       lockfileVersion: 5.3
       specifiers: {foo: ^1.0.0}
       dependencies: {foo: 1.0.0}

   becomes

       lockfileVersion: 5.3
       importers:
         .:
           specifiers: {foo: ^1.0.0}
           dependencies: {foo: 1.0.0}

2. Inline-specifiers layout: each dependency entry carries its own
   specifier:

       dependencies:
         foo: {specifier: ^1.0.0, version: 1.0.0}

Both transforms return new mappings; their input is never modified.
"""

from __future__ import annotations

import copy
from typing import Any, Mapping

from pnlock.constants import (
    DEPENDENCIES_FIELDS, INLINE_SPECIFIERS_SUFFIX, ROOT_IMPORTER_ID,
)
from pnlock.lockfile.model import ABSENT, lookup


def is_shared_format(data: Mapping[str, Any]) -> bool:
    """True when the document has no importers mapping."""
    return lookup(data, "importers") in (ABSENT, None)


def normalize_lockfile(data: Mapping[str, Any]) -> dict[str, Any]:
    """Convert a parsed lockfile to the importers layout.

    Idempotent: a document that already has importers is returned
    as an equal copy.
    """
    result = copy.deepcopy(dict(data))
    if not is_shared_format(result):
        return result

    root: dict[str, Any] = {"specifiers": result.pop("specifiers", None) or {}}
    for key in ("dependenciesMeta", "publishDirectory"):
        value = lookup(result, key)
        if value is not ABSENT and value is not None:
            root[key] = copy.deepcopy(value)

    for dep_type in DEPENDENCIES_FIELDS:
        value = lookup(result, dep_type)
        if value is ABSENT:
            continue
        if value is not None:
            root[dep_type] = value
        del result[dep_type]

    result["importers"] = {ROOT_IMPORTER_ID: root}
    return result


def _has_inline_specifiers(snapshot: Mapping[str, Any]) -> bool:
    for dep_type in DEPENDENCIES_FIELDS:
        deps = snapshot.get(dep_type) or {}
        if not isinstance(deps, Mapping):
            continue
        if any(isinstance(v, Mapping) and "specifier" in v for v in deps.values()):
            return True
    return False


def is_inline_specifiers_format(data: Mapping[str, Any]) -> bool:
    if str(data.get("lockfileVersion", "")).endswith(INLINE_SPECIFIERS_SUFFIX):
        return True
    importers = data.get("importers") or {}
    if not isinstance(importers, Mapping):
        return False
    return any(
        isinstance(snap, Mapping) and _has_inline_specifiers(snap)
        for snap in importers.values()
    )


def _revert_snapshot(importer_id: str, snapshot: Mapping[str, Any]) -> dict[str, Any]:
    result = copy.deepcopy(dict(snapshot))
    existing = result.get("specifiers") or {}
    if not isinstance(existing, Mapping):
        raise ValueError(
            f"Project snapshot {importer_id} has invalid specifiers: {existing!r}"
        )
    specifiers: dict[str, Any] = dict(existing)

    for dep_type in DEPENDENCIES_FIELDS:
        deps = result.get(dep_type)
        if not deps or not isinstance(deps, Mapping):
            continue
        versions: dict[str, Any] = {}
        for name, entry in deps.items():
            if not isinstance(entry, Mapping):
                versions[name] = entry
                continue
            specifier = entry.get("specifier")
            if name in specifiers and specifiers[name] != specifier:
                raise ValueError(
                    f"Project snapshot {importer_id} has mismatched specifiers "
                    f"for {name}: {specifiers[name]!r} vs {specifier!r}"
                )
            specifiers[name] = specifier
            versions[name] = entry.get("version")
        result[dep_type] = versions

    result["specifiers"] = specifiers
    return result


def revert_inline_specifiers(data: Mapping[str, Any]) -> dict[str, Any]:
    """Move inline specifiers back into per-importer ``specifiers`` maps.

    Raises:
        ValueError: version token is not numeric, or one dependency
            name has two different specifiers
    """
    if not is_inline_specifiers_format(data):
        return copy.deepcopy(dict(data))

    result = copy.deepcopy(dict(data))
    token = result.get("lockfileVersion")
    if isinstance(token, str) and token.endswith(INLINE_SPECIFIERS_SUFFIX):
        original = token[: -len(INLINE_SPECIFIERS_SUFFIX)]
        try:
            float(original)
        except ValueError:
            raise ValueError(
                f"Unable to revert lockfile from inline specifiers format. "
                f"Invalid version parsed: {original}"
            ) from None
        result["lockfileVersion"] = original

    result["importers"] = {
        pid: _revert_snapshot(pid, snap) if isinstance(snap, Mapping) else snap
        for pid, snap in (result.get("importers") or {}).items()
    }
    return result
