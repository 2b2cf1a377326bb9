"""
pnlock.lockfile.model — Lockfile document types.

Canonical pnpm-lock.yaml layout (lockfileVersion 6):

    lockfileVersion: '6.0'
    importers:
      .:
        specifiers: {...}          # or inline {specifier, version}
        dependencies: {...}
        devDependencies: {...}
      packages/app:
        ...
    packages:
      /foo@1.0.0:
        resolution: {integrity: sha512-...}

Raw YAML mappings are only touched in the normalize/merge layer;
everything returned to callers is a LockfileDocument.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Mapping

from pnlock.constants import DEPENDENCIES_FIELDS


class Absent:
    """Marker for a field that is not present in the document.

    Distinct from ``None``: ``dependencies: null`` is present.
    """

    _instance: "Absent | None" = None

    def __new__(cls) -> "Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = Absent()


def lookup(data: Mapping[str, Any] | None, key: str) -> Any:
    """Return ``data[key]`` or ABSENT."""
    if not isinstance(data, Mapping) or key not in data:
        return ABSENT
    return data[key]


_SNAPSHOT_KEYS = (
    "specifiers", "dependenciesMeta", "publishDirectory",
) + DEPENDENCIES_FIELDS


@dataclass(frozen=True)
class ProjectSnapshot:
    """One importer (workspace project) entry."""
    specifiers: dict[str, Any] = field(default_factory=dict)
    dependencies: dict[str, Any] | None = None
    dev_dependencies: dict[str, Any] | None = None
    optional_dependencies: dict[str, Any] | None = None
    dependencies_meta: dict[str, Any] | None = None
    publish_directory: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def dependency_fields(self) -> dict[str, dict[str, Any]]:
        """Present dependency maps keyed by their lockfile field name."""
        fields = {
            "optionalDependencies": self.optional_dependencies,
            "dependencies": self.dependencies,
            "devDependencies": self.dev_dependencies,
        }
        return {k: v for k, v in fields.items() if v is not None}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> ProjectSnapshot:
        data = data or {}
        if not isinstance(data, Mapping):
            raise ValueError(f"importer entry must be a mapping, got {type(data).__name__}")
        return cls(
            specifiers=copy.deepcopy(data.get("specifiers") or {}),
            dependencies=copy.deepcopy(data.get("dependencies")),
            dev_dependencies=copy.deepcopy(data.get("devDependencies")),
            optional_dependencies=copy.deepcopy(data.get("optionalDependencies")),
            dependencies_meta=copy.deepcopy(data.get("dependenciesMeta")),
            publish_directory=data.get("publishDirectory"),
            extra={
                k: copy.deepcopy(v) for k, v in data.items()
                if k not in _SNAPSHOT_KEYS
            },
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"specifiers": copy.deepcopy(self.specifiers)}
        for name in DEPENDENCIES_FIELDS:
            value = self.dependency_fields().get(name)
            if value is not None:
                data[name] = copy.deepcopy(value)
        if self.dependencies_meta is not None:
            data["dependenciesMeta"] = copy.deepcopy(self.dependencies_meta)
        if self.publish_directory is not None:
            data["publishDirectory"] = self.publish_directory
        data.update(copy.deepcopy(self.extra))
        return data


@dataclass(frozen=True)
class LockfileDocument:
    """A parsed, canonical-schema lockfile."""
    lockfile_version: Any = None
    importers: dict[str, ProjectSnapshot] = field(default_factory=dict)
    packages: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def format_version(self) -> str:
        """The format-version token as text ("0" when missing)."""
        if self.lockfile_version is None:
            return "0"
        return str(self.lockfile_version)

    @property
    def root(self) -> ProjectSnapshot | None:
        return self.importers.get(".")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LockfileDocument:
        """Build from a canonical-schema mapping (see normalize_lockfile)."""
        importers = lookup(data, "importers")
        if not isinstance(importers, Mapping):
            raise ValueError("lockfile has no importers mapping")
        packages = data.get("packages")
        return cls(
            lockfile_version=data.get("lockfileVersion"),
            importers={
                str(pid): ProjectSnapshot.from_dict(snap)
                for pid, snap in importers.items()
            },
            packages=copy.deepcopy(packages) if packages is not None else None,
            extra={
                k: copy.deepcopy(v) for k, v in data.items()
                if k not in ("lockfileVersion", "importers", "packages")
            },
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.lockfile_version is not None:
            data["lockfileVersion"] = self.lockfile_version
        data.update(copy.deepcopy(self.extra))
        data["importers"] = {
            pid: snap.to_dict() for pid, snap in self.importers.items()
        }
        if self.packages is not None:
            data["packages"] = copy.deepcopy(self.packages)
        return data


@dataclass(frozen=True)
class CandidatePath:
    """A lockfile location; lower rank is tried first."""
    path: str
    rank: int = 0


@dataclass(frozen=True)
class ReadOutcome:
    """Result of one read: document (or None) and whether conflicts were fixed."""
    document: LockfileDocument | None
    had_conflicts: bool = False
    lockfile_path: str | None = None
