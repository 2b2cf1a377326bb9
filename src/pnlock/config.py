"""
pnlock.config — Read options from config files and the environment.

~/.pnlock/config.yaml (global) and <project>/.pnlock.yaml (project):

    wanted_versions:
      - "6.0"
    ignore_incompatible: false
    git_branch_lockfile: false
    merge_git_branch_lockfiles: false

Priority (low to high):
    global file → project file → PNLOCK_WANTED_VERSIONS → CLI flags
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from pnlock.constants import LOCKFILE_VERSION
from pnlock.lockfile.merger import deep_merge

PNLOCK_HOME = Path.home() / ".pnlock"
PROJECT_CONFIG = ".pnlock.yaml"
WANTED_VERSIONS_ENV = "PNLOCK_WANTED_VERSIONS"


class ConfigError(Exception):
    """Config file error."""
    pass


@dataclass
class ReadConfig:
    """Options for reading the wanted lockfile."""
    wanted_versions: list[str] = field(default_factory=lambda: [LOCKFILE_VERSION])
    ignore_incompatible: bool = False
    git_branch_lockfile: bool = False
    merge_git_branch_lockfiles: bool = False


def config_path() -> Path:
    return PNLOCK_HOME / "config.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with open(path) as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a YAML mapping: {path}")
    return data


def _wanted_from_env() -> list[str] | None:
    env = os.environ.get(WANTED_VERSIONS_ENV, "").strip()
    if not env:
        return None
    # Comma-separated: PNLOCK_WANTED_VERSIONS=5.4,6.0
    return [v.strip() for v in env.split(",") if v.strip()]


def _flag(data: dict[str, Any], key: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ConfigError(f"{key} must be true or false, got {value!r}")
    return value


def load_config(project_dir: str | Path | None = None) -> ReadConfig:
    """Build a ReadConfig from files and environment."""
    data = _load_yaml(config_path())
    if project_dir is not None:
        data = deep_merge(data, _load_yaml(Path(project_dir) / PROJECT_CONFIG))

    cfg = ReadConfig()
    wanted = data.get("wanted_versions")
    if wanted is not None:
        if not isinstance(wanted, list):
            raise ConfigError("wanted_versions must be a list")
        cfg.wanted_versions = [str(v) for v in wanted]
    cfg.ignore_incompatible = _flag(data, "ignore_incompatible")
    cfg.git_branch_lockfile = _flag(data, "git_branch_lockfile")
    cfg.merge_git_branch_lockfiles = _flag(data, "merge_git_branch_lockfiles")

    env_wanted = _wanted_from_env()
    if env_wanted is not None:
        cfg.wanted_versions = env_wanted

    return cfg


def apply_overrides(
    cfg: ReadConfig,
    wanted_versions: list[str] | tuple[str, ...] | None = None,
    ignore_incompatible: bool | None = None,
    git_branch_lockfile: bool | None = None,
    merge_git_branch_lockfiles: bool | None = None,
) -> ReadConfig:
    """Apply CLI flags on top of a loaded config (None = not given)."""
    if wanted_versions:
        cfg.wanted_versions = list(wanted_versions)
    if ignore_incompatible is not None:
        cfg.ignore_incompatible = ignore_incompatible
    if git_branch_lockfile is not None:
        cfg.git_branch_lockfile = git_branch_lockfile
    if merge_git_branch_lockfiles is not None:
        cfg.merge_git_branch_lockfiles = merge_git_branch_lockfiles
    return cfg
