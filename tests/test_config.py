"""
tests/test_config.py — Config file and environment tests.
"""

import os
import sys

import yaml
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import pnlock.config as config
from pnlock.config import ConfigError, ReadConfig, apply_overrides, load_config


@pytest.fixture(autouse=True)
def home(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "PNLOCK_HOME", tmp_path / "home")
    monkeypatch.delenv(config.WANTED_VERSIONS_ENV, raising=False)
    return tmp_path / "home"


def _write(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.dump(data, f)


class TestLoadConfig:
    def test_defaults(self, tmp_path):
        cfg = load_config(tmp_path)
        assert cfg == ReadConfig()
        assert cfg.wanted_versions == ["6.0"]
        assert not cfg.ignore_incompatible

    def test_global_file(self, home):
        _write(home / "config.yaml", {
            "wanted_versions": ["5.4", 6.0],
            "ignore_incompatible": True,
        })
        cfg = load_config()
        assert cfg.wanted_versions == ["5.4", "6.0"]
        assert cfg.ignore_incompatible

    def test_project_overrides_global(self, home, tmp_path):
        _write(home / "config.yaml", {
            "wanted_versions": ["5.4"],
            "git_branch_lockfile": True,
        })
        project = tmp_path / "project"
        _write(project / ".pnlock.yaml", {"wanted_versions": ["6.0"]})
        cfg = load_config(project)
        assert cfg.wanted_versions == ["6.0"]
        assert cfg.git_branch_lockfile

    def test_env_overrides_files(self, home, monkeypatch):
        _write(home / "config.yaml", {"wanted_versions": ["5.4"]})
        monkeypatch.setenv(config.WANTED_VERSIONS_ENV, "6.0, 6.1")
        assert load_config().wanted_versions == ["6.0", "6.1"]

    def test_not_a_mapping(self, home):
        home.mkdir(parents=True)
        (home / "config.yaml").write_text("- a\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config()

    def test_wanted_not_a_list(self, home):
        _write(home / "config.yaml", {"wanted_versions": "6.0"})
        with pytest.raises(ConfigError, match="list"):
            load_config()

    def test_string_flag_rejected(self, home):
        home.mkdir(parents=True)
        (home / "config.yaml").write_text('ignore_incompatible: "false"\n')
        with pytest.raises(ConfigError, match="ignore_incompatible"):
            load_config()

    def test_empty_flag_is_false(self, home):
        home.mkdir(parents=True)
        (home / "config.yaml").write_text("git_branch_lockfile:\n")
        assert not load_config().git_branch_lockfile

    def test_project_yaml_syntax_error(self, tmp_path):
        project = tmp_path / "project"
        project.mkdir()
        (project / ".pnlock.yaml").write_text("wanted_versions: [6.0\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(project)


class TestOverrides:
    def test_flags_win(self):
        cfg = apply_overrides(
            ReadConfig(), ("5.4",), ignore_incompatible=True,
            merge_git_branch_lockfiles=True,
        )
        assert cfg.wanted_versions == ["5.4"]
        assert cfg.ignore_incompatible
        assert cfg.merge_git_branch_lockfiles
        assert not cfg.git_branch_lockfile

    def test_unset_flags_keep_config(self):
        base = ReadConfig(wanted_versions=["5.4"], ignore_incompatible=True)
        cfg = apply_overrides(base, ())
        assert cfg.wanted_versions == ["5.4"]
        assert cfg.ignore_incompatible
