"""
tests/test_cli.py — CLI tests.

Tests commands using Click CliRunner.
"""

import os
import sys
import shutil
import tempfile

import yaml
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from click.testing import CliRunner

import pnlock.config as config
from pnlock.cli import main


@pytest.fixture(autouse=True)
def clean_config(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "PNLOCK_HOME", tmp_path / "home")
    monkeypatch.delenv(config.WANTED_VERSIONS_ENV, raising=False)


runner = CliRunner()


def _make_workspace(files: dict[str, str | dict]) -> str:
    tmpdir = tempfile.mkdtemp()
    for name, content in files.items():
        with open(os.path.join(tmpdir, name), "w") as f:
            if isinstance(content, dict):
                yaml.dump(content, f)
            else:
                f.write(content)
    return tmpdir


def _lockfile(version: str) -> dict:
    return {
        "lockfileVersion": version,
        "importers": {
            ".": {
                "specifiers": {"foo": "^1.0.0"},
                "dependencies": {"foo": "1.0.0"},
            },
        },
        "packages": {"/foo@1.0.0": {"dev": False}},
    }


LEGACY = (
    "lockfileVersion: '6.0'\n"
    "specifiers:\n"
    "  foo: ^1.0.0\n"
    "dependencies:\n"
    "  foo: 1.0.0\n"
)


# ─────────────────────────────────────────────
# READ
# ─────────────────────────────────────────────
class TestRead:
    def test_read_canonical(self):
        ws = _make_workspace({"pnpm-lock.yaml": _lockfile("6.0")})
        result = runner.invoke(main, ["read", "-C", ws])
        assert result.exit_code == 0
        assert yaml.safe_load(result.output) == _lockfile("6.0")
        shutil.rmtree(ws)

    def test_read_legacy(self):
        ws = _make_workspace({"pnpm-lock.yaml": LEGACY})
        result = runner.invoke(main, ["read", "-C", ws])
        assert result.exit_code == 0
        data = yaml.safe_load(result.output)
        assert data["importers"]["."]["dependencies"] == {"foo": "1.0.0"}
        assert "dependencies" not in data
        shutil.rmtree(ws)

    def test_read_to_file(self):
        ws = _make_workspace({"pnpm-lock.yaml": _lockfile("6.0")})
        out = os.path.join(ws, "out.yaml")
        result = runner.invoke(main, ["read", "-C", ws, "-o", out])
        assert result.exit_code == 0
        with open(out) as f:
            assert yaml.safe_load(f) == _lockfile("6.0")
        shutil.rmtree(ws)

    def test_read_missing(self):
        ws = _make_workspace({})
        result = runner.invoke(main, ["read", "-C", ws])
        assert result.exit_code == 1
        assert "No lockfile found" in result.output
        shutil.rmtree(ws)

    def test_read_incompatible(self):
        ws = _make_workspace({"pnpm-lock.yaml": _lockfile("7.0")})
        result = runner.invoke(main, ["read", "-C", ws, "--wanted", "6.0"])
        assert result.exit_code == 1
        assert "not compatible" in result.output
        shutil.rmtree(ws)

    def test_read_ignore_incompatible(self):
        ws = _make_workspace({"pnpm-lock.yaml": _lockfile("7.0")})
        result = runner.invoke(main, [
            "read", "-C", ws, "--wanted", "6.0", "--ignore-incompatible",
        ])
        assert result.exit_code == 1
        assert "Ignoring not compatible lockfile" in result.output
        assert "No lockfile found" in result.output
        shutil.rmtree(ws)

    def test_read_broken(self):
        ws = _make_workspace({"pnpm-lock.yaml": "importers: [unclosed\n"})
        result = runner.invoke(main, ["read", "-C", ws])
        assert result.exit_code == 1
        assert "is broken" in result.output
        shutil.rmtree(ws)

    def test_read_invalid_wanted(self):
        ws = _make_workspace({"pnpm-lock.yaml": _lockfile("6.0")})
        result = runner.invoke(main, ["read", "-C", ws, "--wanted", "six"])
        assert result.exit_code == 1
        assert "Invalid wanted lockfile version" in result.output
        assert "is broken" not in result.output
        shutil.rmtree(ws)

    def test_read_wanted_from_env(self, monkeypatch):
        monkeypatch.setenv(config.WANTED_VERSIONS_ENV, "7.0")
        ws = _make_workspace({"pnpm-lock.yaml": _lockfile("7.0")})
        result = runner.invoke(main, ["read", "-C", ws])
        assert result.exit_code == 0
        shutil.rmtree(ws)


# ─────────────────────────────────────────────
# CHECK
# ─────────────────────────────────────────────
class TestCheck:
    def test_check_compatible(self):
        ws = _make_workspace({"pnpm-lock.yaml": _lockfile("6.0")})
        result = runner.invoke(main, ["check", "-C", ws])
        assert result.exit_code == 0
        assert "Version:    6.0" in result.output
        assert "Importers:  1" in result.output
        assert "Packages:   1" in result.output
        assert "✓ Compatible with 6.0" in result.output
        shutil.rmtree(ws)

    def test_check_newer(self):
        ws = _make_workspace({"pnpm-lock.yaml": _lockfile("6.2")})
        result = runner.invoke(main, ["check", "-C", ws, "--wanted", "6.0"])
        assert result.exit_code == 0
        assert "⚠" in result.output
        assert "newer version" in result.output
        shutil.rmtree(ws)

    def test_check_incompatible(self):
        ws = _make_workspace({"pnpm-lock.yaml": _lockfile("7.0")})
        result = runner.invoke(main, ["check", "-C", ws, "--wanted", "6.0"])
        assert result.exit_code == 1
        assert "INCOMPATIBLE" in result.output
        shutil.rmtree(ws)

    def test_check_ignore_incompatible(self):
        ws = _make_workspace({"pnpm-lock.yaml": _lockfile("7.0")})
        result = runner.invoke(main, [
            "check", "-C", ws, "--wanted", "6.0", "--ignore-incompatible",
        ])
        assert result.exit_code == 0
        assert "Ignoring not compatible lockfile" in result.output
        assert "No lockfile found" in result.output
        shutil.rmtree(ws)

    def test_check_ignore_incompatible_from_config(self):
        ws = _make_workspace({
            "pnpm-lock.yaml": _lockfile("7.0"),
            ".pnlock.yaml": {"wanted_versions": ["6.0"], "ignore_incompatible": True},
        })
        result = runner.invoke(main, ["check", "-C", ws])
        assert result.exit_code == 0
        assert "INCOMPATIBLE" not in result.output
        assert "No lockfile found" in result.output
        shutil.rmtree(ws)

    def test_check_invalid_wanted(self):
        ws = _make_workspace({"pnpm-lock.yaml": _lockfile("6.0")})
        result = runner.invoke(main, ["check", "-C", ws, "--wanted", "six"])
        assert result.exit_code == 1
        assert "Invalid wanted lockfile version" in result.output
        shutil.rmtree(ws)

    def test_check_missing(self):
        ws = _make_workspace({})
        result = runner.invoke(main, ["check", "-C", ws])
        assert result.exit_code == 0
        assert "No lockfile found" in result.output
        shutil.rmtree(ws)

    def test_check_conflicts(self):
        ws = _make_workspace({
            "pnpm-lock.yaml": (
                "lockfileVersion: '6.0'\n"
                "importers:\n"
                "  .:\n"
                "    specifiers:\n"
                "<<<<<<< HEAD\n"
                "      foo: ^1.0.0\n"
                "=======\n"
                "      foo: ^1.1.0\n"
                ">>>>>>> feature\n"
            ),
        })
        result = runner.invoke(main, ["check", "-C", ws])
        assert result.exit_code == 0
        assert "merge conflicts resolved" in result.output
        shutil.rmtree(ws)
