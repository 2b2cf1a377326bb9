"""
tests/test_git.py — Git branch lockfile naming tests.
"""

import os
import sys
import shutil
import subprocess

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from pnlock.git import branch_lockfile_name, current_branch, list_branch_lockfiles


class TestNaming:
    def test_branch_name(self):
        assert branch_lockfile_name("main") == "pnpm-lock.main.yaml"

    def test_slashes_replaced(self):
        assert branch_lockfile_name("feature/a/b") == "pnpm-lock.feature!a!b.yaml"

    def test_no_branch(self):
        assert branch_lockfile_name(None) == "pnpm-lock.yaml"
        assert branch_lockfile_name("") == "pnpm-lock.yaml"

    def test_list_branch_lockfiles(self, tmp_path):
        for name in ("pnpm-lock.yaml", "pnpm-lock.b.yaml", "pnpm-lock.a.yaml", "other.yaml"):
            (tmp_path / name).write_text("{}\n")
        assert [p.name for p in list_branch_lockfiles(tmp_path)] == [
            "pnpm-lock.a.yaml", "pnpm-lock.b.yaml",
        ]


class TestCurrentBranch:
    def test_not_a_repository(self, tmp_path):
        assert current_branch(tmp_path) is None

    @pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
    def test_repository(self, tmp_path):
        subprocess.run(
            ["git", "init", "-q", "-b", "feature/x"],
            cwd=tmp_path, check=True,
        )
        assert current_branch(tmp_path) == "feature/x"
