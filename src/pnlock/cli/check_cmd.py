"""
pnlock.cli.check_cmd — pnlock check command.

Shows which lockfile was picked, its format version, size and
whether it is usable with the wanted format versions. Honors the
same config and flags as ``pnlock read``.
"""

import sys
from pathlib import Path

import click

from pnlock.config import ConfigError, apply_overrides, load_config
from pnlock.lockfile.errors import LockfileBreakingChangeError, LockfileError
from pnlock.lockfile.read import LockfileReader
from pnlock.reporter import CollectingReporter


@click.command("check")
@click.option("-C", "--dir", "project_dir", default=None,
              help="Project directory (default: pwd)")
@click.option("--wanted", "wanted_versions", multiple=True,
              help="Acceptable lockfile format version (repeatable)")
@click.option("--ignore-incompatible/--no-ignore-incompatible", default=None,
              help="Skip a lockfile with an incompatible major version")
@click.option("--git-branch-lockfile/--no-git-branch-lockfile", default=None,
              help="Prefer pnpm-lock.<branch>.yaml")
@click.option("--merge-git-branch-lockfiles/--no-merge-git-branch-lockfiles",
              default=None, help="Merge all branch lockfiles into the result")
def check_cmd(project_dir, wanted_versions, ignore_incompatible,
              git_branch_lockfile, merge_git_branch_lockfiles):
    """Check the wanted lockfile against the wanted format versions."""
    ws = Path(project_dir or ".").resolve()

    try:
        cfg = apply_overrides(
            load_config(ws), wanted_versions, ignore_incompatible,
            git_branch_lockfile, merge_git_branch_lockfiles,
        )
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    reporter = CollectingReporter()
    reader = LockfileReader(reporter=reporter)

    try:
        outcome = reader.read_wanted_and_autofix_conflicts(
            ws,
            wanted_versions=cfg.wanted_versions,
            ignore_incompatible=cfg.ignore_incompatible,
            use_git_branch_lockfile=cfg.git_branch_lockfile,
            merge_git_branch_lockfiles=cfg.merge_git_branch_lockfiles,
        )
    except LockfileBreakingChangeError as e:
        click.echo(f"✗ INCOMPATIBLE: {e.lockfile_path}")
        click.echo(f"  wanted: {', '.join(cfg.wanted_versions)}")
        click.echo(f"  {e.hint}")
        sys.exit(1)
    except LockfileError as e:
        click.echo(f"Error: {e}", err=True)
        if e.hint:
            click.echo(e.hint, err=True)
        sys.exit(1)

    doc = outcome.document
    if doc is None:
        for message in reporter.warnings:
            click.echo(f"⚠ {message}")
        click.echo(f"No lockfile found in {ws}")
        return

    click.echo(f"Lockfile:   {outcome.lockfile_path}")
    click.echo(f"Version:    {doc.format_version}")
    click.echo(f"Importers:  {len(doc.importers)}")
    click.echo(f"Packages:   {len(doc.packages or {})}")
    if outcome.had_conflicts:
        click.echo("Conflicts:  merge conflicts resolved (not written back)")

    click.echo()
    if reporter.warnings:
        for message in reporter.warnings:
            click.echo(f"⚠ {message}")
    else:
        click.echo(f"✓ Compatible with {', '.join(cfg.wanted_versions) or 'any version'}")
