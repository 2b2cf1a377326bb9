"""
pnlock.cli.read_cmd — pnlock read command.

  pnlock read                          — pnpm-lock.yaml in pwd
  pnlock read -C packages/app          — another project
  pnlock read --wanted 5.4 --wanted 6.0
  pnlock read -o lock.normalized.yaml
"""

import sys
from pathlib import Path

import click
import yaml

from pnlock.config import ConfigError, apply_overrides, load_config
from pnlock.lockfile.errors import LockfileError
from pnlock.lockfile.read import LockfileReader
from pnlock.reporter import ClickReporter


@click.command("read")
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
@click.option("-o", "--output", default=None,
              help="Write to file instead of stdout")
@click.option("-q", "--quiet", is_flag=True, default=False,
              help="Only print warnings")
def read_cmd(project_dir, wanted_versions, ignore_incompatible,
             git_branch_lockfile, merge_git_branch_lockfiles, output, quiet):
    """Read, repair and print the wanted lockfile."""
    ws = Path(project_dir or ".").resolve()

    try:
        cfg = apply_overrides(
            load_config(ws), wanted_versions, ignore_incompatible,
            git_branch_lockfile, merge_git_branch_lockfiles,
        )
        reader = LockfileReader(reporter=ClickReporter(quiet=quiet))
        doc = reader.read_wanted(
            ws,
            wanted_versions=cfg.wanted_versions,
            ignore_incompatible=cfg.ignore_incompatible,
            use_git_branch_lockfile=cfg.git_branch_lockfile,
            merge_git_branch_lockfiles=cfg.merge_git_branch_lockfiles,
        )
    except LockfileError as e:
        click.echo(f"Error: {e}", err=True)
        if e.hint:
            click.echo(e.hint, err=True)
        sys.exit(1)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if doc is None:
        click.echo(f"No lockfile found in {ws}", err=True)
        sys.exit(1)

    text = yaml.dump(doc.to_dict(), default_flow_style=False, sort_keys=False)
    if output:
        Path(output).write_text(text)
        click.echo(f"Written: {output}", err=True)
    else:
        click.echo(text, nl=False)
