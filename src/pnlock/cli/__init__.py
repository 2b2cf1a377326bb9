"""
pnlock.cli — CLI entry point.

Commands:
  pnlock read [flags]    — Print the normalized lockfile as YAML
  pnlock check [flags]   — Show lockfile info and compatibility verdict
"""

import click

from pnlock.cli.read_cmd import read_cmd
from pnlock.cli.check_cmd import check_cmd


@click.group()
@click.version_option(package_name="pnlock")
def main():
    """pnlock — Read pnpm lockfiles."""
    pass


main.add_command(read_cmd, "read")
main.add_command(check_cmd, "check")
