"""
pnlock.reporter — Warning/notice output.

The reader never prints on its own; it reports through a Reporter
passed in by the caller:

    reader = LockfileReader(reporter=ClickReporter())

ClickReporter writes to stderr (stdout stays clean for YAML output),
CollectingReporter keeps messages in memory.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

import click


class Reporter(Protocol):
    def warn(self, message: str, prefix: str) -> None: ...

    def info(self, message: str, prefix: str) -> None: ...


class ClickReporter:
    """Print notices to stderr."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet

    def warn(self, message: str, prefix: str) -> None:
        click.echo(f"WARN  {prefix}  {message}", err=True)

    def info(self, message: str, prefix: str) -> None:
        if self.quiet:
            return
        click.echo(f"{prefix}  {message}", err=True)


@dataclass
class ReportRecord:
    level: str
    message: str
    prefix: str


@dataclass
class CollectingReporter:
    """Keep every notice in memory."""
    records: list[ReportRecord] = field(default_factory=list)

    def warn(self, message: str, prefix: str) -> None:
        self.records.append(ReportRecord("warn", message, prefix))

    def info(self, message: str, prefix: str) -> None:
        self.records.append(ReportRecord("info", message, prefix))

    @property
    def warnings(self) -> list[str]:
        return [r.message for r in self.records if r.level == "warn"]

    @property
    def infos(self) -> list[str]:
        return [r.message for r in self.records if r.level == "info"]
