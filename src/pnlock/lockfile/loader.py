"""pnlock.lockfile.loader — Raw lockfile reading."""

from __future__ import annotations

from pathlib import Path

BOM = "\ufeff"


def strip_bom(text: str) -> str:
    if text.startswith(BOM):
        return text[1:]
    return text


def load_raw(path: str | Path) -> str | None:
    """Read a lockfile as text.

    Returns:
        File content without a leading BOM, or None if the file
        does not exist. Other OS errors propagate.
    """
    try:
        with open(path, encoding="utf-8") as f:
            text = f.read()
    except FileNotFoundError:
        return None
    return strip_bom(text)
