"""Directory size totals and display formatting."""

from __future__ import annotations

import os
from pathlib import Path

_KIB = 1024
_MIB = 1024 * 1024


def directory_size(path: str | Path) -> int:
    """Return the total size in bytes of all files below ``path``.

    Missing or unreadable directories count as zero; unreadable entries are
    skipped rather than aborting the walk.
    """
    total = 0
    try:
        entries = list(os.scandir(path))
    except OSError:
        return 0

    for entry in entries:
        try:
            if entry.is_dir(follow_symlinks=False):
                total += directory_size(entry.path)
            elif entry.is_file(follow_symlinks=False):
                total += entry.stat(follow_symlinks=False).st_size
        except OSError:
            continue
    return total


def format_size(num_bytes: int) -> str:
    if num_bytes >= _MIB:
        whole = num_bytes // _MIB
        tenths = (num_bytes % _MIB) * 10 // _MIB
        return f"{whole}.{tenths} MB"
    if num_bytes >= _KIB:
        return f"{num_bytes // _KIB} KB"
    return f"{num_bytes} B"
