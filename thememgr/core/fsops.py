"""Filesystem primitives used by the apply engine.

Every helper raises ThemeManagerError with a specific code so the engine can
report which step failed.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from thememgr.errors import ErrorCode, ThemeManagerError


def rename_dir(src: Path, dst: Path) -> None:
    """Move ``src`` to ``dst`` with a single rename; no copy fallback."""
    try:
        os.rename(src, dst)
    except OSError as exc:
        raise ThemeManagerError(
            ErrorCode.RENAME_FAILED,
            path=src,
            details={"destination": str(dst), "original": str(exc)},
        ) from exc


def remove_tree(path: Path) -> None:
    """Delete ``path`` and everything below it.

    A file or symlink at ``path`` is unlinked; a symlink is never followed.
    """
    try:
        if path.is_symlink() or not path.is_dir():
            path.unlink()
        else:
            shutil.rmtree(path)
    except FileNotFoundError as exc:
        raise ThemeManagerError(
            ErrorCode.NOT_FOUND, path=path, details={"original": str(exc)}
        ) from exc
    except OSError as exc:
        raise ThemeManagerError(
            ErrorCode.RECURSIVE_DELETE_FAILED, path=path, details={"original": str(exc)}
        ) from exc


def ensure_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ThemeManagerError(
            ErrorCode.MKDIR_FAILED, path=path, details={"original": str(exc)}
        ) from exc


def merge_tree(src: Path, dst: Path) -> None:
    """Copy ``src`` into ``dst`` recursively.

    Files present in both are overwritten, files only in ``dst`` are kept.
    """
    if not src.is_dir():
        raise ThemeManagerError(ErrorCode.NOT_FOUND, path=src)
    try:
        shutil.copytree(src, dst, dirs_exist_ok=True)
    except shutil.Error as exc:
        failures = exc.args[0] if exc.args else []
        raise ThemeManagerError(
            ErrorCode.MERGE_FAILED,
            path=src,
            details={"destination": str(dst), "failed_files": len(failures)},
        ) from exc
    except OSError as exc:
        raise ThemeManagerError(
            ErrorCode.MERGE_FAILED,
            path=src,
            details={"destination": str(dst), "original": str(exc)},
        ) from exc


def write_text_file(path: Path, content: str) -> None:
    """Write ``content`` to ``path``, replacing any existing file."""
    encoded = content.encode("utf-8")
    try:
        handle = open(path, "wb")
    except OSError as exc:
        raise ThemeManagerError(
            ErrorCode.OPEN_FAILED, path=path, details={"original": str(exc)}
        ) from exc
    with handle:
        try:
            written = handle.write(encoded)
        except OSError as exc:
            raise ThemeManagerError(
                ErrorCode.WRITE_INCOMPLETE, path=path, details={"original": str(exc)}
            ) from exc
    if written != len(encoded):
        raise ThemeManagerError(
            ErrorCode.WRITE_INCOMPLETE,
            path=path,
            details={"written": written, "expected": len(encoded)},
        )


def is_plain_name(name: str) -> bool:
    """True when ``name`` names a direct child folder and nothing else."""
    if not name or name in (".", ".."):
        return False
    return "/" not in name and "\\" not in name and "\x00" not in name
