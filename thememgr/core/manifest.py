"""Animation manifest parsing and generation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from thememgr.core.constants import (
    ENTRY_TOKEN,
    MANIFEST_HEADER,
    MANIFEST_VERSION,
    SINGLE_MANIFEST_DEFAULTS,
)
from thememgr.errors import ErrorCode

logger = logging.getLogger(__name__)

# Larger files are treated as unreadable.
_MAX_MANIFEST_BYTES = 1024 * 1024


@dataclass(frozen=True, slots=True)
class ManifestSummary:
    """Validity of a manifest and how many animations it lists.

    ``error`` says why an invalid manifest was rejected and is ignored by
    equality.
    """

    valid: bool
    entry_count: int = 0
    error: ErrorCode | None = field(default=None, compare=False)

    def __iter__(self):
        return iter((self.valid, self.entry_count))


def parse_manifest(path: str | Path) -> ManifestSummary:
    """Validate the header of a manifest and count its ``Name:`` entries."""
    content, error = _load_manifest(Path(path))
    if content is None:
        return ManifestSummary(False, error=error)
    if MANIFEST_HEADER not in content:
        logger.debug("Manifest %s has no header line", path)
        return ManifestSummary(False, error=ErrorCode.MANIFEST_INVALID)
    return ManifestSummary(True, count_entries(content))


def count_entries(content: str) -> int:
    """Count ``Name:`` tokens at the start of the text or right after ``\\n``."""
    count = content.count("\n" + ENTRY_TOKEN)
    if content.startswith(ENTRY_TOKEN):
        count += 1
    return count


def first_entry_name(path: str | Path) -> str | None:
    """Return the value of the first line-leading ``Name:`` entry."""
    content, _error = _load_manifest(Path(path))
    if content is None:
        return None

    if content.startswith(ENTRY_TOKEN):
        start = len(ENTRY_TOKEN)
    else:
        index = content.find("\n" + ENTRY_TOKEN)
        if index < 0:
            return None
        start = index + 1 + len(ENTRY_TOKEN)

    end = content.find("\n", start)
    value = content[start:] if end < 0 else content[start:end]
    value = value.lstrip(" \t").rstrip("\r")
    return value or None


def render_single_manifest(name: str) -> str:
    """Build a one-entry manifest for an animation that ships without one."""
    lines = [
        MANIFEST_HEADER,
        f"Version: {MANIFEST_VERSION}",
        "",
        f"{ENTRY_TOKEN} {name}",
    ]
    lines.extend(f"{key}: {value}" for key, value in SINGLE_MANIFEST_DEFAULTS)
    return "\n".join(lines) + "\n"


def _load_manifest(path: Path) -> tuple[str | None, ErrorCode | None]:
    # Bytes are decoded directly so a lone "\r" is not taken as a line break.
    try:
        if path.stat().st_size > _MAX_MANIFEST_BYTES:
            logger.warning("Manifest %s exceeds %d bytes", path, _MAX_MANIFEST_BYTES)
            return None, ErrorCode.SIZE_OUT_OF_BOUNDS
        data = path.read_bytes()
    except FileNotFoundError:
        return None, ErrorCode.NOT_FOUND
    except OSError:
        return None, ErrorCode.OPEN_FAILED
    return data.decode("utf-8", errors="replace"), None
