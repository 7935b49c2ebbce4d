"""Parse animation ``meta.txt`` descriptors."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from thememgr.core.constants import MAX_BITMAP_HEIGHT, MAX_BITMAP_WIDTH

logger = logging.getLogger(__name__)

_INT_RE = re.compile(r"[ \t]*([+-]?[0-9]+)")
_MAX_META_BYTES = 64 * 1024


def parse_dimensions(path: str | Path) -> tuple[int, int] | None:
    """Return ``(width, height)`` from a descriptor, or None.

    Both fields must be present and in range; there is no partial result.
    """
    content = _read_descriptor(Path(path))
    if content is None:
        return None

    width = _parse_field(content, "Width:", MAX_BITMAP_WIDTH)
    height = _parse_field(content, "Height:", MAX_BITMAP_HEIGHT)
    if width is None or height is None:
        logger.debug("Rejected descriptor %s (width=%s height=%s)", path, width, height)
        return None
    return width, height


def _parse_field(content: str, token: str, upper: int) -> int | None:
    index = content.find(token)
    if index < 0:
        return None
    match = _INT_RE.match(content, index + len(token))
    if match is None:
        return None
    value = int(match.group(1))
    if not 1 <= value <= upper:
        return None
    return value


def _read_descriptor(path: Path) -> str | None:
    try:
        if path.stat().st_size > _MAX_META_BYTES:
            return None
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None
