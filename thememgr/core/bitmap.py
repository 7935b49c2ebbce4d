"""Decode ``.bm`` animation frames into packed 1-bpp bitmaps.

A frame file starts with a one byte flag. ``0x00`` means the packed bitmap
follows verbatim. ``0x01`` is followed by a reserved byte, a little-endian
``uint16`` payload size and a heatshrink stream (window 2^8, lookahead 2^4)
that inflates to the packed bitmap.
"""

from __future__ import annotations

import logging
import struct
from pathlib import Path

import heatshrink2

from thememgr.core.constants import (
    HEATSHRINK_LOOKAHEAD_SZ2,
    HEATSHRINK_WINDOW_SZ2,
    MAX_BITMAP_HEIGHT,
    MAX_BITMAP_WIDTH,
    MAX_FRAME_BYTES,
    MIN_FRAME_BYTES,
)
from thememgr.core.models import DecodedBitmap, packed_row_bytes
from thememgr.errors import ErrorCode, ThemeManagerError

logger = logging.getLogger(__name__)

FLAG_RAW = 0x00
FLAG_HEATSHRINK = 0x01
_COMPRESSED_HEADER = struct.Struct("<BBH")


def frame_size_in_bounds(size: int) -> bool:
    return MIN_FRAME_BYTES <= size <= MAX_FRAME_BYTES


def decode_frame(data: bytes, width: int, height: int) -> DecodedBitmap | None:
    """Decode one frame, returning None on any failure."""
    try:
        return DecodedBitmap(width, height, _decode_payload(data, width, height))
    except ThemeManagerError as exc:
        logger.debug("Frame decode failed: %s (%s)", exc.code.name, exc.details)
        return None


def read_frame_file(path: str | Path) -> bytes | None:
    """Read a frame file if its size is within the decodable bounds."""
    path = Path(path)
    try:
        size = path.stat().st_size
    except OSError:
        return None
    if not frame_size_in_bounds(size):
        logger.debug("Frame %s is %d bytes, outside bounds", path, size)
        return None
    try:
        data = path.read_bytes()
    except OSError:
        return None
    if len(data) != size:
        return None
    return data


def _decode_payload(data: bytes, width: int, height: int) -> bytes:
    if not frame_size_in_bounds(len(data)):
        raise ThemeManagerError(
            ErrorCode.SIZE_OUT_OF_BOUNDS, details={"length": len(data)}
        )
    if not (1 <= width <= MAX_BITMAP_WIDTH and 1 <= height <= MAX_BITMAP_HEIGHT):
        raise ThemeManagerError(
            ErrorCode.SIZE_OUT_OF_BOUNDS, details={"width": width, "height": height}
        )

    expected = packed_row_bytes(width) * height
    flag = data[0]

    if flag == FLAG_RAW:
        payload = bytes(data[1:])
    elif flag == FLAG_HEATSHRINK:
        payload = _inflate(data, expected)
    else:
        raise ThemeManagerError(ErrorCode.DECODE_FAILED, details={"flag": flag})

    if len(payload) != expected:
        raise ThemeManagerError(
            ErrorCode.DECODE_FAILED,
            details={"decoded": len(payload), "expected": expected},
        )
    return payload


def _inflate(data: bytes, expected: int) -> bytes:
    if len(data) <= _COMPRESSED_HEADER.size:
        raise ThemeManagerError(ErrorCode.DECODE_FAILED, details={"length": len(data)})
    _flag, _reserved, declared = _COMPRESSED_HEADER.unpack_from(data)
    stream = data[_COMPRESSED_HEADER.size:]
    if declared == 0 or declared > len(stream):
        raise ThemeManagerError(
            ErrorCode.READ_INCOMPLETE,
            details={"declared": declared, "available": len(stream)},
        )
    try:
        inflated = heatshrink2.decompress(
            bytes(stream[:declared]),
            window_sz2=HEATSHRINK_WINDOW_SZ2,
            lookahead_sz2=HEATSHRINK_LOOKAHEAD_SZ2,
        )
    except Exception as exc:
        raise ThemeManagerError(
            ErrorCode.DECODE_FAILED, details={"original": str(exc)}
        ) from exc
    if len(inflated) > expected:
        raise ThemeManagerError(
            ErrorCode.DECODE_FAILED,
            details={"overrun": len(inflated) - expected},
        )
    return bytes(inflated)
