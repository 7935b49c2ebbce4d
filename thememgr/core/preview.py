"""Locate and decode the first frame of a pack's first animation."""

from __future__ import annotations

import logging
from pathlib import Path

from thememgr.core.bitmap import decode_frame, read_frame_file
from thememgr.core.constants import (
    ANIMS_DIRNAME,
    FIRST_FRAME_FILENAME,
    MANIFEST_FILENAME,
    META_FILENAME,
)
from thememgr.core.fsops import is_plain_name
from thememgr.core.manifest import first_entry_name
from thememgr.core.meta import parse_dimensions
from thememgr.core.models import DecodedBitmap, PackageVariant, ThemePackage

logger = logging.getLogger(__name__)


def animation_dir(package: ThemePackage) -> Path | None:
    """Return the folder holding the first animation's descriptor and frames."""
    match package.variant:
        case PackageVariant.SINGLE:
            return package.source_dir
        case PackageVariant.PACK:
            return _first_entry_dir(package.source_dir)
        case PackageVariant.ANIMS_PACK:
            return _first_entry_dir(package.source_dir / ANIMS_DIRNAME)
    return None


def _first_entry_dir(manifest_dir: Path) -> Path | None:
    entry = first_entry_name(manifest_dir / MANIFEST_FILENAME)
    if entry is None:
        return None
    if not is_plain_name(entry):
        logger.warning("Ignoring manifest entry %r in %s", entry, manifest_dir)
        return None
    return manifest_dir / entry


class PreviewLoader:
    """Builds a preview bitmap for a package, or None when anything is missing."""

    def load(self, package: ThemePackage) -> DecodedBitmap | None:
        anim_dir = animation_dir(package)
        if anim_dir is None:
            return None

        dimensions = parse_dimensions(anim_dir / META_FILENAME)
        if dimensions is None:
            return None
        width, height = dimensions

        data = read_frame_file(anim_dir / FIRST_FRAME_FILENAME)
        if data is None:
            return None

        bitmap = decode_frame(data, width, height)
        if bitmap is None:
            logger.debug("No preview for %s", package.name)
        return bitmap
