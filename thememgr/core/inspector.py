"""Build display details for a selected package."""

from __future__ import annotations

import logging

from thememgr.core.constants import ANIMS_DIRNAME, MANIFEST_FILENAME
from thememgr.core.manifest import parse_manifest
from thememgr.core.models import PackageInfo, PackageVariant, ThemePackage
from thememgr.core.preview import PreviewLoader
from thememgr.core.sizes import directory_size

logger = logging.getLogger(__name__)


def animation_count(package: ThemePackage) -> int:
    """Number of animations in a package; 0 when its manifest is invalid."""
    match package.variant:
        case PackageVariant.PACK:
            summary = parse_manifest(package.source_dir / MANIFEST_FILENAME)
        case PackageVariant.ANIMS_PACK:
            summary = parse_manifest(package.source_dir / ANIMS_DIRNAME / MANIFEST_FILENAME)
        case PackageVariant.SINGLE:
            return 1
    if not summary.valid:
        logger.debug("No animation count for %s (%s)", package.name, summary.error.name)
        return 0
    return summary.entry_count


class PackageInspector:
    """Computes PackageInfo on demand; nothing is cached between calls."""

    def __init__(self, preview_loader: PreviewLoader | None = None) -> None:
        self._preview_loader = preview_loader or PreviewLoader()

    def inspect(self, package: ThemePackage, *, with_preview: bool = True) -> PackageInfo:
        preview = self._preview_loader.load(package) if with_preview else None
        return PackageInfo(
            name=package.name,
            variant=package.variant,
            type_label=package.variant.type_label,
            animation_count=animation_count(package),
            size_bytes=directory_size(package.source_dir),
            preview=preview,
        )
