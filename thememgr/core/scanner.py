"""Discover and classify animation packs on the storage volume."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from thememgr.core.constants import (
    ANIMS_DIRNAME,
    MANIFEST_FILENAME,
    MAX_NAME_LEN,
    MAX_PACKAGES,
    META_FILENAME,
)
from thememgr.core.models import PackageVariant, ScanResult, ThemePackage

logger = logging.getLogger(__name__)


def classify_directory(pack_dir: Path) -> PackageVariant | None:
    """Return the layout of ``pack_dir``; the first matching rule wins."""
    if (pack_dir / MANIFEST_FILENAME).is_file():
        return PackageVariant.PACK
    if (pack_dir / ANIMS_DIRNAME / MANIFEST_FILENAME).is_file():
        return PackageVariant.ANIMS_PACK
    if (pack_dir / META_FILENAME).is_file():
        return PackageVariant.SINGLE
    return None


class PackageScanner:
    """Lists the packs below a root directory in enumeration order."""

    def __init__(
        self,
        root: str | Path,
        backup_dir: str | Path | None = None,
        *,
        max_packages: int = MAX_PACKAGES,
    ) -> None:
        self._root = Path(root)
        self._backup_dir = Path(backup_dir) if backup_dir is not None else None
        self._max_packages = max_packages

    @property
    def root(self) -> Path:
        return self._root

    def scan(self) -> ScanResult:
        has_backup = self._backup_dir is not None and self._backup_dir.is_dir()

        if not self._root.is_dir():
            logger.warning("Directory %s not found", self._root)
            return ScanResult(root_present=False, has_backup=has_backup)

        packages: list[ThemePackage] = []
        try:
            with os.scandir(self._root) as entries:
                for entry in entries:
                    if len(packages) >= self._max_packages:
                        logger.warning(
                            "Package limit of %d reached in %s; remaining folders ignored",
                            self._max_packages,
                            self._root,
                        )
                        break
                    package = self._classify_entry(entry)
                    if package is not None:
                        packages.append(package)
        except OSError as exc:
            logger.error("Failed to open %s: %s", self._root, exc)

        logger.info(
            "Total: %d themes, backup: %s", len(packages), "yes" if has_backup else "no"
        )
        return ScanResult(
            packages=tuple(packages),
            root_present=True,
            has_backup=has_backup,
        )

    def _classify_entry(self, entry: os.DirEntry) -> ThemePackage | None:
        try:
            if not entry.is_dir():
                return None
            if entry.is_symlink():
                logger.warning("Skipping symlinked folder %s", entry.name)
                return None
        except OSError:
            return None

        if len(entry.name) > MAX_NAME_LEN - 1:
            logger.warning("Skipping %s (name longer than %d)", entry.name, MAX_NAME_LEN - 1)
            return None

        pack_dir = Path(entry.path)
        variant = classify_directory(pack_dir)
        if variant is None:
            logger.warning("Skipping %s (unknown format)", entry.name)
            return None

        logger.info("[%s] %s", variant.type_label, entry.name)
        return ThemePackage(name=entry.name, variant=variant, source_dir=pack_dir)
