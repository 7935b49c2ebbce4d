"""Apply, restore and delete animation packs.

The engine owns the location of the active animation folder and its single
backup slot. Applying a pack first renames the active folder to the backup
slot, then merges the pack into a fresh active folder. Restoring swaps the
backup back in. Callers never touch either path directly.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from thememgr.core import fsops
from thememgr.core.constants import (
    ACTIVE_DIRNAME,
    ANIMS_DIRNAME,
    BACKUP_DIRNAME,
    MANIFEST_FILENAME,
    PACKS_DIRNAME,
)
from thememgr.core.manifest import render_single_manifest
from thememgr.core.models import (
    OperationResult,
    OperationStage,
    PackageVariant,
    ScanResult,
    ThemePackage,
)
from thememgr.core.scanner import PackageScanner
from thememgr.errors import ErrorCode, ThemeManagerError, classify_exception

if TYPE_CHECKING:
    from thememgr.config.settings import AppSettings

logger = logging.getLogger(__name__)


class ApplyEngine:
    """Backup-then-merge application of packs with a one-slot undo."""

    def __init__(self, packs_root: str | Path, active_dir: str | Path,
                 backup_dir: str | Path) -> None:
        self._packs_root = Path(packs_root)
        self._active_dir = Path(active_dir)
        self._backup_dir = Path(backup_dir)

    @classmethod
    def for_storage_root(cls, storage_root: str | Path) -> ApplyEngine:
        root = Path(storage_root)
        return cls(root / PACKS_DIRNAME, root / ACTIVE_DIRNAME, root / BACKUP_DIRNAME)

    @classmethod
    def from_settings(cls, settings: AppSettings) -> ApplyEngine | None:
        root = settings.storage_root
        if root is None:
            return None
        return cls.for_storage_root(root)

    @property
    def packs_root(self) -> Path:
        return self._packs_root

    @property
    def has_backup(self) -> bool:
        return self._backup_dir.is_dir()

    def scan(self) -> ScanResult:
        return PackageScanner(self._packs_root, self._backup_dir).scan()

    # -- apply --

    def apply(self, package: ThemePackage) -> OperationResult:
        source_dir = self._source_dir(package)
        if source_dir is None or not source_dir.is_dir():
            error = ThemeManagerError(ErrorCode.NOT_FOUND, path=source_dir)
            logger.error("Pack folder missing: %s", package.name)
            return OperationResult(False, f"Theme not found: {package.name}",
                                   OperationStage.BACKUP, error)

        try:
            backup_taken = self._backup_active()
        except ThemeManagerError as exc:
            logger.error("Backup failed, aborting apply: %s", exc.to_dict())
            return OperationResult(False, "Backup failed; nothing was changed.",
                                   OperationStage.BACKUP, exc)

        stage = OperationStage.PREPARE
        try:
            fsops.ensure_dir(self._active_dir)
            stage = OperationStage.POPULATE
            self._populate(package, source_dir)
        except (ThemeManagerError, OSError) as exc:
            error = classify_exception(exc, self._active_dir, default=ErrorCode.MERGE_FAILED)
            logger.error("Apply of %s failed at %s: %s", package.name, stage.value,
                         error.to_dict())
            return OperationResult(False, f"Apply failed: {error.message}",
                                   stage, error, backup_taken=backup_taken)

        logger.info("Applied %s (%s)", package.name, package.variant.apply_summary)
        return OperationResult(True, f"{package.name}\n{package.variant.apply_summary}.",
                               OperationStage.DONE, backup_taken=backup_taken)

    def _backup_active(self) -> bool:
        """Move the active folder into the backup slot.

        Returns False when there was no active folder to back up.
        """
        if not self._active_dir.is_dir():
            return False
        if self._backup_dir.exists() or self._backup_dir.is_symlink():
            fsops.remove_tree(self._backup_dir)
        fsops.rename_dir(self._active_dir, self._backup_dir)
        logger.info("Backed up %s -> %s", self._active_dir, self._backup_dir)
        return True

    def _populate(self, package: ThemePackage, source_dir: Path) -> None:
        match package.variant:
            case PackageVariant.PACK:
                self._merge(source_dir, self._active_dir)
            case PackageVariant.ANIMS_PACK:
                self._merge(source_dir / ANIMS_DIRNAME, self._active_dir)
            case PackageVariant.SINGLE:
                target = self._active_dir / package.name
                fsops.ensure_dir(target)
                self._merge(source_dir, target)
                fsops.write_text_file(
                    self._active_dir / MANIFEST_FILENAME,
                    render_single_manifest(package.name),
                )
                logger.info("Generated manifest for single animation %s", package.name)

    def _merge(self, src: Path, dst: Path) -> None:
        fsops.merge_tree(src, dst)
        logger.info("Merged: %s -> %s", src, dst)

    # -- restore --

    def restore(self) -> OperationResult:
        if not self._backup_dir.is_dir():
            error = ThemeManagerError(ErrorCode.NOT_FOUND, message="No backup found!",
                                      path=self._backup_dir)
            return OperationResult(False, error.message, OperationStage.RESTORE, error)

        try:
            if self._active_dir.exists():
                fsops.remove_tree(self._active_dir)
            fsops.rename_dir(self._backup_dir, self._active_dir)
        except ThemeManagerError as exc:
            logger.error("Restore failed: %s", exc.to_dict())
            return OperationResult(False, f"Restore failed: {exc.message}",
                                   OperationStage.RESTORE, exc)

        logger.info("Restored %s -> %s", self._backup_dir, self._active_dir)
        return OperationResult(True, "Previous theme restored.", OperationStage.DONE)

    # -- delete --

    def delete(self, package: ThemePackage) -> OperationResult:
        source_dir = self._source_dir(package)
        if source_dir is None:
            error = ThemeManagerError(ErrorCode.NOT_FOUND, details={"name": package.name})
            return OperationResult(False, f"Theme not found: {package.name}",
                                   OperationStage.DELETE, error)
        try:
            fsops.remove_tree(source_dir)
        except ThemeManagerError as exc:
            logger.error("Failed to delete: %s (%s)", package.name, exc.code.name)
            return OperationResult(False, f"Delete failed: {exc.message}",
                                   OperationStage.DELETE, exc)

        logger.info("Deleted theme: %s", package.name)
        return OperationResult(True, "Theme removed from storage.", OperationStage.DONE)

    def _source_dir(self, package: ThemePackage) -> Path | None:
        if not fsops.is_plain_name(package.name):
            return None
        return self._packs_root / package.name
