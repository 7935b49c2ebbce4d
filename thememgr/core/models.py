"""Data model for animation packs and engine results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from thememgr.core.constants import MAX_BITMAP_HEIGHT, MAX_BITMAP_WIDTH

if TYPE_CHECKING:
    from thememgr.errors import ThemeManagerError


class PackageVariant(Enum):
    """On-disk layout of an animation pack."""

    PACK = "pack"
    ANIMS_PACK = "anims_pack"
    SINGLE = "single"

    @property
    def menu_prefix(self) -> str:
        match self:
            case PackageVariant.PACK:
                return "[P] "
            case PackageVariant.ANIMS_PACK:
                return "[A] "
            case PackageVariant.SINGLE:
                return "[S] "

    @property
    def type_label(self) -> str:
        match self:
            case PackageVariant.PACK:
                return "Pack"
            case PackageVariant.ANIMS_PACK:
                return "Anim Pack"
            case PackageVariant.SINGLE:
                return "Single"

    @property
    def apply_summary(self) -> str:
        match self:
            case PackageVariant.PACK:
                return "Pack merged"
            case PackageVariant.ANIMS_PACK:
                return "Anims merged"
            case PackageVariant.SINGLE:
                return "Anim + manifest"


@dataclass(frozen=True, slots=True)
class ThemePackage:
    """A classified pack directory found by a scan."""

    name: str
    variant: PackageVariant
    source_dir: Path


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Ordered scan output plus the two flags the UI needs."""

    packages: tuple[ThemePackage, ...] = ()
    root_present: bool = False
    has_backup: bool = False

    def __len__(self) -> int:
        return len(self.packages)

    def __iter__(self):
        return iter(self.packages)

    def get(self, name: str) -> ThemePackage | None:
        for package in self.packages:
            if package.name == name:
                return package
        return None


def packed_row_bytes(width: int) -> int:
    """Bytes per packed 1-bpp row."""
    return (width + 7) // 8


@dataclass(frozen=True, slots=True)
class DecodedBitmap:
    """Packed row-major 1-bpp image, LSB is the left-most pixel of each byte."""

    width: int
    height: int
    data: bytes

    def __post_init__(self) -> None:
        if not 1 <= self.width <= MAX_BITMAP_WIDTH:
            raise ValueError(f"bitmap width out of range: {self.width}")
        if not 1 <= self.height <= MAX_BITMAP_HEIGHT:
            raise ValueError(f"bitmap height out of range: {self.height}")
        expected = packed_row_bytes(self.width) * self.height
        if len(self.data) != expected:
            raise ValueError(
                f"bitmap buffer is {len(self.data)} bytes, expected {expected}"
            )

    @property
    def row_stride(self) -> int:
        return packed_row_bytes(self.width)

    def pixel(self, x: int, y: int) -> bool:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height}")
        byte = self.data[y * self.row_stride + x // 8]
        return bool(byte >> (x % 8) & 1)


@dataclass(frozen=True, slots=True)
class PackageInfo:
    """Display-ready details for one package."""

    name: str
    variant: PackageVariant
    type_label: str
    animation_count: int
    size_bytes: int
    preview: DecodedBitmap | None = None


class OperationStage(Enum):
    """Where an engine operation finished or stopped."""

    BACKUP = "backup"
    PREPARE = "prepare"
    POPULATE = "populate"
    RESTORE = "restore"
    DELETE = "delete"
    DONE = "done"


@dataclass
class OperationResult:
    """Outcome of an apply, restore or delete call."""

    ok: bool
    message: str
    stage: OperationStage
    error: ThemeManagerError | None = None
    backup_taken: bool = False

    def __bool__(self) -> bool:
        return self.ok

    @property
    def backup_only(self) -> bool:
        """True when the old theme was moved to backup but the new one is incomplete."""
        return not self.ok and self.backup_taken
