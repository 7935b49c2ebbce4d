"""Text shown for packages in the list and info panel."""

from __future__ import annotations

from thememgr.core.models import PackageInfo, ScanResult, ThemePackage
from thememgr.core.sizes import format_size

MAX_LABEL_LEN = 32
_LABEL_CLIP_AT = 26
_LABEL_KEEP = 23

RESTORE_LABEL = ">> Restore Previous <<"
NO_FOLDER_LABEL = "[No SD / No folder]"
NO_THEMES_LABEL = "[No themes found]"


def menu_label(package: ThemePackage) -> str:
    """Prefix the name with its layout tag and clip long labels."""
    label = f"{package.variant.menu_prefix}{package.name}"[: MAX_LABEL_LEN - 1]
    if len(label) > _LABEL_CLIP_AT:
        label = label[:_LABEL_KEEP] + "..."
    return label


def empty_list_label(scan: ScanResult) -> str:
    return NO_THEMES_LABEL if scan.root_present else NO_FOLDER_LABEL


def info_lines(info: PackageInfo) -> list[str]:
    return [
        f"Type: {info.type_label}  Anims: {info.animation_count}",
        f"Size: {format_size(info.size_bytes)}",
    ]


def applied_message(package: ThemePackage) -> str:
    return f"{package.name}\n{package.variant.apply_summary}. Reboot the device to load it."
