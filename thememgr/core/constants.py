"""On-disk layout and limits for animation packs."""

from __future__ import annotations

PACKS_DIRNAME = "animation_packs"
ACTIVE_DIRNAME = "dolphin"
BACKUP_DIRNAME = "dolphin_backup"

MANIFEST_FILENAME = "manifest.txt"
META_FILENAME = "meta.txt"
ANIMS_DIRNAME = "Anims"
FIRST_FRAME_FILENAME = "frame_0.bm"

MANIFEST_HEADER = "Filetype: Flipper Animation Manifest"
MANIFEST_VERSION = 1
ENTRY_TOKEN = "Name:"

MAX_PACKAGES = 64
MAX_NAME_LEN = 64

MAX_BITMAP_WIDTH = 128
MAX_BITMAP_HEIGHT = 64
MIN_FRAME_BYTES = 2
MAX_FRAME_BYTES = 2048

# heatshrink parameters used by the device asset compiler
HEATSHRINK_WINDOW_SZ2 = 8
HEATSHRINK_LOOKAHEAD_SZ2 = 4

# Behaviour fields written into a synthesized single-entry manifest
SINGLE_MANIFEST_DEFAULTS: tuple[tuple[str, int], ...] = (
    ("Min butthurt", 0),
    ("Max butthurt", 14),
    ("Min level", 1),
    ("Max level", 30),
    ("Weight", 5),
)
