"""Desktop shell for browsing and applying animation packs."""
