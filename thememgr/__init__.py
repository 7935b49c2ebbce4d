"""Theme Manager - swap animation packs on a mounted storage volume."""

__version__ = "0.1.0"
