"""Application settings via QSettings."""

from __future__ import annotations

from pathlib import Path

from PySide6.QtCore import QSettings


class AppSettings:
    """Wraps QSettings for persistent app configuration."""

    def __init__(self, qsettings: QSettings | None = None) -> None:
        self._qs = qsettings if qsettings is not None else QSettings("ThemeManager", "ThemeManager")

    # -- storage volume --

    @property
    def storage_root(self) -> Path | None:
        raw = self._qs.value("storage/root", "", type=str)
        value = (raw or "").strip()
        return Path(value).expanduser() if value else None

    @storage_root.setter
    def storage_root(self, value: str | Path | None) -> None:
        cleaned = str(value).strip() if value else ""
        self._qs.setValue("storage/root", cleaned)

    # -- preview --

    @property
    def preview_scale(self) -> int:
        raw = self._qs.value("ui/preview_scale", 2, type=int)
        try:
            scale = int(raw)
        except (TypeError, ValueError):
            return 2
        return min(max(scale, 1), 4)

    @preview_scale.setter
    def preview_scale(self, value: int) -> None:
        self._qs.setValue("ui/preview_scale", min(max(int(value), 1), 4))

    # -- window geometry --

    @property
    def window_geometry(self) -> bytes | None:
        return self._qs.value("ui/window_geometry")

    @window_geometry.setter
    def window_geometry(self, value: bytes) -> None:
        self._qs.setValue("ui/window_geometry", value)

    # -- helpers --

    def sync(self) -> None:
        self._qs.sync()

    @property
    def app_data_dir(self) -> Path:
        path = self._app_data_dir()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @property
    def log_dir(self) -> Path:
        path = self.app_data_dir / "logs"
        path.mkdir(parents=True, exist_ok=True)
        return path

    @staticmethod
    def _app_data_dir() -> Path:
        import os
        base = Path(os.environ.get("APPDATA", Path.home() / ".config"))
        return base / "thememgr"
