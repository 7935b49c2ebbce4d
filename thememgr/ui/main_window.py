"""Main window: pack list on the left, details and actions on the right."""

from __future__ import annotations

from typing import TYPE_CHECKING

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QGuiApplication
from PySide6.QtWidgets import (
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from thememgr.core.engine import ApplyEngine
from thememgr.core.inspector import PackageInspector
from thememgr.core.models import OperationResult, ScanResult, ThemePackage
from thememgr.errors import format_error_for_user
from thememgr.ui.labels import (
    RESTORE_LABEL,
    applied_message,
    empty_list_label,
    info_lines,
    menu_label,
)
from thememgr.ui.preview import bitmap_to_pixmap

if TYPE_CHECKING:
    from thememgr.config.settings import AppSettings

_RESTORE_ROLE = "restore"


class MainWindow(QMainWindow):
    """Lists packs on the storage volume and runs engine operations."""

    def __init__(self, settings: AppSettings) -> None:
        super().__init__()
        self._settings = settings
        self._engine: ApplyEngine | None = ApplyEngine.from_settings(settings)
        self._inspector = PackageInspector()
        self._scan = ScanResult()
        self._selected: ThemePackage | None = None

        self.setWindowTitle("Theme Manager")
        self.setMinimumSize(560, 360)

        self._setup_layout()
        self._setup_menu()
        self._restore_state()
        self.rescan()

    def _setup_layout(self) -> None:
        central = QWidget()
        self.setCentralWidget(central)
        row = QHBoxLayout(central)

        self._list = QListWidget()
        self._list.currentItemChanged.connect(self._on_current_changed)
        self._list.itemActivated.connect(self._on_item_activated)
        row.addWidget(self._list, 1)

        panel = QVBoxLayout()
        self._name_label = QLabel("")
        self._name_label.setObjectName("PackName")
        self._name_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        panel.addWidget(self._name_label)

        self._preview_label = QLabel("")
        self._preview_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._preview_label.setMinimumSize(128 * 2, 64 * 2)
        panel.addWidget(self._preview_label)

        self._info_label = QLabel("")
        self._info_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        panel.addWidget(self._info_label)
        panel.addStretch(1)

        buttons = QHBoxLayout()
        self._delete_btn = QPushButton("Delete")
        self._delete_btn.clicked.connect(self._on_delete)
        self._apply_btn = QPushButton("Apply")
        self._apply_btn.clicked.connect(self._on_apply)
        buttons.addWidget(self._delete_btn)
        buttons.addWidget(self._apply_btn)
        panel.addLayout(buttons)
        row.addLayout(panel, 1)

        self._set_details(None)

    def _setup_menu(self) -> None:
        file_menu = self.menuBar().addMenu("&File")

        choose_action = QAction("Choose Storage Folder...", self)
        choose_action.triggered.connect(self._choose_storage_root)
        file_menu.addAction(choose_action)

        rescan_action = QAction("Rescan", self)
        rescan_action.setShortcut("F5")
        rescan_action.triggered.connect(self.rescan)
        file_menu.addAction(rescan_action)

        self._restore_action = QAction("Restore Previous", self)
        self._restore_action.triggered.connect(self._on_restore)
        file_menu.addAction(self._restore_action)

        file_menu.addSeparator()
        quit_action = QAction("Quit", self)
        quit_action.setShortcut("Ctrl+Q")
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

    # -- list --

    def rescan(self) -> None:
        self._list.clear()
        self._set_details(None)
        if self._engine is None:
            self._scan = ScanResult()
            self._add_placeholder("[Choose a storage folder]")
            self._restore_action.setEnabled(False)
            return

        self._scan = self._engine.scan()
        if not self._scan.packages:
            self._add_placeholder(empty_list_label(self._scan))
        for package in self._scan.packages:
            item = QListWidgetItem(menu_label(package))
            item.setData(Qt.ItemDataRole.UserRole, package.name)
            item.setToolTip(package.name)
            self._list.addItem(item)

        if self._scan.has_backup:
            item = QListWidgetItem(RESTORE_LABEL)
            item.setData(Qt.ItemDataRole.UserRole + 1, _RESTORE_ROLE)
            self._list.addItem(item)
        self._restore_action.setEnabled(self._scan.has_backup)

    def _add_placeholder(self, text: str) -> None:
        item = QListWidgetItem(text)
        item.setFlags(Qt.ItemFlag.NoItemFlags)
        self._list.addItem(item)

    def _package_for_item(self, item: QListWidgetItem | None) -> ThemePackage | None:
        if item is None:
            return None
        name = item.data(Qt.ItemDataRole.UserRole)
        if not name:
            return None
        return self._scan.get(name)

    def _on_current_changed(self, current: QListWidgetItem | None, _previous) -> None:
        self._set_details(self._package_for_item(current))

    def _on_item_activated(self, item: QListWidgetItem) -> None:
        if item.data(Qt.ItemDataRole.UserRole + 1) == _RESTORE_ROLE:
            self._on_restore()

    # -- details --

    def _set_details(self, package: ThemePackage | None) -> None:
        self._selected = package
        self._apply_btn.setEnabled(package is not None)
        self._delete_btn.setEnabled(package is not None)
        if package is None:
            self._name_label.setText("")
            self._info_label.setText("")
            self._preview_label.clear()
            return

        info = self._inspector.inspect(package)
        self._name_label.setText(info.name)
        self._info_label.setText("\n".join(info_lines(info)))
        if info.preview is not None:
            scale = self._settings.preview_scale
            self._preview_label.setPixmap(bitmap_to_pixmap(info.preview, scale))
        else:
            self._preview_label.setText("No preview")

    # -- actions --

    def _on_apply(self) -> None:
        package = self._selected
        if package is None or self._engine is None:
            return
        answer = QMessageBox.question(
            self,
            package.name,
            "Apply this theme?\nBackup will be created.",
        )
        if answer != QMessageBox.StandardButton.Yes:
            return
        result = self._run(lambda: self._engine.apply(package))
        if result.ok:
            QMessageBox.information(self, "Theme Applied!", applied_message(package))
        else:
            self._show_failure("Apply failed!", result)
        self.rescan()

    def _on_delete(self) -> None:
        package = self._selected
        if package is None or self._engine is None:
            return
        answer = QMessageBox.warning(
            self,
            "Delete Theme?",
            f"{package.name}\nThis cannot be undone!",
            QMessageBox.StandardButton.Cancel | QMessageBox.StandardButton.Yes,
            QMessageBox.StandardButton.Cancel,
        )
        if answer != QMessageBox.StandardButton.Yes:
            return
        result = self._run(lambda: self._engine.delete(package))
        if result.ok:
            self.statusBar().showMessage("Deleted! Theme removed from storage.", 2000)
        else:
            self._show_failure("Delete failed!", result)
        self.rescan()

    def _on_restore(self) -> None:
        if self._engine is None:
            return
        result = self._run(self._engine.restore)
        if result.ok:
            QMessageBox.information(
                self,
                "Backup Restored!",
                "Previous theme restored.\nReboot the device to load it.",
            )
        else:
            self._show_failure("Restore failed", result)
        self.rescan()

    def _run(self, operation) -> OperationResult:
        QGuiApplication.setOverrideCursor(Qt.CursorShape.WaitCursor)
        try:
            return operation()
        finally:
            QGuiApplication.restoreOverrideCursor()

    def _show_failure(self, title: str, result: OperationResult) -> None:
        text = result.message
        if result.error is not None:
            text = format_error_for_user(result.error)
        if result.backup_only:
            text += "\n\nThe previous theme is kept as a backup. Use Restore Previous to undo."
        QMessageBox.critical(self, title, text)

    def _choose_storage_root(self) -> None:
        current = self._settings.storage_root
        chosen = QFileDialog.getExistingDirectory(
            self,
            "Choose Storage Folder",
            str(current) if current else "",
        )
        if not chosen:
            return
        self._settings.storage_root = chosen
        self._engine = ApplyEngine.from_settings(self._settings)
        self.rescan()

    # -- state --

    def _restore_state(self) -> None:
        geometry = self._settings.window_geometry
        if geometry:
            self.restoreGeometry(geometry)
        else:
            self.resize(720, 420)

    def closeEvent(self, event) -> None:
        self._settings.window_geometry = self.saveGeometry()
        super().closeEvent(event)
