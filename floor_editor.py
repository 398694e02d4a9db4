#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations
import sys, os, base64, logging, mimetypes
from typing import Optional
from PySide6.QtCore import Qt, QPointF, QSettings, QSizeF
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import (
    QApplication, QMainWindow, QToolBar, QStatusBar, QFileDialog, QMessageBox,
    QDockWidget, QStyle, QComboBox, QInputDialog, QLabel, QWidgetAction
)

from stallmap import (FloorCanvas, StallPanel, FloorStore, EngineConfig, Marker, Mode,
                      StallMapError, new_transient_id, setup_logging, DEFAULT_HIGHLIGHT_LABEL)
from stallmap.config import SETTINGS_ORG, SETTINGS_APP

logger = logging.getLogger("stallmap.editor")

DEFAULT_STORE = "stallmap_floors.json"
IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.bmp *.gif *.webp)"


def _file_to_data_url(path: str) -> str:
    mime = mimetypes.guess_type(path)[0] or "image/png"
    with open(path, "rb") as f:
        payload = base64.b64encode(f.read()).decode("ascii")
    return f"data:{mime};base64,{payload}"


class MainWindow(QMainWindow):
    def __init__(self, store_path: str = DEFAULT_STORE, config: Optional[EngineConfig] = None):
        super().__init__()
        self.setWindowTitle("Stall Map Editor")
        self.resize(1280, 860)

        self.store: Optional[FloorStore] = None
        self._floor_id: Optional[str] = None
        self._home_stall_id: Optional[str] = None   # highlighted in visitor view

        # 1) Canvas
        self.canvas = FloorCanvas(self, config=config or EngineConfig.from_settings())
        self.canvas.set_editable(True)
        self.setCentralWidget(self.canvas)

        # 2) Stall panel
        self.panel = StallPanel(self)
        self.panel_dock = QDockWidget("Stall Details", self)
        self.panel_dock.setWidget(self.panel)
        self.panel_dock.setAllowedAreas(Qt.LeftDockWidgetArea | Qt.RightDockWidgetArea)
        self.panel_dock.setMinimumWidth(280)
        self.addDockWidget(Qt.RightDockWidgetArea, self.panel_dock)

        # 3) Toolbar / status
        self._build_toolbar()
        self.setStatusBar(QStatusBar(self))

        # 4) Wiring
        self.canvas.markerCreated.connect(self._on_create_marker)
        self.canvas.markerMoved.connect(self._on_marker_moved)
        self.canvas.markerSelected.connect(self._on_marker_selected)
        self.canvas.imageLoadFailed.connect(lambda msg: self._status("No map yet: " + msg))
        self.canvas.scaleChanged.connect(lambda _: self._update_status())
        self.panel.labelChanged.connect(self._on_label_changed)
        self.panel.assignmentChanged.connect(self._on_assignment_changed)
        self.panel.deleteRequested.connect(self._on_delete_requested)

        self.open_store(store_path)

    # ---------- toolbar ----------
    def _build_toolbar(self):
        tb = QToolBar("Floor", self)
        tb.setMovable(False)
        tb.setIconSize(QSizeF(18, 18).toSize())
        tb.setToolButtonStyle(Qt.ToolButtonTextBesideIcon)
        self.addToolBar(Qt.TopToolBarArea, tb)
        style = self.style()

        self.act_open = QAction(style.standardIcon(QStyle.SP_DirOpenIcon), "Open floors…", self)
        self.act_open.setShortcut(QKeySequence("Ctrl+O"))
        self.act_open.triggered.connect(self._open_store_dialog)

        self.act_upload = QAction(style.standardIcon(QStyle.SP_ArrowUp), "Upload Map", self)
        self.act_upload.triggered.connect(self._upload_map_dialog)

        self.act_add_floor = QAction(style.standardIcon(QStyle.SP_FileIcon), "Add floor", self)
        self.act_add_floor.triggered.connect(self._add_floor_dialog)

        self.act_rename = QAction(style.standardIcon(QStyle.SP_FileDialogDetailedView), "Rename floor", self)
        self.act_rename.triggered.connect(self._rename_floor_dialog)

        self.act_viewmode = QAction(style.standardIcon(QStyle.SP_DesktopIcon), "Visitor view", self,
                                    checkable=True)
        self.act_viewmode.toggled.connect(self._toggle_viewmode)

        self.act_reset = QAction(style.standardIcon(QStyle.SP_BrowserReload), "Reset view", self)
        self.act_reset.setShortcut(QKeySequence("Ctrl+0"))
        self.act_reset.triggered.connect(self.canvas.reset_view)

        self.cmb_floor = QComboBox(self)
        self.cmb_floor.setMinimumWidth(180)
        self.cmb_floor.currentIndexChanged.connect(self._on_floor_index)

        tb.addAction(self.act_open)
        tb.addSeparator()
        lbl = QLabel("  Floor:  ")
        lbl.setStyleSheet("color:#667085; font-weight:600;")
        wa = QWidgetAction(self); wa.setDefaultWidget(lbl); tb.addAction(wa)
        wa = QWidgetAction(self); wa.setDefaultWidget(self.cmb_floor); tb.addAction(wa)
        tb.addAction(self.act_add_floor)
        tb.addAction(self.act_rename)
        tb.addAction(self.act_upload)
        tb.addSeparator()
        tb.addAction(self.act_viewmode)
        tb.addAction(self.act_reset)

    # ---------- store / floors ----------
    def open_store(self, path: str) -> bool:
        try:
            store = FloorStore(path).load()
            if not store.floors():
                store.add_floor("Ground floor")
        except (StallMapError, OSError) as e:
            QMessageBox.critical(self, "Cannot open floors", str(e))
            return False
        self.store = store
        self._push_recent(path)
        self.panel.set_clients(store.clients())
        self._fill_floor_combo()
        self._status(f"Opened: {os.path.basename(path)}")
        return True

    def _fill_floor_combo(self, select_id: Optional[str] = None):
        self.cmb_floor.blockSignals(True)
        self.cmb_floor.clear()
        for fl in self.store.floors():
            self.cmb_floor.addItem(fl.name, fl.id)
        idx = self.cmb_floor.findData(select_id) if select_id else 0
        self.cmb_floor.setCurrentIndex(max(0, idx))
        self.cmb_floor.blockSignals(False)
        self._on_floor_index(self.cmb_floor.currentIndex())

    def _on_floor_index(self, index: int):
        floor_id = self.cmb_floor.itemData(index)
        if floor_id is None:
            return
        self._floor_id = floor_id
        fl = self.store.floor(floor_id)
        self.canvas.reset_view()
        self.canvas.set_selected_marker(None)
        self.panel.clear()
        self.canvas.set_image_source(fl.map_image_url or None)
        self._reload_markers()
        self._update_status()

    def _reload_markers(self):
        if self._floor_id is None:
            return
        self.canvas.set_markers(self.store.floor(self._floor_id).stalls)
        self._apply_highlight()
        self.panel.load_marker(self.canvas.registry.get(self.canvas.selected_marker_id))

    def _apply_highlight(self):
        if self.canvas.mode == Mode.VIEW and self._home_stall_id in self.canvas.registry:
            self.canvas.set_highlighted_marker(self._home_stall_id)
            self.canvas.set_highlight_label(DEFAULT_HIGHLIGHT_LABEL)
        else:
            self.canvas.set_highlighted_marker(None)
            self.canvas.set_highlight_label(None)

    # ---------- canvas intents ----------
    def _on_create_marker(self, world: QPointF):
        # a background click already dropped the canvas selection
        self.panel.clear()
        if self._floor_id is None:
            return
        label, ok = QInputDialog.getText(self, "New stall", "Stall label",
                                         text=self.store.next_stall_label(self._floor_id))
        label = label.strip()
        if not ok or not label:
            return
        tmp = new_transient_id()
        self.canvas.set_markers(self.canvas.markers() + [Marker(tmp, label, world.x(), world.y())])
        try:
            created = self.store.create_stall(self._floor_id, label, world.x(), world.y())
        except OSError as e:
            logger.error("Stall create failed: %s", e)
            self.canvas.set_markers([m for m in self.canvas.markers() if m.id != tmp])
            QMessageBox.critical(self, "Unable to create stall", str(e))
            return
        self.canvas.registry.replace_id(tmp, created.id)
        self.canvas.update()
        self._status("Stall placed")
        self._update_status()

    def _on_marker_moved(self, stall_id: str, world: QPointF):
        try:
            self.store.update_stall(stall_id, x=world.x(), y=world.y())
        except (OSError, KeyError) as e:
            logger.error("Stall move failed: %s", e)
            self._status("Unable to save stall position")
            self._reload_markers()
            return
        if stall_id == self.panel.current_id:
            self.panel.load_marker(self.canvas.registry.get(stall_id))

    def _on_marker_selected(self, stall_id: Optional[str]):
        self.canvas.set_selected_marker(stall_id)
        marker = self.canvas.registry.get(stall_id)
        self.panel.load_marker(marker)
        if marker is not None and self.canvas.mode == Mode.EDIT:
            self._home_stall_id = marker.id

    # ---------- panel intents ----------
    def _on_label_changed(self, stall_id: str, label: str):
        self._update_stall(stall_id, label=label)

    def _on_assignment_changed(self, stall_id: str, client_id: Optional[str]):
        if client_id is None:
            self._update_stall(stall_id, clear_client=True)
        else:
            self._update_stall(stall_id, client_id=client_id)

    def _update_stall(self, stall_id: str, **changes):
        try:
            self.store.update_stall(stall_id, **changes)
            self._status("Stall updated")
        except (OSError, KeyError) as e:
            logger.error("Stall update failed: %s", e)
            self._status("Unable to update stall")
        self._reload_markers()

    def _on_delete_requested(self, stall_id: str):
        if QMessageBox.question(self, "Delete stall", "Remove this stall marker?") != QMessageBox.Yes:
            return
        try:
            self.store.delete_stall(stall_id)
        except (OSError, KeyError) as e:
            QMessageBox.critical(self, "Unable to delete stall", str(e))
            return
        if self._home_stall_id == stall_id:
            self._home_stall_id = None
        self._reload_markers()
        self._status("Stall removed")
        self._update_status()

    # ---------- dialogs ----------
    def _open_store_dialog(self):
        path, _ = QFileDialog.getOpenFileName(self, "Open floors", "", "JSON (*.json)")
        if path:
            self.open_store(path)

    def _upload_map_dialog(self):
        if self._floor_id is None:
            return
        path, _ = QFileDialog.getOpenFileName(self, "Upload floor map", "", IMAGE_FILTER)
        if not path:
            return
        try:
            source = _file_to_data_url(path)
        except OSError as e:
            QMessageBox.critical(self, "Unable to upload map image", str(e))
            return
        # existing stalls keep their coordinates, even if the new map has another size
        if self.canvas.set_image_source(source):
            self.store.set_map_image(self._floor_id, source)
            self._status("Map image updated")

    def _add_floor_dialog(self):
        name, ok = QInputDialog.getText(self, "Add floor", "Floor name",
                                        text=f"Floor {len(self.store.floors()) + 1}")
        if ok and name.strip():
            fl = self.store.add_floor(name.strip())
            self._fill_floor_combo(fl.id)

    def _rename_floor_dialog(self):
        if self._floor_id is None:
            return
        fl = self.store.floor(self._floor_id)
        name, ok = QInputDialog.getText(self, "Rename floor", "Floor name", text=fl.name)
        if not ok:
            return
        try:
            self.store.rename_floor(fl.id, name.strip())
        except ValueError as e:
            self._status(str(e))
            return
        self._fill_floor_combo(fl.id)
        self._status("Floor name saved")

    def _toggle_viewmode(self, on: bool):
        self.canvas.set_editable(not on)
        self.panel.set_editable(not on)
        if on:
            self.canvas.set_selected_marker(None)
            self.panel.clear()
        self._apply_highlight()
        self._update_status()

    # ---------- status / settings ----------
    def _push_recent(self, path: str):
        st = QSettings(SETTINGS_ORG, SETTINGS_APP)
        files = st.value("recent", [], list)
        path = os.path.abspath(path)
        if path in files: files.remove(path)
        files.insert(0, path)
        st.setValue("recent", files[:12])

    def _status(self, text: str):
        self.statusBar().showMessage(text, 3000)

    def _update_status(self):
        count = len(self.canvas.registry)
        self.statusBar().showMessage(
            f"Mode: {'Visitor' if self.canvas.mode == Mode.VIEW else 'Editing'} | "
            f"{count} stalls placed | Zoom: {int(self.canvas.viewport.scale * 100)}%"
        )

    def closeEvent(self, event):
        self.canvas.shutdown()
        super().closeEvent(event)


def main():
    setup_logging(logging.DEBUG if "--debug" in sys.argv else logging.INFO)
    app = QApplication(sys.argv)
    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    win = MainWindow(args[0] if args else DEFAULT_STORE)
    win.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
