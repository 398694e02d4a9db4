# stallmap/properties.py
from __future__ import annotations
from typing import Dict, Optional
from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QFormLayout, QLineEdit, QComboBox, QLabel, QPushButton
)

from .models import Marker

EMPTY_HINT = ("Select a stall marker on the map to edit its details, "
              "or click anywhere on the map to create a new stall.")


class StallPanel(QWidget):
    labelChanged = Signal(str, str)          # stall id, new label
    assignmentChanged = Signal(str, object)  # stall id, client id or None
    deleteRequested = Signal(str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._current: Optional[Marker] = None

        self.setMinimumWidth(260)
        root = QVBoxLayout(self)
        root.setContentsMargins(8, 8, 8, 8)
        root.setSpacing(10)

        self.lbl_title = QLabel("Stall Details")
        self.lbl_title.setStyleSheet("font-weight: 600;")
        root.addWidget(self.lbl_title)

        self.lbl_hint = QLabel(EMPTY_HINT)
        self.lbl_hint.setWordWrap(True)
        self.lbl_hint.setStyleSheet("color:#4f46e5;")
        root.addWidget(self.lbl_hint)

        self.frm = QWidget()
        fr = QFormLayout(self.frm)
        fr.setLabelAlignment(Qt.AlignRight)
        self.ed_label = QLineEdit()
        self.cmb_client = QComboBox()
        self.lbl_coords = QLabel("-")
        self.btn_delete = QPushButton("Delete Stall")
        self.btn_delete.setStyleSheet("color:#dc2626;")
        fr.addRow("Stall identifier:", self.ed_label)
        fr.addRow("Assigned corporate:", self.cmb_client)
        fr.addRow("Coordinates:", self.lbl_coords)
        fr.addRow(self.btn_delete)
        root.addWidget(self.frm)
        root.addStretch(1)

        # commit on editingFinished (focus out or Enter)
        self.ed_label.editingFinished.connect(self._apply_label)
        self.cmb_client.currentIndexChanged.connect(self._apply_client)
        self.btn_delete.clicked.connect(self._request_delete)

        self.set_clients({})
        self.clear()

    # ---------- API ----------
    @property
    def current_id(self) -> Optional[str]:
        return self._current.id if self._current else None

    def set_clients(self, clients: Dict[str, str]):
        self.cmb_client.blockSignals(True)
        self.cmb_client.clear()
        self.cmb_client.addItem("Unassigned", None)
        for cid, name in sorted(clients.items(), key=lambda kv: kv[1].lower()):
            self.cmb_client.addItem(name or cid, cid)
        self.cmb_client.blockSignals(False)
        if self._current is not None:
            self.load_marker(self._current)

    def set_editable(self, editable: bool):
        for w in (self.ed_label, self.cmb_client, self.btn_delete):
            w.setEnabled(editable)

    def clear(self):
        self._current = None
        self.lbl_hint.setVisible(True)
        self.frm.setVisible(False)

    def load_marker(self, marker: Optional[Marker]):
        self._current = marker
        if marker is None:
            self.clear()
            return
        self.lbl_hint.setVisible(False)
        self.frm.setVisible(True)

        self.ed_label.blockSignals(True)
        self.cmb_client.blockSignals(True)
        self.ed_label.setText(marker.label)
        idx = self.cmb_client.findData(marker.assigned.id) if marker.assigned else 0
        self.cmb_client.setCurrentIndex(max(0, idx))
        self.lbl_coords.setText(f"{marker.x:.0f}, {marker.y:.0f}")
        self.ed_label.blockSignals(False)
        self.cmb_client.blockSignals(False)

    # ---------- apply handlers ----------
    def _apply_label(self):
        if self._current is None: return
        text = self.ed_label.text().strip()
        if not text or text == self._current.label:
            self.ed_label.setText(self._current.label)
            return
        self.labelChanged.emit(self._current.id, text)

    def _apply_client(self, *_):
        if self._current is None: return
        self.assignmentChanged.emit(self._current.id, self.cmb_client.currentData())

    def _request_delete(self):
        if self._current is None: return
        self.deleteRequested.emit(self._current.id)
