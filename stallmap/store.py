"""
JSON-file floor store used by the desktop editor as its persistence collaborator.

The engine never calls this module; ``floor_editor.MainWindow`` turns canvas
intents into store calls and feeds the results back into the canvas.
File shape::

    {"floors": [{"id", "name", "map_image_url", "order_index", "stalls": [...]}],
     "clients": [{"id", "company_name"}]}
"""
from __future__ import annotations
import json
import logging
import os
import uuid
from dataclasses import replace
from typing import Dict, List, Optional

from .errors import FloorFormatError
from .models import AssignedRef, Marker
from .state import FloorRecord

logger = logging.getLogger(__name__)


class FloorStore:
    def __init__(self, path: str):
        self.path = path
        self._floors: List[FloorRecord] = []
        self._clients: Dict[str, str] = {}

    # ---- file ----
    def load(self) -> "FloorStore":
        if not os.path.exists(self.path):
            self._floors, self._clients = [], {}
            return self
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise FloorFormatError(f"{self.path}: not valid JSON ({e})") from e
        if not isinstance(data, dict):
            raise FloorFormatError(f"{self.path}: top level must be an object")
        floors = [FloorRecord.from_dict(d) for d in data.get("floors", [])]
        self._floors = sorted(floors, key=lambda fl: fl.order_index)
        self._clients = {}
        for c in data.get("clients", []):
            if isinstance(c, dict) and c.get("id"):
                self._clients[str(c["id"])] = c.get("company_name") or ""
        logger.info("Loaded %d floors from %s", len(self._floors), self.path)
        return self

    def save(self):
        data = {
            "floors": [fl.to_dict() for fl in self._floors],
            "clients": [{"id": k, "company_name": v} for k, v in self._clients.items()],
        }
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        logger.debug("Saved %s", self.path)

    # ---- reads ----
    def floors(self) -> List[FloorRecord]:
        return list(self._floors)

    def floor(self, floor_id: str) -> FloorRecord:
        for fl in self._floors:
            if fl.id == floor_id:
                return fl
        raise KeyError(f"unknown floor {floor_id!r}")

    def clients(self) -> Dict[str, str]:
        return dict(self._clients)

    def _locate(self, stall_id: str):
        for fl in self._floors:
            for i, m in enumerate(fl.stalls):
                if m.id == stall_id:
                    return fl, i
        raise KeyError(f"unknown stall {stall_id!r}")

    # ---- writes ----
    def add_floor(self, name: str) -> FloorRecord:
        order = max((fl.order_index for fl in self._floors), default=-1) + 1
        fl = FloorRecord(id=uuid.uuid4().hex, name=name or "Untitled floor", order_index=order)
        self._floors.append(fl)
        self.save()
        return fl

    def rename_floor(self, floor_id: str, name: str):
        if not name.strip():
            raise ValueError("Floor name cannot be empty")
        self.floor(floor_id).name = name
        self.save()

    def set_map_image(self, floor_id: str, source_ref: str):
        self.floor(floor_id).map_image_url = source_ref
        self.save()
        logger.info("Floor %s map image updated", floor_id)

    def add_client(self, company_name: str) -> str:
        cid = uuid.uuid4().hex
        self._clients[cid] = company_name
        self.save()
        return cid

    def next_stall_label(self, floor_id: str) -> str:
        return f"Stall {len(self.floor(floor_id).stalls) + 1}"

    def create_stall(self, floor_id: str, label: str, x: float, y: float) -> Marker:
        fl = self.floor(floor_id)
        m = Marker(id=uuid.uuid4().hex, label=label, x=float(x), y=float(y))
        fl.stalls.append(m)
        self.save()
        logger.info("Created stall %s (%s) at (%.0f, %.0f)", m.id, label, x, y)
        return m

    def update_stall(self, stall_id: str, *, label: Optional[str] = None,
                     x: Optional[float] = None, y: Optional[float] = None,
                     client_id: Optional[str] = None, clear_client: bool = False) -> Marker:
        fl, i = self._locate(stall_id)
        m = fl.stalls[i]
        changes = {}
        if label is not None:
            changes["label"] = label
        if x is not None:
            changes["x"] = float(x)
        if y is not None:
            changes["y"] = float(y)
        if clear_client:
            changes["assigned"] = None
        elif client_id is not None:
            if client_id not in self._clients:
                raise KeyError(f"unknown client {client_id!r}")
            changes["assigned"] = AssignedRef(client_id, self._clients[client_id])
        fl.stalls[i] = m = replace(m, **changes)
        self.save()
        return m

    def delete_stall(self, stall_id: str):
        fl, i = self._locate(stall_id)
        del fl.stalls[i]
        self.save()
        logger.info("Deleted stall %s", stall_id)
