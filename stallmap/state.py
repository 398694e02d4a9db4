from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .errors import FloorFormatError
from .models import AssignedRef, Marker


def _num(v: Any) -> float:
    try:
        return float(v) if v is not None else 0.0
    except (TypeError, ValueError):
        return 0.0

def marker_from_row(row: Dict[str, Any]) -> Marker:
    """Normalise a stall record from the store into a Marker.

    Accepts both the flat shape written by ``marker_to_row`` and the
    database-style one (``stall_identifier``, nested ``position``, embedded
    ``corporate_client`` possibly given as a one-element list).
    """
    if not isinstance(row, dict) or not row.get("id"):
        raise FloorFormatError(f"stall record without id: {row!r}")
    label = row.get("identifier", row.get("stall_identifier")) or ""
    pos = row.get("position") if isinstance(row.get("position"), dict) else row
    client_id = row.get("corporate_client_id", row.get("corporateClientId"))
    client_name = row.get("corporate_client_name", row.get("corporateClientName"))
    client = row.get("corporate_client")
    if isinstance(client, list):
        client = client[0] if client else None
    if isinstance(client, dict):
        client_name = client_name or client.get("company_name")
    assigned = AssignedRef(str(client_id), client_name or "") if client_id else None
    return Marker(id=str(row["id"]), label=str(label),
                  x=_num(pos.get("x")), y=_num(pos.get("y")), assigned=assigned)

def marker_to_row(marker: Marker) -> Dict[str, Any]:
    return {
        "id": marker.id,
        "identifier": marker.label,
        "x": marker.x, "y": marker.y,
        "corporate_client_id": marker.assigned.id if marker.assigned else None,
        "corporate_client_name": marker.assigned.display_name if marker.assigned else None,
    }


@dataclass
class FloorRecord:
    id: str
    name: str = "Untitled floor"
    map_image_url: str = ""
    order_index: int = 0
    stalls: List[Marker] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FloorRecord":
        if not isinstance(data, dict) or not data.get("id"):
            raise FloorFormatError(f"floor record without id: {data!r}")
        stalls = data.get("stalls") or []
        if not isinstance(stalls, list):
            raise FloorFormatError(f"floor {data['id']!r}: stalls must be a list")
        return cls(
            id=str(data["id"]),
            name=data.get("name") or "Untitled floor",
            map_image_url=data.get("map_image_url") or "",
            order_index=int(_num(data.get("order_index"))),
            stalls=[marker_from_row(r) for r in stalls],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id, "name": self.name,
            "map_image_url": self.map_image_url,
            "order_index": self.order_index,
            "stalls": [marker_to_row(m) for m in self.stalls],
        }

    def stall(self, stall_id: str) -> Optional[Marker]:
        for m in self.stalls:
            if m.id == stall_id:
                return m
        return None
