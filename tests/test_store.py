import json

import pytest

from stallmap import FloorFormatError, FloorRecord, FloorStore, Marker, marker_from_row, marker_to_row


def test_marker_from_database_row():
    row = {
        "id": "s1", "stall_identifier": None, "position": None,
        "corporate_client_id": "c1",
        "corporate_client": [{"id": "c1", "company_name": "Acme"}],
    }
    m = marker_from_row(row)
    assert (m.id, m.label, m.x, m.y) == ("s1", "", 0.0, 0.0)
    assert m.assigned.id == "c1" and m.assigned.display_name == "Acme"


def test_marker_from_flat_row():
    m = marker_from_row({"id": "s2", "identifier": "B4", "x": "12.5", "y": 7})
    assert (m.label, m.x, m.y, m.assigned) == ("B4", 12.5, 7.0, None)


def test_marker_row_requires_id():
    with pytest.raises(FloorFormatError):
        marker_from_row({"identifier": "x"})


def test_marker_row_shape_is_stable():
    m = Marker("s3", "C1", 1.0, 2.0)
    assert marker_from_row(marker_to_row(m)) == m


def test_floor_defaults():
    fl = FloorRecord.from_dict({"id": "f1", "name": None, "order_index": None})
    assert (fl.name, fl.map_image_url, fl.order_index, fl.stalls) == ("Untitled floor", "", 0, [])


@pytest.fixture
def store(tmp_path):
    return FloorStore(str(tmp_path / "floors.json")).load()


def test_missing_file_is_empty(store):
    assert store.floors() == []


def test_stall_lifecycle_persists(store, tmp_path):
    fl = store.add_floor("Ground")
    assert store.next_stall_label(fl.id) == "Stall 1"
    created = store.create_stall(fl.id, "A1", 10, 20)
    cid = store.add_client("Acme")
    store.update_stall(created.id, x=30, client_id=cid)

    again = FloorStore(store.path).load()
    m = again.floor(fl.id).stall(created.id)
    assert (m.label, m.x, m.y) == ("A1", 30.0, 20.0)
    assert m.assigned.display_name == "Acme"
    assert again.next_stall_label(fl.id) == "Stall 2"

    again.update_stall(created.id, clear_client=True)
    assert again.floor(fl.id).stall(created.id).assigned is None
    again.delete_stall(created.id)
    assert FloorStore(store.path).load().floor(fl.id).stalls == []


def test_unknown_ids(store):
    fl = store.add_floor("Ground")
    with pytest.raises(KeyError):
        store.update_stall("nope", x=1)
    with pytest.raises(KeyError):
        store.delete_stall("nope")
    with pytest.raises(KeyError):
        store.floor("nope")
    m = store.create_stall(fl.id, "A", 0, 0)
    with pytest.raises(KeyError):
        store.update_stall(m.id, client_id="nobody")


def test_floors_sorted_by_order(tmp_path):
    path = tmp_path / "floors.json"
    path.write_text(json.dumps({"floors": [
        {"id": "b", "name": "Upper", "order_index": 2},
        {"id": "a", "name": "Lower", "order_index": 1},
    ]}))
    assert [fl.id for fl in FloorStore(str(path)).load().floors()] == ["a", "b"]


def test_rename_rejects_blank(store):
    fl = store.add_floor("Ground")
    with pytest.raises(ValueError):
        store.rename_floor(fl.id, "  ")
    store.rename_floor(fl.id, "Lobby")
    assert store.floor(fl.id).name == "Lobby"


def test_malformed_file(tmp_path):
    path = tmp_path / "floors.json"
    path.write_text("{not json")
    with pytest.raises(FloorFormatError):
        FloorStore(str(path)).load()
    path.write_text("[]")
    with pytest.raises(FloorFormatError):
        FloorStore(str(path)).load()
