import json

from conftest import run
from core.context_store import CURRENT_WAREHOUSE_KEY, WarehouseContextStore, resolve_warehouse_id
from models import WarehouseContext


def test_resolve_warehouse_id_key_order():
    assert resolve_warehouse_id({"id": "a", "warehouse_id": "b"}) == "a"
    assert resolve_warehouse_id({"warehouse_id": "b", "warehouseId": "c"}) == "b"
    assert resolve_warehouse_id({"warehouseId": "c", "warehouseid": "d"}) == "c"
    assert resolve_warehouse_id({"warehouseid": "d"}) == "d"


def test_resolve_warehouse_id_skips_empty_values():
    assert resolve_warehouse_id({"id": "", "warehouse_id": None, "warehouseId": 42}) == "42"


def test_resolve_warehouse_id_returns_empty_when_absent():
    assert resolve_warehouse_id({"name": "North"}) == ""
    assert resolve_warehouse_id(None) == ""


def test_full_warehouse_object_round_trips(storage):
    store = WarehouseContextStore(storage)
    run(store.set_current_warehouse(
        {"warehouse_id": 7, "name": "North", "location": "Oslo", "capacity": "250", "zone": "A"}
    ))

    current = store.get_current_warehouse()
    assert current.id == "7"
    assert current.name == "North"
    assert current.location == "Oslo"
    assert current.storage_capacity == 250
    # Extra server fields are kept
    assert current.model_extra["zone"] == "A"


def test_last_write_wins(storage):
    store = WarehouseContextStore(storage)
    run(store.set_current_warehouse({"id": "1", "name": "First"}))
    run(store.set_current_warehouse({"id": "2", "name": "Second"}))

    assert store.get_current_warehouse().id == "2"


def test_malformed_json_is_treated_as_absent(storage):
    run(storage.set_item(CURRENT_WAREHOUSE_KEY, "{not-json"))
    store = WarehouseContextStore(storage)

    assert store.get_current_warehouse() is None


def test_non_object_json_is_treated_as_absent(storage):
    run(storage.set_item(CURRENT_WAREHOUSE_KEY, "[1, 2, 3]"))

    assert WarehouseContextStore(storage).get_current_warehouse() is None


def test_missing_context_returns_none(storage):
    assert WarehouseContextStore(storage).get_current_warehouse() is None


def test_stored_payload_keeps_server_extras(storage):
    warehouse = WarehouseContext(id="w9", name="Dock", storage_capacity=12, temperature_zone="frozen")
    run(WarehouseContextStore(storage).set_current_warehouse(warehouse))

    stored = json.loads(storage.get_item(CURRENT_WAREHOUSE_KEY))
    assert stored["temperature_zone"] == "frozen"
    assert stored["storage_capacity"] == 12
