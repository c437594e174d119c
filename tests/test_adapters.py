import math

from core import adapters


def test_to_number_coerces_and_defaults_to_zero():
    assert adapters.to_number(12) == 12
    assert adapters.to_number("7.5") == 7.5
    assert adapters.to_number(" 3 ") == 3
    assert adapters.to_number("abc") == 0
    assert adapters.to_number(None) == 0
    assert adapters.to_number({"n": 1}) == 0
    assert adapters.to_number(math.nan) == 0
    assert adapters.to_number(math.inf) == 0


def test_unwrap_list_accepts_bare_array_or_key():
    assert adapters.unwrap_list([1, 2], "products") == [1, 2]
    assert adapters.unwrap_list({"products": [3]}, "products") == [3]
    assert adapters.unwrap_list({"products": "nope"}, "products") == []
    assert adapters.unwrap_list({"other": [1]}, "products") == []
    assert adapters.unwrap_list(None, "products") == []


def test_batch_quantity_key_precedence():
    batch = adapters.batch_from_raw({"batch_id": "b1", "number_of_batches": 0, "quantity": 9})
    assert batch.id == "b1"
    # number_of_batches is present (zero is a value, not a gap)
    assert batch.quantity == 0

    assert adapters.batch_from_raw({"quantity": "4"}).quantity == 4
    assert adapters.batch_from_raw({"count": 2}).quantity == 2
    assert adapters.batch_from_raw({}).quantity == 0


def test_adapt_home_reads_alert_count_or_alert_list():
    overview = adapters.adapt_home(
        {"warehouses": [{"warehouseId": "w1", "name": "A", "storage_capacity": 10}], "alerts": [{}, {}]}
    )
    assert overview.warehouses[0].id == "w1"
    assert overview.warehouses[0].storage_capacity == 10
    assert overview.alerts_count == 2

    assert adapters.adapt_home({"warehouses": [], "alertsCount": 5}).alerts_count == 5
    assert adapters.adapt_home("garbage").warehouses == []


def test_products_endpoint_accepts_both_shapes():
    bare = adapters.adapt_products([{"product_id": "p1", "name": "Milk", "min_temp": "2"}])
    wrapped = adapters.adapt_products({"products": [{"id": "p2", "name": "Fish"}]})

    assert bare[0].id == "p1"
    assert bare[0].min_temp == 2
    assert bare[0].max_temp is None
    assert wrapped[0].id == "p2"


def test_warehouse_info_falls_back_to_stored_context():
    stored = adapters.warehouse_from_raw({"id": "w1", "name": "Stored", "capacity": 50})
    detail = adapters.adapt_warehouse_info({"batches": [{"id": "b", "quantity": 5}]}, stored)

    assert detail.warehouse.name == "Stored"
    assert detail.batches[0].quantity == 5


def test_alerts_parse_timestamps_and_missing_resolution():
    alerts = adapters.adapt_alerts(
        {"alerts": [
            {"id": 1, "sensor_id": "s1", "warehouse_id": "w1", "alert_type": "TEMP_HIGH",
             "created_at": "2026-01-02T03:04:05Z"},
            {"id": 2, "is_resolved": True, "created_at": "not a date"},
        ]}
    )
    assert alerts[0].is_resolved is None
    assert alerts[0].created_at.year == 2026
    assert alerts[1].is_resolved is True
    assert alerts[1].created_at is None


def test_utility_summary_guards_zero_capacity():
    summary = adapters.adapt_utility({"totalCapacity": "200", "totalOccupied": 50})
    assert summary.utilization_percent == 25
    assert summary.used_text == "50/200 used"

    empty = adapters.adapt_utility({})
    assert empty.utilization_percent == 0
