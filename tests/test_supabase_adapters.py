"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest

from cheese_stock.adapters.supabase_catalog_repository import (
    SupabaseCatalogRepository,
)
from cheese_stock.adapters.supabase_unit_repository import SupabaseUnitRepository
from cheese_stock.domain.errors import ConcurrentUpdateError
from cheese_stock.services import ledger
from tests.conftest import BRIE, make_unit


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "insert": [], "update": []}
    )
    payloads: list[tuple[str, object]] = field(default_factory=list)
    last_filters: list[tuple[str, object]] = field(default_factory=list)

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.payloads.append(("insert", payload))
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.payloads.append(("update", payload))
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, _column: str, desc: bool = False) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _product_row() -> dict[str, object]:
    return {
        "id": 1,
        "name": "Brie",
        "plu": "00123",
        "sold_by_unit": False,
        "cheese_type": {"id": 1, "name": "blando"},
    }


def _unit_row(current: int = 600) -> dict[str, object]:
    return {
        "id": 5,
        "initial_weight_grams": 1000,
        "current_weight_grams": current,
        "active": current > 0,
        "created_at": "2024-05-01T10:00:00+00:00",
        "note": "caja 1",
        "product": _product_row(),
        "partitions": [
            {
                "id": 11,
                "weight_grams": 100,
                "created_at": "2024-05-02T10:00:00+00:00",
                "note": None,
            },
            {
                "id": 10,
                "weight_grams": 300,
                "created_at": "2024-05-01T12:00:00+00:00",
                "note": "Corte sin observaciones",
            },
        ],
    }


def test_catalog_find_by_plu() -> None:
    client = FakeSupabaseClient()
    client.table("products").queue("select", [_product_row()])

    repository = SupabaseCatalogRepository(client)
    product = repository.find_by_plu("00123")

    assert product == BRIE
    assert client.table("products").last_filters == [("plu", "00123")]


def test_catalog_find_by_plu_missing() -> None:
    repository = SupabaseCatalogRepository(FakeSupabaseClient())

    assert repository.find_by_plu("99999") is None


def test_catalog_lists_cheese_types() -> None:
    client = FakeSupabaseClient()
    client.table("cheese_types").queue(
        "select", [{"id": 1, "name": "blando"}, {"id": 3, "name": "duro"}]
    )

    repository = SupabaseCatalogRepository(client)

    assert [item.name for item in repository.list_cheese_types()] == [
        "blando",
        "duro",
    ]


def test_unit_repository_parses_partitions_in_order() -> None:
    client = FakeSupabaseClient()
    client.table("units").queue("select", [_unit_row()])

    repository = SupabaseUnitRepository(client)
    unit = repository.get_unit(5)

    assert unit is not None
    assert unit.product == BRIE
    assert [partition.id for partition in unit.partitions] == [10, 11]
    assert unit.created_at == datetime(2024, 5, 1, 10, 0, tzinfo=UTC)
    ledger.check_invariant(unit)


def test_unit_repository_create_unit() -> None:
    client = FakeSupabaseClient()
    units_table = client.table("units")
    units_table.queue("insert", [{"id": 42}])

    repository = SupabaseUnitRepository(client)
    created = repository.create_unit(ledger.create_unit(BRIE, 1500, note="caja"))

    assert created.id == 42
    action, payload = units_table.payloads[0]
    assert action == "insert"
    assert payload["product_id"] == 1
    assert payload["initial_weight_grams"] == 1500
    assert payload["active"] is True


def test_unit_repository_create_unit_failure() -> None:
    repository = SupabaseUnitRepository(FakeSupabaseClient())

    with pytest.raises(RuntimeError):
        repository.create_unit(ledger.create_unit(BRIE, 1500))


def test_record_cut_guards_on_previous_weight() -> None:
    client = FakeSupabaseClient()
    units_table = client.table("units")
    units_table.queue("update", [{"id": 5}])
    units_table.queue("select", [_unit_row(current=500)])
    client.table("partitions").queue("insert", [{"id": 12}])
    previous = make_unit(initial=1000, current=600, unit_id=5)

    repository = SupabaseUnitRepository(client)
    stored = repository.record_cut(previous, ledger.apply_cut(previous, 100))

    assert ("current_weight_grams", 600) in units_table.last_filters
    assert units_table.payloads[0] == (
        "update",
        {"current_weight_grams": 500, "active": True},
    )
    _, partition_payload = client.table("partitions").payloads[0]
    assert partition_payload["unit_id"] == 5
    assert partition_payload["weight_grams"] == 100
    assert stored.current_weight_grams == 500


def test_record_cut_conflict_raises() -> None:
    client = FakeSupabaseClient()
    previous = make_unit(initial=1000, current=600, unit_id=5)

    repository = SupabaseUnitRepository(client)

    with pytest.raises(ConcurrentUpdateError):
        repository.record_cut(previous, ledger.apply_cut(previous, 100))
    assert "partitions" not in client.tables


def test_record_cut_restores_weight_when_partition_fails() -> None:
    client = FakeSupabaseClient()
    units_table = client.table("units")
    units_table.queue("update", [{"id": 5}])
    previous = make_unit(initial=1000, current=600, unit_id=5)

    repository = SupabaseUnitRepository(client)

    with pytest.raises(RuntimeError):
        repository.record_cut(previous, ledger.apply_cut(previous, 600))
    assert units_table.payloads[-1] == (
        "update",
        {"current_weight_grams": 600, "active": True},
    )


@dataclass
class FailingTable(FakeTable):
    def execute(self) -> FakeResponse:
        raise ConnectionError("connection reset")


def test_record_cut_restores_weight_when_partition_insert_raises() -> None:
    client = FakeSupabaseClient()
    units_table = client.table("units")
    units_table.queue("update", [{"id": 5}])
    client.tables["partitions"] = FailingTable(name="partitions")
    previous = make_unit(initial=1000, current=600, unit_id=5)

    repository = SupabaseUnitRepository(client)

    with pytest.raises(ConnectionError):
        repository.record_cut(previous, ledger.apply_cut(previous, 600))
    assert units_table.payloads == [
        ("update", {"current_weight_grams": 0, "active": False}),
        ("update", {"current_weight_grams": 600, "active": True}),
    ]


def test_list_active_units_filters_on_flag() -> None:
    client = FakeSupabaseClient()
    units_table = client.table("units")
    units_table.queue("select", [_unit_row()])

    repository = SupabaseUnitRepository(client)
    units = repository.list_active_units()

    assert len(units) == 1
    assert ("active", True) in units_table.last_filters
