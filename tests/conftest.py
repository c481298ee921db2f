"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime

import pytest

from cheese_stock.config import Settings
from cheese_stock.containers import AppContainer
from cheese_stock.domain.catalog import CheeseType, Product
from cheese_stock.domain.errors import ConcurrentUpdateError
from cheese_stock.domain.units import CutOutcome, Partition, Unit
from cheese_stock.services.cuts import CutPlanner
from cheese_stock.services.inventory import (
    CheeseTypeCatalog,
    InventoryService,
    ProductCatalog,
    UnitStore,
)

BLANDO = CheeseType(id=1, name="blando")
SEMI_DURO = CheeseType(id=2, name="semi-duro")
DURO = CheeseType(id=3, name="duro")

BRIE = Product(id=1, name="Brie", plu="00123", sold_by_unit=False, cheese_type=BLANDO)
PATEGRAS = Product(
    id=2, name="Pategras", plu="04567", sold_by_unit=False, cheese_type=SEMI_DURO
)
REGGIANITO = Product(
    id=3, name="Reggianito", plu="12345", sold_by_unit=False, cheese_type=DURO
)


def make_barcode(plu: str, grams: int, prefix: str = "20", check: str = "0") -> str:
    """Build a scale label the way the shop's scale prints it."""
    return f"{prefix}{plu}{grams:05d}{check}"


@dataclass
class InMemoryCatalog(ProductCatalog, CheeseTypeCatalog):
    """In-memory product catalog for tests."""

    products: list[Product] = field(
        default_factory=lambda: [BRIE, PATEGRAS, REGGIANITO]
    )
    cheese_types: list[CheeseType] = field(
        default_factory=lambda: [BLANDO, SEMI_DURO, DURO]
    )
    lookups: list[str] = field(default_factory=list)

    def find_by_plu(self, plu: str) -> Product | None:
        self.lookups.append(plu)
        return next((item for item in self.products if item.plu == plu), None)

    def get_product(self, product_id: int) -> Product | None:
        return next((item for item in self.products if item.id == product_id), None)

    def list_products(self) -> list[Product]:
        return list(self.products)

    def list_cheese_types(self) -> list[CheeseType]:
        return list(self.cheese_types)


@dataclass
class InMemoryUnitStore(UnitStore):
    """In-memory unit store with compare-and-set cuts."""

    units: dict[int, Unit] = field(default_factory=dict)
    next_unit_id: int = 1
    next_partition_id: int = 1
    fail_writes: bool = False

    def create_unit(self, unit: Unit) -> Unit:
        self._check_writable()
        stored = replace(unit, id=self.next_unit_id)
        self.units[stored.id] = stored
        self.next_unit_id += 1
        return stored

    def get_unit(self, unit_id: int) -> Unit | None:
        return self.units.get(unit_id)

    def record_cut(self, previous: Unit, outcome: CutOutcome) -> Unit:
        self._check_writable()
        current = self.units[previous.id]
        if current.current_weight_grams != previous.current_weight_grams:
            raise ConcurrentUpdateError(previous.id, previous.current_weight_grams)
        partition = replace(outcome.partition, id=self.next_partition_id)
        self.next_partition_id += 1
        stored = replace(
            outcome.unit, partitions=(*outcome.unit.partitions[:-1], partition)
        )
        self.units[previous.id] = stored
        return stored

    def update_note(self, unit_id: int, note: str | None) -> Unit:
        self._check_writable()
        stored = replace(self.units[unit_id], note=note)
        self.units[unit_id] = stored
        return stored

    def list_active_units(self) -> list[Unit]:
        return [unit for unit in self.units.values() if unit.active]

    def list_all_units(self) -> list[Unit]:
        return list(self.units.values())

    def add(self, unit: Unit) -> Unit:
        """Seed a unit directly, bypassing the ledger."""
        stored = replace(unit, id=self.next_unit_id) if unit.id is None else unit
        self.units[stored.id] = stored
        self.next_unit_id = max(self.next_unit_id, stored.id) + 1
        return stored

    def _check_writable(self) -> None:
        if self.fail_writes:
            raise RuntimeError("store unavailable")


def make_unit(  # noqa: PLR0913
    product: Product = BRIE,
    initial: int = 1000,
    current: int | None = None,
    unit_id: int | None = None,
    created_at: datetime | None = None,
    note: str | None = None,
) -> Unit:
    """Build a unit whose single cut accounts for any missing weight."""
    remaining = initial if current is None else current
    created = created_at or datetime(2024, 5, 1, 10, 0, tzinfo=UTC)
    partitions = ()
    if remaining < initial:
        partitions = (
            Partition(id=None, weight_grams=initial - remaining, created_at=created),
        )
    return Unit(
        id=unit_id,
        product=product,
        initial_weight_grams=initial,
        current_weight_grams=remaining,
        active=remaining > 0,
        created_at=created,
        partitions=partitions,
        note=note,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
    )


@pytest.fixture
def catalog() -> InMemoryCatalog:
    return InMemoryCatalog()


@pytest.fixture
def unit_store() -> InMemoryUnitStore:
    return InMemoryUnitStore()


@pytest.fixture
def planner(catalog: InMemoryCatalog) -> CutPlanner:
    return CutPlanner(catalog=catalog)


@pytest.fixture
def inventory_service(
    catalog: InMemoryCatalog, unit_store: InMemoryUnitStore, planner: CutPlanner
) -> InventoryService:
    return InventoryService(
        products=catalog,
        cheese_types=catalog,
        units=unit_store,
        planner=planner,
    )


@pytest.fixture
def container(
    settings: Settings, inventory_service: InventoryService
) -> AppContainer:
    return AppContainer(settings=settings, inventory_service=inventory_service)
