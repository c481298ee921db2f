"""Pydantic request and response models for the HTTP API."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from cheese_stock.domain.catalog import CheeseType, Product
from cheese_stock.domain.filters import (
    InventoryView,
    Snapshot,
    StatusFilter,
    UnitFilter,
    UnitStats,
)
from cheese_stock.domain.units import CutOutcome, Partition, Unit


class BarcodeRequest(BaseModel):
    """Scale barcode payload."""

    barcode: str


class CreateUnitRequest(BaseModel):
    """Intake of a new unit from its scale label."""

    barcode: str
    note: str | None = None


class DirectCutRequest(BaseModel):
    """Cut an explicitly entered weight."""

    weight_grams: float | int | str
    note: str | None = None


class ScanCutRequest(BaseModel):
    """Cut down to the weight printed on the remaining piece's label."""

    barcode: str
    note: str | None = None


class AnnotateRequest(BaseModel):
    """Replace the intake note of a unit."""

    note: str | None = None


class UnitQuery(BaseModel):
    """Filter request for inventory and history views."""

    snapshot: Snapshot = Snapshot.HISTORY
    status: StatusFilter = StatusFilter.ALL
    cheese_type: str | None = None
    created_from: date | datetime | None = None
    created_to: date | datetime | None = None
    text: str | None = None
    search_notes: bool = False

    def to_filter(self) -> UnitFilter:
        return UnitFilter(
            status=self.status,
            cheese_type=self.cheese_type,
            created_from=self.created_from,
            created_to=self.created_to,
            text=self.text,
            search_notes=self.search_notes,
        )


class CheeseTypeOut(BaseModel):
    """Cheese type representation."""

    id: int
    name: str

    @classmethod
    def from_domain(cls, cheese_type: CheeseType) -> "CheeseTypeOut":
        return cls(id=cheese_type.id, name=cheese_type.name)


class ProductOut(BaseModel):
    """Product representation."""

    id: int
    name: str
    plu: str
    sold_by_unit: bool
    cheese_type: CheeseTypeOut

    @classmethod
    def from_domain(cls, product: Product) -> "ProductOut":
        return cls(
            id=product.id,
            name=product.name,
            plu=product.plu,
            sold_by_unit=product.sold_by_unit,
            cheese_type=CheeseTypeOut.from_domain(product.cheese_type),
        )


class PartitionOut(BaseModel):
    """Partition representation."""

    id: int | None
    weight_grams: int
    created_at: datetime
    note: str | None

    @classmethod
    def from_domain(cls, partition: Partition) -> "PartitionOut":
        return cls(
            id=partition.id,
            weight_grams=partition.weight_grams,
            created_at=partition.created_at,
            note=partition.note,
        )


class UnitOut(BaseModel):
    """Unit representation with its cuts."""

    id: int | None
    product: ProductOut
    initial_weight_grams: int
    current_weight_grams: int
    cut_weight_grams: int
    active: bool
    created_at: datetime
    note: str | None
    partitions: list[PartitionOut] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, unit: Unit) -> "UnitOut":
        return cls(
            id=unit.id,
            product=ProductOut.from_domain(unit.product),
            initial_weight_grams=unit.initial_weight_grams,
            current_weight_grams=unit.current_weight_grams,
            cut_weight_grams=unit.cut_weight_grams,
            active=unit.active,
            created_at=unit.created_at,
            note=unit.note,
            partitions=[PartitionOut.from_domain(item) for item in unit.partitions],
        )


class CutOut(BaseModel):
    """Result of a cut."""

    unit: UnitOut
    partition: PartitionOut

    @classmethod
    def from_domain(cls, outcome: CutOutcome) -> "CutOut":
        return cls(
            unit=UnitOut.from_domain(outcome.unit),
            partition=PartitionOut.from_domain(outcome.partition),
        )


class StatsOut(BaseModel):
    """Statistics over a filtered view."""

    total: int
    active: int
    inactive: int
    initial_weight_grams: int
    sold_weight_grams: int
    distinct_products: int
    depleted_by_product: dict[str, int]
    sold_weight_by_cheese_type: dict[str, int]

    @classmethod
    def from_domain(cls, stats: UnitStats) -> "StatsOut":
        return cls(
            total=stats.total,
            active=stats.active,
            inactive=stats.inactive,
            initial_weight_grams=stats.initial_weight_grams,
            sold_weight_grams=stats.sold_weight_grams,
            distinct_products=stats.distinct_products,
            depleted_by_product=stats.depleted_by_product,
            sold_weight_by_cheese_type=stats.sold_weight_by_cheese_type,
        )


class InventoryViewOut(BaseModel):
    """Filtered units with statistics."""

    units: list[UnitOut]
    stats: StatsOut

    @classmethod
    def from_domain(cls, view: InventoryView) -> "InventoryViewOut":
        return cls(
            units=[UnitOut.from_domain(unit) for unit in view.units],
            stats=StatsOut.from_domain(view.stats),
        )
