"""Domain models for inventory queries and statistics."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum

from cheese_stock.domain.units import Unit

ALL_CHEESE_TYPES = "all"


class StatusFilter(StrEnum):
    """Unit status selection."""

    ALL = "all"
    ACTIVE = "active"
    INACTIVE = "inactive"


class Snapshot(StrEnum):
    """Which units a query runs over."""

    CURRENT = "current"
    HISTORY = "history"


@dataclass(frozen=True)
class UnitFilter:
    """Conjunctive filter over units; unset fields always pass."""

    status: StatusFilter = StatusFilter.ALL
    cheese_type: str | None = None
    created_from: datetime | date | None = None
    created_to: datetime | date | None = None
    text: str | None = None
    search_notes: bool = False


@dataclass(frozen=True)
class UnitStats:
    """Statistics derived from a filtered set of units."""

    total: int = 0
    active: int = 0
    inactive: int = 0
    initial_weight_grams: int = 0
    sold_weight_grams: int = 0
    distinct_products: int = 0
    depleted_by_product: dict[str, int] = field(default_factory=dict)
    sold_weight_by_cheese_type: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class InventoryView:
    """Filtered units with their statistics."""

    units: list[Unit]
    stats: UnitStats


@dataclass(frozen=True)
class ProductSales:
    """Depletion summary of a single product over a history snapshot."""

    product_id: int
    depleted_units: int
    sold_weight_grams: int
