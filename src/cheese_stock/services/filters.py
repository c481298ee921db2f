"""Filtering and statistics over unit snapshots.

Everything here is recomputed from scratch on each call; inputs are never
modified and no counters are cached between calls.
"""

from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import UTC, date, datetime, time

from cheese_stock.domain.filters import (
    ALL_CHEESE_TYPES,
    InventoryView,
    ProductSales,
    StatusFilter,
    UnitFilter,
    UnitStats,
)
from cheese_stock.domain.units import Unit


def filter_and_aggregate(
    units: Sequence[Unit], unit_filter: UnitFilter | None = None
) -> InventoryView:
    """Filter units and derive statistics over the filtered result."""
    selected = filter_units(units, unit_filter or UnitFilter())
    return InventoryView(units=selected, stats=aggregate(selected))


def filter_units(units: Iterable[Unit], unit_filter: UnitFilter) -> list[Unit]:
    """Return units passing every predicate, in their original order."""
    created_from = _lower_bound(unit_filter.created_from)
    created_to = _upper_bound(unit_filter.created_to)
    cheese_type = _normalize_cheese_type(unit_filter.cheese_type)
    query = unit_filter.text.lower() if unit_filter.text else None

    selected = []
    for unit in units:
        if not _matches_status(unit, unit_filter.status):
            continue
        if cheese_type and unit.product.cheese_type.name.lower() != cheese_type:
            continue
        created_at = _as_aware(unit.created_at)
        if created_from and created_at < created_from:
            continue
        if created_to and created_at > created_to:
            continue
        if query and not _matches_text(unit, query, unit_filter.search_notes):
            continue
        selected.append(unit)
    return selected


def aggregate(units: Sequence[Unit]) -> UnitStats:
    """Compute totals and breakdowns for a set of units."""
    depleted = [unit for unit in units if not unit.active]
    depleted_by_product: Counter[str] = Counter()
    sold_by_type: Counter[str] = Counter()
    for unit in depleted:
        depleted_by_product[unit.product.name] += 1
        sold_by_type[unit.product.cheese_type.name] += unit.cut_weight_grams

    return UnitStats(
        total=len(units),
        active=len(units) - len(depleted),
        inactive=len(depleted),
        initial_weight_grams=sum(unit.initial_weight_grams for unit in units),
        sold_weight_grams=sum(unit.cut_weight_grams for unit in units),
        distinct_products=len({unit.product.id for unit in units}),
        depleted_by_product=dict(depleted_by_product),
        sold_weight_by_cheese_type=dict(sold_by_type),
    )


def stock_by_product(units: Iterable[Unit]) -> dict[int, int]:
    """Count active units per product id."""
    counts: Counter[int] = Counter(unit.product.id for unit in units if unit.active)
    return dict(counts)


def product_sales(units: Iterable[Unit], product_id: int) -> ProductSales:
    """Summarize depleted units of one product."""
    depleted = [
        unit for unit in units if unit.product.id == product_id and not unit.active
    ]
    return ProductSales(
        product_id=product_id,
        depleted_units=len(depleted),
        sold_weight_grams=sum(unit.cut_weight_grams for unit in depleted),
    )


def _matches_status(unit: Unit, status: StatusFilter) -> bool:
    if status == StatusFilter.ACTIVE:
        return unit.active
    if status == StatusFilter.INACTIVE:
        return not unit.active
    return True


def _matches_text(unit: Unit, query: str, search_notes: bool) -> bool:
    if search_notes:
        return bool(unit.note) and query in unit.note.lower()
    return (
        query in unit.product.name.lower()
        or query in unit.product.plu.lower()
        or (unit.id is not None and query in str(unit.id))
    )


def _normalize_cheese_type(value: str | None) -> str | None:
    if not value:
        return None
    lowered = value.strip().lower()
    if lowered == ALL_CHEESE_TYPES:
        return None
    return lowered


def _lower_bound(value: datetime | date | None) -> datetime | None:
    if value is None:
        return None
    if not isinstance(value, datetime):
        return datetime.combine(value, time.min, tzinfo=UTC)
    return _as_aware(value)


def _upper_bound(value: datetime | date | None) -> datetime | None:
    if value is None:
        return None
    if not isinstance(value, datetime):
        return datetime.combine(value, time.max, tzinfo=UTC)
    return _as_aware(value)


def _as_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value
