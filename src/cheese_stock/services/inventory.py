"""Inventory application service.

This is the surface presentation code talks to. Each operation returns
``Ok`` or ``Err`` instead of raising, and store failures are reported as
``StoreError`` without any retry.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol, TypeVar

from cheese_stock.config import DEFAULT_CUT_NOTE
from cheese_stock.domain.barcode import DecodedBarcode
from cheese_stock.domain.catalog import CheeseType, Product
from cheese_stock.domain.cuts import CutPlan
from cheese_stock.domain.errors import (
    CheeseStockError,
    InvariantViolation,
    StoreError,
    UnitNotFoundError,
)
from cheese_stock.domain.filters import (
    InventoryView,
    ProductSales,
    Snapshot,
    UnitFilter,
)
from cheese_stock.domain.results import Err, Ok, Result
from cheese_stock.domain.units import CutOutcome, Unit
from cheese_stock.services import filters, ledger
from cheese_stock.services.barcode import ProductLookup, decode_barcode
from cheese_stock.services.cuts import CutPlanner

logger = logging.getLogger(__name__)

T = TypeVar("T")

LOCK_STRIPES = 64


class ProductCatalog(ProductLookup, Protocol):
    """Read access to the product catalog."""

    def get_product(self, product_id: int) -> Product | None:
        """Return a product by id, if present."""

    def list_products(self) -> list[Product]:
        """Return all products."""


class CheeseTypeCatalog(Protocol):
    """Read access to cheese types."""

    def list_cheese_types(self) -> list[CheeseType]:
        """Return all cheese types."""


class UnitStore(Protocol):
    """Persistence interface for units and their partitions."""

    def create_unit(self, unit: Unit) -> Unit:
        """Persist a new unit and return it with its id."""

    def get_unit(self, unit_id: int) -> Unit | None:
        """Return a unit with its partitions, if present."""

    def record_cut(self, previous: Unit, outcome: CutOutcome) -> Unit:
        """Persist a cut if the unit still has ``previous`` weight.

        Raises ``ConcurrentUpdateError`` when the stored weight changed.
        """

    def update_note(self, unit_id: int, note: str | None) -> Unit:
        """Replace a unit's intake note and return the unit."""

    def list_active_units(self) -> list[Unit]:
        """Return units with weight remaining."""

    def list_all_units(self) -> list[Unit]:
        """Return every unit ever received."""


@dataclass
class InventoryService:
    """Application service for unit intake, cuts and queries."""

    products: ProductCatalog
    cheese_types: CheeseTypeCatalog
    units: UnitStore
    planner: CutPlanner
    default_cut_note: str = DEFAULT_CUT_NOTE
    _locks: tuple[threading.Lock, ...] = field(
        default_factory=lambda: tuple(threading.Lock() for _ in range(LOCK_STRIPES)),
        repr=False,
    )

    def decode_barcode(self, barcode: str) -> Result[DecodedBarcode]:
        """Decode a scale barcode against the catalog."""
        return _run("decode_barcode", lambda: decode_barcode(barcode, self.products))

    def create_unit_from_barcode(
        self, barcode: str, note: str | None = None
    ) -> Result[Unit]:
        """Register a new unit from its intake label."""

        def create() -> Unit:
            decoded = decode_barcode(barcode, self.products)
            unit = ledger.create_unit(decoded.product, decoded.weight_grams, note)
            created = _call_store(lambda: self.units.create_unit(unit))
            logger.info(
                "Unit created",
                extra={
                    "unit_id": created.id,
                    "plu": decoded.plu,
                    "weight_grams": decoded.weight_grams,
                },
            )
            return created

        return _run("create_unit_from_barcode", create)

    def get_unit(self, unit_id: int) -> Result[Unit]:
        """Return a unit by id."""
        return _run("get_unit", lambda: self._load_unit(unit_id))

    def cut_direct(
        self, unit_id: int, weight: object, note: str | None = None
    ) -> Result[CutOutcome]:
        """Cut an explicitly entered weight from a unit."""
        return self._cut(
            "cut_direct",
            unit_id,
            lambda unit: self.planner.plan_direct(unit, weight, note),
        )

    def cut_from_scan(
        self, unit_id: int, barcode: str, note: str | None = None
    ) -> Result[CutOutcome]:
        """Cut a unit down to the weight printed on a fresh label."""
        return self._cut(
            "cut_from_scan",
            unit_id,
            lambda unit: self.planner.plan_from_scan(unit, barcode, note),
        )

    def deplete(self, unit_id: int) -> Result[CutOutcome]:
        """Sell out the remainder of a unit."""
        return self._cut("deplete", unit_id, self.planner.plan_full_depletion)

    def annotate_unit(self, unit_id: int, note: str | None) -> Result[Unit]:
        """Replace a unit's intake note."""

        def annotate() -> Unit:
            unit = self._load_unit(unit_id)
            annotated = ledger.annotate(unit, note)
            return _call_store(lambda: self.units.update_note(unit_id, annotated.note))

        return _run("annotate_unit", annotate)

    def filter_and_aggregate(
        self,
        unit_filter: UnitFilter | None = None,
        snapshot: Snapshot = Snapshot.HISTORY,
    ) -> Result[InventoryView]:
        """Filter the chosen snapshot and compute its statistics."""
        return _run(
            "filter_and_aggregate",
            lambda: filters.filter_and_aggregate(
                self._snapshot(snapshot), unit_filter
            ),
        )

    def stock_by_product(self) -> Result[dict[int, int]]:
        """Count active units per product id."""
        return _run(
            "stock_by_product",
            lambda: filters.stock_by_product(self._snapshot(Snapshot.CURRENT)),
        )

    def product_sales(self, product_id: int) -> Result[ProductSales]:
        """Return depletion totals for a product over the full history."""
        return _run(
            "product_sales",
            lambda: filters.product_sales(
                self._snapshot(Snapshot.HISTORY), product_id
            ),
        )

    def list_products(self) -> Result[list[Product]]:
        """Return the product catalog."""
        return _run(
            "list_products", lambda: _call_store(self.products.list_products)
        )

    def list_cheese_types(self) -> Result[list[CheeseType]]:
        """Return known cheese types."""
        return _run(
            "list_cheese_types",
            lambda: _call_store(self.cheese_types.list_cheese_types),
        )

    def _cut(
        self, operation: str, unit_id: int, plan: Callable[[Unit], CutPlan]
    ) -> Result[CutOutcome]:
        def cut() -> CutOutcome:
            with self._lock_for(unit_id):
                unit = self._load_unit(unit_id)
                cut_plan = plan(unit)
                outcome = ledger.apply_cut(
                    unit, cut_plan.weight_grams, cut_plan.note or self.default_cut_note
                )
                stored = _call_store(lambda: self.units.record_cut(unit, outcome))
                try:
                    ledger.check_invariant(stored)
                except InvariantViolation as exc:
                    # The cut is already committed.
                    logger.error(
                        "Stored unit %s inconsistent after cut: %s",
                        unit_id,
                        exc.context,
                    )
            logger.info(
                "Unit cut",
                extra={
                    "unit_id": unit_id,
                    "mode": cut_plan.mode.value,
                    "weight_grams": cut_plan.weight_grams,
                    "remaining_grams": stored.current_weight_grams,
                },
            )
            return CutOutcome(unit=stored, partition=stored.partitions[-1])

        return _run(operation, cut)

    def _load_unit(self, unit_id: int) -> Unit:
        unit = _call_store(lambda: self.units.get_unit(unit_id))
        if unit is None:
            raise UnitNotFoundError(unit_id)
        return unit

    def _snapshot(self, snapshot: Snapshot) -> list[Unit]:
        if snapshot == Snapshot.CURRENT:
            return _call_store(self.units.list_active_units)
        return _call_store(self.units.list_all_units)

    def _lock_for(self, unit_id: int) -> threading.Lock:
        return self._locks[hash(unit_id) % len(self._locks)]


def _call_store(call: Callable[[], T]) -> T:
    """Invoke the external store, wrapping unexpected failures."""
    try:
        return call()
    except CheeseStockError:
        raise
    except Exception as exc:
        logger.exception("Store request failed")
        raise StoreError(
            "Inventory store request failed", reason=type(exc).__name__
        ) from exc


def _run(operation: str, call: Callable[[], T]) -> Result[T]:
    try:
        return Ok(call())
    except InvariantViolation as exc:
        logger.error("Aborted %s: %s", operation, exc.message)
        return Err(exc)
    except CheeseStockError as exc:
        logger.warning("Rejected %s: %s", operation, exc.message)
        return Err(exc)
