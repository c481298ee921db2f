"""Cut planning for direct weights, post-cut scans and full depletion."""

import math
from dataclasses import dataclass

from cheese_stock.config import FULL_DEPLETION_NOTE
from cheese_stock.domain.cuts import CutMode, CutPlan
from cheese_stock.domain.errors import (
    ExceedsAvailableError,
    InvalidCutAmountError,
)
from cheese_stock.domain.units import Unit
from cheese_stock.services.barcode import ProductLookup, decode_barcode


@dataclass
class CutPlanner:
    """Turns operator input into validated cut plans.

    Planning never touches the store; the plan is applied by the ledger.
    """

    catalog: ProductLookup
    full_depletion_note: str = FULL_DEPLETION_NOTE

    def plan_direct(
        self, unit: Unit, weight: object, note: str | None = None
    ) -> CutPlan:
        """Plan a cut of an explicitly entered weight."""
        grams = _to_grams(weight)
        if grams is None or grams > unit.current_weight_grams:
            raise InvalidCutAmountError(weight, unit.current_weight_grams)
        return CutPlan(weight_grams=grams, mode=CutMode.DIRECT, note=note)

    def plan_from_scan(
        self, unit: Unit, barcode: str, note: str | None = None
    ) -> CutPlan:
        """Plan a cut from the label printed for the piece that remains."""
        decoded = decode_barcode(barcode, self.catalog)
        remaining = decoded.weight_grams
        if remaining > unit.current_weight_grams:
            raise ExceedsAvailableError(remaining, unit.current_weight_grams)
        return CutPlan(
            weight_grams=unit.current_weight_grams - remaining,
            mode=CutMode.SCAN,
            note=note,
        )

    def plan_full_depletion(self, unit: Unit) -> CutPlan:
        """Plan a cut that sells out whatever is left."""
        return CutPlan(
            weight_grams=unit.current_weight_grams,
            mode=CutMode.DEPLETION,
            note=self.full_depletion_note,
        )


def _to_grams(value: object) -> int | None:
    """Return a non-negative whole number of grams, or None if invalid."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float):
        if not math.isfinite(value) or value < 0 or not value.is_integer():
            return None
        return int(value)
    return None
