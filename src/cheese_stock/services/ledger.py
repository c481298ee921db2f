"""Weight ledger for cheese units.

Every function returns a new ``Unit`` value and leaves its input untouched,
so a rejected operation never leaves partial state behind. Results are
checked against the conservation invariant before they are returned:

    initial_weight_grams == current_weight_grams + sum(partition weights)
"""

import logging
from dataclasses import replace
from datetime import UTC, datetime

from cheese_stock.domain.catalog import Product
from cheese_stock.domain.errors import (
    InvalidCutAmountError,
    InvalidWeightError,
    InvariantViolation,
    OverCutError,
)
from cheese_stock.domain.units import CutOutcome, Partition, Unit

logger = logging.getLogger(__name__)


def create_unit(
    product: Product,
    initial_weight_grams: int,
    note: str | None = None,
    now: datetime | None = None,
) -> Unit:
    """Create a full, active unit for a freshly received piece."""
    if isinstance(initial_weight_grams, bool) or initial_weight_grams <= 0:
        raise InvalidWeightError(initial_weight_grams)
    unit = Unit(
        id=None,
        product=product,
        initial_weight_grams=initial_weight_grams,
        current_weight_grams=initial_weight_grams,
        active=True,
        created_at=now or datetime.now(tz=UTC),
        partitions=(),
        note=_clean_note(note),
    )
    return _verified(unit, "create")


def apply_cut(
    unit: Unit,
    cut_weight_grams: int,
    note: str | None = None,
    now: datetime | None = None,
) -> CutOutcome:
    """Append a partition of ``cut_weight_grams`` and reduce the unit."""
    if isinstance(cut_weight_grams, bool) or cut_weight_grams < 0:
        raise InvalidCutAmountError(cut_weight_grams, unit.current_weight_grams)
    if cut_weight_grams > unit.current_weight_grams:
        raise OverCutError(cut_weight_grams, unit.current_weight_grams)

    partition = Partition(
        id=None,
        weight_grams=cut_weight_grams,
        created_at=now or datetime.now(tz=UTC),
        note=_clean_note(note),
    )
    remaining = unit.current_weight_grams - cut_weight_grams
    updated = replace(
        unit,
        current_weight_grams=remaining,
        active=unit.active and remaining > 0,
        partitions=(*unit.partitions, partition),
    )
    return CutOutcome(unit=_verified(updated, "cut"), partition=partition)


def annotate(unit: Unit, note: str | None) -> Unit:
    """Replace the intake note; weights are left as they are."""
    return _verified(replace(unit, note=_clean_note(note)), "annotate")


def check_invariant(unit: Unit) -> None:
    """Raise ``InvariantViolation`` if the unit's weights are inconsistent."""
    cut_total = sum(partition.weight_grams for partition in unit.partitions)
    if unit.initial_weight_grams != unit.current_weight_grams + cut_total:
        raise InvariantViolation(
            "Unit weights do not add up",
            unit_id=unit.id,
            initial_weight_grams=unit.initial_weight_grams,
            current_weight_grams=unit.current_weight_grams,
            cut_weight_grams=cut_total,
        )
    if unit.current_weight_grams < 0:
        raise InvariantViolation(
            "Unit weight is negative",
            unit_id=unit.id,
            current_weight_grams=unit.current_weight_grams,
        )
    if any(partition.weight_grams < 0 for partition in unit.partitions):
        raise InvariantViolation("Partition weight is negative", unit_id=unit.id)
    # Inactive with weight left is allowed: units can be retired externally.
    if unit.active and unit.current_weight_grams == 0:
        raise InvariantViolation(
            "Depleted unit is still marked active",
            unit_id=unit.id,
            active=unit.active,
            current_weight_grams=unit.current_weight_grams,
        )


def _verified(unit: Unit, operation: str) -> Unit:
    try:
        check_invariant(unit)
    except InvariantViolation as exc:
        logger.error(
            "Ledger invariant violated during %s: %s",
            operation,
            exc.context,
            extra={"unit_id": unit.id},
        )
        raise
    return unit


def _clean_note(note: str | None) -> str | None:
    if note is None:
        return None
    stripped = note.strip()
    return stripped or None
