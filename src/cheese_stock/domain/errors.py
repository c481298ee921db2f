"""Typed errors for barcode decoding, cuts and the unit ledger.

Every error carries a machine-readable ``code`` and a ``context`` dict with
the offending values, so callers can render a message without parsing the
exception text.

    CheeseStockError
    +-- BarcodeError
    |   +-- LengthOrFormatError
    |   +-- InvalidWeightError
    |   +-- UnknownProductError
    +-- CutError
    |   +-- InvalidCutAmountError
    |   +-- ExceedsAvailableError
    |   +-- OverCutError
    +-- UnitNotFoundError
    +-- ConcurrentUpdateError
    +-- StoreError
    +-- InvariantViolation
"""


class CheeseStockError(Exception):
    """Base class for all recoverable inventory errors."""

    code: str = "CHEESE_STOCK_ERROR"

    def __init__(self, message: str, **context: object) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, object]:
        """Serialize the error for API responses."""
        return {"code": self.code, "message": self.message, **self.context}


class BarcodeError(CheeseStockError):
    """A scale barcode could not be decoded."""

    code = "BARCODE_ERROR"


class LengthOrFormatError(BarcodeError):
    """Barcode is not exactly 13 ASCII digits."""

    code = "BARCODE_LENGTH_OR_FORMAT"

    def __init__(self, barcode: object) -> None:
        if isinstance(barcode, str):
            length: int | None = len(barcode)
            message = f"Barcode must be exactly 13 digits, got {length} characters"
        else:
            message = f"Barcode must be a string, got {type(barcode).__name__}"
            length = None
        super().__init__(message, barcode=barcode, length=length)


class InvalidWeightError(BarcodeError):
    """Weight is not a strictly positive integer of grams."""

    code = "INVALID_WEIGHT"

    def __init__(self, weight: object) -> None:
        super().__init__(f"Invalid weight: {weight!r}", weight=weight)


class UnknownProductError(BarcodeError):
    """PLU does not resolve to any catalog product."""

    code = "UNKNOWN_PRODUCT"

    def __init__(self, plu: str) -> None:
        super().__init__(f"No product found with PLU {plu}", plu=plu)
        self.plu = plu


class CutError(CheeseStockError):
    """A cut request violates the unit's remaining weight."""

    code = "CUT_ERROR"


class InvalidCutAmountError(CutError):
    """Cut amount is not a finite, non-negative whole number of grams."""

    code = "INVALID_CUT_AMOUNT"

    def __init__(self, amount: object, available_grams: int) -> None:
        super().__init__(
            f"Invalid cut amount {amount!r} (available {available_grams}g)",
            amount=amount,
            available_grams=available_grams,
        )


class ExceedsAvailableError(CutError):
    """Scanned remaining weight is greater than the unit's current weight."""

    code = "EXCEEDS_AVAILABLE"

    def __init__(self, scanned_grams: int, available_grams: int) -> None:
        super().__init__(
            f"Scanned weight {scanned_grams}g exceeds available {available_grams}g",
            scanned_grams=scanned_grams,
            available_grams=available_grams,
        )


class OverCutError(CutError):
    """Requested cut is larger than what remains of the unit."""

    code = "OVER_CUT"

    def __init__(self, requested_grams: int, available_grams: int) -> None:
        super().__init__(
            f"Cannot cut {requested_grams}g, only {available_grams}g available",
            requested_grams=requested_grams,
            available_grams=available_grams,
        )


class UnitNotFoundError(CheeseStockError):
    """Unit id is not known to the store."""

    code = "UNIT_NOT_FOUND"

    def __init__(self, unit_id: int) -> None:
        super().__init__(f"Unit {unit_id} not found", unit_id=unit_id)


class ConcurrentUpdateError(CheeseStockError):
    """Another writer changed the unit between read and write."""

    code = "CONCURRENT_UPDATE"

    def __init__(self, unit_id: int | None, expected_grams: int) -> None:
        super().__init__(
            f"Unit {unit_id} changed while cutting (expected {expected_grams}g)",
            unit_id=unit_id,
            expected_grams=expected_grams,
        )


class StoreError(CheeseStockError):
    """The external store failed to answer a request."""

    code = "STORE_ERROR"


class InvariantViolation(CheeseStockError):
    """Weight conservation failed after a ledger operation.

    This is a defect, not a user error; the operation is aborted.
    """

    code = "INVARIANT_VIOLATION"
