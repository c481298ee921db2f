"""Decoding of 13-digit scale barcodes.

Layout of a weighed-item label::

    PP LLLLL WWWWW C
    |  |     |     +-- check digit (present, not verified)
    |  |     +-------- weight in grams, zero padded
    |  +-------------- PLU, matched verbatim
    +----------------- format/country prefix, ignored
"""

from typing import Protocol

from cheese_stock.domain.barcode import DecodedBarcode, ScaleBarcode
from cheese_stock.domain.catalog import Product
from cheese_stock.domain.errors import (
    InvalidWeightError,
    LengthOrFormatError,
    UnknownProductError,
)

BARCODE_LENGTH = 13
_DIGITS = frozenset("0123456789")


class ProductLookup(Protocol):
    """Read access to products by PLU."""

    def find_by_plu(self, plu: str) -> Product | None:
        """Return the product for a PLU, if present."""


def parse_barcode(code: str) -> ScaleBarcode:
    """Split a barcode into its fields without consulting the catalog."""
    if (
        not isinstance(code, str)
        or len(code) != BARCODE_LENGTH
        or not set(code) <= _DIGITS
    ):
        raise LengthOrFormatError(code)

    weight_field = code[7:12]
    weight_grams = int(weight_field)
    if weight_grams <= 0:
        raise InvalidWeightError(weight_field)

    return ScaleBarcode(
        prefix=code[0:2],
        plu=code[2:7],
        weight_grams=weight_grams,
        check_digit=code[12],
    )


def decode_barcode(code: str, catalog: ProductLookup) -> DecodedBarcode:
    """Decode a barcode and resolve its PLU to a product."""
    parsed = parse_barcode(code)
    product = catalog.find_by_plu(parsed.plu)
    if product is None:
        raise UnknownProductError(parsed.plu)
    return DecodedBarcode(
        product=product, plu=parsed.plu, weight_grams=parsed.weight_grams
    )
