"""Domain models for scale barcodes."""

from dataclasses import dataclass

from cheese_stock.domain.catalog import Product


@dataclass(frozen=True)
class ScaleBarcode:
    """Fields of a 13-digit weighed-item label."""

    prefix: str
    plu: str
    weight_grams: int
    check_digit: str


@dataclass(frozen=True)
class DecodedBarcode:
    """Barcode resolved against the product catalog."""

    product: Product
    plu: str
    weight_grams: int
