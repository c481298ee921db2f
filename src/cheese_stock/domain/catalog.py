"""Domain models for the product catalog."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CheeseType:
    """Hardness category used to classify products."""

    id: int
    name: str


@dataclass(frozen=True)
class Product:
    """A sellable cheese product identified by its scale PLU."""

    id: int
    name: str
    plu: str
    sold_by_unit: bool
    cheese_type: CheeseType
