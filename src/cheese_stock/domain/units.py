"""Domain models for cheese units and their cuts."""

from dataclasses import dataclass
from datetime import datetime

from cheese_stock.domain.catalog import Product


@dataclass(frozen=True)
class Partition:
    """A single recorded cut against a unit."""

    id: int | None
    weight_grams: int
    created_at: datetime
    note: str | None = None


@dataclass(frozen=True)
class Unit:
    """One physical piece of cheese tracked from intake to depletion."""

    id: int | None
    product: Product
    initial_weight_grams: int
    current_weight_grams: int
    active: bool
    created_at: datetime
    partitions: tuple[Partition, ...] = ()
    note: str | None = None

    @property
    def cut_weight_grams(self) -> int:
        """Weight removed so far."""
        return self.initial_weight_grams - self.current_weight_grams

    @property
    def partition_count(self) -> int:
        return len(self.partitions)


@dataclass(frozen=True)
class CutOutcome:
    """Result of applying a cut: the updated unit and the new partition."""

    unit: Unit
    partition: Partition
