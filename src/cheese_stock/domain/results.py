"""Tagged success/error results returned by the application facade."""

from dataclasses import dataclass
from typing import Generic, TypeVar

from cheese_stock.domain.errors import CheeseStockError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""

    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """Failed outcome carrying a typed error."""

    error: CheeseStockError

    @property
    def ok(self) -> bool:
        return False


Result = Ok[T] | Err
