"""Domain models for planned cuts."""

from dataclasses import dataclass
from enum import StrEnum


class CutMode(StrEnum):
    """How the cut amount was obtained."""

    DIRECT = "direct"
    SCAN = "scan"
    DEPLETION = "depletion"


@dataclass(frozen=True)
class CutPlan:
    """A validated cut ready to be applied to a unit."""

    weight_grams: int
    mode: CutMode
    note: str | None = None
