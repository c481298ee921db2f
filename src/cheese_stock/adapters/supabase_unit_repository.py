"""Supabase repository for cheese units and partitions."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from cheese_stock.adapters.supabase_catalog_repository import (
    PRODUCT_COLUMNS,
    parse_product,
)
from cheese_stock.domain.errors import ConcurrentUpdateError
from cheese_stock.domain.units import CutOutcome, Partition, Unit
from cheese_stock.services.inventory import UnitStore

UNIT_COLUMNS = (
    "id, initial_weight_grams, current_weight_grams, active, created_at, note, "
    f"product:products({PRODUCT_COLUMNS}), "
    "partitions(id, weight_grams, created_at, note)"
)


@dataclass
class SupabaseUnitRepository(UnitStore):
    """Supabase implementation for unit persistence."""

    client: Client

    def create_unit(self, unit: Unit) -> Unit:
        """Insert a unit row and return the stored unit."""
        response = (
            self.client.table("units")
            .insert(
                {
                    "product_id": unit.product.id,
                    "initial_weight_grams": unit.initial_weight_grams,
                    "current_weight_grams": unit.current_weight_grams,
                    "active": unit.active,
                    "created_at": unit.created_at.isoformat(),
                    "note": unit.note,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create unit")
        row = response.data[0]
        return Unit(
            id=int(row["id"]),
            product=unit.product,
            initial_weight_grams=unit.initial_weight_grams,
            current_weight_grams=unit.current_weight_grams,
            active=unit.active,
            created_at=unit.created_at,
            partitions=(),
            note=unit.note,
        )

    def get_unit(self, unit_id: int) -> Unit | None:
        """Return a unit with its partitions, if present."""
        response = (
            self.client.table("units")
            .select(UNIT_COLUMNS)
            .eq("id", unit_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_unit(response.data[0])

    def record_cut(self, previous: Unit, outcome: CutOutcome) -> Unit:
        """Update the unit weight guarded by its previous value, then log the cut."""
        if previous.id is None:
            raise RuntimeError("Cannot cut a unit that was never stored")
        updated = outcome.unit
        response = (
            self.client.table("units")
            .update(
                {
                    "current_weight_grams": updated.current_weight_grams,
                    "active": updated.active,
                }
            )
            .eq("id", previous.id)
            .eq("current_weight_grams", previous.current_weight_grams)
            .execute()
        )
        if not response.data:
            raise ConcurrentUpdateError(previous.id, previous.current_weight_grams)

        partition = outcome.partition
        try:
            inserted = (
                self.client.table("partitions")
                .insert(
                    {
                        "unit_id": previous.id,
                        "weight_grams": partition.weight_grams,
                        "created_at": partition.created_at.isoformat(),
                        "note": partition.note,
                    }
                )
                .execute()
            )
        except Exception:
            self._restore_weight(previous)
            raise
        if not inserted.data:
            self._restore_weight(previous)
            raise RuntimeError("Failed to record partition")

        stored = self.get_unit(previous.id)
        if stored is None:
            raise RuntimeError("Unit disappeared after cut")
        return stored

    def update_note(self, unit_id: int, note: str | None) -> Unit:
        """Replace the intake note of a unit."""
        response = (
            self.client.table("units")
            .update({"note": note})
            .eq("id", unit_id)
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update unit note")
        stored = self.get_unit(unit_id)
        if stored is None:
            raise RuntimeError("Unit disappeared after note update")
        return stored

    def list_active_units(self) -> list[Unit]:
        """Return active units, oldest first."""
        response = (
            self.client.table("units")
            .select(UNIT_COLUMNS)
            .eq("active", True)
            .order("created_at", desc=False)
            .execute()
        )
        return [parse_unit(row) for row in response.data or []]

    def list_all_units(self) -> list[Unit]:
        """Return every unit, newest first."""
        response = (
            self.client.table("units")
            .select(UNIT_COLUMNS)
            .order("created_at", desc=True)
            .execute()
        )
        return [parse_unit(row) for row in response.data or []]

    def _restore_weight(self, previous: Unit) -> None:
        self.client.table("units").update(
            {
                "current_weight_grams": previous.current_weight_grams,
                "active": previous.active,
            }
        ).eq("id", previous.id).execute()


def parse_unit(row: dict[str, object]) -> Unit:
    """Parse a unit row with its embedded product and partitions."""
    partitions = sorted(
        (_parse_partition(item) for item in row.get("partitions") or []),
        key=lambda partition: (partition.created_at, partition.id or 0),
    )
    return Unit(
        id=int(row["id"]),
        product=parse_product(row.get("product") or {}),
        initial_weight_grams=int(row.get("initial_weight_grams", 0)),
        current_weight_grams=int(row.get("current_weight_grams", 0)),
        active=bool(row.get("active", False)),
        created_at=_parse_timestamp(row.get("created_at")),
        partitions=tuple(partitions),
        note=row.get("note"),
    )


def _parse_partition(row: dict[str, object]) -> Partition:
    return Partition(
        id=int(row["id"]),
        weight_grams=int(row.get("weight_grams", 0)),
        created_at=_parse_timestamp(row.get("created_at")),
        note=row.get("note"),
    )


def _parse_timestamp(raw: object) -> datetime:
    if isinstance(raw, str) and raw:
        parsed = datetime.fromisoformat(raw)
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    return datetime.min.replace(tzinfo=UTC)
