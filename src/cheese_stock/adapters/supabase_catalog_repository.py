"""Supabase-backed product and cheese type catalog."""

from dataclasses import dataclass

from supabase import Client

from cheese_stock.domain.catalog import CheeseType, Product
from cheese_stock.services.inventory import CheeseTypeCatalog, ProductCatalog

PRODUCT_COLUMNS = "id, name, plu, sold_by_unit, cheese_type:cheese_types(id, name)"


@dataclass
class SupabaseCatalogRepository(ProductCatalog, CheeseTypeCatalog):
    """Supabase implementation for catalog lookups."""

    client: Client

    def find_by_plu(self, plu: str) -> Product | None:
        """Return the product with a PLU, if present."""
        response = (
            self.client.table("products")
            .select(PRODUCT_COLUMNS)
            .eq("plu", plu)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_product(response.data[0])

    def get_product(self, product_id: int) -> Product | None:
        """Return a product by id, if present."""
        response = (
            self.client.table("products")
            .select(PRODUCT_COLUMNS)
            .eq("id", product_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_product(response.data[0])

    def list_products(self) -> list[Product]:
        """Return all products ordered by name."""
        response = (
            self.client.table("products")
            .select(PRODUCT_COLUMNS)
            .order("name", desc=False)
            .execute()
        )
        return [parse_product(row) for row in response.data or []]

    def list_cheese_types(self) -> list[CheeseType]:
        """Return all cheese types."""
        response = (
            self.client.table("cheese_types")
            .select("id, name")
            .order("id", desc=False)
            .execute()
        )
        return [_parse_cheese_type(row) for row in response.data or []]


def parse_product(row: dict[str, object]) -> Product:
    """Parse a product row with its embedded cheese type."""
    cheese_type_row = row.get("cheese_type") or {}
    return Product(
        id=int(row["id"]),
        name=str(row.get("name", "")),
        plu=str(row.get("plu", "")),
        sold_by_unit=bool(row.get("sold_by_unit", False)),
        cheese_type=_parse_cheese_type(cheese_type_row),
    )


def _parse_cheese_type(row: dict[str, object]) -> CheeseType:
    return CheeseType(id=int(row.get("id", 0)), name=str(row.get("name", "")))
