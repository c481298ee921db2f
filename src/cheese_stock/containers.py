"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from cheese_stock.adapters.supabase_catalog_repository import (
    SupabaseCatalogRepository,
)
from cheese_stock.adapters.supabase_unit_repository import SupabaseUnitRepository
from cheese_stock.config import Settings
from cheese_stock.services.cuts import CutPlanner
from cheese_stock.services.inventory import InventoryService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    inventory_service: InventoryService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    catalog_repository = SupabaseCatalogRepository(supabase_client)
    unit_repository = SupabaseUnitRepository(supabase_client)
    planner = CutPlanner(
        catalog=catalog_repository,
        full_depletion_note=resolved_settings.full_depletion_note,
    )
    inventory_service = InventoryService(
        products=catalog_repository,
        cheese_types=catalog_repository,
        units=unit_repository,
        planner=planner,
        default_cut_note=resolved_settings.default_cut_note,
    )
    return AppContainer(
        settings=resolved_settings,
        inventory_service=inventory_service,
    )
