"""FastAPI application factory."""

from typing import TypeVar

from fastapi import FastAPI, HTTPException, Request, status

from cheese_stock.api.models import (
    AnnotateRequest,
    BarcodeRequest,
    CheeseTypeOut,
    CreateUnitRequest,
    CutOut,
    DirectCutRequest,
    InventoryViewOut,
    ProductOut,
    ScanCutRequest,
    UnitOut,
    UnitQuery,
)
from cheese_stock.app_logging import configure_logging
from cheese_stock.containers import AppContainer
from cheese_stock.domain.errors import (
    BarcodeError,
    CheeseStockError,
    ConcurrentUpdateError,
    CutError,
    InvariantViolation,
    StoreError,
    UnitNotFoundError,
    UnknownProductError,
)
from cheese_stock.domain.filters import ProductSales
from cheese_stock.domain.results import Err, Ok, Result
from cheese_stock.services.inventory import InventoryService

T = TypeVar("T")

_STATUS_BY_ERROR: list[tuple[type[CheeseStockError], int]] = [
    (UnknownProductError, status.HTTP_404_NOT_FOUND),
    (UnitNotFoundError, status.HTTP_404_NOT_FOUND),
    (BarcodeError, status.HTTP_400_BAD_REQUEST),
    (CutError, status.HTTP_400_BAD_REQUEST),
    (ConcurrentUpdateError, status.HTTP_409_CONFLICT),
    (StoreError, status.HTTP_502_BAD_GATEWAY),
    (InvariantViolation, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)

    app = FastAPI()
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/products")
    def list_products(request: Request) -> list[ProductOut]:
        """Return the product catalog."""
        products = _unwrap(_service(request).list_products())
        return [ProductOut.from_domain(product) for product in products]

    @app.get("/products/stock")
    def stock_by_product(request: Request) -> dict[int, int]:
        """Return the number of active units per product id."""
        return _unwrap(_service(request).stock_by_product())

    @app.get("/products/{product_id}/sales")
    def product_sales(product_id: int, request: Request) -> dict[str, int]:
        """Return depleted units and sold weight for a product."""
        sales: ProductSales = _unwrap(_service(request).product_sales(product_id))
        return {
            "product_id": sales.product_id,
            "depleted_units": sales.depleted_units,
            "sold_weight_grams": sales.sold_weight_grams,
        }

    @app.get("/cheese-types")
    def list_cheese_types(request: Request) -> list[CheeseTypeOut]:
        """Return known cheese types."""
        cheese_types = _unwrap(_service(request).list_cheese_types())
        return [CheeseTypeOut.from_domain(item) for item in cheese_types]

    @app.post("/barcodes/decode")
    def decode_barcode(
        payload: BarcodeRequest, request: Request
    ) -> dict[str, object]:
        """Decode a scale barcode without registering anything."""
        decoded = _unwrap(_service(request).decode_barcode(payload.barcode))
        return {
            "plu": decoded.plu,
            "weight_grams": decoded.weight_grams,
            "product": ProductOut.from_domain(decoded.product).model_dump(),
        }

    @app.post("/units", status_code=status.HTTP_201_CREATED)
    def create_unit(payload: CreateUnitRequest, request: Request) -> UnitOut:
        """Register a unit from its intake barcode."""
        unit = _unwrap(
            _service(request).create_unit_from_barcode(payload.barcode, payload.note)
        )
        return UnitOut.from_domain(unit)

    @app.get("/units/{unit_id}")
    def get_unit(unit_id: int, request: Request) -> UnitOut:
        """Return a unit with its cut history."""
        return UnitOut.from_domain(_unwrap(_service(request).get_unit(unit_id)))

    @app.patch("/units/{unit_id}")
    def annotate_unit(
        unit_id: int, payload: AnnotateRequest, request: Request
    ) -> UnitOut:
        """Replace the intake note of a unit."""
        unit = _unwrap(_service(request).annotate_unit(unit_id, payload.note))
        return UnitOut.from_domain(unit)

    @app.post("/units/{unit_id}/cuts", status_code=status.HTTP_201_CREATED)
    def cut_direct(
        unit_id: int, payload: DirectCutRequest, request: Request
    ) -> CutOut:
        """Cut an explicitly entered weight from a unit."""
        outcome = _unwrap(
            _service(request).cut_direct(unit_id, payload.weight_grams, payload.note)
        )
        return CutOut.from_domain(outcome)

    @app.post("/units/{unit_id}/cuts/scan", status_code=status.HTTP_201_CREATED)
    def cut_from_scan(
        unit_id: int, payload: ScanCutRequest, request: Request
    ) -> CutOut:
        """Cut a unit down to the weight on the remaining piece's label."""
        outcome = _unwrap(
            _service(request).cut_from_scan(unit_id, payload.barcode, payload.note)
        )
        return CutOut.from_domain(outcome)

    @app.post("/units/{unit_id}/deplete", status_code=status.HTTP_201_CREATED)
    def deplete(unit_id: int, request: Request) -> CutOut:
        """Sell out the remainder of a unit."""
        return CutOut.from_domain(_unwrap(_service(request).deplete(unit_id)))

    @app.post("/units/query")
    def query_units(query: UnitQuery, request: Request) -> InventoryViewOut:
        """Filter inventory or history and return statistics."""
        view = _unwrap(
            _service(request).filter_and_aggregate(query.to_filter(), query.snapshot)
        )
        return InventoryViewOut.from_domain(view)

    return app


def _service(request: Request) -> InventoryService:
    container: AppContainer = request.app.state.container
    return container.inventory_service


def _unwrap(result: Result[T]) -> T:
    """Return the value of a successful result or raise an HTTP error."""
    if isinstance(result, Ok):
        return result.value
    if isinstance(result, Err):
        raise HTTPException(
            status_code=_status_for(result.error), detail=result.error.to_dict()
        )
    raise TypeError(f"Unexpected result {result!r}")


def _status_for(error: CheeseStockError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST
