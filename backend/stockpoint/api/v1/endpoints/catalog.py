"""StockPoint POS — Catalog endpoints. GET /catalog/units, GET /catalog/batches."""
from uuid import UUID

from fastapi import APIRouter, Query

from stockpoint.api.deps import CatalogRepo, UserShopIds
from stockpoint.config import get_settings
from stockpoint.models.stock import ProductCondition, StockStatus
from stockpoint.schemas.catalog import CatalogListResponse, StockBatchRow, StockUnitRow
from stockpoint.services.catalog_filters import parse_flag
from stockpoint.services.catalog_service import CatalogService

settings = get_settings()

router = APIRouter()


@router.get("/units", response_model=CatalogListResponse[StockUnitRow])
async def list_units(
    repo: CatalogRepo,
    user_shop_ids: UserShopIds,
    shop_id: UUID | None = None,
    search: str | None = Query(None, max_length=100),
    low_stock: str | None = None,
    variant_id: UUID | None = None,
    stock_status: StockStatus | None = None,
    condition: ProductCondition | None = None,
    vendor_id: UUID | None = None,
    is_sold: bool | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
):
    """List active serialized units in the caller's shops."""
    result = await CatalogService.list_units(
        repo,
        user_shop_ids,
        shop_id=shop_id,
        search=search,
        low_stock=parse_flag(low_stock),
        variant_id=variant_id,
        stock_status=stock_status.value if stock_status else None,
        condition=condition.value if condition else None,
        vendor_id=vendor_id,
        is_sold=is_sold,
        offset=(page - 1) * limit,
        limit=limit,
    )
    return CatalogListResponse[StockUnitRow].build(result.items, result.total, page, limit)


@router.get("/batches", response_model=CatalogListResponse[StockBatchRow])
async def list_batches(
    repo: CatalogRepo,
    user_shop_ids: UserShopIds,
    shop_id: UUID | None = None,
    search: str | None = Query(None, max_length=100),
    low_stock: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
):
    """List active bulk batches in the caller's shops."""
    result = await CatalogService.list_batches(
        repo,
        user_shop_ids,
        shop_id=shop_id,
        search=search,
        low_stock=parse_flag(low_stock),
        offset=(page - 1) * limit,
        limit=limit,
    )
    return CatalogListResponse[StockBatchRow].build(result.items, result.total, page, limit)
