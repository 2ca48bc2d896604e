"""StockPoint POS — Stock endpoints. GET /stock/summary, GET /stock/{id}, by IMEI, by barcode."""
from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from stockpoint.api.deps import DbSession, UserShopIds
from stockpoint.schemas.catalog import StockSummaryResponse, StockUnitRow
from stockpoint.schemas.common import ApiResponse
from stockpoint.services.stock_service import StockService

router = APIRouter()


def _found(unit: dict | None) -> ApiResponse[StockUnitRow]:
    if not unit:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Stock item not found")
    return ApiResponse(data=StockUnitRow.model_validate(unit))


@router.get("/summary", response_model=ApiResponse[StockSummaryResponse])
async def get_stock_summary(
    db: DbSession,
    user_shop_ids: UserShopIds,
    shop_id: UUID | None = None,
):
    """Unit counts per status and in-stock sale value."""
    summary = await StockService.get_summary(db, user_shop_ids, shop_id)
    return ApiResponse(data=StockSummaryResponse.model_validate(summary))


@router.get("/imei/{imei}", response_model=ApiResponse[StockUnitRow])
async def get_stock_by_imei(imei: str, db: DbSession, user_shop_ids: UserShopIds):
    """Find a unit by primary or secondary IMEI."""
    return _found(await StockService.get_unit_by_imei(db, user_shop_ids, imei))


@router.get("/barcode/{barcode}", response_model=ApiResponse[StockUnitRow])
async def get_stock_by_barcode(barcode: str, db: DbSession, user_shop_ids: UserShopIds):
    return _found(await StockService.get_unit_by_barcode(db, user_shop_ids, barcode))


@router.get("/{id}", response_model=ApiResponse[StockUnitRow])
async def get_stock(id: UUID, db: DbSession, user_shop_ids: UserShopIds):
    return _found(await StockService.get_unit(db, user_shop_ids, id))
