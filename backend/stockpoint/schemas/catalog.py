"""StockPoint POS — Catalog listing and stock schemas."""
import math
from datetime import datetime
from decimal import Decimal
from typing import Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel

RowT = TypeVar("RowT")


class VariantRef(BaseModel):
    id: UUID
    variant_name: str | None
    color: str | None
    storage_size: str | None
    sku: str | None


class NamedRef(BaseModel):
    id: UUID
    name: str | None


class _CatalogRow(BaseModel):
    id: UUID
    shop_id: UUID
    variant_id: UUID
    barcode: str | None
    purchase_price: Decimal | None
    vendor_id: UUID | None
    notes: str | None
    created_at: datetime | None
    updated_at: datetime | None
    variant: VariantRef | None
    product: NamedRef | None
    brand: NamedRef | None
    category: NamedRef | None


class StockUnitRow(_CatalogRow):
    primary_imei: str | None
    secondary_imei: str | None
    serial_number: str | None
    sale_price: Decimal
    stock_status: str
    is_sold: bool
    condition: str


class StockBatchRow(_CatalogRow):
    quantity: int
    sale_price: Decimal | None
    low_stock_threshold: int


class CatalogListResponse(BaseModel, Generic[RowT]):
    """Listing payload: {products, total} plus page metadata."""

    products: list[RowT]
    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def build(cls, products: list, total: int, page: int, limit: int) -> "CatalogListResponse":
        return cls(
            products=products,
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit) if limit else 0,
        )


class StockStatusCount(BaseModel):
    stock_status: str
    count: int


class StockSummaryResponse(BaseModel):
    summary: list[StockStatusCount]
    total_value: Decimal
