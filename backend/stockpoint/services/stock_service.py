"""StockPoint POS — StockService: unit lookups and stock summary within the caller's shops."""
from collections.abc import Iterable
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import ColumnElement, Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from stockpoint.models.stock import StockStatus, StockUnit
from stockpoint.services.catalog_filters import ItemKind, resolve_shop_scope
from stockpoint.services.catalog_repository import projection, row_to_item, with_dimensions


class StockService:
    """Read-side helpers over serialized stock units."""

    @staticmethod
    def unit_lookup_statement(user_shop_ids: Iterable[UUID], *conditions: ColumnElement[bool]) -> Select:
        return (
            with_dimensions(select(*projection(ItemKind.UNIT)).select_from(StockUnit), StockUnit)
            .where(StockUnit.shop_id.in_(sorted(set(user_shop_ids))), *conditions)
            .limit(1)
        )

    @staticmethod
    async def _first_unit(db: AsyncSession, stmt: Select) -> dict[str, Any] | None:
        row = (await db.execute(stmt)).first()
        return row_to_item(ItemKind.UNIT, row) if row else None

    @staticmethod
    async def get_unit(db: AsyncSession, user_shop_ids: Iterable[UUID], id: UUID) -> dict[str, Any] | None:
        stmt = StockService.unit_lookup_statement(user_shop_ids, StockUnit.id == id)
        return await StockService._first_unit(db, stmt)

    @staticmethod
    async def get_unit_by_imei(db: AsyncSession, user_shop_ids: Iterable[UUID], imei: str) -> dict[str, Any] | None:
        stmt = StockService.unit_lookup_statement(
            user_shop_ids,
            or_(StockUnit.primary_imei == imei, StockUnit.secondary_imei == imei),
        )
        return await StockService._first_unit(db, stmt)

    @staticmethod
    async def get_unit_by_barcode(db: AsyncSession, user_shop_ids: Iterable[UUID], barcode: str) -> dict[str, Any] | None:
        stmt = StockService.unit_lookup_statement(user_shop_ids, StockUnit.barcode == barcode)
        return await StockService._first_unit(db, stmt)

    @staticmethod
    async def get_summary(
        db: AsyncSession,
        user_shop_ids: Iterable[UUID],
        shop_id: UUID | None = None,
    ) -> dict[str, Any]:
        """Unit counts per status and total sale value of in-stock units."""
        scope = resolve_shop_scope(user_shop_ids, shop_id)
        shop_condition = StockUnit.shop_id.in_(sorted(scope))

        counts = await db.execute(
            select(StockUnit.stock_status, func.count().label("count"))
            .where(shop_condition)
            .group_by(StockUnit.stock_status)
            .order_by(StockUnit.stock_status)
        )
        total_value = (await db.execute(
            select(func.coalesce(func.sum(StockUnit.sale_price), 0))
            .where(shop_condition, StockUnit.stock_status == StockStatus.IN_STOCK.value)
        )).scalar_one()

        return {
            "summary": [{"stock_status": status, "count": count} for status, count in counts.all()],
            "total_value": Decimal(str(total_value or 0)),
        }
