"""StockPoint POS — CatalogService: paginated, multi-tenant stock listings."""
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from stockpoint.config import get_settings
from stockpoint.services.catalog_filters import (
    CatalogQuery,
    compose_batch_query,
    compose_unit_query,
    resolve_shop_scope,
)
from stockpoint.services.catalog_repository import CatalogRepository

logger = logging.getLogger(__name__)


@dataclass
class CatalogPage:
    items: list[dict[str, Any]] = field(default_factory=list)
    total: int = 0


class CatalogService:
    """List serialized units and bulk batches with search, low-stock and scope filters."""

    @staticmethod
    async def list_units(
        repo: CatalogRepository,
        user_shop_ids: Iterable[UUID],
        *,
        shop_id: UUID | None = None,
        search: str | None = None,
        low_stock: bool = False,
        variant_id: UUID | None = None,
        stock_status: str | None = None,
        condition: str | None = None,
        vendor_id: UUID | None = None,
        is_sold: bool | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> CatalogPage:
        scope = resolve_shop_scope(user_shop_ids, shop_id)
        query = compose_unit_query(
            scope,
            search=search,
            low_stock=low_stock,
            variant_id=variant_id,
            stock_status=stock_status,
            condition=condition,
            vendor_id=vendor_id,
            is_sold=is_sold,
            default_threshold=get_settings().DEFAULT_LOW_STOCK_THRESHOLD,
        )
        return await CatalogService.run(repo, query, offset, limit)

    @staticmethod
    async def list_batches(
        repo: CatalogRepository,
        user_shop_ids: Iterable[UUID],
        *,
        shop_id: UUID | None = None,
        search: str | None = None,
        low_stock: bool = False,
        offset: int = 0,
        limit: int = 20,
    ) -> CatalogPage:
        scope = resolve_shop_scope(user_shop_ids, shop_id)
        query = compose_batch_query(scope, search=search, low_stock=low_stock)
        return await CatalogService.run(repo, query, offset, limit)

    @staticmethod
    async def run(repo: CatalogRepository, query: CatalogQuery, offset: int, limit: int) -> CatalogPage:
        """Page and count over the same query. offset/limit go to the store as given."""
        logger.debug(
            "Catalog listing kind=%s shops=%d filters=%s offset=%s limit=%s",
            query.kind.value, len(query.shop_ids), query.clause_names, offset, limit,
        )
        items = await repo.fetch_page(query, offset, limit)
        total = await repo.count(query)
        logger.debug("Catalog listing kind=%s returned %d of %d", query.kind.value, len(items), total)
        return CatalogPage(items=items, total=total)
