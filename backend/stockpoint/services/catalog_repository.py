"""StockPoint POS — Catalog repository: turns a CatalogQuery into SQL."""
from typing import Any, Protocol

from sqlalchemy import ColumnElement, Select, and_, func, literal, or_, select, true
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from stockpoint.models.catalog import Brand, Category, Product, Variant
from stockpoint.models.stock import StockBatch, StockUnit
from stockpoint.services.catalog_filters import (
    ActiveClause,
    CatalogQuery,
    Clause,
    EqualsClause,
    GroupedThreshold,
    ItemKind,
    LowStockClause,
    RowThreshold,
    SearchClause,
    ShopScopeClause,
)


class CatalogRepository(Protocol):
    """Data access for catalog listings. Both calls must honour the same query."""

    async def fetch_page(self, query: CatalogQuery, offset: int, limit: int) -> list[dict[str, Any]]:
        ...

    async def count(self, query: CatalogQuery) -> int:
        ...


TARGETS = {
    ItemKind.UNIT: StockUnit,
    ItemKind.BATCH: StockBatch,
}

ITEM_FIELDS = {
    ItemKind.UNIT: (
        "id", "shop_id", "variant_id", "primary_imei", "secondary_imei", "serial_number",
        "barcode", "purchase_price", "sale_price", "stock_status", "is_sold", "notes",
        "condition", "vendor_id", "created_at", "updated_at",
    ),
    ItemKind.BATCH: (
        "id", "shop_id", "variant_id", "barcode", "quantity", "purchase_price", "sale_price",
        "low_stock_threshold", "vendor_id", "notes", "created_at", "updated_at",
    ),
}

# Nested objects in each row: key -> (model, projected fields)
DIMENSIONS = (
    ("variant", Variant, ("id", "variant_name", "color", "storage_size", "sku")),
    ("product", Product, ("id", "name")),
    ("brand", Brand, ("id", "name")),
    ("category", Category, ("id", "name")),
)

# Searchable dimension columns
_DIMENSION_SEARCH_COLUMNS = {
    "variant_name": Variant.variant_name,
    "product_name": Product.name,
    "brand_name": Brand.name,
}


def with_dimensions(stmt: Select, target) -> Select:
    """LEFT JOIN variant -> product -> brand -> category; dangling references stay in."""
    return (
        stmt.outerjoin(Variant, Variant.id == target.variant_id)
        .outerjoin(Product, Product.id == Variant.product_id)
        .outerjoin(Brand, Brand.id == Product.brand_id)
        .outerjoin(Category, Category.id == Product.category_id)
    )


def projection(kind: ItemKind) -> list:
    target = TARGETS[kind]
    columns = [getattr(target, f).label(f) for f in ITEM_FIELDS[kind]]
    for key, model, fields in DIMENSIONS:
        columns.extend(getattr(model, f).label(f"{key}__{f}") for f in fields)
    return columns


def row_to_item(kind: ItemKind, row) -> dict[str, Any]:
    """Flat labelled row -> item dict with nested dimension objects (None when unjoined)."""
    mapping = row._mapping
    item = {f: mapping[f] for f in ITEM_FIELDS[kind]}
    for key, _model, fields in DIMENSIONS:
        if mapping[f"{key}__id"] is None:
            item[key] = None
        else:
            item[key] = {f: mapping[f"{key}__{f}"] for f in fields}
    return item


def _search_column(target, field: str):
    column = _DIMENSION_SEARCH_COLUMNS.get(field)
    if column is None:
        column = getattr(target, field)
    return column


def _low_stock_condition(target, clause: LowStockClause) -> ColumnElement[bool]:
    policy = clause.policy
    if isinstance(policy, GroupedThreshold):
        # Aliased so the subquery is not correlated to the outer stock_units
        units = aliased(StockUnit, name="grouped_units")
        low_variants = (
            select(units.variant_id)
            .where(
                units.is_active == True,
                units.is_sold == False,
                units.stock_status != policy.excluded_status,
                units.shop_id.in_(sorted(clause.shop_ids)),
            )
            .group_by(units.variant_id)
            .having(func.count() <= func.coalesce(func.min(units.low_stock_threshold), policy.default_threshold))
        )
        return target.variant_id.in_(low_variants)
    if isinstance(policy, RowThreshold):
        return target.quantity <= target.low_stock_threshold
    raise TypeError(f"Unsupported low-stock policy: {policy!r}")


def clause_condition(target, clause: Clause) -> ColumnElement[bool]:
    if isinstance(clause, ActiveClause):
        return target.is_active == True
    if isinstance(clause, ShopScopeClause):
        return target.shop_id.in_(sorted(clause.shop_ids))
    if isinstance(clause, SearchClause):
        pattern = f"%{clause.term}%"
        return or_(
            *(func.coalesce(_search_column(target, f), literal("")).ilike(pattern) for f in clause.fields)
        )
    if isinstance(clause, EqualsClause):
        return getattr(target, clause.field) == clause.value
    if isinstance(clause, LowStockClause):
        return _low_stock_condition(target, clause)
    raise TypeError(f"Unsupported catalog clause: {clause!r}")


def where_clause(query: CatalogQuery) -> ColumnElement[bool]:
    target = TARGETS[query.kind]
    conditions = [clause_condition(target, c) for c in query.clauses]
    return and_(*conditions) if conditions else true()


class SqlCatalogRepository:
    """CatalogRepository over an injected AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def page_statement(query: CatalogQuery, offset: int, limit: int) -> Select:
        target = TARGETS[query.kind]
        return (
            with_dimensions(select(*projection(query.kind)).select_from(target), target)
            .where(where_clause(query))
            .order_by(target.created_at.desc(), target.id.desc())
            .limit(limit)
            .offset(offset)
        )

    @staticmethod
    def count_statement(query: CatalogQuery) -> Select:
        target = TARGETS[query.kind]
        return with_dimensions(select(func.count()).select_from(target), target).where(where_clause(query))

    async def fetch_page(self, query: CatalogQuery, offset: int, limit: int) -> list[dict[str, Any]]:
        result = await self.db.execute(self.page_statement(query, offset, limit))
        return [row_to_item(query.kind, row) for row in result.all()]

    async def count(self, query: CatalogQuery) -> int:
        result = await self.db.execute(self.count_statement(query))
        return result.scalar_one()
