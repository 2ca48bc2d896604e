"""StockPoint POS — Catalog filter composition.

A catalog listing is described by a ``CatalogQuery``: the item kind plus an
ordered tuple of filter clauses that are ANDed together. The query is built
once per listing call and handed, unchanged, to both the page query and the
count query, so the two can never disagree on which rows match.

Clauses are plain frozen dataclasses. They carry no SQL; the repository
decides how to evaluate them.
"""
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union
from uuid import UUID

from stockpoint.models.stock import StockStatus

DEFAULT_LOW_STOCK_THRESHOLD = 5


class ItemKind(str, Enum):
    UNIT = "unit"    # StockUnit, individually tracked
    BATCH = "batch"  # StockBatch, count tracked


# Searchable fields per kind. Item fields live on the stock row; the
# ``*_name`` fields come from the joined dimension tables.
UNIT_SEARCH_FIELDS = (
    "barcode",
    "primary_imei",
    "secondary_imei",
    "serial_number",
    "variant_name",
    "product_name",
    "brand_name",
)
BATCH_SEARCH_FIELDS = (
    "barcode",
    "variant_name",
    "product_name",
    "brand_name",
)


def resolve_shop_scope(user_shop_ids: Iterable[UUID], requested_shop_id: UUID | None = None) -> frozenset[UUID]:
    """
    Effective shop filter for a caller.

    A requested shop the caller may see narrows the scope to that shop. Anything
    else, including a shop outside the caller's set, falls back to every shop
    the caller may see.
    """
    authorized = frozenset(user_shop_ids)
    if requested_shop_id is not None and requested_shop_id in authorized:
        return frozenset({requested_shop_id})
    return authorized


def parse_flag(value: str | None) -> bool:
    """Wire-level boolean flag: only the literal string "true" turns it on."""
    return value == "true"


# ── Low-stock policies ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class GroupedThreshold:
    """
    Low stock for individually tracked units.

    Available units (active, unsold, status not 'sold') inside the shop scope
    are grouped by variant. A variant is low when its count is at or below the
    smallest threshold set on any of its units, or ``default_threshold`` when
    none is set.
    """

    default_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD
    excluded_status: str = StockStatus.SOLD.value

    def is_low(self, count: int, thresholds: Iterable[Any]) -> bool:
        configured = [t for t in thresholds if t is not None]
        threshold = min(configured) if configured else self.default_threshold
        return count <= threshold


@dataclass(frozen=True)
class RowThreshold:
    """Low stock for batches: the row's own quantity is at or below its own threshold."""

    def is_low(self, quantity: int, threshold: int) -> bool:
        return quantity <= threshold


LowStockPolicy = Union[GroupedThreshold, RowThreshold]


def low_stock_policy_for(kind: ItemKind, default_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD) -> LowStockPolicy:
    if kind is ItemKind.UNIT:
        return GroupedThreshold(default_threshold=default_threshold)
    return RowThreshold()


# ── Clauses ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ActiveClause:
    name = "active"


@dataclass(frozen=True)
class ShopScopeClause:
    shop_ids: frozenset[UUID]
    name = "shop_scope"


@dataclass(frozen=True)
class SearchClause:
    """Case-insensitive substring match on any of ``fields``; nulls count as ''."""

    term: str
    fields: tuple[str, ...]
    name = "search"


@dataclass(frozen=True)
class EqualsClause:
    field: str
    value: Any

    @property
    def name(self) -> str:
        return self.field


@dataclass(frozen=True)
class LowStockClause:
    policy: LowStockPolicy
    shop_ids: frozenset[UUID]
    name = "low_stock"


Clause = Union[ActiveClause, ShopScopeClause, SearchClause, EqualsClause, LowStockClause]


@dataclass(frozen=True)
class CatalogQuery:
    """What to list: an item kind and the clauses every matching row satisfies."""

    kind: ItemKind
    clauses: tuple[Clause, ...]

    @property
    def clause_names(self) -> list[str]:
        return [c.name for c in self.clauses]

    @property
    def shop_ids(self) -> frozenset[UUID]:
        for clause in self.clauses:
            if isinstance(clause, ShopScopeClause):
                return clause.shop_ids
        return frozenset()


def _base_clauses(scope: frozenset[UUID], search: str | None, fields: tuple[str, ...]) -> list[Clause]:
    clauses: list[Clause] = [ActiveClause(), ShopScopeClause(scope)]
    if search:
        clauses.append(SearchClause(term=search, fields=fields))
    return clauses


def compose_unit_query(
    scope: frozenset[UUID],
    *,
    search: str | None = None,
    low_stock: bool = False,
    variant_id: UUID | None = None,
    stock_status: str | None = None,
    condition: str | None = None,
    vendor_id: UUID | None = None,
    is_sold: bool | None = None,
    default_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
) -> CatalogQuery:
    clauses = _base_clauses(scope, search, UNIT_SEARCH_FIELDS)

    for field, value in (
        ("variant_id", variant_id),
        ("stock_status", stock_status),
        ("condition", condition),
        ("vendor_id", vendor_id),
        ("is_sold", is_sold),
    ):
        if value is not None:
            clauses.append(EqualsClause(field=field, value=value))

    if low_stock:
        clauses.append(LowStockClause(low_stock_policy_for(ItemKind.UNIT, default_threshold), scope))
    return CatalogQuery(kind=ItemKind.UNIT, clauses=tuple(clauses))


def compose_batch_query(
    scope: frozenset[UUID],
    *,
    search: str | None = None,
    low_stock: bool = False,
) -> CatalogQuery:
    clauses = _base_clauses(scope, search, BATCH_SEARCH_FIELDS)
    if low_stock:
        clauses.append(LowStockClause(low_stock_policy_for(ItemKind.BATCH), scope))
    return CatalogQuery(kind=ItemKind.BATCH, clauses=tuple(clauses))
