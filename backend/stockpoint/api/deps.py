"""StockPoint POS — FastAPI dependencies (auth, DB, shop scope, repositories)."""
from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stockpoint.db.session import get_db
from stockpoint.models.shop import UserShop
from stockpoint.services.catalog_repository import CatalogRepository, SqlCatalogRepository

DbSession = Annotated[AsyncSession, Depends(get_db)]


class CurrentUser:
    """User identity from the JWT — set on request.state by middleware."""

    def __init__(
        self,
        id: UUID,
        email: str,
        role: str,
        shop_ids: list[UUID] | None = None,
    ):
        self.id = id
        self.email = email
        self.role = role
        # None = resolve from user_shop; list = shops carried in the token
        self.shop_ids: list[UUID] | None = shop_ids


async def require_auth(request: Request) -> CurrentUser:
    """Require authenticated user. Raise 401 if not logged in."""
    user = getattr(request.state, "user", None)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user


async def get_user_shop_ids(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_auth),
) -> list[UUID]:
    """Shops the caller may see: the token's shop_ids claim, else the user_shop links."""
    if user.shop_ids is not None:
        return list(user.shop_ids)
    result = await db.execute(select(UserShop.shop_id).where(UserShop.user_id == user.id))
    return list(result.scalars().all())


def get_catalog_repository(db: AsyncSession = Depends(get_db)) -> CatalogRepository:
    return SqlCatalogRepository(db)


UserShopIds = Annotated[list[UUID], Depends(get_user_shop_ids)]
CatalogRepo = Annotated[CatalogRepository, Depends(get_catalog_repository)]
