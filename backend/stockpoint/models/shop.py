"""StockPoint POS — Shop and UserShop models (tenant boundary)."""
import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from stockpoint.db.base import Base


class ShopType(str, Enum):
    RETAIL_SHOP = "retail_shop"
    WHOLESALER = "wholesaler"
    REPAIR_CENTER = "repair_center"


class Shop(Base):
    """A tenant. Every stock-bearing row belongs to exactly one shop."""

    __tablename__ = "shops"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    owner_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    shop_type: Mapped[str] = mapped_column(String(50), nullable=False, default=ShopType.RETAIL_SHOP.value)
    currency_code: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    phone: Mapped[str | None] = mapped_column(Text, nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default="now()")
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default="now()")


class UserShop(Base):
    """Links a user to a shop they may see. Source of the caller's shop scope."""

    __tablename__ = "user_shop"
    __table_args__ = (UniqueConstraint("user_id", "shop_id", name="uq_user_shop_user_shop"),)

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    shop_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default="now()")
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default="now()")
