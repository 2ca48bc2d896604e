"""create shops, catalog dimensions, stock units and batches

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def _id() -> sa.Column:
    return sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()"))


def upgrade() -> None:
    # Enable pgcrypto for gen_random_uuid()
    op.execute('CREATE EXTENSION IF NOT EXISTS "pgcrypto"')

    op.create_table(
        "shops",
        _id(),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("owner_id", UUID(as_uuid=True), nullable=False),
        sa.Column("shop_type", sa.String(50), nullable=False, server_default="retail_shop"),
        sa.Column("currency_code", sa.String(3), nullable=False, server_default="USD"),
        sa.Column("phone", sa.Text(), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "user_shop",
        _id(),
        sa.Column("user_id", UUID(as_uuid=True), nullable=False),
        sa.Column("shop_id", UUID(as_uuid=True), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_user_shop_user_id", "user_shop", ["user_id"], unique=False)
    op.create_unique_constraint("uq_user_shop_user_shop", "user_shop", ["user_id", "shop_id"])

    for table in ("category", "brand"):
        op.create_table(
            table,
            _id(),
            sa.Column("name", sa.Text(), nullable=False, unique=True),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
            *_timestamps(),
        )

    op.create_table(
        "product",
        _id(),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("category_id", UUID(as_uuid=True), nullable=False),
        sa.Column("brand_id", UUID(as_uuid=True), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        *_timestamps(),
    )

    op.create_table(
        "variant",
        _id(),
        sa.Column("product_id", UUID(as_uuid=True), nullable=False),
        sa.Column("variant_name", sa.Text(), nullable=False),
        sa.Column("color", sa.Text(), nullable=True),
        sa.Column("storage_size", sa.Text(), nullable=True),
        sa.Column("sku", sa.Text(), nullable=True),
        sa.Column("tracking_mode", sa.String(20), nullable=False, server_default="serialized"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        *_timestamps(),
    )
    op.create_index("ix_variant_product_id", "variant", ["product_id"], unique=False)

    op.create_table(
        "stock_units",
        _id(),
        sa.Column("variant_id", UUID(as_uuid=True), nullable=False),
        sa.Column("shop_id", UUID(as_uuid=True), nullable=False),
        sa.Column("sale_item_id", UUID(as_uuid=True), nullable=True),
        sa.Column("primary_imei", sa.Text(), nullable=True),
        sa.Column("secondary_imei", sa.Text(), nullable=True),
        sa.Column("serial_number", sa.Text(), nullable=True),
        sa.Column("barcode", sa.Text(), nullable=True),
        sa.Column("purchase_price", sa.Numeric(10, 2), nullable=True),
        sa.Column("sale_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("stock_status", sa.String(20), nullable=False, server_default="in_stock"),
        sa.Column("is_sold", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("condition", sa.String(10), nullable=False, server_default="new"),
        sa.Column("vendor_id", UUID(as_uuid=True), nullable=True),
        sa.Column("low_stock_threshold", sa.Numeric(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        *_timestamps(),
        sa.CheckConstraint("sale_price > 0", name="ck_stock_units_sale_price_positive"),
    )
    op.create_index("ix_stock_units_shop_id", "stock_units", ["shop_id"], unique=False)
    op.create_index("ix_stock_units_variant_id", "stock_units", ["variant_id"], unique=False)
    op.create_index("ix_stock_units_shop_created", "stock_units", ["shop_id", "created_at"], unique=False)

    op.create_table(
        "stock_batches",
        _id(),
        sa.Column("variant_id", UUID(as_uuid=True), nullable=False),
        sa.Column("shop_id", UUID(as_uuid=True), nullable=False),
        sa.Column("barcode", sa.Text(), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("purchase_price", sa.Numeric(10, 2), nullable=True),
        sa.Column("sale_price", sa.Numeric(10, 2), nullable=True),
        sa.Column("low_stock_threshold", sa.Integer(), nullable=False, server_default="5"),
        sa.Column("vendor_id", UUID(as_uuid=True), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        *_timestamps(),
        sa.CheckConstraint("quantity >= 0", name="ck_stock_batches_quantity_non_negative"),
    )
    op.create_index("ix_stock_batches_shop_id", "stock_batches", ["shop_id"], unique=False)
    op.create_index("ix_stock_batches_variant_id", "stock_batches", ["variant_id"], unique=False)
    op.create_index("ix_stock_batches_shop_created", "stock_batches", ["shop_id", "created_at"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_stock_batches_shop_created", table_name="stock_batches")
    op.drop_index("ix_stock_batches_variant_id", table_name="stock_batches")
    op.drop_index("ix_stock_batches_shop_id", table_name="stock_batches")
    op.drop_table("stock_batches")

    op.drop_index("ix_stock_units_shop_created", table_name="stock_units")
    op.drop_index("ix_stock_units_variant_id", table_name="stock_units")
    op.drop_index("ix_stock_units_shop_id", table_name="stock_units")
    op.drop_table("stock_units")

    op.drop_index("ix_variant_product_id", table_name="variant")
    op.drop_table("variant")
    op.drop_table("product")
    op.drop_table("brand")
    op.drop_table("category")

    op.drop_constraint("uq_user_shop_user_shop", "user_shop", type_="unique")
    op.drop_index("ix_user_shop_user_id", table_name="user_shop")
    op.drop_table("user_shop")
    op.drop_table("shops")
