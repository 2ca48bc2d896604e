import asyncio
import random
import uuid
from decimal import Decimal

from sqlalchemy import select

from stockpoint.db.session import async_session_maker
from stockpoint.models.catalog import Brand, Category, Product, TrackingMode, Variant
from stockpoint.models.shop import Shop, ShopType, UserShop
from stockpoint.models.stock import ProductCondition, StockBatch, StockStatus, StockUnit

# Fixed owner so a dev token with this `sub` sees the seeded shops
DEV_OWNER_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")


async def _get_or_create(db, model, **fields):
    result = await db.execute(select(model).filter_by(**fields).limit(1))
    obj = result.scalar_one_or_none()
    if not obj:
        obj = model(**fields)
        db.add(obj)
        await db.flush()
    return obj


def _imei() -> str:
    return "".join(str(random.randint(0, 9)) for _ in range(15))


async def seed_database():
    print("Connecting to database for seeding...")
    async with async_session_maker() as db:

        # 1. Shops owned by the dev user
        shops = []
        for name, shop_type in (
            ("Downtown Mobiles", ShopType.RETAIL_SHOP),
            ("Mall Kiosk", ShopType.RETAIL_SHOP),
            ("Fix-It Repair Center", ShopType.REPAIR_CENTER),
        ):
            result = await db.execute(select(Shop).where(Shop.name == name, Shop.owner_id == DEV_OWNER_ID))
            shop = result.scalar_one_or_none()
            if not shop:
                shop = Shop(name=name, owner_id=DEV_OWNER_ID, shop_type=shop_type.value)
                db.add(shop)
                await db.flush()
            await _get_or_create(db, UserShop, user_id=DEV_OWNER_ID, shop_id=shop.id)
            shops.append(shop)
        print(f"Using {len(shops)} shops for owner {DEV_OWNER_ID}")

        # 2. Catalog dimensions
        phones = await _get_or_create(db, Category, name="Smartphones")
        accessories = await _get_or_create(db, Category, name="Accessories")
        brands = [await _get_or_create(db, Brand, name=n) for n in ("Apple", "Samsung", "Xiaomi")]

        variants = []
        for brand in brands:
            product = await _get_or_create(
                db, Product, name=f"{brand.name} Flagship", brand_id=brand.id, category_id=phones.id,
            )
            for color, storage in (("Black", "128GB"), ("Silver", "256GB")):
                variants.append(await _get_or_create(
                    db,
                    Variant,
                    product_id=product.id,
                    variant_name=f"{product.name} {storage} {color}",
                    color=color,
                    storage_size=storage,
                    tracking_mode=TrackingMode.SERIALIZED.value,
                ))

        cable = await _get_or_create(
            db, Product, name="USB-C Cable", brand_id=brands[0].id, category_id=accessories.id,
        )
        cable_variant = await _get_or_create(
            db, Variant, product_id=cable.id, variant_name="USB-C Cable 1m", tracking_mode=TrackingMode.BULK.value,
        )

        # 3. Serialized units: a random 1-12 per shop/variant, so some variants land under the threshold
        print("Generating stock units and batches...")
        created = 0
        for shop in shops:
            for variant in variants:
                for _ in range(random.randint(1, 12)):
                    db.add(StockUnit(
                        shop_id=shop.id,
                        variant_id=variant.id,
                        primary_imei=_imei(),
                        barcode=f"SU{random.randint(10**8, 10**9 - 1)}",
                        purchase_price=Decimal(random.randint(200, 800)),
                        sale_price=Decimal(random.randint(900, 1400)),
                        stock_status=StockStatus.IN_STOCK.value,
                        condition=random.choice(list(ProductCondition)).value,
                    ))
                    created += 1

            # 4. One accessory batch per shop
            db.add(StockBatch(
                shop_id=shop.id,
                variant_id=cable_variant.id,
                barcode=f"SB{random.randint(10**8, 10**9 - 1)}",
                quantity=random.randint(0, 20),
                purchase_price=Decimal("2.50"),
                sale_price=Decimal("9.99"),
                low_stock_threshold=5,
            ))

        await db.commit()
        print(f"Seeded {created} stock units and {len(shops)} accessory batches.")

if __name__ == "__main__":
    asyncio.run(seed_database())
