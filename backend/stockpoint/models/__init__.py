"""StockPoint POS — SQLAlchemy models."""
from stockpoint.models.catalog import Brand, Category, Product, TrackingMode, Variant
from stockpoint.models.shop import Shop, ShopType, UserShop
from stockpoint.models.stock import ProductCondition, StockBatch, StockStatus, StockUnit

__all__ = [
    "Shop", "ShopType", "UserShop",
    "Category", "Brand", "Product", "Variant", "TrackingMode",
    "StockUnit", "StockBatch", "StockStatus", "ProductCondition",
]
