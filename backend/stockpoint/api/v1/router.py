"""StockPoint POS — API v1 router aggregation."""
from fastapi import APIRouter

from stockpoint.api.v1.endpoints import catalog, stock

api_router = APIRouter()

api_router.include_router(catalog.router, prefix="/catalog", tags=["catalog"])
api_router.include_router(stock.router, prefix="/stock", tags=["stock"])
