"""
StockPoint POS — FastAPI ASGI Entry Point
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from stockpoint.api.v1.router import api_router
from stockpoint.config import get_settings
from stockpoint.core.auth_middleware import JWTAuthMiddleware
from stockpoint.core.responses import error_response

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# SQLSTATE codes surfaced by asyncpg through IntegrityError.orig
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan — dispose the engine pool on shutdown."""
    logger.info("StockPoint starting (environment=%s)", settings.ENVIRONMENT)
    yield
    from stockpoint.db.session import engine
    await engine.dispose()


app = FastAPI(
    title="StockPoint POS",
    description="Multi-shop point of sale: inventory, sales and repairs",
    version="0.1.0",
    docs_url="/api/v1/docs",
    redoc_url="/api/v1/redoc",
    openapi_url="/api/v1/openapi.json",
    lifespan=lifespan,
)
app.add_middleware(JWTAuthMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")


def _sqlstate(exc: IntegrityError) -> str | None:
    orig = exc.orig
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    code = _sqlstate(exc)
    logger.warning("Integrity error on %s %s: sqlstate=%s", request.method, request.url.path, code)
    if code == UNIQUE_VIOLATION:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=error_response("DUPLICATE_ENTRY", "A record with this value already exists"),
        )
    if code == FOREIGN_KEY_VIOLATION:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_response("FOREIGN_KEY_VIOLATION", "Referenced record does not exist"),
        )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response("INTEGRITY_ERROR", "Constraint violation"),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = str(exc) if settings.DEBUG else "Internal server error"
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response("INTERNAL_ERROR", message),
    )


@app.get("/health")
async def health():
    """Health check for load balancers and Docker."""
    return {"status": "ok", "service": "stockpoint"}
