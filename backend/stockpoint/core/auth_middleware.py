"""StockPoint POS — JWT auth middleware: extracts bearer token, sets request.state.user."""
import logging
from typing import Callable
from uuid import UUID

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from stockpoint.api.deps import CurrentUser
from stockpoint.core.security import decode_token

logger = logging.getLogger(__name__)


def _parse_shop_ids(claim) -> list[UUID] | None:
    """Optional `shop_ids` claim. None means 'look the user's shops up in user_shop'."""
    if claim is None:
        return None
    return [UUID(str(s)) for s in claim]


class JWTAuthMiddleware(BaseHTTPMiddleware):
    """Decode the Authorization bearer token and populate request.state.user."""

    PUBLIC_PATHS = {
        "/health",
        "/api/v1/docs",
        "/api/v1/redoc",
        "/api/v1/openapi.json",
    }

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request.state.user = None

        if request.url.path in self.PUBLIC_PATHS:
            return await call_next(request)

        auth = request.headers.get("Authorization", "")
        if auth.startswith("Bearer "):
            payload = decode_token(auth[7:].strip())
            if payload and payload.get("type") == "access" and payload.get("sub"):
                try:
                    request.state.user = CurrentUser(
                        id=UUID(payload["sub"]),
                        email=payload.get("email") or "unknown",
                        role=payload.get("role", "staff"),
                        shop_ids=_parse_shop_ids(payload.get("shop_ids")),
                    )
                except (TypeError, ValueError) as exc:
                    logger.debug("Rejecting token with malformed claims: %s", exc)
            else:
                logger.debug("Bearer token could not be decoded")

        return await call_next(request)
