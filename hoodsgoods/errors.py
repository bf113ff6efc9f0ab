"""
Business-level exceptions. Services raise these; the handlers registered in
``hoodsgoods.main`` turn them into JSON responses.
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
import httpx


class HoodsGoodsError(Exception):
    """Base exception for all business logic errors."""

    status_code = 400

    def __init__(self, message: str = "Request could not be processed."):
        self.message = message
        super().__init__(self.message)


class AuthenticationError(HoodsGoodsError):
    """Raised when the bearer token is missing or invalid."""
    status_code = 401


class AuthorizationError(HoodsGoodsError):
    """Raised when the caller lacks permission."""
    status_code = 403


class NotFoundError(HoodsGoodsError):
    """Raised when a requested resource doesn't exist."""
    status_code = 404


class ConflictError(HoodsGoodsError):
    """Raised when the request clashes with current state (duplicates, stock, lifecycle)."""
    status_code = 409


class ValidationFailed(HoodsGoodsError):
    status_code = 422


async def hoodsgoods_error_handler(request: Request, exc: HoodsGoodsError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse({"detail": exc.message}, status_code=exc.status_code, headers=headers)


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    # Internals stay in the log, never in the response
    logger.bind(event="db.error", path=request.url.path).exception("Database error")
    return JSONResponse({"detail": "An internal error occurred. Please try again later."}, status_code=500)


async def identity_provider_error_handler(request: Request, exc: httpx.HTTPError) -> JSONResponse:
    logger.bind(event="identity.unavailable", error=str(exc)).error("Identity provider request failed")
    return JSONResponse({"detail": "Identity provider unavailable"}, status_code=503)
