"""
Consolidated middleware for the MealPrep API
"""

import time
import logging
from uuid import uuid4
from decimal import Decimal

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from api.responses import error_response
from app.exceptions import AppError, RateLimitError

logger = logging.getLogger("mealprep.middleware")


# ============================================================================
# Helper Functions
# ============================================================================


def make_serializable(obj):
    """Convert objects to JSON-serializable format"""
    if isinstance(obj, Decimal):
        return float(obj)
    elif isinstance(obj, Exception):
        return str(obj)
    elif isinstance(obj, bytes):
        return obj.decode("utf-8", errors="replace")
    elif isinstance(obj, dict):
        return {k: make_serializable(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [make_serializable(item) for item in obj]
    return obj


# ============================================================================
# Request Logging Middleware
# ============================================================================


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all HTTP requests and responses"""

    async def dispatch(self, request: Request, call_next):
        # Honour an upstream request id when a proxy already assigned one
        request_id = request.headers.get("X-Request-ID") or str(uuid4())
        request.state.request_id = request_id
        client = request.client.host if request.client else None

        logger.info(
            f"request_started request_id={request_id} method={request.method} "
            f"path={request.url.path} client={client}"
        )
        start_time = time.perf_counter()

        try:
            response: Response = await call_next(request)
        except Exception as exc:
            process_time = time.perf_counter() - start_time
            logger.error(
                f"request_failed request_id={request_id} method={request.method} "
                f"path={request.url.path} error={exc} process_time={process_time:.4f}s",
                exc_info=True,
            )
            raise

        process_time = time.perf_counter() - start_time
        logger.info(
            f"request_completed request_id={request_id} method={request.method} "
            f"path={request.url.path} status={response.status_code} "
            f"process_time={process_time:.4f}s"
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        return response


# ============================================================================
# Security Headers Middleware
# ============================================================================

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "cross-origin",
    "X-DNS-Prefetch-Control": "off",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
}
HSTS_HEADER = "max-age=31536000; includeSubDomains; preload"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add hardening headers to every response"""

    def __init__(self, app, hsts: bool = False):
        super().__init__(app)
        self.hsts = hsts

    async def dispatch(self, request: Request, call_next):
        response: Response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        if self.hsts:
            response.headers["Strict-Transport-Security"] = HSTS_HEADER
        return response


# ============================================================================
# Error Handlers
# ============================================================================


async def app_error_handler(request: Request, exc: AppError):
    """Render any AppError with its own status and code"""
    if exc.http_status >= 500:
        logger.error(f"{exc.code} on {request.url.path}: {exc.message}")
    else:
        logger.warning(f"{exc.code} on {request.url.path}: {exc.message}")

    headers = None
    if isinstance(exc, RateLimitError) and exc.retry_after:
        headers = {"Retry-After": str(exc.retry_after)}

    return JSONResponse(
        status_code=exc.http_status,
        content=error_response(exc.code, exc.message, make_serializable(exc.details)),
        headers=headers,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors"""
    serializable_errors = make_serializable(exc.errors())
    logger.warning(f"Validation error on {request.url.path}: {serializable_errors}")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
        content=error_response(
            "VALIDATION_ERROR", "Request validation failed", serializable_errors
        ),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions (unknown routes, wrong methods)"""
    logger.warning(f"HTTP {exc.status_code} on {request.url.path}: {exc.detail}")

    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(f"HTTP_{exc.status_code}", str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors without leaking internals"""
    logger.exception(f"Unexpected error on {request.url.path}: {exc}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response("INTERNAL_SERVER_ERROR", "An unexpected error occurred"),
    )
