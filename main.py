"""
MealPrep Agent FastAPI Application
Main entry point: settings, logging, middleware, exception handlers and routers
"""

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import uvicorn
from contextlib import asynccontextmanager
import anyio
from typing import Optional

from api.routes import (
    auth,
    chat,
    family,
    health,
    ingredients,
    meal_plans,
    preferences,
    profiles,
    receipts,
    recipes,
    roles,
    shopping_lists,
)
from api.dependencies import limit_api
from api.responses import ErrorResponse
from api.middleware import (
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
    app_error_handler,
    validation_exception_handler,
    http_exception_handler,
    general_exception_handler,
)
from adapters import n8n_client, openrouter_client, supabase_auth
from app.config import settings
from app.exceptions import AppError
from domain.models import init_database

# Setup logging with configured level and format
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()), format=settings.log_format
)
_logger = logging.getLogger("mealprep.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: verify the database with retries (Supabase/Neon may still be
    waking up). Shutdown: close the shared HTTP clients.
    """
    last_exc: Optional[Exception] = None
    _logger.info(f"Starting MealPrep Agent in {settings.environment.value} mode")

    for attempt in range(1, settings.db_init_attempts + 1):
        try:
            # Blocking check runs in a thread to keep the event loop free
            await anyio.to_thread.run_sync(init_database)
            _logger.info("Database initialization succeeded")
            break
        except Exception as exc:
            last_exc = exc
            _logger.warning(
                "Database init attempt %d/%d failed: %s",
                attempt,
                settings.db_init_attempts,
                exc,
            )
            if attempt < settings.db_init_attempts:
                await anyio.sleep(settings.db_init_delay_sec)
            else:
                _logger.error(
                    "Database initialization failed after %d attempts: %s", attempt, last_exc
                )
                raise

    if not settings.openrouter_api_key:
        _logger.warning("OPENROUTER_API_KEY not set; chat and suggestions will use fallbacks")
    if settings.webhook_enabled and not settings.n8n_webhook_url:
        _logger.warning("Webhooks enabled but N8N_WEBHOOK_URL is not set")

    try:
        yield
    finally:
        _logger.info("Shutting down MealPrep Agent")
        for client in (openrouter_client, n8n_client, supabase_auth):
            client.close()


app = FastAPI(
    title=settings.api_title,
    version=settings.app_version,
    description=settings.api_description,
    lifespan=lifespan,
    debug=settings.debug,
    openapi_url=(
        f"{settings.api_prefix}/openapi.json" if not settings.is_production() else None
    ),
    docs_url=f"{settings.api_prefix}/docs" if not settings.is_production() else None,
    redoc_url=f"{settings.api_prefix}/redoc" if not settings.is_production() else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware, hsts=settings.is_production())

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

app.include_router(health.router, prefix=settings.api_prefix)

# Error envelope documented for every authenticated router
ERROR_RESPONSES = {
    status_code: {"model": ErrorResponse} for status_code in (400, 401, 403, 404, 409, 429, 502)
}

# Everything except health counts against the general per-client budget
for module in (
    auth,
    profiles,
    roles,
    preferences,
    family,
    recipes,
    ingredients,
    meal_plans,
    shopping_lists,
    receipts,
    chat,
):
    app.include_router(
        module.router,
        prefix=settings.api_prefix,
        dependencies=[Depends(limit_api)],
        responses=ERROR_RESPONSES,
    )


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development(),
        log_level=settings.log_level.lower(),
    )
