"""
FastAPI application factory and API package.

Run with:
    uvicorn quote_pricing.api:app --reload --port 8000

Or via main.py:
    python -m quote_pricing --serve
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from quote_pricing.config import get_settings
from quote_pricing.api.routes import health_router, pricing_router
from quote_pricing.models.errors import ConfigurationError, InvalidInputError, PricingError

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = {
    InvalidInputError: 400,
    ConfigurationError: 422,
}


async def pricing_error_handler(request: Request, exc: PricingError) -> JSONResponse:
    status_code = _STATUS_BY_ERROR.get(type(exc), 400)
    logger.warning(f"{request.method} {request.url.path} rejected ({exc.kind}): {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.kind, "detail": str(exc)},
    )


async def request_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Malformed payloads parsed inside a route (e.g. an unknown package mode)."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "validation_error",
            "detail": exc.errors(include_url=False, include_context=False, include_input=False),
        },
    )


def create_app() -> FastAPI:
    """Application factory: create and configure the FastAPI instance."""
    settings = get_settings()

    application = FastAPI(
        title="Quote Pricing API",
        description="Pricing computation engine for enterprise quotes",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.add_exception_handler(PricingError, pricing_error_handler)
    application.add_exception_handler(ValidationError, request_validation_handler)

    application.include_router(health_router, tags=["Health"])
    application.include_router(pricing_router, prefix="/api/pricing", tags=["Pricing"])

    logger.info(f"Created {settings.app_name} API")
    return application


# Module-level instance for `uvicorn quote_pricing.api:app`
app = create_app()
