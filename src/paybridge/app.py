"""FastAPI application factory for Paybridge."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from paybridge.common.config import get_settings
from paybridge.common.exceptions import PaybridgeError
from paybridge.common.logging import setup_logging
from paybridge.common.responses import error_response
from paybridge.common.schemas import ErrorResponse, HealthResponse

logger = logging.getLogger(__name__)

_HTTP_ERROR_CODES = {
    404: "not_found",
    405: "method_not_allowed",
}


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(PaybridgeError)
    async def paybridge_error_handler(request: Request, exc: PaybridgeError):
        # Errors raised while resolving dependencies, e.g. missing credentials.
        logger.error("Request failed: %s %s", exc.code, exc.message)
        return error_response(exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        body = ErrorResponse(error=_HTTP_ERROR_CODES.get(exc.status_code, "http_error"))
        return JSONResponse(
            status_code=exc.status_code,
            content=body.model_dump(exclude_none=True),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        body = ErrorResponse(error="server_error", details=str(exc) or exc.__class__.__name__)
        return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))

    @app.get("/health", response_model=HealthResponse)
    async def health():
        return HealthResponse(version=settings.api_version)

    # Mount routers
    from paybridge.webhooks.router import router as webhook_router
    from paybridge.subscriptions.router import router as subscription_router
    from paybridge.checkout.router import router as checkout_router

    prefix = settings.api_prefix
    app.include_router(webhook_router, prefix=prefix)
    app.include_router(subscription_router, prefix=prefix)
    app.include_router(checkout_router, prefix=prefix)

    return app
