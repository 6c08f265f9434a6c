# storefront/main.py
"""
Storefront API application.

Wires the security core into FastAPI:
- AuthGateMiddleware in front of every route (public / login / forbidden)
- CSRF token store on app.state, consumed by mutating routes
- Unified error envelope for every failure
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from typing import Optional
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging

from storefront.api import auth, cart, catalog, orders, testing
from storefront.core.config import Settings, settings as default_settings, validate_required_settings
from storefront.core.exceptions import ErrorCode, StorefrontError, ValidationError
from storefront.core.logging_config import setup_logging
from storefront.core.rate_limit_config import RATE_LIMIT_MESSAGE, create_limiter
from storefront.core.responses import error, error_response
from storefront.core.security import AuthorizationGate, CsrfTokenStore, SessionCodec, create_csrf_store
from storefront.middleware.auth_gate import AuthGateMiddleware
from storefront.middleware.security_middleware import SecurityHeadersMiddleware
from storefront.services.redis_service import create_redis_service

logger = setup_logging()


def create_app(
    app_settings: Optional[Settings] = None,
    csrf_store: Optional[CsrfTokenStore] = None
) -> FastAPI:
    """
    Build the application.

    Args:
        app_settings: Settings to use, defaults to the environment
        csrf_store: Explicit token store; when omitted the store is chosen
            from the settings (Redis when REDIS_URL is reachable, memory otherwise)
    """
    app_settings = app_settings or default_settings
    codec = SessionCodec(app_settings.SESSION_SECRET_KEY)
    gate = AuthorizationGate.from_settings(app_settings, codec)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("=" * 60)
        logger.info(f"🚀 {app_settings.APP_NAME} API starting ({app_settings.ENVIRONMENT})")

        validate_required_settings(app_settings)

        redis_service = None
        if csrf_store is None and app_settings.REDIS_URL:
            redis_service = await create_redis_service(app_settings.REDIS_URL)
            app.state.csrf_store = create_csrf_store(app_settings, redis_service)
        app.state.redis_service = redis_service

        logger.info(f"  - Session cookies: {'signed' if codec.signed else 'unsigned'}")
        logger.info(f"  - CSRF store: {type(app.state.csrf_store).__name__}")
        logger.info("✅ API ready")
        logger.info("=" * 60)

        yield

        if redis_service is not None:
            await redis_service.shutdown()
        logger.info(f"🛑 {app_settings.APP_NAME} API shut down")

    app = FastAPI(
        title=f"{app_settings.APP_NAME} API",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None
    )

    app.state.settings = app_settings
    app.state.session_codec = codec
    app.state.csrf_store = csrf_store or create_csrf_store(app_settings)
    app.state.redis_service = None

    # slowapi looks the limiter up on app.state
    limiter = create_limiter(enabled=app_settings.RATE_LIMIT_ENABLED)
    app.state.limiter = limiter

    _register_exception_handlers(app)

    # Last added runs first: CORS -> security headers -> gate -> routes
    app.middleware("http")(AuthGateMiddleware(gate, cookie_name=app_settings.SESSION_COOKIE_NAME))
    app.middleware("http")(SecurityHeadersMiddleware(hsts=app_settings.is_production))
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(auth.create_login_router(limiter, app_settings.LOGIN_RATE_LIMIT))
    for module in (auth, cart, catalog, orders, testing):
        app.include_router(module.router)

    @app.get("/health", status_code=200)
    async def health():
        """Health check endpoint (public)"""
        status = {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "csrf_store": type(app.state.csrf_store).__name__,
        }
        if app.state.redis_service is not None:
            status["redis"] = await app.state.redis_service.health_check()
        return status

    return app


def _register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError):
        return error_response(exc, f"{request.method} {request.url.path}")

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        field_errors = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ())[1:]) or "root",
                "message": err.get("msg", "Invalid value"),
            }
            for err in exc.errors()
        ]
        return error_response(ValidationError(field_errors), f"{request.method} {request.url.path}")

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        logger.warning(f"🚦 Rate limit exceeded on {request.url.path}")
        response = JSONResponse(
            status_code=429,
            content=error(ErrorCode.RATE_LIMITED, RATE_LIMIT_MESSAGE),
        )
        response.headers["Retry-After"] = "60"
        return response

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        return error_response(exc, f"{request.method} {request.url.path}")


app = create_app()


if __name__ == "__main__":
    import os
    import uvicorn

    port = int(os.getenv("PORT", "8000"))
    logger.info(f"🚀 Starting server on port {port}...")
    uvicorn.run(app, host="0.0.0.0", port=port, log_level="info")
