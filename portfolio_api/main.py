# portfolio_api/main.py

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from portfolio_api.common.config import Settings, settings as default_settings
from portfolio_api.common.rate_limit import ApiQuotaMiddleware, RateLimiter, create_api_limiter
from portfolio_api.common.security_headers import SecurityHeadersMiddleware
from portfolio_api.common.utils.global_messages import GlobalMessages
from portfolio_api.modules.contact.contact_service import ContactService
from portfolio_api.modules.contact.email_renderer import SiteOwner
from portfolio_api.modules.contact.transports.selector import TransportConfig, select_transport_mode
from portfolio_api.router.routers import include_routers

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    # Centralized logging configuration
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404 and request.url.path.startswith("/api"):
        message = GlobalMessages.API_ROUTE_NOT_FOUND
    else:
        message = str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": message},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Server error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": GlobalMessages.INTERNAL_ERROR},
    )


def build_contact_service(settings: Settings) -> ContactService:
    config = TransportConfig.from_settings(settings)
    mode = select_transport_mode(config)
    logger.info("Contact form email transport: %s", mode.value)
    return ContactService(
        rate_limiter=RateLimiter(
            max_requests=settings.CONTACT_RATE_LIMIT,
            window_seconds=settings.CONTACT_RATE_WINDOW_SECONDS,
        ),
        config=config,
        mode=mode,
        owner=SiteOwner.from_settings(settings),
        display_timezone=settings.display_timezone,
    )


def create_app(
    settings: Optional[Settings] = None,
    contact_service: Optional[ContactService] = None,
) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings)

    app = FastAPI(
        title="Portfolio API",
        description="Backend for the portfolio site: contact form delivery and profile data.",
        version="1.0.0",
        debug=settings.DEBUG,
    )
    app.state.settings = settings
    app.state.contact_service = contact_service or build_contact_service(settings)

    # Rate limiting for every API route; the contact form has its own stricter quota.
    app.state.limiter = create_api_limiter(
        trusted_hops=settings.TRUSTED_PROXY_HOPS,
        enabled=settings.RATE_LIMIT_ENABLED,
    )
    app.add_middleware(
        ApiQuotaMiddleware,
        limiter=app.state.limiter,
        limit=settings.API_RATE_LIMIT,
        window_seconds=settings.API_RATE_WINDOW_SECONDS,
        trusted_hops=settings.TRUSTED_PROXY_HOPS,
    )
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    app.add_middleware(SecurityHeadersMiddleware)

    # Middleware for CORS using allowed origins from settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    )

    include_routers(app)

    # Health check endpoint
    @app.get("/api/health", tags=["Health"])
    async def health_check():
        return {
            "status": "OK",
            "message": GlobalMessages.API_RUNNING,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("portfolio_api.main:app", host=default_settings.HOST, port=default_settings.PORT)
