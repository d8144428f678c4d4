"""
FastAPI application - Main entry point
"""

from dotenv import load_dotenv

load_dotenv()

import logging
import os
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from menu_site import __version__
from menu_site.api.dependencies import SiteServices, build_services
from menu_site.api.endpoints.checkout import router as checkout_router
from menu_site.api.endpoints.merch import router as merch_router
from menu_site.api.endpoints.music import router as music_router
from menu_site.error_handler import EmptyCart, ErrorHandler
from menu_site.utils.site_config_loader import load_site_config

# Setup logging
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)


def create_app(services: Optional[SiteServices] = None) -> FastAPI:
    app = FastAPI(
        title="MENU Site API",
        description="Merch listing, cart checkout and latest release for the MENU band site",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.state.services = services if services is not None else build_services(load_site_config())

    app.include_router(merch_router, prefix="/api")
    app.include_router(checkout_router, prefix="/api")
    app.include_router(music_router, prefix="/api")

    error_handler = ErrorHandler()

    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Only the checkout body is validated; anything unparseable is an empty cart.
        logger.info("Rejected malformed request body on %s (%d errors)", request.url.path, len(exc.errors()))
        status_code, payload = error_handler.to_response(EmptyCart(), context={"path": request.url.path})
        return JSONResponse(status_code=status_code, content=payload)

    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # ============================================================================
    # ENDPOINTS
    # ============================================================================
    @app.get("/", tags=["Health"])
    async def root():
        """Health check endpoint."""
        return {"service": "MENU Site API", "status": "healthy", "version": __version__, "timestamp": datetime.now().isoformat()}

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Detailed health check (catalog cache state, integrations mode)."""
        svc: SiteServices = app.state.services
        snapshot = svc.cache.current
        return {
            "status": "healthy",
            "integrations": svc.integrations_mode,
            "catalog": {
                "items": len(snapshot.items),
                "stale": svc.cache.is_stale(),
                "ttl_seconds": svc.cache.ttl_seconds,
            },
            "timestamp": datetime.now().isoformat(),
        }

    # ============================================================================
    # STARTUP/SHUTDOWN EVENTS
    # ============================================================================
    @app.on_event("startup")
    async def startup_event():
        svc: SiteServices = app.state.services
        logger.info("Starting MENU Site API (integrations=%s)...", svc.integrations_mode)
        if not svc.config.square.location_id:
            logger.warning("SQUARE_LOCATION_ID not set; inventory checks disabled, items assumed in stock")

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Shutting down MENU Site API...")

    return app


app = create_app()
