# gatekeeper/main.py
"""
FastAPI application factory.
Includes request timing middleware, error handlers, and all routers.
Settings are passed in explicitly; nothing here reads config.yaml.
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from gatekeeper import __version__
from gatekeeper.config import Settings
from gatekeeper.database import Gateway
from gatekeeper.exceptions import GatekeeperError
from gatekeeper.routers import health, visitors
from gatekeeper.utils.logger import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.settings
    gateway = app.state.gateway

    # ── Startup ──────────────────────────────────────────────────────────────
    logger.info("🚀 Gatekeeper starting up...")
    # Tables are created on the first session that reaches the database
    if not gateway.check_connection():
        logger.warning("Cannot connect to the database; requests will fail until it is reachable")
    logger.info(f"🌐 Listening on http://{settings.server.host}:{settings.server.port}")
    logger.info("📖 API docs at /docs")

    yield

    # ── Shutdown ─────────────────────────────────────────────────────────────
    logger.info("🛑 Gatekeeper shutting down...")
    gateway.dispose()


def create_app(settings: Settings, gateway: Gateway = None) -> FastAPI:
    app = FastAPI(
        title="Gatekeeper API",
        description="Registry of license plates permitted through the gate.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.gateway = gateway or Gateway.from_settings(settings)

    # ── Request Timing Middleware ────────────────────────────────────────────
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        duration = round((time.time() - start) * 1000, 2)
        logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
        return response

    # ── Error Handlers ───────────────────────────────────────────────────────
    @app.exception_handler(GatekeeperError)
    async def gatekeeper_exception_handler(request: Request, exc: GatekeeperError):
        if exc.status_code >= 500:
            logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.detail}")
            message = GatekeeperError.message
        else:
            message = exc.detail
        return JSONResponse(status_code=exc.status_code, content={"message": message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.debug(f"Rejected body on {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "Name and plate are required"},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error"},
        )

    # ── Routers ──────────────────────────────────────────────────────────────
    app.include_router(visitors.router, tags=["🚗 Visitors"])
    app.include_router(health.router,   tags=["💚 Health"])

    return app
