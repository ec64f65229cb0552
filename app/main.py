"""
Store API
FastAPI application entry point

- Explicit route table (ROUTE_TABLE) instead of import-time router discovery
- Error sanitization middleware + Store API error envelope
- Health endpoint with DB ping
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from sqlalchemy import text

from app.api.routes import shipping_method
from app.core.config import settings
from app.core.database import AsyncSessionLocal, engine
from app.core.error_handler import ErrorSanitizationMiddleware, store_api_error_handler
from app.core.exceptions import StoreApiError

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger(__name__)

# (router factory, prefix) pairs registered by create_app()
ROUTE_TABLE = [
    (shipping_method.build_router, ""),
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"{settings.APP_NAME} starting (environment={settings.ENVIRONMENT})")

    yield

    await engine.dispose()
    logger.info("Database engine disposed")


async def health_check():
    """
    Health check with an actual DB ping.
    Returns 503 if database is unreachable.
    """
    health_status = {
        "status": "healthy",
        "database": "unknown",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

    try:
        async with AsyncSessionLocal() as db:
            await db.execute(text("SELECT 1"))
        health_status["database"] = "connected"
    except Exception as e:
        logger.error(f"Health check database ping failed: {type(e).__name__}: {e}")
        health_status["database"] = f"error: {type(e).__name__}"
        health_status["status"] = "unhealthy"
        return JSONResponse(status_code=503, content=health_status)

    return health_status


def create_app() -> FastAPI:
    app = FastAPI(
        lifespan=lifespan,
        title=settings.APP_NAME,
        description="Store API for storefront clients: shipping method listing.",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=[
            {"name": "Health", "description": "Health check endpoints"},
            {"name": "Store API", "description": "Storefront-facing endpoints"},
            {"name": "Shipping Method", "description": "Shipping methods of the current sales channel"},
        ],
    )

    app.add_exception_handler(StoreApiError, store_api_error_handler)

    # Error sanitization (catches unhandled exceptions)
    app.add_middleware(ErrorSanitizationMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["sw-context-token"],
    )

    for build_router, prefix in ROUTE_TABLE:
        app.include_router(build_router(), prefix=prefix)

    app.add_api_route("/health", health_check, methods=["GET"], tags=["Health"])

    return app


app = create_app()
