"""
FastAPI application for the E-commerce product catalog.

This API exposes the MongoDB products collection.
"""

import logging
import time
from datetime import datetime
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.config import DB_NAME, LOG_LEVEL
from api.database import MongoConnectionManager, default_manager
from api.routes import products
from api.models import HealthResponse

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(manager: MongoConnectionManager | None = None) -> FastAPI:
    """Build the API around a connection manager (the process default if none)."""
    if manager is None:
        manager = default_manager

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        logger.info("🚀 Starting E-commerce Products API...")
        app.state.mongo = manager
        await manager.initialize()
        yield
        logger.info("👋 Shutting down API...")
        await manager.close()

    app = FastAPI(
        title="E-commerce Products API",
        description="Product catalog backed by MongoDB",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_timing_header(request: Request, call_next):
        """Add response timing header."""
        start_time = time.time()
        response = await call_next(request)
        process_time = (time.time() - start_time) * 1000
        response.headers["X-Process-Time-Ms"] = str(round(process_time, 2))
        return response

    app.include_router(products.router)

    @app.get("/", tags=["Root"])
    def root():
        """API root endpoint."""
        return {
            "message": "E-commerce Products API",
            "database": DB_NAME,
            "docs": "/docs",
            "health": "/health"
        }

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(request: Request):
        """
        Health check endpoint.

        Verifies MongoDB connectivity.
        """
        try:
            await request.app.state.mongo.ping()
            mongo_status = "connected"
        except Exception as e:
            logger.warning("MongoDB ping failed: %s", e)
            mongo_status = f"error: {str(e)}"

        return HealthResponse(
            status="healthy" if mongo_status == "connected" else "unhealthy",
            mongodb=mongo_status,
            timestamp=datetime.now()
        )

    return app


app = create_app()
