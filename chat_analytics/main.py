"""
FastAPI application entry point for the Chat Analytics API.

This module configures logging and CORS, registers the analytics router and
starts the ASGI server when executed directly. The engine is pure, so there
are no connection pools to open or close; the lifespan only logs.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chat_analytics import __version__
from chat_analytics.api import api_router
from chat_analytics.core.config import get_settings

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log application start and stop; the engine holds no resources."""
    logger.info(f"{settings.app_name} starting")
    yield
    logger.info(f"{settings.app_name} shutting down")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=__version__,
    description=(
        "Attribution-aware analytics for chat interactions. "
        "Computes funnel, traffic-source, channel and quality metrics "
        "for a posted batch of chat records."
    ),
    lifespan=lifespan,
)

# Configure CORS middleware for the dashboard dev servers
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register API routers (each router carries its own prefix)
app.include_router(api_router)


@app.get("/health")
async def health_check():
    """Liveness check. Reports the running version alongside the status."""
    return {"status": "healthy", "version": __version__}


@app.get("/")
async def root():
    """Service name, version and documentation links."""
    return {
        "name": settings.app_name,
        "version": __version__,
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


# Local development server
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "chat_analytics.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
