"""
API package initialization.

This package contains FastAPI router modules for the Chat Analytics backend:
- analytics: metrics summary, record filtering, payload validation and settings
"""

from fastapi import APIRouter

from chat_analytics.api.analytics import router as analytics_router

# Create main API router
api_router = APIRouter()

# analytics router has its own /analytics prefix
api_router.include_router(analytics_router)

__all__ = [
    "api_router",
    "analytics_router",
]
