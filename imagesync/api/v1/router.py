"""
API v1 router for the Image Store Sync service.

This module defines the main router for API v1 endpoints.
"""

import structlog
from fastapi import APIRouter

from imagesync.api.v1.endpoints import consistency

logger = structlog.get_logger(__name__)

# Create main router for API v1
api_router = APIRouter()

api_router.include_router(
    consistency.router, prefix="/consistency", tags=["consistency"]
)

logger.info("API v1 router configured")
