"""
API v1 package.
"""

from fastapi import APIRouter
from .endpoints import health_router, products_router, verifications_router

# Create main v1 router
v1_router = APIRouter()

# Include endpoint routers
v1_router.include_router(health_router)
v1_router.include_router(products_router)
v1_router.include_router(verifications_router)

__all__ = ["v1_router"]
