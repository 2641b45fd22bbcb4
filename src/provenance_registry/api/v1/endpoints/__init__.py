"""
API v1 endpoints package.
"""

from .health import router as health_router
from .products import router as products_router
from .verifications import router as verifications_router

__all__ = ["health_router", "products_router", "verifications_router"]
