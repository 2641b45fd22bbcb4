"""
Shared FastAPI dependencies.
"""

from fastapi import Request

from ...services.registry_service import RegistryService


def get_registry(request: Request) -> RegistryService:
    """Dependency to get the registry owned by the running app."""
    return request.app.state.registry
