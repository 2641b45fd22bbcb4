"""
Translation of registry errors into HTTP responses.
"""

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ..core.exceptions import (
    DuplicateProductError,
    PersistenceError,
    ProductNotFoundError,
    RegistryError,
)

logger = structlog.get_logger(module=__name__)

ERROR_STATUS_CODES = {
    DuplicateProductError: status.HTTP_409_CONFLICT,
    ProductNotFoundError: status.HTTP_404_NOT_FOUND,
    PersistenceError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


async def registry_error_handler(request: Request, exc: RegistryError) -> JSONResponse:
    """Render a RegistryError as a structured JSON error."""
    status_code = ERROR_STATUS_CODES.get(type(exc), status.HTTP_400_BAD_REQUEST)

    logger.warning(
        "Registry operation rejected",
        path=request.url.path,
        error_code=exc.error_code,
        status_code=status_code,
        **exc.details
    )
    return JSONResponse(status_code=status_code, content=exc.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RegistryError, registry_error_handler)
