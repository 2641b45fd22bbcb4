"""
Registry error taxonomy.

Every public registry operation either returns a value or raises one of
these. Checks run before any state is touched, so a raised error always
leaves the registry unchanged.
"""

from typing import Any, Dict, Optional


class RegistryError(Exception):
    """Base class for registry failures reported to callers."""

    error_code = "registry_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.error_code,
            "detail": self.message,
            **self.details
        }


class DuplicateProductError(RegistryError):
    """A product with the given id is already registered."""

    error_code = "duplicate_product"

    def __init__(self, product_id: str):
        super().__init__(
            f"Product '{product_id}' is already registered",
            {"product_id": product_id}
        )
        self.product_id = product_id


class ProductNotFoundError(RegistryError):
    """No product with the given id exists."""

    error_code = "product_not_found"

    def __init__(self, product_id: str):
        super().__init__(
            f"Product '{product_id}' not found",
            {"product_id": product_id}
        )
        self.product_id = product_id


class PersistenceError(RegistryError):
    """Snapshot could not be written or read back."""

    error_code = "persistence_failure"
