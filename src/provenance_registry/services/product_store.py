"""
In-memory product registry.
"""

from typing import Dict, Iterable, List, Tuple

import structlog

from ..core.exceptions import DuplicateProductError, ProductNotFoundError
from ..models.domain import Product


class ProductStore:
    """Mapping from product id to the current immutable Product record."""

    def __init__(self):
        self._products: Dict[str, Product] = {}
        self.logger = structlog.get_logger(component="product_store")

    def register(self,
                 product_id: str,
                 product_type: str,
                 producer: str,
                 timestamp: int,
                 location: str) -> Product:
        """
        Register a new product.

        Args:
            product_id: Caller-chosen unique identifier
            product_type: Kind of product
            producer: Manufacturer or producer name
            timestamp: Registration logical time
            location: Registration location

        Returns:
            The created Product with empty histories

        Raises:
            DuplicateProductError: If ``product_id`` is already registered
        """
        if product_id in self._products:
            self.logger.warning("Duplicate product registration", product_id=product_id)
            raise DuplicateProductError(product_id)

        product = Product(
            product_id=product_id,
            product_type=product_type,
            producer=producer,
            registration_timestamp=timestamp,
            registration_location=location
        )
        self._products[product_id] = product

        self.logger.info(
            "Product registered",
            product_id=product_id,
            product_type=product_type,
            producer=producer
        )
        return product

    def get(self, product_id: str) -> Product:
        """
        Get the current record for a product.

        Raises:
            ProductNotFoundError: If no such product exists
        """
        product = self._products.get(product_id)
        if product is None:
            self.logger.debug("Product not found", product_id=product_id)
            raise ProductNotFoundError(product_id)
        return product

    def replace(self, product: Product) -> None:
        """Swap in an updated record for an already registered product."""
        if product.product_id not in self._products:
            raise ProductNotFoundError(product.product_id)
        self._products[product.product_id] = product

    def items(self) -> List[Tuple[str, Product]]:
        """All entries in registration order."""
        return list(self._products.items())

    def load(self, entries: Iterable[Tuple[str, Product]]) -> None:
        """Replace the whole mapping with ``entries``."""
        products: Dict[str, Product] = {}
        for product_id, product in entries:
            if product_id != product.product_id:
                raise ValueError(
                    f"Entry key '{product_id}' does not match product id '{product.product_id}'"
                )
            products[product_id] = product
        self._products = products

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._products

    def __len__(self) -> int:
        return len(self._products)
