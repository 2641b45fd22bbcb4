"""
Supply-chain event recording.
"""

import structlog

from ..models.domain import SupplyChainEvent
from .product_store import ProductStore


class EventAppender:
    """Appends chain-of-custody events to registered products."""

    def __init__(self, product_store: ProductStore):
        self.product_store = product_store
        self.logger = structlog.get_logger(component="event_appender")

    def add_event(self,
                  product_id: str,
                  event_type: str,
                  timestamp: int,
                  location: str,
                  handler: str) -> SupplyChainEvent:
        """
        Append an event to a product's history.

        Raises:
            ProductNotFoundError: If the product is unknown
        """
        product = self.product_store.get(product_id)

        event = SupplyChainEvent(
            event_type=event_type,
            timestamp=timestamp,
            location=location,
            handler=handler
        )
        self.product_store.replace(product.with_event(event))

        self.logger.info(
            "Supply chain event recorded",
            product_id=product_id,
            event_type=event_type,
            event_count=len(product.events) + 1
        )
        return event
