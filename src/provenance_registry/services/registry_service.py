"""
Registry service: the process-scoped owner of all registry state.
"""

import threading
from typing import Any, Dict, List, Optional

import structlog

from ..config.settings import Settings, get_settings
from ..db.snapshot_store import BaseSnapshotStore, build_snapshot_store
from ..models.domain import LedgerEntry, Product, SupplyChainEvent, VerificationResult
from .event_appender import EventAppender
from .identifier_counter import IdentifierCounter
from .persistence import PersistenceManager
from .product_store import ProductStore
from .verification_engine import VerificationEngine
from .verification_ledger import VerificationLedger


class RegistryService:
    """
    Entry point for every registry operation.

    Each mutation runs to completion under a single lock, so no two
    operations interleave and no caller ever observes a half-applied
    update. Products are immutable values, so a record returned by
    ``get_product`` stays valid after later appends.
    """

    def __init__(self,
                 snapshot_store: Optional[BaseSnapshotStore] = None,
                 settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

        self.product_store = ProductStore()
        self.counter = IdentifierCounter()
        self.ledger = VerificationLedger()
        self.event_appender = EventAppender(self.product_store)
        self.verification_engine = VerificationEngine(
            self.product_store,
            self.counter,
            self.ledger
        )
        self.persistence = PersistenceManager(
            self.product_store,
            self.counter,
            self.ledger,
            snapshot_store
        )

        self._lock = threading.RLock()
        self.logger = structlog.get_logger(component="registry_service")

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "RegistryService":
        """Create a service with the snapshot backend chosen in settings."""
        settings = settings or get_settings()
        return cls(snapshot_store=build_snapshot_store(settings), settings=settings)

    def startup(self) -> bool:
        """
        Recover persisted state if configured to.

        Returns:
            True if a snapshot was restored
        """
        if not self.settings.restore_on_startup:
            self.logger.info("Snapshot restore disabled, starting empty")
            return False

        with self._lock:
            recovered = self.persistence.recover()

        self.logger.info("Registry started", recovered=recovered, **self.stats())
        return recovered

    def shutdown(self) -> None:
        """Persist current state if configured to, then release the snapshot store."""
        try:
            if self.settings.persist_on_shutdown:
                with self._lock:
                    self.persistence.prepare_shutdown()
            else:
                self.logger.info("Snapshot on shutdown disabled")
        finally:
            if self.persistence.snapshot_store is not None:
                self.persistence.snapshot_store.close()

        self.logger.info("Registry stopped", **self.stats())

    def register(self,
                 product_id: str,
                 product_type: str,
                 producer: str,
                 timestamp: int,
                 location: str) -> Product:
        with self._lock:
            return self.product_store.register(
                product_id, product_type, producer, timestamp, location
            )

    def add_event(self,
                  product_id: str,
                  event_type: str,
                  timestamp: int,
                  location: str,
                  handler: str) -> SupplyChainEvent:
        with self._lock:
            return self.event_appender.add_event(
                product_id, event_type, timestamp, location, handler
            )

    def verify(self,
               product_id: str,
               image_hash: str,
               timestamp: int,
               location: str) -> VerificationResult:
        with self._lock:
            return self.verification_engine.verify(
                product_id, image_hash, timestamp, location
            )

    def get_product(self, product_id: str) -> Product:
        with self._lock:
            return self.product_store.get(product_id)

    def get_verification_logs(self, start_timestamp: int, end_timestamp: int) -> List[LedgerEntry]:
        with self._lock:
            return self.ledger.query_range(start_timestamp, end_timestamp)

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return self._stats()

    def _stats(self) -> Dict[str, Any]:
        return {
            "product_count": len(self.product_store),
            "ledger_size": len(self.ledger),
            "counter_value": self.counter.value
        }
