"""
Snapshot and restore of registry state across process restarts.

Before shutdown the whole registry is copied into a stable buffer and
written through a snapshot store. On startup the buffer is filled from the
store, the in-memory components are rebuilt from it, and the buffer is
cleared again so stale data is never reused.
"""

from typing import Iterable, List, Optional, Sequence, Tuple

import structlog

from ..core.exceptions import PersistenceError
from ..db.snapshot_store import BaseSnapshotStore
from ..models.domain import LedgerEntry, Product, RegistrySnapshot
from .identifier_counter import IdentifierCounter
from .product_store import ProductStore
from .verification_engine import parse_counter_value
from .verification_ledger import VerificationLedger


class PersistenceManager:
    """Moves registry state between memory and a snapshot store."""

    def __init__(self,
                 product_store: ProductStore,
                 counter: IdentifierCounter,
                 ledger: VerificationLedger,
                 snapshot_store: Optional[BaseSnapshotStore] = None):
        self.product_store = product_store
        self.counter = counter
        self.ledger = ledger
        self.snapshot_store = snapshot_store
        self._stable: Optional[RegistrySnapshot] = None
        self.logger = structlog.get_logger(component="persistence_manager")

    @property
    def stable_snapshot(self) -> Optional[RegistrySnapshot]:
        """Snapshot waiting in the stable buffer, if any."""
        return self._stable

    def snapshot(self) -> List[Tuple[str, Product]]:
        """All product entries in registration order."""
        return self.product_store.items()

    def restore(self,
                entries: Iterable[Tuple[str, Product]],
                counter_value: Optional[int] = None,
                ledger: Optional[Sequence[LedgerEntry]] = None) -> None:
        """
        Rebuild the registry from snapshot entries, replacing current contents.

        Args:
            entries: (product id, Product) pairs in registration order
            counter_value: Persisted counter value; derived from the highest
                minted verification id when omitted, and raised to it when
                lower
            ledger: Persisted ledger entries; rebuilt from the products'
                verifications in mint order when omitted
        """
        entries = list(entries)
        products = [product for _, product in entries]

        highest_minted = self._highest_counter_value(products)
        if counter_value is None:
            counter_value = highest_minted
        elif counter_value < 0:
            raise ValueError("Counter value cannot be negative")
        elif counter_value < highest_minted:
            # Never hand out an id already minted into a restored product
            self.logger.warning(
                "Persisted counter behind minted verification ids",
                counter_value=counter_value,
                highest_minted=highest_minted
            )
            counter_value = highest_minted
        if ledger is None:
            ledger = self._rebuild_ledger(products)

        self.product_store.load(entries)
        self.counter.restore(counter_value)
        self.ledger.load(ledger)
        self._stable = None

        self.logger.info(
            "Registry restored",
            product_count=len(entries),
            counter_value=counter_value,
            ledger_size=len(ledger)
        )

    def capture(self) -> RegistrySnapshot:
        """Build a full snapshot document of the current state."""
        return RegistrySnapshot(
            products=self.snapshot(),
            counter_value=self.counter.value,
            ledger=self.ledger.entries()
        )

    def prepare_shutdown(self) -> RegistrySnapshot:
        """
        Capture current state into the stable buffer and persist it.

        Raises:
            PersistenceError: If the snapshot store rejects the write
        """
        self._stable = self.capture()
        if self.snapshot_store is not None:
            try:
                self.snapshot_store.save(self._stable)
            except PersistenceError:
                self.logger.error("Snapshot before shutdown failed")
                raise

        self.logger.info(
            "Registry snapshot prepared",
            product_count=len(self._stable.products),
            counter_value=self._stable.counter_value,
            ledger_size=len(self._stable.ledger)
        )
        return self._stable

    def recover(self) -> bool:
        """
        Restore state from the stable buffer or the snapshot store.

        Returns:
            True if a snapshot was found and restored

        Raises:
            PersistenceError: If the stored snapshot cannot be read or applied
        """
        if self._stable is None and self.snapshot_store is not None:
            self._stable = self.snapshot_store.load()

        if self._stable is None:
            self.logger.info("No snapshot to recover, starting empty")
            return False

        stable = self._stable
        try:
            self.restore(stable.products, stable.counter_value, stable.ledger)
        except ValueError as e:
            self.logger.error("Snapshot could not be applied", error=str(e))
            raise PersistenceError(f"Snapshot could not be applied: {e}") from e
        return True

    @staticmethod
    def _highest_counter_value(products: Iterable[Product]) -> int:
        return max(
            (parse_counter_value(result.verification_id)
             for product in products
             for result in product.verifications),
            default=0
        )

    @staticmethod
    def _rebuild_ledger(products: Iterable[Product]) -> List[LedgerEntry]:
        entries = [
            LedgerEntry(product_id=product.product_id, result=result)
            for product in products
            for result in product.verifications
        ]
        entries.sort(key=lambda entry: parse_counter_value(entry.result.verification_id))
        return entries
