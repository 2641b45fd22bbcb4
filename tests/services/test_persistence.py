"""
Tests for PersistenceManager snapshot and restore.
"""

from unittest.mock import MagicMock

import pytest

from provenance_registry.core.exceptions import PersistenceError
from provenance_registry.db.snapshot_store import InMemorySnapshotStore
from provenance_registry.services.registry_service import RegistryService


def populate(registry: RegistryService) -> None:
    registry.register("P1", "widget", "ACME", 1000, "Factory A")
    registry.register("P2", "gadget", "Globex", 1001, "Factory B")
    registry.add_event("P1", "shipped", 1010, "Port B", "Carrier X")
    registry.verify("P2", "img-2", 1015, "Warehouse B")
    registry.verify("P1", "hash123", 1020, "Warehouse C")
    registry.add_event("P2", "received", 1025, "Shop D", "Clerk Y")
    registry.verify("P2", "img-2", 1030, "Shop D")


def observable_state(registry: RegistryService):
    products = {
        product_id: registry.get_product(product_id)
        for product_id, _ in registry.persistence.snapshot()
    }
    return products, registry.get_verification_logs(0, 10_000), registry.counter.value


class TestPersistenceManager:
    """Test PersistenceManager functionality."""

    @pytest.fixture
    def populated(self, registry):
        populate(registry)
        return registry

    def test_snapshot_lists_products_in_registration_order(self, populated):
        """Test snapshot returns every product as (id, Product) pairs."""
        entries = populated.persistence.snapshot()

        assert [product_id for product_id, _ in entries] == ["P1", "P2"]
        assert entries[0][1] == populated.get_product("P1")

    def test_restore_of_snapshot_is_identity(self, populated):
        """Test restore(snapshot()) leaves observable state unchanged."""
        before = observable_state(populated)

        populated.persistence.restore(populated.persistence.snapshot())

        assert observable_state(populated) == before

    def test_restore_is_idempotent(self, populated):
        """Test restoring the same entries twice gives the same state."""
        entries = populated.persistence.snapshot()
        populated.persistence.restore(entries)
        once = observable_state(populated)

        populated.persistence.restore(entries)

        assert observable_state(populated) == once

    def test_restore_into_fresh_registry(self, populated, settings):
        """Test a new process rebuilds counter and ledger from product entries alone."""
        before = observable_state(populated)
        fresh = RegistryService(settings=settings)

        fresh.persistence.restore(populated.persistence.snapshot())

        assert observable_state(fresh) == before
        assert fresh.verify("P1", "hash123", 1040, "X").verification_id == "ver-1040-4"

    def test_restore_replaces_existing_contents(self, populated, settings):
        """Test restore discards whatever the registry held before."""
        other = RegistryService(settings=settings)
        other.register("ONLY", "widget", "ACME", 1, "X")

        populated.persistence.restore(other.persistence.snapshot())

        assert [product_id for product_id, _ in populated.persistence.snapshot()] == ["ONLY"]
        assert populated.get_verification_logs(0, 10_000) == []

    def test_shutdown_then_recover_across_instances(self, settings):
        """Test state survives a simulated restart through a snapshot store."""
        store = InMemorySnapshotStore()
        first = RegistryService(snapshot_store=store, settings=settings)
        populate(first)
        before = observable_state(first)
        first.shutdown()

        second = RegistryService(snapshot_store=store, settings=settings)
        assert second.startup() is True

        assert observable_state(second) == before
        assert second.verify("P2", "img-3", 1050, "X").verification_id == "ver-1050-4"

    def test_stale_counter_value_cannot_reissue_ids(self, populated):
        """Test a persisted counter behind the minted ids is raised to the highest one."""
        populated.persistence.restore(populated.persistence.snapshot(), counter_value=0)

        populated.verify("P1", "hash123", 1040, "X")

        minted = [
            result.verification_id
            for _, product in populated.persistence.snapshot()
            for result in product.verifications
        ]
        assert len(minted) == len(set(minted))
        assert populated.counter.value == 4

    def test_recover_stale_snapshot_document(self, populated, settings):
        """Test recovery from a document whose counter lags its products keeps ids unique."""
        store = InMemorySnapshotStore()
        store.save(populated.persistence.capture().model_copy(update={"counter_value": 1}))

        restarted = RegistryService(snapshot_store=store, settings=settings)
        assert restarted.startup() is True

        assert restarted.counter.value == 3
        assert restarted.verify("P2", "img-9", 1050, "X").verification_id == "ver-1050-4"

    def test_stable_buffer_cleared_after_recover(self, populated):
        """Test the stable buffer does not outlive a successful restore."""
        populated.persistence.prepare_shutdown()
        assert populated.persistence.stable_snapshot is not None

        assert populated.persistence.recover() is True

        assert populated.persistence.stable_snapshot is None

    def test_recover_with_nothing_persisted(self, registry):
        """Test recovery on first boot starts empty."""
        assert registry.persistence.recover() is False
        assert registry.stats() == {"product_count": 0, "ledger_size": 0, "counter_value": 0}

    def test_save_failure_is_surfaced(self, populated):
        """Test a failing snapshot store propagates PersistenceError."""
        failing_store = MagicMock()
        failing_store.save.side_effect = PersistenceError("disk full")
        populated.persistence.snapshot_store = failing_store

        with pytest.raises(PersistenceError):
            populated.shutdown()
        failing_store.close.assert_called_once()

    def test_load_failure_is_surfaced(self, registry):
        """Test a failing snapshot load propagates PersistenceError."""
        failing_store = MagicMock()
        failing_store.load.side_effect = PersistenceError("corrupt")
        registry.persistence.snapshot_store = failing_store

        with pytest.raises(PersistenceError):
            registry.startup()

    def test_invalid_snapshot_leaves_state_untouched(self, populated):
        """Test a snapshot that cannot be applied fails before mutating anything."""
        before = observable_state(populated)
        product = populated.get_product("P1")

        with pytest.raises(ValueError):
            populated.persistence.restore([("WRONG", product)])

        assert observable_state(populated) == before
