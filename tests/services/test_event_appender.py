"""
Tests for EventAppender functionality.
"""

import pytest

from provenance_registry.core.exceptions import ProductNotFoundError
from provenance_registry.services.event_appender import EventAppender
from provenance_registry.services.product_store import ProductStore


class TestEventAppender:
    """Test EventAppender functionality."""

    @pytest.fixture
    def store(self):
        store = ProductStore()
        store.register("P1", "widget", "ACME", 1000, "Factory A")
        return store

    @pytest.fixture
    def appender(self, store):
        return EventAppender(store)

    def test_add_event_appends_and_returns_event(self, appender, store):
        """Test an event is returned and stored on the product."""
        event = appender.add_event("P1", "shipped", 1010, "Port B", "Carrier X")

        assert event.event_type == "shipped"
        assert event.timestamp == 1010
        assert event.location == "Port B"
        assert event.handler == "Carrier X"
        assert store.get("P1").events == (event,)

    def test_events_keep_call_order(self, appender, store):
        """Test events are kept in the order they were added."""
        appender.add_event("P1", "shipped", 1010, "Port B", "Carrier X")
        appender.add_event("P1", "received", 1005, "Warehouse C", "Clerk Y")
        appender.add_event("P1", "sold", 1020, "Shop D", "Retailer Z")

        event_types = [event.event_type for event in store.get("P1").events]
        assert event_types == ["shipped", "received", "sold"]

    def test_registration_fields_untouched(self, appender, store):
        """Test appending an event keeps all registration fields."""
        before = store.get("P1")

        appender.add_event("P1", "shipped", 1010, "Port B", "Carrier X")
        after = store.get("P1")

        assert after.product_type == before.product_type
        assert after.producer == before.producer
        assert after.registration_timestamp == before.registration_timestamp
        assert after.registration_location == before.registration_location
        assert after.verifications == before.verifications

    def test_unknown_product(self, appender, store):
        """Test adding an event to an unknown product fails without side effects."""
        with pytest.raises(ProductNotFoundError):
            appender.add_event("missing", "shipped", 1010, "Port B", "Carrier X")

        assert "missing" not in store
        assert store.get("P1").events == ()
