"""
Immutable domain records.

Records are frozen pydantic models and their sequences are tuples, so a
value handed to a caller can never change underneath it. Updates build a
new record with ``model_copy(update=...)`` and swap it into the store.
"""

from datetime import datetime, timezone
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field


class SupplyChainEvent(BaseModel):
    """A single chain-of-custody step."""

    model_config = ConfigDict(frozen=True)

    event_type: str = Field(description="Event kind, e.g. 'shipped' or 'received'")
    timestamp: int = Field(description="Caller-supplied logical time")
    location: str
    handler: str


class VerificationResult(BaseModel):
    """Outcome of one authenticity verification."""

    model_config = ConfigDict(frozen=True)

    timestamp: int
    location: str
    is_authentic: bool
    confidence_score: float = Field(ge=0.70, le=0.99)
    verification_id: str


class Product(BaseModel):
    """A registered product with its append-only histories."""

    model_config = ConfigDict(frozen=True)

    product_id: str
    product_type: str
    producer: str
    registration_timestamp: int
    registration_location: str
    events: Tuple[SupplyChainEvent, ...] = ()
    verifications: Tuple[VerificationResult, ...] = ()

    def with_event(self, event: SupplyChainEvent) -> "Product":
        """Return a copy with ``event`` appended."""
        return self.model_copy(update={"events": self.events + (event,)})

    def with_verification(self, result: VerificationResult) -> "Product":
        """Return a copy with ``result`` appended."""
        return self.model_copy(update={"verifications": self.verifications + (result,)})


class LedgerEntry(BaseModel):
    """A (product id, verification) pair in the global ledger."""

    model_config = ConfigDict(frozen=True)

    product_id: str
    result: VerificationResult


class RegistrySnapshot(BaseModel):
    """Durable image of the whole registry."""

    model_config = ConfigDict(frozen=True)

    products: List[Tuple[str, Product]] = Field(default_factory=list)
    counter_value: int = Field(0, ge=0)
    ledger: List[LedgerEntry] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
