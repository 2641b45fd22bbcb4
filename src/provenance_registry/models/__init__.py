"""
Domain models for the provenance registry.
"""

from .domain import (
    LedgerEntry,
    Product,
    RegistrySnapshot,
    SupplyChainEvent,
    VerificationResult,
)

__all__ = [
    "LedgerEntry",
    "Product",
    "RegistrySnapshot",
    "SupplyChainEvent",
    "VerificationResult",
]
