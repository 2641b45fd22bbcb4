"""
Registry services.
"""

from .event_appender import EventAppender
from .identifier_counter import IdentifierCounter
from .persistence import PersistenceManager
from .product_store import ProductStore
from .registry_service import RegistryService
from .verification_engine import VerificationEngine, score, stable_text_hash
from .verification_ledger import VerificationLedger

__all__ = [
    "EventAppender",
    "IdentifierCounter",
    "PersistenceManager",
    "ProductStore",
    "RegistryService",
    "VerificationEngine",
    "VerificationLedger",
    "score",
    "stable_text_hash",
]
