"""
Authenticity verification.

The confidence score is a deterministic placeholder derived from the
submitted image hash, not the output of a real classifier. Its arithmetic
is fixed so that stored histories and confidence displays stay reproducible:

    h      = djb2(image_hash)            32-bit unsigned, over code points
    score  = (70 + (h % 100) % 30) / 100
    genuine = score > 0.70
"""

from typing import Tuple

import structlog

from ..models.domain import VerificationResult
from .identifier_counter import IdentifierCounter
from .product_store import ProductStore
from .verification_ledger import VerificationLedger

HASH_SEED = 5381
HASH_MASK = 0xFFFFFFFF
BASE_SCORE = 70
SCORE_SPREAD = 30
AUTHENTICITY_THRESHOLD = 0.70
VERIFICATION_ID_PREFIX = "ver"


def stable_text_hash(text: str) -> int:
    """djb2 string hash with 32-bit wrap-around, stable across runs."""
    h = HASH_SEED
    for char in text:
        h = ((h << 5) + h + ord(char)) & HASH_MASK
    return h


def score(image_hash: str) -> Tuple[float, bool]:
    """
    Derive the confidence score and authenticity verdict for an image hash.

    Returns:
        Tuple of (confidence_score, is_authentic)
    """
    modulo = stable_text_hash(image_hash) % 100
    confidence_score = (BASE_SCORE + modulo % SCORE_SPREAD) / 100.0
    return confidence_score, confidence_score > AUTHENTICITY_THRESHOLD


def format_verification_id(timestamp: int, counter_value: int) -> str:
    return f"{VERIFICATION_ID_PREFIX}-{timestamp}-{counter_value}"


def parse_counter_value(verification_id: str) -> int:
    """Extract the counter value minted into a verification id."""
    prefix, _, counter = verification_id.rpartition("-")
    if not prefix.startswith(f"{VERIFICATION_ID_PREFIX}-") or not counter.isdigit():
        raise ValueError(f"Malformed verification id: {verification_id!r}")
    return int(counter)


class VerificationEngine:
    """Scores verification requests and records the results."""

    def __init__(self,
                 product_store: ProductStore,
                 counter: IdentifierCounter,
                 ledger: VerificationLedger):
        self.product_store = product_store
        self.counter = counter
        self.ledger = ledger
        self.logger = structlog.get_logger(component="verification_engine")

    def verify(self,
               product_id: str,
               image_hash: str,
               timestamp: int,
               location: str) -> VerificationResult:
        """
        Verify a product's authenticity from an image hash.

        Args:
            product_id: Registered product id
            image_hash: Hash of the submitted product image
            timestamp: Verification logical time
            location: Where the verification took place

        Returns:
            The recorded VerificationResult

        Raises:
            ProductNotFoundError: If the product is unknown; the counter
                does not advance in that case
        """
        product = self.product_store.get(product_id)

        confidence_score, is_authentic = score(image_hash)
        verification_id = format_verification_id(timestamp, self.counter.next())

        result = VerificationResult(
            timestamp=timestamp,
            location=location,
            is_authentic=is_authentic,
            confidence_score=confidence_score,
            verification_id=verification_id
        )
        self.product_store.replace(product.with_verification(result))
        self.ledger.append(product_id, result)

        self.logger.info(
            "Product verified",
            product_id=product_id,
            verification_id=verification_id,
            confidence_score=confidence_score,
            is_authentic=is_authentic
        )
        return result
