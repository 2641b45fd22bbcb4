"""
Product API endpoints for registration, custody events and verification.
"""

from fastapi import APIRouter, Depends, status
import structlog

from ....models.domain import Product, SupplyChainEvent, VerificationResult
from ....services.registry_service import RegistryService
from ..dependencies import get_registry
from ..schemas.products import (
    EventCreateRequest,
    ProductRegisterRequest,
    VerificationRequest,
)

logger = structlog.get_logger(module=__name__)

router = APIRouter(prefix="/products", tags=["products"])


@router.post("",
             response_model=Product,
             status_code=status.HTTP_201_CREATED,
             summary="Register Product",
             description="Register a new product with its origin details")
async def register_product(
    request: ProductRegisterRequest,
    registry: RegistryService = Depends(get_registry)
) -> Product:
    """
    Register a product.

    Returns 409 if a product with the same id already exists.
    """
    return registry.register(
        request.product_id,
        request.product_type,
        request.producer,
        request.timestamp,
        request.location
    )


@router.get("/{product_id}",
            response_model=Product,
            summary="Get Product",
            description="Get a product with its full event and verification history")
async def get_product(
    product_id: str,
    registry: RegistryService = Depends(get_registry)
) -> Product:
    return registry.get_product(product_id)


@router.post("/{product_id}/events",
             response_model=SupplyChainEvent,
             status_code=status.HTTP_201_CREATED,
             summary="Add Supply Chain Event")
async def add_event(
    product_id: str,
    request: EventCreateRequest,
    registry: RegistryService = Depends(get_registry)
) -> SupplyChainEvent:
    """Append a chain-of-custody event to a product."""
    return registry.add_event(
        product_id,
        request.event_type,
        request.timestamp,
        request.location,
        request.handler
    )


@router.post("/{product_id}/verifications",
             response_model=VerificationResult,
             status_code=status.HTTP_201_CREATED,
             summary="Verify Product Authenticity")
async def verify_product(
    product_id: str,
    request: VerificationRequest,
    registry: RegistryService = Depends(get_registry)
) -> VerificationResult:
    """
    Verify a product from an image hash.

    The score is deterministic in the image hash; each call mints a new
    verification id.
    """
    result = registry.verify(
        product_id,
        request.image_hash,
        request.timestamp,
        request.location
    )

    if not result.is_authentic:
        logger.warning(
            "Verification flagged product as not authentic",
            product_id=product_id,
            verification_id=result.verification_id,
            confidence_score=result.confidence_score
        )
    return result
