"""
Pydantic schemas for product API endpoints.
"""

from typing import List

from pydantic import BaseModel, Field, field_validator

from ....models.domain import LedgerEntry


class ProductRegisterRequest(BaseModel):
    """Request model for product registration."""

    product_id: str = Field(
        min_length=1,
        max_length=255,
        description="Caller-chosen unique product identifier"
    )
    product_type: str = Field(max_length=255, description="Kind of product")
    producer: str = Field(max_length=255, description="Producer or manufacturer")
    timestamp: int = Field(description="Registration logical time")
    location: str = Field(max_length=255, description="Registration location")

    @field_validator("product_id")
    @classmethod
    def validate_product_id(cls, v: str) -> str:
        """Reject blank product ids."""
        if not v.strip():
            raise ValueError("Product id cannot be blank")
        return v


class EventCreateRequest(BaseModel):
    """Request model for appending a supply chain event."""

    event_type: str = Field(min_length=1, max_length=100, description="Event kind")
    timestamp: int = Field(description="Event logical time")
    location: str = Field(max_length=255, description="Where the event happened")
    handler: str = Field(max_length=255, description="Who handled the product")


class VerificationRequest(BaseModel):
    """Request model for an authenticity verification."""

    image_hash: str = Field(max_length=1024, description="Hash of the submitted product image")
    timestamp: int = Field(description="Verification logical time")
    location: str = Field(max_length=255, description="Where the verification happened")


class VerificationLogResponse(BaseModel):
    """Verification ledger slice for a time range."""

    start_timestamp: int
    end_timestamp: int
    total: int
    entries: List[LedgerEntry]
