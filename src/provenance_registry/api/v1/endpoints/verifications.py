"""
Verification ledger endpoints.
"""

from fastapi import APIRouter, Depends, Query

from ....services.registry_service import RegistryService
from ..dependencies import get_registry
from ..schemas.products import VerificationLogResponse

router = APIRouter(prefix="/verifications", tags=["verifications"])


@router.get("",
            response_model=VerificationLogResponse,
            summary="Get Verification Logs",
            description="List verifications whose timestamp lies in [start, end], oldest first")
async def get_verification_logs(
    start: int = Query(..., description="Inclusive range start"),
    end: int = Query(..., description="Inclusive range end"),
    registry: RegistryService = Depends(get_registry)
) -> VerificationLogResponse:
    entries = registry.get_verification_logs(start, end)
    return VerificationLogResponse(
        start_timestamp=start,
        end_timestamp=end,
        total=len(entries),
        entries=entries
    )
