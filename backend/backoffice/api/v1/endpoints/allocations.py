"""
Advisor Back Office - Target Allocation Endpoints
"""
from fastapi import APIRouter

from backoffice.core.portfolio import compare_account_allocations
from backoffice.schemas.allocation import (
    AllocationComparisonRequest,
    AllocationComparisonResponse,
)

router = APIRouter()


@router.post("/compare", response_model=AllocationComparisonResponse)
async def compare_allocations(data: AllocationComparisonRequest):
    """Compare an account's positions with its target allocations."""
    comparison = compare_account_allocations(
        positions=[p.model_dump() for p in data.positions],
        target_allocations=[t.model_dump() for t in data.target_allocations],
        tolerance=data.tolerance,
    )
    return comparison.to_dict()
