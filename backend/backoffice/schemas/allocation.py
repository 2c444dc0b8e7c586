"""
Advisor Back Office - Target Allocation Comparison Schemas
"""
from typing import Optional
from pydantic import BaseModel, Field


class PositionSchema(BaseModel):
    symbol: str = Field(..., min_length=1, max_length=20)
    quantity: float = Field(..., allow_inf_nan=False)
    current_price: float = Field(..., ge=0, allow_inf_nan=False)


class TargetAllocationSchema(BaseModel):
    id: Optional[str] = None
    ticker: str = Field(..., min_length=1, max_length=20)
    name: Optional[str] = None
    target_percentage: float = Field(..., ge=0, le=100, allow_inf_nan=False)


class AllocationComparisonRequest(BaseModel):
    """Positions and target allocations for one account."""
    positions: list[PositionSchema] = Field(default_factory=list)
    target_allocations: list[TargetAllocationSchema] = Field(default_factory=list)
    tolerance: float = Field(2, ge=0, allow_inf_nan=False, description="On-target band in points")


class ComparisonRowSchema(BaseModel):
    allocation_id: Optional[str]
    ticker: str
    name: str
    target_percentage: float
    actual_percentage: float
    variance: float
    actual_value: float
    target_value: float
    quantity: float
    status: str


class AllocationComparisonResponse(BaseModel):
    has_target_allocations: bool
    comparison: list[ComparisonRowSchema]
    total_actual_value: float
    total_target_percentage: float
