"""
Advisor Back Office - Risk Limit Schemas
"""
from typing import Optional
from pydantic import BaseModel, Field

from backoffice.core.risk import (
    HoldingCategory,
    RiskTier,
    RiskTierAllocation,
    TargetAllocationLine,
    TierHolding,
)


def _percentage(description: str):
    return Field(default=0, ge=0, le=100, allow_inf_nan=False, description=description)


class RiskTierAllocationSchema(BaseModel):
    """Risk tolerance split across the five tiers."""
    low: float = _percentage("Low risk %")
    low_medium: float = _percentage("Low-medium risk %")
    medium: float = _percentage("Medium risk %")
    medium_high: float = _percentage("Medium-high risk %")
    high: float = _percentage("High risk %")

    def to_domain(self) -> RiskTierAllocation:
        return RiskTierAllocation(**self.model_dump())


class AllocationLineSchema(BaseModel):
    """Target allocation (or holding) tagged with its category."""
    category: HoldingCategory
    target_percentage: float = Field(..., ge=0, allow_inf_nan=False)

    def to_domain(self) -> TargetAllocationLine:
        return TargetAllocationLine(
            category=self.category,
            target_percentage=self.target_percentage,
        )


class BlendedCapsResponse(BaseModel):
    """Blended caps for an allocation."""
    caps: dict[str, float]
    max_allowed: dict[str, float]
    allocation_total: float
    allocation_complete: bool


class RiskValidationRequest(BaseModel):
    """Request to validate target allocations against risk limits."""
    allocation: RiskTierAllocationSchema
    lines: list[AllocationLineSchema] = Field(default_factory=list)


class RiskLimitEntrySchema(BaseModel):
    category: HoldingCategory
    label: str
    current_percentage: float
    max_allowed: float
    exceeded_by: float


class RiskValidationResponse(BaseModel):
    """Validation outcome."""
    is_valid: bool
    violations: list[RiskLimitEntrySchema]
    warnings: list[RiskLimitEntrySchema]
    risk_score: float
    risk_label: str
    allocation_complete: bool


class RiskScoreRequest(BaseModel):
    holdings: list[AllocationLineSchema] = Field(default_factory=list)


class RiskScoreResponse(BaseModel):
    """Portfolio risk score (0 = undetermined)."""
    score: float
    label: str
    color: str
    determined: bool


# ==================== Compliance ====================

class TierHoldingSchema(BaseModel):
    ticker: str = Field(..., min_length=1, max_length=20)
    value: float = Field(..., allow_inf_nan=False)
    risk_tier: Optional[RiskTier] = Field(None, description="None if not in the holdings library")

    def to_domain(self) -> TierHolding:
        return TierHolding(ticker=self.ticker, value=self.value, risk_tier=self.risk_tier)


class PositionComplianceRequest(BaseModel):
    """Request to check a new position against the account's tier allocation."""
    ticker: str = Field(..., min_length=1, max_length=20)
    ticker_risk_tier: Optional[RiskTier] = None
    allocation: RiskTierAllocationSchema
    holdings: list[TierHoldingSchema] = Field(default_factory=list)
    position_value: float = Field(..., ge=0, allow_inf_nan=False)


class PositionComplianceResponse(BaseModel):
    compliant: bool
    ticker: str
    errors: list[str]
    warnings: list[str]
    details: dict


class AccountComplianceRequest(BaseModel):
    allocation: RiskTierAllocationSchema
    holdings: list[TierHoldingSchema] = Field(default_factory=list)


class ComplianceIssueSchema(BaseModel):
    ticker: str
    issue: str
    risk_tier: Optional[RiskTier] = None


class AccountComplianceResponse(BaseModel):
    compliant: bool
    issues: list[ComplianceIssueSchema]
    tier_weights: dict[str, dict[str, float]]
