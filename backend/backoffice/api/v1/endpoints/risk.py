"""
Advisor Back Office - Risk Limit Endpoints
Blended caps, target allocation validation, risk scoring and tier compliance
"""
from fastapi import APIRouter

from backoffice.core.risk import (
    RiskLimitEngine,
    calculate_portfolio_risk_score,
    check_account_compliance,
    check_position_compliance,
    get_risk_score_color,
    get_risk_score_label,
)
from backoffice.schemas.risk import (
    AccountComplianceRequest,
    AccountComplianceResponse,
    BlendedCapsResponse,
    PositionComplianceRequest,
    PositionComplianceResponse,
    RiskScoreRequest,
    RiskScoreResponse,
    RiskTierAllocationSchema,
    RiskValidationRequest,
    RiskValidationResponse,
)

router = APIRouter()


@router.post("/caps", response_model=BlendedCapsResponse)
async def get_blended_caps(data: RiskTierAllocationSchema):
    """Blend the category caps for a risk tier allocation."""
    allocation = data.to_domain()
    engine = RiskLimitEngine(allocation)
    return BlendedCapsResponse(
        caps=engine.caps.to_dict(),
        max_allowed=engine.caps.rounded().to_dict(),
        allocation_total=float(allocation.total),
        allocation_complete=engine.is_complete,
    )


@router.post("/validate", response_model=RiskValidationResponse)
async def validate_target_allocations(data: RiskValidationRequest):
    """Check target allocations against the account's blended caps."""
    engine = RiskLimitEngine(data.allocation.to_domain())
    lines = [line.to_domain() for line in data.lines]

    outcome = engine.validate(lines)
    score = engine.score(lines)

    return RiskValidationResponse(
        **outcome.to_dict(),
        risk_score=float(score),
        risk_label=get_risk_score_label(score),
        allocation_complete=engine.is_complete,
    )


@router.post("/score", response_model=RiskScoreResponse)
async def get_risk_score(data: RiskScoreRequest):
    """Weighted 1-4 risk score for a set of holdings (0 when undetermined)."""
    score = calculate_portfolio_risk_score(line.to_domain() for line in data.holdings)
    return RiskScoreResponse(
        score=float(score),
        label=get_risk_score_label(score),
        color=get_risk_score_color(score),
        determined=score > 0,
    )


@router.post("/compliance/position", response_model=PositionComplianceResponse)
async def check_position(data: PositionComplianceRequest):
    """Check whether a new position fits the account's tier allocation."""
    result = check_position_compliance(
        ticker=data.ticker.upper(),
        ticker_tier=data.ticker_risk_tier,
        allocation=data.allocation.to_domain(),
        holdings=[h.to_domain() for h in data.holdings],
        position_value=data.position_value,
    )
    return result.to_dict()


@router.post("/compliance/account", response_model=AccountComplianceResponse)
async def check_account(data: AccountComplianceRequest):
    """Check every holding in an account against its tier allocation."""
    result = check_account_compliance(
        allocation=data.allocation.to_domain(),
        holdings=[h.to_domain() for h in data.holdings],
    )
    return result.to_dict()
