"""
Risk Limits Module

Core business logic for account risk limits including:
- Risk tiers and holding categories with their reference tables
- Blended category caps and target allocation validation
- Portfolio risk scoring
- Risk tier compliance checks
"""
from backoffice.core.risk.risk_config import (
    RiskTier,
    HoldingCategory,
    CategoryCaps,
    RiskTierAllocation,
    TargetAllocationLine,
    CAPPED_CATEGORIES,
    CATEGORY_CAP_TABLE,
    CATEGORY_RISK_WEIGHT,
    CATEGORY_LABELS,
    RISK_TIER_LABELS,
    get_allocation_key,
    parse_category,
)
from backoffice.core.risk.scoring import (
    RiskScoreBand,
    RISK_SCORE_BANDS,
    calculate_portfolio_risk_score,
    get_risk_score_label,
    get_risk_score_color,
)
from backoffice.core.risk.limits import (
    BlendedCaps,
    RiskLimitEntry,
    ValidationOutcome,
    RiskLimitEngine,
    blend_caps,
    validate_risk_limits,
)
from backoffice.core.risk.compliance import (
    TierHolding,
    ComplianceCheckResult,
    ComplianceIssue,
    AccountComplianceResult,
    check_position_compliance,
    check_account_compliance,
)

__all__ = [
    # Configuration
    "RiskTier",
    "HoldingCategory",
    "CategoryCaps",
    "RiskTierAllocation",
    "TargetAllocationLine",
    "CAPPED_CATEGORIES",
    "CATEGORY_CAP_TABLE",
    "CATEGORY_RISK_WEIGHT",
    "CATEGORY_LABELS",
    "RISK_TIER_LABELS",
    "get_allocation_key",
    "parse_category",
    # Scoring
    "RiskScoreBand",
    "RISK_SCORE_BANDS",
    "calculate_portfolio_risk_score",
    "get_risk_score_label",
    "get_risk_score_color",
    # Limits
    "BlendedCaps",
    "RiskLimitEntry",
    "ValidationOutcome",
    "RiskLimitEngine",
    "blend_caps",
    "validate_risk_limits",
    # Compliance
    "TierHolding",
    "ComplianceCheckResult",
    "ComplianceIssue",
    "AccountComplianceResult",
    "check_position_compliance",
    "check_account_compliance",
]
