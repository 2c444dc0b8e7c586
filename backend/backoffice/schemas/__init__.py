"""
Request and response models for the HTTP API
"""
from backoffice.schemas.risk import (
    RiskTierAllocationSchema,
    AllocationLineSchema,
    BlendedCapsResponse,
    RiskValidationRequest,
    RiskLimitEntrySchema,
    RiskValidationResponse,
    RiskScoreRequest,
    RiskScoreResponse,
    TierHoldingSchema,
    PositionComplianceRequest,
    PositionComplianceResponse,
    AccountComplianceRequest,
    ComplianceIssueSchema,
    AccountComplianceResponse,
)
from backoffice.schemas.alert import (
    AccountSnapshotSchema,
    AffectedAccountsRequest,
    AffectedAccountSchema,
    AffectedAccountsResponse,
)
from backoffice.schemas.allocation import (
    PositionSchema,
    TargetAllocationSchema,
    AllocationComparisonRequest,
    ComparisonRowSchema,
    AllocationComparisonResponse,
)

__all__ = [
    # Risk
    "RiskTierAllocationSchema",
    "AllocationLineSchema",
    "BlendedCapsResponse",
    "RiskValidationRequest",
    "RiskLimitEntrySchema",
    "RiskValidationResponse",
    "RiskScoreRequest",
    "RiskScoreResponse",
    "TierHoldingSchema",
    "PositionComplianceRequest",
    "PositionComplianceResponse",
    "AccountComplianceRequest",
    "ComplianceIssueSchema",
    "AccountComplianceResponse",
    # Alerts
    "AccountSnapshotSchema",
    "AffectedAccountsRequest",
    "AffectedAccountSchema",
    "AffectedAccountsResponse",
    # Allocations
    "PositionSchema",
    "TargetAllocationSchema",
    "AllocationComparisonRequest",
    "ComparisonRowSchema",
    "AllocationComparisonResponse",
]
