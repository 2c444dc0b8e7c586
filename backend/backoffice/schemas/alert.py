"""
Advisor Back Office - Trading Alert Schemas
"""
from typing import Optional
from pydantic import BaseModel, Field

from backoffice.core.alerts import AccountSnapshot, DeviationStatus, SignalDirection


class AccountSnapshotSchema(BaseModel):
    """One candidate account as seen by the alert ticker."""
    account_id: str = Field(..., min_length=1)
    account_type: str = Field(..., description="individual, corporate or joint")
    portfolio_value: float = Field(..., allow_inf_nan=False, description="Sum of all positions")
    position_value: Optional[float] = Field(
        None, allow_inf_nan=False, description="None when the account holds no position"
    )
    target_percentage: Optional[float] = Field(
        None, ge=0, le=100, allow_inf_nan=False, description="None when there is no target"
    )
    account_name: str = ""
    owner_name: str = ""
    household_id: Optional[str] = None
    household_name: str = ""
    household_category: Optional[str] = None

    def to_domain(self) -> AccountSnapshot:
        return AccountSnapshot(**self.model_dump())


class AffectedAccountsRequest(BaseModel):
    """Candidate accounts for an alert."""
    accounts: list[AccountSnapshotSchema] = Field(default_factory=list)


class AffectedAccountSchema(BaseModel):
    account_id: str
    account_type: str
    account_name: str
    owner_name: str
    household_id: Optional[str]
    household_name: str
    household_category: Optional[str]
    current_value: float
    portfolio_value: float
    actual_percentage: float
    target_percentage: Optional[float]
    variance: Optional[float]
    status: DeviationStatus


class AffectedAccountsResponse(BaseModel):
    """Affected accounts ordered for review."""
    ticker: str
    signal: SignalDirection
    affected: list[AffectedAccountSchema]
    active: list[AffectedAccountSchema]
    zero_balance: list[AffectedAccountSchema]
    zero_balance_note: str
