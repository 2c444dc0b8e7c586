"""
Advisor Back Office - Trading Alert Endpoints
Accounts affected by a BUY/SELL alert on a ticker
"""
from typing import Optional
from fastapi import APIRouter, Query

from backoffice.config import settings
from backoffice.core.alerts import classify_affected_accounts
from backoffice.schemas.alert import AffectedAccountsRequest, AffectedAccountsResponse
from backoffice.utils.exceptions import raise_bad_request

router = APIRouter()


@router.post("/{ticker}/affected-accounts", response_model=AffectedAccountsResponse)
async def get_affected_accounts(
    ticker: str,
    data: AffectedAccountsRequest,
    signal: str = Query("BUY", description="BUY or SELL"),
    household_category: Optional[str] = Query(None, description="Filter by household category"),
):
    """Classify candidate accounts for an alert and order them for review."""
    ticker = ticker.strip().upper()
    if not ticker:
        raise_bad_request("Ticker is required")

    result = classify_affected_accounts(
        ticker=ticker,
        signal=signal,
        candidates=[account.to_domain() for account in data.accounts],
        household_category=household_category,
        zero_balance_note=settings.ALERT_ZERO_BALANCE_NOTE,
    )
    return result.to_dict()
