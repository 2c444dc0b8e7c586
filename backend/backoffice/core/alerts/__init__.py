"""
Trading Alerts Module

Classifies the accounts affected by a BUY/SELL trading alert.
"""
from backoffice.core.alerts.deviation import (
    DeviationStatus,
    SignalDirection,
    AccountSnapshot,
    AffectedAccount,
    DeviationResult,
    classify_account,
    sort_for_signal,
    filter_by_household_category,
    classify_affected_accounts,
)

__all__ = [
    "DeviationStatus",
    "SignalDirection",
    "AccountSnapshot",
    "AffectedAccount",
    "DeviationResult",
    "classify_account",
    "sort_for_signal",
    "filter_by_household_category",
    "classify_affected_accounts",
]
