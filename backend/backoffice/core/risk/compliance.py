"""
Risk Tier Compliance

Checks an account's holdings against its risk tier allocation. Every
ticker must be classified into a risk tier, the account must allot a
non-zero share to that tier, and the tier's weight must stay within
the allotted percentage.

Works on holdings already resolved by the caller (value and tier per
ticker); nothing here reads the holdings library directly.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Optional
from loguru import logger

from backoffice.core.risk.risk_config import (
    RISK_TIER_LABELS,
    RiskTier,
    RiskTierAllocation,
)
from backoffice.utils.decimals import ZERO, HUNDRED, non_signaling, to_decimal, round_to


# Projected weight above this fraction of the tier allocation is flagged
APPROACHING_LIMIT_THRESHOLD = Decimal("0.9")


@dataclass
class TierHolding:
    """A position valued in account currency, with its library risk tier."""
    ticker: str
    value: Decimal
    risk_tier: Optional[RiskTier] = None  # None = not in holdings library

    def __post_init__(self):
        self.value = to_decimal(self.value)


@dataclass
class ComplianceCheckResult:
    """Result of checking one new position."""
    compliant: bool
    ticker: str
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    details: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        details = {
            key: (float(value) if isinstance(value, Decimal) else value)
            for key, value in self.details.items()
        }
        return {
            "compliant": self.compliant,
            "ticker": self.ticker,
            "errors": self.errors,
            "warnings": self.warnings,
            "details": details,
        }


@dataclass
class ComplianceIssue:
    ticker: str
    issue: str
    risk_tier: Optional[RiskTier] = None

    def to_dict(self) -> dict:
        return {
            "ticker": self.ticker,
            "issue": self.issue,
            "risk_tier": self.risk_tier.value if self.risk_tier else None,
        }


@dataclass
class AccountComplianceResult:
    """Result of checking all holdings in an account."""
    compliant: bool
    issues: list[ComplianceIssue] = field(default_factory=list)
    tier_weights: dict[RiskTier, dict[str, Decimal]] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "compliant": self.compliant,
            "issues": [i.to_dict() for i in self.issues],
            "tier_weights": {
                tier.value: {k: float(v) for k, v in weights.items()}
                for tier, weights in self.tier_weights.items()
            },
        }


def _tier_values(holdings: Iterable[TierHolding]) -> tuple[Decimal, dict[RiskTier, Decimal]]:
    """Total account value and value per classified tier."""
    total = ZERO
    per_tier = {tier: ZERO for tier in RiskTier}
    for holding in holdings:
        total += holding.value
        if holding.risk_tier is not None:
            per_tier[holding.risk_tier] += holding.value
    return total, per_tier


@non_signaling()
def check_position_compliance(
    ticker: str,
    ticker_tier: Optional[RiskTier],
    allocation: RiskTierAllocation,
    holdings: list[TierHolding],
    position_value: Decimal | float,
) -> ComplianceCheckResult:
    """
    Check whether a new position may be added to an account.

    Args:
        ticker: Ticker being added
        ticker_tier: Its library risk tier, or None if unclassified
        allocation: The account's risk tier allocation
        holdings: Current account holdings
        position_value: Value of the position being added

    Returns:
        ComplianceCheckResult; errors make it non-compliant, warnings do not
    """
    position_value = to_decimal(position_value)
    result = ComplianceCheckResult(
        compliant=True,
        ticker=ticker,
        details={"ticker_in_library": ticker_tier is not None},
    )

    if ticker_tier is None:
        result.compliant = False
        result.errors.append(
            f'Ticker "{ticker}" is not in the Holdings Library. Please add it with '
            f"a risk classification before creating this position."
        )
        return result

    label = RISK_TIER_LABELS[ticker_tier]
    tier_limit = allocation.weight(ticker_tier)
    result.details.update({
        "ticker_risk_tier": ticker_tier.value,
        "category_allocation_limit": tier_limit,
    })

    if tier_limit == 0:
        result.compliant = False
        result.details["risk_tier_allowed"] = False
        result.errors.append(
            f"This account has 0% allocation for {label} risk. "
            f'"{ticker}" is classified as {label} risk and cannot be added.'
        )
        return result

    result.details["risk_tier_allowed"] = True

    total_value, per_tier = _tier_values(holdings)
    current_tier_value = per_tier[ticker_tier]
    current_weight = (current_tier_value / total_value) * HUNDRED if total_value > 0 else ZERO
    result.details["current_category_weight"] = round_to(current_weight)

    new_total = total_value + position_value
    if new_total > 0:
        projected_weight = ((current_tier_value + position_value) / new_total) * HUNDRED
    else:
        # First position is the whole account
        projected_weight = HUNDRED
    projected_display = round_to(projected_weight)
    result.details["projected_category_weight"] = projected_display

    if projected_weight > tier_limit:
        exceeded_by = round_to(projected_weight - tier_limit)
        result.compliant = False
        result.errors.append(
            f"Adding this position would put {label} risk at {projected_display}%, "
            f"exceeding your {tier_limit}% allocation by {exceeded_by}%."
        )
        logger.debug(f"{ticker}: {label} tier over allocation by {exceeded_by}%")
        return result

    if projected_weight > tier_limit * APPROACHING_LIMIT_THRESHOLD:
        result.warnings.append(
            f"This position brings {label} risk to {projected_display}%, "
            f"approaching your {tier_limit}% limit."
        )

    return result


@non_signaling()
def check_account_compliance(
    allocation: RiskTierAllocation,
    holdings: list[TierHolding],
) -> AccountComplianceResult:
    """
    Check every holding in an account against its tier allocation.

    Reports unclassified holdings, holdings in tiers with a 0% allocation,
    and tiers whose weight exceeds a positive allocation.
    """
    issues: list[ComplianceIssue] = []

    for holding in holdings:
        if holding.risk_tier is None:
            issues.append(ComplianceIssue(
                ticker=holding.ticker,
                issue="Not in Holdings Library - unclassified risk",
            ))
            continue
        if allocation.weight(holding.risk_tier) == 0:
            label = RISK_TIER_LABELS[holding.risk_tier]
            issues.append(ComplianceIssue(
                ticker=holding.ticker,
                issue=f"{label} risk not allowed (0% allocation)",
                risk_tier=holding.risk_tier,
            ))

    total_value, per_tier = _tier_values(holdings)
    tier_weights: dict[RiskTier, dict[str, Decimal]] = {}

    for tier in RiskTier:
        current_weight = (per_tier[tier] / total_value) * HUNDRED if total_value > 0 else ZERO
        limit = allocation.weight(tier)
        tier_weights[tier] = {
            "current": round_to(current_weight),
            "limit": limit,
        }
        if current_weight > limit and limit > 0:
            issues.append(ComplianceIssue(
                ticker="",
                issue=(
                    f"{RISK_TIER_LABELS[tier]} category at {round_to(current_weight, 0)}%, "
                    f"exceeds {limit}% limit"
                ),
                risk_tier=tier,
            ))

    return AccountComplianceResult(
        compliant=not issues,
        issues=issues,
        tier_weights=tier_weights,
    )


__all__ = [
    "APPROACHING_LIMIT_THRESHOLD",
    "TierHolding",
    "ComplianceCheckResult",
    "ComplianceIssue",
    "AccountComplianceResult",
    "check_position_compliance",
    "check_account_compliance",
]
