"""
Risk Limit Engine

Blends an account's five-tier risk allocation into percentage caps for the
higher-risk holding categories, and validates proposed target allocations
against those caps.

Caps are only enforced for leveraged (double long) ETFs, individual
securities and single ETFs. Basket ETFs, auto-added and misc holdings are
never restricted.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional
from loguru import logger

from backoffice.core.risk.risk_config import (
    CAPPED_CATEGORIES,
    CATEGORY_CAP_TABLE,
    CATEGORY_LABELS,
    AllocationLineLike,
    CategoryCaps,
    HoldingCategory,
    RiskTier,
    RiskTierAllocation,
    allocation_line_values,
    parse_category,
)
from backoffice.core.risk.scoring import calculate_portfolio_risk_score
from backoffice.utils.decimals import ZERO, HUNDRED, non_signaling, to_decimal, round_to


# A category reaching this fraction of its cap is flagged
WARNING_THRESHOLD = Decimal("0.8")


@dataclass(frozen=True)
class BlendedCaps(CategoryCaps):
    """Caps weighted across tiers by an account's allocation."""

    @non_signaling()
    def rounded(self, places: int = 1) -> CategoryCaps:
        return CategoryCaps(
            double_long_etf=round_to(self.double_long_etf, places),
            security=round_to(self.security, places),
            single_etf=round_to(self.single_etf, places),
        )


@dataclass
class RiskLimitEntry:
    """A capped category at or over its limit."""
    category: HoldingCategory
    current_percentage: Decimal
    max_allowed: Decimal
    exceeded_by: Decimal = ZERO

    def to_dict(self) -> dict:
        return {
            "category": self.category.value,
            "label": CATEGORY_LABELS[self.category],
            "current_percentage": float(self.current_percentage),
            "max_allowed": float(self.max_allowed),
            "exceeded_by": float(self.exceeded_by),
        }


@dataclass
class ValidationOutcome:
    """Result of checking target allocations against blended caps."""
    is_valid: bool
    violations: list[RiskLimitEntry] = field(default_factory=list)
    warnings: list[RiskLimitEntry] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "violations": [v.to_dict() for v in self.violations],
            "warnings": [w.to_dict() for w in self.warnings],
        }


def sum_by_category(lines: Iterable[AllocationLineLike]) -> dict[HoldingCategory, Decimal]:
    """
    Total target percentage per category.

    Leveraged ETFs are folded into double long ETFs. Lines with an
    unrecognized category are ignored.
    """
    totals: dict[HoldingCategory, Decimal] = {}
    for line in lines:
        raw_category, raw_percentage = allocation_line_values(line)
        category = parse_category(raw_category)
        if category is None:
            continue
        key = category.cap_key
        totals[key] = totals.get(key, ZERO) + to_decimal(raw_percentage)
    return totals


@non_signaling()
def blend_caps(allocation: RiskTierAllocation) -> BlendedCaps:
    """
    Blend per-tier caps using the allocation as weights.

    blended[c] = sum over tiers of (weight / 100) * cap[tier][c]

    No normalization: an allocation summing to less than 100 yields
    proportionally lower caps.
    """
    blended = {category.value: ZERO for category in CAPPED_CATEGORIES}
    for tier in RiskTier:
        fraction = allocation.weight(tier) / HUNDRED
        caps = CATEGORY_CAP_TABLE[tier]
        for category in CAPPED_CATEGORIES:
            blended[category.value] += fraction * caps.get(category)
    return BlendedCaps(**blended)


@non_signaling()
def validate_risk_limits(
    lines: Iterable[AllocationLineLike],
    allocation: RiskTierAllocation,
) -> ValidationOutcome:
    """
    Validate target allocations against the account's blended caps.

    Args:
        lines: Target allocations (category + target percentage); lines
            sharing a category are summed before comparison
        allocation: The account's risk tier allocation

    Returns:
        ValidationOutcome. A category over its cap is a violation; one at
        or above 80% of a positive cap is a warning. Warnings never make
        the outcome invalid.
    """
    caps = blend_caps(allocation).rounded()
    totals = sum_by_category(lines)
    result = ValidationOutcome(is_valid=True)

    for category in CAPPED_CATEGORIES:
        total = totals.get(category, ZERO)
        max_allowed = caps.get(category)

        if total > max_allowed:
            result.violations.append(RiskLimitEntry(
                category=category,
                current_percentage=total,
                max_allowed=max_allowed,
                exceeded_by=total - max_allowed,
            ))
        elif max_allowed > 0 and total >= max_allowed * WARNING_THRESHOLD:
            result.warnings.append(RiskLimitEntry(
                category=category,
                current_percentage=total,
                max_allowed=max_allowed,
            ))

    result.is_valid = not result.violations

    if result.violations or result.warnings:
        logger.debug(
            f"Risk limit check: {len(result.violations)} violation(s), "
            f"{len(result.warnings)} warning(s)"
        )
    return result


class RiskLimitEngine:
    """
    Risk limits for a single account allocation.

    Usage:
        engine = RiskLimitEngine(RiskTierAllocation(medium=100))

        engine.caps.security          # Decimal("30")
        outcome = engine.validate([
            TargetAllocationLine(HoldingCategory.SECURITY, 25),
        ])
        if outcome.warnings:
            ...
    """

    def __init__(self, allocation: RiskTierAllocation | Mapping[str, Any]):
        if isinstance(allocation, RiskTierAllocation):
            self.allocation = allocation
        else:
            self.allocation = RiskTierAllocation.from_record(allocation)

    @property
    def caps(self) -> BlendedCaps:
        return blend_caps(self.allocation)

    @property
    def is_complete(self) -> bool:
        return self.allocation.is_complete

    def max_allowed(self, category: HoldingCategory | str) -> Optional[Decimal]:
        """Rounded cap for a category, or None when the category is uncapped."""
        parsed = parse_category(category)
        if parsed is None or not parsed.is_capped:
            return None
        return self.caps.rounded().get(parsed)

    def validate(self, lines: Iterable[AllocationLineLike]) -> ValidationOutcome:
        return validate_risk_limits(lines, self.allocation)

    def score(self, holdings: Iterable[AllocationLineLike]) -> Decimal:
        return calculate_portfolio_risk_score(holdings)


__all__ = [
    "WARNING_THRESHOLD",
    "BlendedCaps",
    "RiskLimitEntry",
    "ValidationOutcome",
    "sum_by_category",
    "blend_caps",
    "validate_risk_limits",
    "RiskLimitEngine",
]
