"""
Risk Tier Configuration

Defines the five risk tiers an account's risk tolerance is split across,
the holding categories used to classify tickers, and the static reference
tables that drive limit checks and risk scoring:

- CATEGORY_CAP_TABLE: max aggregate % per capped category, per tier
- CATEGORY_RISK_WEIGHT: 1 (lowest) .. 4 (highest) per category
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping, Optional, Union

from backoffice.utils.decimals import ZERO, HUNDRED, non_signaling, to_decimal
from backoffice.utils.exceptions import InvalidAllocationError, InvalidRiskTierError


class RiskTier(str, Enum):
    """Risk tolerance buckets, ordered from lowest to highest risk."""
    LOW = "low"
    LOW_MEDIUM = "low_medium"
    MEDIUM = "medium"
    MEDIUM_HIGH = "medium_high"
    HIGH = "high"

    @classmethod
    def parse(cls, value: str) -> "RiskTier":
        """
        Parse a tier name, accepting "low-medium" / "Low Medium" spellings.

        Raises:
            InvalidRiskTierError: If the name is not a known tier
        """
        key = str(value).strip().lower().replace("-", "_").replace(" ", "_")
        try:
            return cls(key)
        except ValueError:
            raise InvalidRiskTierError(value) from None


class HoldingCategory(str, Enum):
    """Structural risk classification of a holding."""
    BASKET_ETF = "basket_etf"
    SINGLE_ETF = "single_etf"
    DOUBLE_LONG_ETF = "double_long_etf"
    LEVERAGED_ETF = "leveraged_etf"
    SECURITY = "security"
    AUTO_ADDED = "auto_added"
    MISC = "misc"

    @property
    def cap_key(self) -> "HoldingCategory":
        """Category whose cap applies to this one (leveraged == double long)."""
        if self is HoldingCategory.LEVERAGED_ETF:
            return HoldingCategory.DOUBLE_LONG_ETF
        return self

    @property
    def is_capped(self) -> bool:
        return self.cap_key in CAPPED_CATEGORIES


# Order in which capped categories are checked and reported
CAPPED_CATEGORIES: tuple[HoldingCategory, ...] = (
    HoldingCategory.DOUBLE_LONG_ETF,
    HoldingCategory.SECURITY,
    HoldingCategory.SINGLE_ETF,
)


@dataclass(frozen=True)
class CategoryCaps:
    """Max aggregate percentage per capped category."""
    double_long_etf: Decimal
    security: Decimal
    single_etf: Decimal

    def get(self, category: HoldingCategory) -> Decimal:
        return getattr(self, category.cap_key.value)

    def to_dict(self) -> dict:
        return {
            "double_long_etf": float(self.double_long_etf),
            "security": float(self.security),
            "single_etf": float(self.single_etf),
        }


# ==================== Reference Tables ====================

CATEGORY_CAP_TABLE: dict[RiskTier, CategoryCaps] = {
    RiskTier.LOW: CategoryCaps(
        double_long_etf=Decimal("0"),
        security=Decimal("15"),
        single_etf=Decimal("30"),
    ),
    RiskTier.LOW_MEDIUM: CategoryCaps(
        double_long_etf=Decimal("5"),
        security=Decimal("20"),
        single_etf=Decimal("40"),
    ),
    RiskTier.MEDIUM: CategoryCaps(
        double_long_etf=Decimal("10"),
        security=Decimal("30"),
        single_etf=Decimal("50"),
    ),
    RiskTier.MEDIUM_HIGH: CategoryCaps(
        double_long_etf=Decimal("25"),
        security=Decimal("50"),
        single_etf=Decimal("100"),
    ),
    RiskTier.HIGH: CategoryCaps(
        double_long_etf=Decimal("100"),
        security=Decimal("100"),
        single_etf=Decimal("100"),
    ),
}

CATEGORY_RISK_WEIGHT: dict[HoldingCategory, int] = {
    HoldingCategory.BASKET_ETF: 1,
    HoldingCategory.SINGLE_ETF: 2,
    HoldingCategory.MISC: 2,
    HoldingCategory.AUTO_ADDED: 2,
    HoldingCategory.SECURITY: 3,
    HoldingCategory.DOUBLE_LONG_ETF: 4,
    HoldingCategory.LEVERAGED_ETF: 4,
}

CATEGORY_LABELS: dict[HoldingCategory, str] = {
    HoldingCategory.BASKET_ETF: "Basket ETF",
    HoldingCategory.SINGLE_ETF: "Single ETF",
    HoldingCategory.DOUBLE_LONG_ETF: "Leveraged ETF",
    HoldingCategory.LEVERAGED_ETF: "Leveraged ETF",
    HoldingCategory.SECURITY: "Individual Security",
    HoldingCategory.AUTO_ADDED: "Auto Added",
    HoldingCategory.MISC: "Miscellaneous",
}

RISK_TIER_LABELS: dict[RiskTier, str] = {
    RiskTier.LOW: "Low",
    RiskTier.LOW_MEDIUM: "Low-Medium",
    RiskTier.MEDIUM: "Medium",
    RiskTier.MEDIUM_HIGH: "Medium-High",
    RiskTier.HIGH: "High",
}

# Tolerance for "percentages sum to 100"
ALLOCATION_SUM_TOLERANCE = Decimal("0.01")


def parse_category(value: Any) -> Optional[HoldingCategory]:
    """Resolve a category tag, returning None for unknown tags."""
    if isinstance(value, HoldingCategory):
        return value
    try:
        return HoldingCategory(str(value).strip().lower())
    except ValueError:
        return None


@dataclass
class TargetAllocationLine:
    """One target allocation (or holding) tagged with its category."""
    category: Union[HoldingCategory, str]
    target_percentage: Decimal

    def __post_init__(self):
        self.target_percentage = to_decimal(self.target_percentage)


AllocationLineLike = Union[TargetAllocationLine, Mapping[str, Any]]


def allocation_line_values(line: AllocationLineLike) -> tuple[Any, Any]:
    """(category, target_percentage) from a line object or a plain dict."""
    if isinstance(line, Mapping):
        return line.get("category"), line.get("target_percentage", 0)
    return line.category, line.target_percentage


# ==================== Tier Allocation ====================

@dataclass(frozen=True)
class RiskTierAllocation:
    """
    An account's risk tolerance as five tier percentages.

    Percentages should sum to 100 to be complete, but incomplete
    allocations are valid input: the advisor edits them live.
    """
    low: Decimal = ZERO
    low_medium: Decimal = ZERO
    medium: Decimal = ZERO
    medium_high: Decimal = ZERO
    high: Decimal = ZERO

    def __post_init__(self):
        for tier in RiskTier:
            object.__setattr__(self, tier.value, to_decimal(getattr(self, tier.value)))

    def weight(self, tier: RiskTier) -> Decimal:
        """Percentage allotted to a tier."""
        return getattr(self, tier.value)

    @property
    def total(self) -> Decimal:
        return sum((self.weight(tier) for tier in RiskTier), ZERO)

    @property
    @non_signaling()
    def is_complete(self) -> bool:
        return abs(self.total - HUNDRED) < ALLOCATION_SUM_TOLERANCE

    @classmethod
    def single_tier(cls, tier: RiskTier) -> "RiskTierAllocation":
        """Allocation with 100% in one tier."""
        return cls(**{tier.value: HUNDRED})

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "RiskTierAllocation":
        """
        Build an allocation from an account record.

        Reads risk_<tier>_pct columns; missing or null columns count as 0.
        Numeric strings (as stored in decimal columns) are accepted.

        Raises:
            InvalidAllocationError: If a column holds a non-numeric value
        """
        values = {}
        for tier in RiskTier:
            field_name = f"risk_{tier.value}_pct"
            raw = record.get(field_name)
            if raw is None or raw == "":
                values[tier.value] = ZERO
                continue
            try:
                values[tier.value] = to_decimal(raw)
            except (InvalidOperation, ValueError, TypeError):
                raise InvalidAllocationError(field_name, raw) from None
        return cls(**values)

    def to_dict(self) -> dict:
        return {tier.value: float(self.weight(tier)) for tier in RiskTier}


def get_allocation_key(tier: RiskTier | str) -> str:
    """Attribute name on RiskTierAllocation for a tier."""
    if not isinstance(tier, RiskTier):
        tier = RiskTier.parse(tier)
    return tier.value


__all__ = [
    "RiskTier",
    "HoldingCategory",
    "CAPPED_CATEGORIES",
    "CategoryCaps",
    "CATEGORY_CAP_TABLE",
    "CATEGORY_RISK_WEIGHT",
    "CATEGORY_LABELS",
    "RISK_TIER_LABELS",
    "ALLOCATION_SUM_TOLERANCE",
    "RiskTierAllocation",
    "TargetAllocationLine",
    "AllocationLineLike",
    "allocation_line_values",
    "parse_category",
    "get_allocation_key",
]
