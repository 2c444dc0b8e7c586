"""
Target Allocation Comparison

Compares an account's actual positions with its target allocations,
ticker by ticker, for the account details screen.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional

from backoffice.utils.decimals import ZERO, HUNDRED, non_signaling, to_decimal, round_to
from backoffice.utils.tickers import normalize_ticker


# Variance (in percentage points) treated as on target
DEFAULT_TOLERANCE = Decimal("2")

STATUS_OVER = "over"
STATUS_UNDER = "under"
STATUS_ON_TARGET = "on-target"
STATUS_UNEXPECTED = "unexpected"


@dataclass
class ComparisonRow:
    """Actual vs target for one ticker."""
    ticker: str
    name: str
    target_percentage: Decimal
    actual_percentage: Decimal
    variance: Decimal
    actual_value: Decimal
    target_value: Decimal
    quantity: Decimal
    status: str
    allocation_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "allocation_id": self.allocation_id,
            "ticker": self.ticker,
            "name": self.name,
            "target_percentage": float(self.target_percentage),
            "actual_percentage": float(self.actual_percentage),
            "variance": float(self.variance),
            "actual_value": float(self.actual_value),
            "target_value": float(self.target_value),
            "quantity": float(self.quantity),
            "status": self.status,
        }


@dataclass
class AllocationComparison:
    has_target_allocations: bool
    rows: list[ComparisonRow] = field(default_factory=list)
    total_actual_value: Decimal = ZERO
    total_target_percentage: Decimal = ZERO

    def to_dict(self) -> dict:
        return {
            "has_target_allocations": self.has_target_allocations,
            "comparison": [r.to_dict() for r in self.rows],
            "total_actual_value": float(self.total_actual_value),
            "total_target_percentage": float(self.total_target_percentage),
        }


@dataclass
class _Holding:
    value: Decimal
    quantity: Decimal
    display_ticker: str


def _variance_status(variance: Decimal, tolerance: Decimal) -> str:
    if variance > tolerance:
        return STATUS_OVER
    if variance < -tolerance:
        return STATUS_UNDER
    return STATUS_ON_TARGET


@non_signaling()
def compare_account_allocations(
    positions: Iterable[Mapping[str, Any]],
    target_allocations: Iterable[Mapping[str, Any]],
    tolerance: Decimal | float = DEFAULT_TOLERANCE,
) -> AllocationComparison:
    """
    Compare positions with target allocations.

    Args:
        positions: Dicts with symbol, quantity and current_price
        target_allocations: Dicts with ticker, target_percentage and
            optionally id and name
        tolerance: Variance band (percentage points) considered on target

    Returns:
        AllocationComparison with one row per target, plus an "unexpected"
        row for every held ticker without a target, sorted by largest
        absolute variance first. Empty when the account has no targets.
    """
    target_allocations = list(target_allocations)
    if not target_allocations:
        return AllocationComparison(has_target_allocations=False)

    tolerance = to_decimal(tolerance)

    holdings: dict[str, _Holding] = {}
    total_actual_value = ZERO
    for position in positions:
        display_ticker = str(position.get("symbol", "")).upper()
        quantity = to_decimal(position.get("quantity", 0))
        value = quantity * to_decimal(position.get("current_price", 0))
        total_actual_value += value

        key = normalize_ticker(display_ticker)
        existing = holdings.get(key)
        if existing is None:
            holdings[key] = _Holding(value=value, quantity=quantity, display_ticker=display_ticker)
        else:
            existing.value += value
            existing.quantity += quantity

    total_target_percentage = sum(
        (to_decimal(a.get("target_percentage", 0)) for a in target_allocations),
        ZERO,
    )

    rows: list[ComparisonRow] = []
    seen: set[str] = set()

    for allocation in target_allocations:
        display_ticker = str(allocation.get("ticker", "")).upper()
        key = normalize_ticker(display_ticker)
        seen.add(key)

        holding = holdings.get(key)
        actual_value = holding.value if holding else ZERO
        actual_percentage = (
            (actual_value / total_actual_value) * HUNDRED if total_actual_value > 0 else ZERO
        )
        target_percentage = to_decimal(allocation.get("target_percentage", 0))
        variance = actual_percentage - target_percentage
        target_value = (
            round_to((target_percentage / HUNDRED) * total_actual_value, 2)
            if total_actual_value > 0 else ZERO
        )

        rows.append(ComparisonRow(
            allocation_id=allocation.get("id"),
            ticker=display_ticker,
            name=allocation.get("name") or display_ticker,
            target_percentage=target_percentage,
            actual_percentage=round_to(actual_percentage, 2),
            variance=round_to(variance, 2),
            actual_value=round_to(actual_value, 2),
            target_value=target_value,
            quantity=holding.quantity if holding else ZERO,
            status=_variance_status(variance, tolerance),
        ))

    for key, holding in holdings.items():
        if key in seen:
            continue
        actual_percentage = (
            (holding.value / total_actual_value) * HUNDRED if total_actual_value > 0 else ZERO
        )
        rows.append(ComparisonRow(
            ticker=holding.display_ticker,
            name=holding.display_ticker,
            target_percentage=ZERO,
            actual_percentage=round_to(actual_percentage, 2),
            variance=round_to(actual_percentage, 2),
            actual_value=round_to(holding.value, 2),
            target_value=ZERO,
            quantity=holding.quantity,
            status=STATUS_UNEXPECTED,
        ))

    rows.sort(key=lambda row: abs(row.variance), reverse=True)

    return AllocationComparison(
        has_target_allocations=True,
        rows=rows,
        total_actual_value=round_to(total_actual_value, 2),
        total_target_percentage=total_target_percentage,
    )


__all__ = [
    "DEFAULT_TOLERANCE",
    "ComparisonRow",
    "AllocationComparison",
    "compare_account_allocations",
]
