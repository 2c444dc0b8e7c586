"""
Portfolio Risk Scoring

Collapses a set of holdings into a single 1-4 risk score, weighting each
holding's category risk weight by its target percentage.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from backoffice.core.risk.risk_config import (
    CATEGORY_RISK_WEIGHT,
    AllocationLineLike,
    allocation_line_values,
    parse_category,
)
from backoffice.utils.decimals import ZERO, non_signaling, to_decimal


@dataclass(frozen=True)
class RiskScoreBand:
    """Score band with an inclusive upper bound (None = open-ended)."""
    upper_bound: Decimal | None
    label: str
    color: str


RISK_SCORE_BANDS: tuple[RiskScoreBand, ...] = (
    RiskScoreBand(Decimal("1.5"), "Very Low Risk", "green"),
    RiskScoreBand(Decimal("2"), "Low Risk", "emerald"),
    RiskScoreBand(Decimal("2.5"), "Moderate Risk", "yellow"),
    RiskScoreBand(Decimal("3"), "Elevated Risk", "orange"),
    RiskScoreBand(None, "High Risk", "red"),
)


@non_signaling()
def calculate_portfolio_risk_score(holdings: Iterable[AllocationLineLike]) -> Decimal:
    """
    Weighted average category risk weight.

    Returns 0 when the total percentage is 0 (no holdings, or all at 0%).
    A 0 score means "undetermined", not "lowest risk". Holdings with an
    unrecognized category are left out of the average.
    """
    weighted_score = ZERO
    total_percentage = ZERO

    for holding in holdings:
        raw_category, raw_percentage = allocation_line_values(holding)
        category = parse_category(raw_category)
        if category is None:
            continue
        percentage = to_decimal(raw_percentage)
        weighted_score += CATEGORY_RISK_WEIGHT[category] * percentage
        total_percentage += percentage

    if total_percentage == 0:
        return ZERO
    return weighted_score / total_percentage


@non_signaling()
def get_risk_score_band(score: Decimal | float) -> RiskScoreBand:
    score = to_decimal(score)
    for band in RISK_SCORE_BANDS:
        if band.upper_bound is None or score <= band.upper_bound:
            return band
    return RISK_SCORE_BANDS[-1]


def get_risk_score_label(score: Decimal | float) -> str:
    """Human readable label for a risk score."""
    return get_risk_score_band(score).label


def get_risk_score_color(score: Decimal | float) -> str:
    """Color token for a risk score."""
    return get_risk_score_band(score).color


__all__ = [
    "RiskScoreBand",
    "RISK_SCORE_BANDS",
    "calculate_portfolio_risk_score",
    "get_risk_score_band",
    "get_risk_score_label",
    "get_risk_score_color",
]
