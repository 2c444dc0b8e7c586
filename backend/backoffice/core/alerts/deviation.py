"""
Alert Deviation Classifier

Given a trading signal on a ticker, works out which accounts are affected
and how far each one is from its target allocation for that ticker.

Accounts that hold the ticker or target it are classified as under, over,
on-target, no-target or zero-balance. The result is split into accounts
that can act on the signal (ordered so the best candidates come first)
and zero-balance accounts, which are listed last.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Mapping, Optional
from loguru import logger

from backoffice.config import DEFAULT_ZERO_BALANCE_NOTE
from backoffice.utils.decimals import ZERO, HUNDRED, non_signaling, to_decimal
from backoffice.utils.exceptions import InvalidSignalError
from backoffice.utils.tickers import normalize_ticker


class DeviationStatus(str, Enum):
    """Actual vs target allocation for one ticker in one account."""
    UNDER = "under"
    OVER = "over"
    ON_TARGET = "on-target"
    NO_TARGET = "no-target"
    ZERO_BALANCE = "zero-balance"


class SignalDirection(str, Enum):
    """Direction of an incoming trading alert."""
    BUY = "BUY"
    SELL = "SELL"

    @classmethod
    def parse(cls, value: Any) -> "SignalDirection":
        """
        Parse a signal string case-insensitively.

        Raises:
            InvalidSignalError: If the value is neither BUY nor SELL
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise InvalidSignalError(value) from None

    @property
    def priority_status(self) -> DeviationStatus:
        """Status that most needs action for this signal."""
        if self is SignalDirection.BUY:
            return DeviationStatus.UNDER
        return DeviationStatus.OVER


def _optional_decimal(value: Any) -> Optional[Decimal]:
    return None if value is None else to_decimal(value)


def _position_value(position: Mapping[str, Any]) -> Decimal:
    if "market_value" in position:
        return to_decimal(position["market_value"])
    return to_decimal(position.get("quantity", 0)) * to_decimal(position.get("current_price", 0))


@dataclass
class AccountSnapshot:
    """
    One account's view of a ticker, assembled by the caller.

    position_value is None when the account holds no position in the
    ticker; target_percentage is None when it has no target for it.
    """
    account_id: str
    account_type: str
    portfolio_value: Decimal
    position_value: Optional[Decimal] = None
    target_percentage: Optional[Decimal] = None
    account_name: str = ""
    owner_name: str = ""
    household_id: Optional[str] = None
    household_name: str = ""
    household_category: Optional[str] = None

    def __post_init__(self):
        self.portfolio_value = to_decimal(self.portfolio_value)
        self.position_value = _optional_decimal(self.position_value)
        self.target_percentage = _optional_decimal(self.target_percentage)

    @property
    def has_position(self) -> bool:
        return self.position_value is not None

    @property
    def has_target(self) -> bool:
        return self.target_percentage is not None

    @classmethod
    def from_holdings(
        cls,
        ticker: str,
        account_id: str,
        account_type: str,
        positions: Iterable[Mapping[str, Any]],
        target_allocations: Iterable[Mapping[str, Any]],
        **identity: Any,
    ) -> "AccountSnapshot":
        """
        Build a snapshot from an account's raw positions and targets.

        Args:
            ticker: Alert ticker (exchange suffixes are ignored when matching)
            account_id: Account identifier
            account_type: individual / corporate / joint
            positions: Dicts with symbol and either market_value or
                quantity + current_price
            target_allocations: Dicts with ticker and target_percentage
            **identity: account_name, owner_name, household_* fields

        Returns:
            AccountSnapshot; portfolio_value is the sum of all positions
        """
        wanted = normalize_ticker(ticker)

        portfolio_value = ZERO
        position_value: Optional[Decimal] = None
        for position in positions:
            value = _position_value(position)
            portfolio_value += value
            if normalize_ticker(position.get("symbol", "")) == wanted:
                position_value = (position_value or ZERO) + value

        target_percentage: Optional[Decimal] = None
        for allocation in target_allocations:
            if normalize_ticker(allocation.get("ticker", "")) == wanted:
                target_percentage = (target_percentage or ZERO) + to_decimal(
                    allocation.get("target_percentage", 0)
                )

        return cls(
            account_id=account_id,
            account_type=account_type,
            portfolio_value=portfolio_value,
            position_value=position_value,
            target_percentage=target_percentage,
            **identity,
        )


@dataclass
class AffectedAccount:
    """An account affected by an alert, with its deviation for the ticker."""
    account_id: str
    account_type: str
    status: DeviationStatus
    current_value: Decimal
    portfolio_value: Decimal
    actual_percentage: Decimal
    target_percentage: Optional[Decimal] = None
    variance: Optional[Decimal] = None
    account_name: str = ""
    owner_name: str = ""
    household_id: Optional[str] = None
    household_name: str = ""
    household_category: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "account_id": self.account_id,
            "account_type": self.account_type,
            "account_name": self.account_name,
            "owner_name": self.owner_name,
            "household_id": self.household_id,
            "household_name": self.household_name,
            "household_category": self.household_category,
            "current_value": float(self.current_value),
            "portfolio_value": float(self.portfolio_value),
            "actual_percentage": float(self.actual_percentage),
            "target_percentage": (
                float(self.target_percentage) if self.target_percentage is not None else None
            ),
            "variance": float(self.variance) if self.variance is not None else None,
            "status": self.status.value,
        }


@dataclass
class DeviationResult:
    """Affected accounts for one alert, partitioned for review."""
    ticker: str
    signal: SignalDirection
    affected: list[AffectedAccount] = field(default_factory=list)
    active: list[AffectedAccount] = field(default_factory=list)
    zero_balance: list[AffectedAccount] = field(default_factory=list)
    zero_balance_note: str = DEFAULT_ZERO_BALANCE_NOTE

    @property
    def ordered(self) -> list[AffectedAccount]:
        """Accounts in display order: active first, then zero-balance."""
        return self.active + self.zero_balance

    def to_dict(self) -> dict:
        return {
            "ticker": self.ticker,
            "signal": self.signal.value,
            "affected": [a.to_dict() for a in self.affected],
            "active": [a.to_dict() for a in self.active],
            "zero_balance": [a.to_dict() for a in self.zero_balance],
            "zero_balance_note": self.zero_balance_note,
        }


@non_signaling()
def classify_account(snapshot: AccountSnapshot) -> Optional[AffectedAccount]:
    """
    Classify one account's deviation for the alert ticker.

    Returns None when the account neither holds nor targets the ticker.
    """
    if not snapshot.has_position and not snapshot.has_target:
        return None

    current_value = snapshot.position_value if snapshot.has_position else ZERO
    portfolio_value = snapshot.portfolio_value
    target = snapshot.target_percentage

    common = dict(
        account_id=snapshot.account_id,
        account_type=snapshot.account_type,
        current_value=current_value,
        portfolio_value=portfolio_value,
        target_percentage=target,
        account_name=snapshot.account_name,
        owner_name=snapshot.owner_name,
        household_id=snapshot.household_id,
        household_name=snapshot.household_name,
        household_category=snapshot.household_category,
    )

    # Checked before any division: nothing to compute a percentage against
    if target is not None and portfolio_value == 0:
        return AffectedAccount(
            status=DeviationStatus.ZERO_BALANCE,
            actual_percentage=ZERO,
            **common,
        )

    if portfolio_value > 0:
        actual = (current_value / portfolio_value) * HUNDRED
    else:
        actual = ZERO

    if target is None:
        return AffectedAccount(
            status=DeviationStatus.NO_TARGET,
            actual_percentage=actual,
            **common,
        )

    if actual < target:
        status = DeviationStatus.UNDER
    elif actual > target:
        status = DeviationStatus.OVER
    else:
        status = DeviationStatus.ON_TARGET

    return AffectedAccount(
        status=status,
        actual_percentage=actual,
        variance=actual - target,
        **common,
    )


def sort_for_signal(
    accounts: Iterable[AffectedAccount],
    signal: SignalDirection,
) -> list[AffectedAccount]:
    """
    Move the accounts that most need action to the front.

    BUY puts underweight accounts first, SELL puts overweight accounts
    first. The sort is stable and uses no other key, so input order is
    kept within each group.
    """
    priority = signal.priority_status
    return sorted(accounts, key=lambda account: 0 if account.status == priority else 1)


def filter_by_household_category(
    accounts: Iterable[AffectedAccount],
    household_category: Optional[str],
) -> list[AffectedAccount]:
    """Keep accounts in one household category (no filter when None)."""
    if not household_category:
        return list(accounts)
    return [a for a in accounts if a.household_category == household_category]


@non_signaling()
def classify_affected_accounts(
    ticker: str,
    signal: SignalDirection | str,
    candidates: Iterable[AccountSnapshot],
    household_category: Optional[str] = None,
    zero_balance_note: str = DEFAULT_ZERO_BALANCE_NOTE,
) -> DeviationResult:
    """
    Classify every candidate account for an alert and order them for review.

    Args:
        ticker: Alert ticker
        signal: BUY or SELL
        candidates: Accounts holding or targeting the ticker
        household_category: Optional household category filter
        zero_balance_note: Annotation shown with zero-balance accounts

    Returns:
        DeviationResult with all affected accounts (input order), the
        active accounts sorted for the signal, and zero-balance accounts
    """
    signal = SignalDirection.parse(signal)

    affected = [
        account
        for account in (classify_account(candidate) for candidate in candidates)
        if account is not None
    ]
    affected = filter_by_household_category(affected, household_category)

    zero_balance = [a for a in affected if a.status == DeviationStatus.ZERO_BALANCE]
    active = [a for a in affected if a.status != DeviationStatus.ZERO_BALANCE]

    logger.debug(
        f"{signal.value} {ticker}: {len(active)} active, "
        f"{len(zero_balance)} zero-balance account(s)"
    )

    return DeviationResult(
        ticker=ticker,
        signal=signal,
        affected=affected,
        active=sort_for_signal(active, signal),
        zero_balance=zero_balance,
        zero_balance_note=zero_balance_note,
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
