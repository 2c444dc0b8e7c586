"""
Unit Tests - Alert Deviation Classifier
Tests for classifying and ordering the accounts affected by a trading alert.
"""
import pytest
from decimal import Decimal

from backoffice.config import DEFAULT_ZERO_BALANCE_NOTE
from backoffice.core.alerts import (
    AccountSnapshot,
    DeviationStatus,
    SignalDirection,
    classify_account,
    classify_affected_accounts,
    filter_by_household_category,
    sort_for_signal,
)
from backoffice.utils.exceptions import InvalidSignalError


def snapshot(account_id, portfolio_value, position_value=None, target_percentage=None, **kwargs):
    return AccountSnapshot(
        account_id=account_id,
        account_type="individual",
        portfolio_value=portfolio_value,
        position_value=position_value,
        target_percentage=target_percentage,
        **kwargs,
    )


class TestSignalDirection:
    """Tests for SignalDirection enum."""

    @pytest.mark.parametrize("raw", ["BUY", "buy", " Buy "])
    def test_parse_case_insensitive(self, raw):
        assert SignalDirection.parse(raw) is SignalDirection.BUY

    def test_parse_invalid(self):
        """Anything other than BUY/SELL should raise InvalidSignalError."""
        with pytest.raises(InvalidSignalError) as exc_info:
            SignalDirection.parse("HOLD")
        assert exc_info.value.code == "INVALID_SIGNAL"

    def test_priority_status(self):
        assert SignalDirection.BUY.priority_status is DeviationStatus.UNDER
        assert SignalDirection.SELL.priority_status is DeviationStatus.OVER


class TestClassifyAccount:
    """Tests for classify_account."""

    def test_under_target(self, underweight_snapshot):
        """20% actual vs 30% target should be under by 10 points."""
        account = classify_account(underweight_snapshot)

        assert account.status is DeviationStatus.UNDER
        assert account.actual_percentage == Decimal("20")
        assert account.variance == Decimal("-10")
        assert account.current_value == Decimal("2000")

    def test_over_target(self, overweight_snapshot):
        account = classify_account(overweight_snapshot)
        assert account.status is DeviationStatus.OVER
        assert account.variance == Decimal("20")

    def test_on_target_exact(self, on_target_snapshot):
        account = classify_account(on_target_snapshot)
        assert account.status is DeviationStatus.ON_TARGET
        assert account.variance == 0

    def test_on_target_requires_exact_equality(self):
        account = classify_account(snapshot("a", "1000", "100.01", "10"))
        assert account.status is DeviationStatus.OVER

    def test_no_target(self):
        account = classify_account(snapshot("a", 1000, position_value=500))

        assert account.status is DeviationStatus.NO_TARGET
        assert account.actual_percentage == Decimal("50")
        assert account.target_percentage is None
        assert account.variance is None

    def test_target_without_position(self):
        """Targeting a ticker without holding it is 0% actual."""
        account = classify_account(snapshot("a", 5000, target_percentage=5))

        assert account.status is DeviationStatus.UNDER
        assert account.current_value == 0
        assert account.actual_percentage == 0
        assert account.variance == Decimal("-5")

    def test_zero_balance(self, zero_balance_snapshot):
        """A target with no portfolio value should be zero-balance."""
        account = classify_account(zero_balance_snapshot)

        assert account.status is DeviationStatus.ZERO_BALANCE
        assert account.actual_percentage == 0
        assert account.variance is None
        assert account.target_percentage == Decimal("15")

    def test_zero_balance_with_position(self):
        account = classify_account(snapshot("a", 0, position_value=0, target_percentage=10))
        assert account.status is DeviationStatus.ZERO_BALANCE

    def test_no_target_zero_portfolio(self):
        """Without a target, a zero portfolio is no-target at 0%."""
        account = classify_account(snapshot("a", 0, position_value=0))
        assert account.status is DeviationStatus.NO_TARGET
        assert account.actual_percentage == 0

    def test_negative_portfolio_not_zero_balance(self):
        account = classify_account(snapshot("a", -100, position_value=50, target_percentage=10))
        assert account.status is DeviationStatus.UNDER
        assert account.actual_percentage == 0

    def test_unrelated_account_excluded(self):
        """Neither a position nor a target means not affected."""
        assert classify_account(snapshot("a", 1000)) is None

    def test_identity_carried(self):
        account = classify_account(snapshot(
            "a", 1000, 100, 10,
            account_name="RRSP", owner_name="Sam Lee",
            household_id="h1", household_name="Lee", household_category="retail",
        ))
        assert account.account_name == "RRSP"
        assert account.household_id == "h1"
        assert account.household_category == "retail"

    def test_to_dict(self, underweight_snapshot):
        data = classify_account(underweight_snapshot).to_dict()
        assert data["status"] == "under"
        assert data["actual_percentage"] == 20.0
        assert data["target_percentage"] == 30.0
        assert data["variance"] == -10.0


class TestSortForSignal:
    """Tests for sort_for_signal."""

    @pytest.fixture
    def accounts(self, on_target_snapshot, underweight_snapshot, overweight_snapshot):
        extra_under = snapshot("under-2", 1000, 50, 10)
        no_target = snapshot("none-1", 1000, 200)
        return [
            classify_account(s) for s in (
                on_target_snapshot, underweight_snapshot, overweight_snapshot,
                no_target, extra_under,
            )
        ]

    def test_buy_puts_under_first(self, accounts):
        ordered = sort_for_signal(accounts, SignalDirection.BUY)
        assert [a.account_id for a in ordered] == [
            "under-1", "under-2", "on-1", "over-1", "none-1",
        ]

    def test_sell_puts_over_first(self, accounts):
        ordered = sort_for_signal(accounts, SignalDirection.SELL)
        assert [a.account_id for a in ordered] == [
            "over-1", "on-1", "under-1", "none-1", "under-2",
        ]

    def test_does_not_mutate_input(self, accounts):
        before = [a.account_id for a in accounts]
        sort_for_signal(accounts, SignalDirection.BUY)
        assert [a.account_id for a in accounts] == before


class TestFilterByHouseholdCategory:
    """Tests for filter_by_household_category."""

    def test_no_filter(self, underweight_snapshot, overweight_snapshot):
        accounts = [classify_account(underweight_snapshot), classify_account(overweight_snapshot)]
        assert filter_by_household_category(accounts, None) == accounts

    def test_filter(self, underweight_snapshot, overweight_snapshot):
        accounts = [classify_account(underweight_snapshot), classify_account(overweight_snapshot)]
        filtered = filter_by_household_category(accounts, "institutional")
        assert [a.account_id for a in filtered] == ["over-1"]


class TestClassifyAffectedAccounts:
    """Tests for classify_affected_accounts."""

    def test_buy_ordering_with_zero_balance_last(
        self, zero_balance_snapshot, on_target_snapshot, underweight_snapshot
    ):
        """Under accounts lead a BUY; zero-balance accounts trail."""
        result = classify_affected_accounts(
            "XIC",
            "buy",
            [zero_balance_snapshot, on_target_snapshot, underweight_snapshot],
        )

        assert result.signal is SignalDirection.BUY
        assert [a.account_id for a in result.active] == ["under-1", "on-1"]
        assert [a.account_id for a in result.zero_balance] == ["zero-1"]
        assert [a.account_id for a in result.ordered] == ["under-1", "on-1", "zero-1"]
        assert result.zero_balance_note == DEFAULT_ZERO_BALANCE_NOTE

    def test_sell_zero_balance_still_last(self, zero_balance_snapshot, overweight_snapshot):
        result = classify_affected_accounts(
            "XIC", SignalDirection.SELL, [zero_balance_snapshot, overweight_snapshot]
        )
        assert [a.account_id for a in result.ordered] == ["over-1", "zero-1"]

    def test_affected_keeps_input_order(self, on_target_snapshot, underweight_snapshot):
        result = classify_affected_accounts(
            "XIC", "BUY", [on_target_snapshot, snapshot("skip", 1000), underweight_snapshot]
        )
        assert [a.account_id for a in result.affected] == ["on-1", "under-1"]

    def test_partition_covers_affected(
        self, zero_balance_snapshot, on_target_snapshot, overweight_snapshot
    ):
        result = classify_affected_accounts(
            "XIC", "SELL", [zero_balance_snapshot, on_target_snapshot, overweight_snapshot]
        )
        assert len(result.active) + len(result.zero_balance) == len(result.affected)

    def test_household_category_filter(
        self, underweight_snapshot, overweight_snapshot, zero_balance_snapshot
    ):
        result = classify_affected_accounts(
            "XIC", "SELL",
            [underweight_snapshot, overweight_snapshot, zero_balance_snapshot],
            household_category="retail",
        )
        assert [a.account_id for a in result.ordered] == ["under-1", "zero-1"]

    def test_invalid_signal(self, underweight_snapshot):
        with pytest.raises(InvalidSignalError):
            classify_affected_accounts("XIC", "HOLD", [underweight_snapshot])

    def test_custom_note_and_to_dict(self, zero_balance_snapshot):
        result = classify_affected_accounts(
            "XIC", "BUY", [zero_balance_snapshot], zero_balance_note="Fund first"
        )
        data = result.to_dict()
        assert data["signal"] == "BUY"
        assert data["active"] == []
        assert data["zero_balance"][0]["status"] == "zero-balance"
        assert data["zero_balance"][0]["variance"] is None
        assert data["zero_balance_note"] == "Fund first"

    def test_empty_candidates(self):
        result = classify_affected_accounts("XIC", "BUY", [])
        assert result.affected == []
        assert result.ordered == []

    def test_nan_portfolio_value(self):
        """A NaN portfolio is neither zero nor positive, so actual is 0."""
        result = classify_affected_accounts("XIC", "BUY", [
            AccountSnapshot("a", "individual", float("nan"), 10, 5),
        ])
        account = result.active[0]
        assert account.status is DeviationStatus.UNDER
        assert account.actual_percentage == 0

    def test_infinite_portfolio_and_position(self):
        result = classify_affected_accounts("XIC", "SELL", [
            AccountSnapshot("a", "individual", float("inf"), float("inf"), 5),
            AccountSnapshot("b", "individual", float("inf"), 10, 5),
        ])
        first, second = result.affected
        assert first.actual_percentage.is_nan()
        assert first.status is DeviationStatus.ON_TARGET
        assert second.actual_percentage == 0
        assert second.status is DeviationStatus.UNDER
        assert result.zero_balance == []


class TestAccountSnapshotFromHoldings:
    """Tests for AccountSnapshot.from_holdings."""

    def test_matches_across_exchange_suffix(self):
        """XIC.TO positions should match an XIC target."""
        result = AccountSnapshot.from_holdings(
            ticker="xic",
            account_id="a1",
            account_type="individual",
            positions=[
                {"symbol": "XIC.TO", "market_value": 2000},
                {"symbol": "CASH", "quantity": 8000, "current_price": 1},
            ],
            target_allocations=[{"ticker": "XIC", "target_percentage": 30}],
            owner_name="Sam Lee",
        )

        assert result.portfolio_value == Decimal("10000")
        assert result.position_value == Decimal("2000")
        assert result.target_percentage == Decimal("30")
        assert result.owner_name == "Sam Lee"
        assert classify_account(result).status is DeviationStatus.UNDER

    def test_no_position_no_target(self):
        result = AccountSnapshot.from_holdings(
            ticker="VFV",
            account_id="a1",
            account_type="joint",
            positions=[{"symbol": "XIC", "market_value": 500}],
            target_allocations=[{"ticker": "XIC", "target_percentage": 100}],
        )
        assert not result.has_position
        assert not result.has_target
        assert classify_account(result) is None

    def test_duplicate_rows_summed(self):
        result = AccountSnapshot.from_holdings(
            ticker="XIC",
            account_id="a1",
            account_type="individual",
            positions=[
                {"symbol": "XIC", "quantity": 10, "current_price": 30},
                {"symbol": "XIC.TO", "quantity": 5, "current_price": 30},
            ],
            target_allocations=[
                {"ticker": "XIC", "target_percentage": 20},
                {"ticker": "XIC.TO", "target_percentage": "5"},
            ],
        )
        assert result.position_value == Decimal("450")
        assert result.target_percentage == Decimal("25")

    def test_empty_account_with_target_is_zero_balance(self):
        result = AccountSnapshot.from_holdings(
            ticker="XIC",
            account_id="a1",
            account_type="individual",
            positions=[],
            target_allocations=[{"ticker": "XIC", "target_percentage": 15}],
        )
        assert result.portfolio_value == 0
        assert classify_account(result).status is DeviationStatus.ZERO_BALANCE
