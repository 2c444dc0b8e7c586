"""
Advisor Back Office - Test Configuration
Shared fixtures and test configuration.
"""
import os
import sys
from decimal import Decimal
import pytest

# Add backend to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Set test environment
os.environ["APP_ENV"] = "testing"
os.environ["LOG_TO_FILE"] = "false"


# =========================
# Risk Allocation Fixtures
# =========================

@pytest.fixture
def medium_allocation():
    """Account entirely in the medium tier."""
    from backoffice.core.risk import RiskTierAllocation
    return RiskTierAllocation(medium=100)


@pytest.fixture
def split_allocation():
    """Account split evenly between low and medium."""
    from backoffice.core.risk import RiskTierAllocation
    return RiskTierAllocation(low=50, medium=50)


@pytest.fixture
def allocation_record() -> dict:
    """Account row as stored, with decimal columns as strings."""
    return {
        "id": "acct-1",
        "risk_low_pct": "20.00",
        "risk_low_medium_pct": "20.00",
        "risk_medium_pct": "40.00",
        "risk_medium_high_pct": None,
        "risk_high_pct": "20.00",
    }


# =========================
# Alert Fixtures
# =========================

@pytest.fixture
def underweight_snapshot():
    """20% actual vs 30% target."""
    from backoffice.core.alerts import AccountSnapshot
    return AccountSnapshot(
        account_id="under-1",
        account_type="individual",
        portfolio_value=Decimal("10000"),
        position_value=Decimal("2000"),
        target_percentage=Decimal("30"),
        household_category="retail",
    )


@pytest.fixture
def on_target_snapshot():
    """10% actual vs 10% target."""
    from backoffice.core.alerts import AccountSnapshot
    return AccountSnapshot(
        account_id="on-1",
        account_type="corporate",
        portfolio_value=Decimal("1000"),
        position_value=Decimal("100"),
        target_percentage=Decimal("10"),
        household_category="retail",
    )


@pytest.fixture
def overweight_snapshot():
    """30% actual vs 10% target."""
    from backoffice.core.alerts import AccountSnapshot
    return AccountSnapshot(
        account_id="over-1",
        account_type="joint",
        portfolio_value=Decimal("1000"),
        position_value=Decimal("300"),
        target_percentage=Decimal("10"),
        household_category="institutional",
    )


@pytest.fixture
def zero_balance_snapshot():
    """Target set but no portfolio value yet."""
    from backoffice.core.alerts import AccountSnapshot
    return AccountSnapshot(
        account_id="zero-1",
        account_type="individual",
        portfolio_value=Decimal("0"),
        target_percentage=Decimal("15"),
        household_category="retail",
    )


# =========================
# API Fixtures
# =========================

@pytest.fixture
def client():
    """Test client with application lifespan."""
    from fastapi.testclient import TestClient
    from backoffice.main import app
    with TestClient(app) as test_client:
        yield test_client
