"""
Advisor Back Office - Custom Exceptions
Application-specific exceptions with HTTP error handling
"""
from typing import Optional, Any, Dict
from fastapi import HTTPException, status


class BackofficeException(Exception):
    """Base exception for Advisor Back Office."""

    def __init__(
        self,
        message: str = "An error occurred",
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {
            "detail": self.message,
            "code": self.code,
            "details": self.details,
        }


# =========================
# Risk Configuration Exceptions
# =========================

class RiskConfigurationError(BackofficeException):
    """Risk tier / allocation related errors."""
    pass


class InvalidRiskTierError(RiskConfigurationError):
    """Unknown risk tier name."""

    def __init__(self, value: Any = None):
        message = f"Unknown risk tier '{value}'" if value is not None else "Unknown risk tier"
        super().__init__(
            message=message,
            code="INVALID_RISK_TIER",
            details={"value": value},
        )


class InvalidAllocationError(RiskConfigurationError):
    """Risk allocation field is not numeric."""

    def __init__(self, field: str = "", value: Any = None):
        message = (
            f"Risk allocation field '{field}' is not a number: {value!r}"
            if field else "Invalid risk allocation"
        )
        super().__init__(
            message=message,
            code="INVALID_ALLOCATION",
            details={"field": field, "value": value},
        )


# =========================
# Alert Exceptions
# =========================

class AlertError(BackofficeException):
    """Trading alert related errors."""
    pass


class InvalidSignalError(AlertError):
    """Signal direction is neither BUY nor SELL."""

    def __init__(self, signal: Any = None):
        message = (
            f"Invalid signal '{signal}', expected BUY or SELL"
            if signal is not None else "Invalid signal"
        )
        super().__init__(
            message=message,
            code="INVALID_SIGNAL",
            details={"signal": signal},
        )


# =========================
# HTTP Exception Helpers
# =========================

def raise_bad_request(message: str = "Bad request"):
    """Raise 400 Bad Request exception."""
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=message
    )
