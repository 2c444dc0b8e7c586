"""
Advisor Back Office - Decimal Helpers
"""
from contextlib import contextmanager
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Any


ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value: Any) -> Decimal:
    """Convert a number (or numeric string) to Decimal without float artifacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_to(value: Decimal, places: int = 1) -> Decimal:
    """Round half-up to a fixed number of decimal places."""
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


@contextmanager
def non_signaling():
    """
    Decimal context in which invalid operations yield NaN instead of raising.

    Ordering comparisons involving NaN evaluate to False and inf / inf is
    NaN, so calculations over non-finite input complete without errors.
    Usable as a decorator.
    """
    with localcontext() as ctx:
        ctx.traps[InvalidOperation] = False
        yield ctx


__all__ = ["ZERO", "HUNDRED", "to_decimal", "round_to", "non_signaling"]
