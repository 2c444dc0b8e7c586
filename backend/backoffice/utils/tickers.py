"""
Advisor Back Office - Ticker Helpers
"""
import re


# Exchange suffixes used by the custodians (e.g. "XIC.TO", "VFV.TO")
EXCHANGE_SUFFIXES = ("TO", "V", "CN", "NE", "TSX", "NYSE", "NASDAQ")

_SUFFIX_PATTERN = re.compile(
    r"\.(" + "|".join(EXCHANGE_SUFFIXES) + r")$",
    re.IGNORECASE,
)


def normalize_ticker(ticker: str) -> str:
    """
    Normalize a ticker for matching across positions and targets.

    Upper-cases the symbol and strips a trailing exchange suffix,
    so "xic.to", "XIC.TO" and "XIC" all compare equal.
    """
    return _SUFFIX_PATTERN.sub("", ticker.strip().upper())


__all__ = ["EXCHANGE_SUFFIXES", "normalize_ticker"]
