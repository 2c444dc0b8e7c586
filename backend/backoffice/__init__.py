"""
Advisor Back Office - risk limits and alert deviation core
"""
__version__ = "1.0.0"
