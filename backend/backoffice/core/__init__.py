"""
Core business logic
"""
