"""
Integration Tests - HTTP API
"""
