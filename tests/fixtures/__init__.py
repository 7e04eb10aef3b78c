"""
Test Fixtures Package

Shared HTML pages used across the unit tests.
"""
