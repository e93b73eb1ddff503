"""
Unit Tests Package.

This package contains tests for pure logic and thin wrappers,
with no background tasks involved.
"""
