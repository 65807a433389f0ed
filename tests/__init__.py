"""Test suite for the lazycore package.

This package contains unit and integration tests validating lazy
resolution, memoization, plugin overrides, definition loading and the
command-line interface.
"""
