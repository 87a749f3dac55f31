"""Integration tests for adapter implementations.

These tests exercise the SQLite repositories and the profile mapper to
validate translation between core domain models and stored rows or DTOs.
"""
