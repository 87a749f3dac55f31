"""Unit tests for core domain logic.

These tests exercise the services and business rules without a database.
Repositories, mappers and rules are replaced with fakes from tests/fakes/.
"""
