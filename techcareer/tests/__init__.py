"""Test suite for the TechCareer service tier.

Organized into three categories:

1. core/: Unit tests for core domain logic
   - Services and rules tested against in-memory fakes
   - No database, fast execution

2. adapters/: Integration tests for adapter implementations
   - SQLite repositories against a temporary database file
   - Profile mapper conversions and merges

3. fakes/: Port implementations for testing
   - In-memory repositories, recording mapper, configurable rules
   - Used by core unit tests and the CLI loop tests
"""
