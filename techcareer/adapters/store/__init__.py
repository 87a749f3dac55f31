"""Repository adapters for persistence and querying.

Implementations support:
- SQLite (zero-config, single-file, via aiosqlite)
"""
