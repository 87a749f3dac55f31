"""External adapters for the TechCareer service tier.

This package contains all external dependencies (SQLite, the object mapper,
the command-line surface) and provides implementations of the core port
interfaces.

Adapter Organization:

- store/: Repositories backed by SQLite (aiosqlite)
- mapping/: Profile-based entity <-> DTO mapper
- cli/: Command-line interface and management commands
"""
