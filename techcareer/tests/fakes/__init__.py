"""Fake implementations of core ports for testing.

These in-memory implementations allow core domain logic to be tested
without external dependencies:

- FakeEventRepository / FakeInstructorRepository: In-memory persistence
- FakeMapper: Recorded mapping calls with canned results
- FakeEventRules / FakeInstructorRules: Configurable rule outcomes
"""

from .mapper import FakeMapper
from .repository import FakeEventRepository, FakeInstructorRepository, FakeRepository
from .rules import FakeEventRules, FakeInstructorRules

__all__ = [
    "FakeEventRepository",
    "FakeEventRules",
    "FakeInstructorRepository",
    "FakeInstructorRules",
    "FakeMapper",
    "FakeRepository",
]
