"""Command-line interface adapters.

Provides CLI commands for managing the TechCareer service tier:
- add/get/update/delete/list for events and instructors
- add/list for event categories
"""
