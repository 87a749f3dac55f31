"""Core domain logic for the TechCareer service tier.

This package contains zero external dependencies and represents
the pure business logic of the application. Persistence, mapping and
the command-line surface are handled by the adapters package.
"""

from .errors import BusinessError, ConflictError, NotFoundError
from .messages import EventMessages, InstructorMessages
from .models import (
    Category,
    CreateEventRequest,
    CreateInstructorRequest,
    Event,
    EventResponse,
    Instructor,
    InstructorResponse,
    UpdateEventRequest,
    UpdateInstructorRequest,
)

__all__ = [
    "BusinessError",
    "Category",
    "ConflictError",
    "CreateEventRequest",
    "CreateInstructorRequest",
    "Event",
    "EventMessages",
    "EventResponse",
    "Instructor",
    "InstructorMessages",
    "InstructorResponse",
    "NotFoundError",
    "UpdateEventRequest",
    "UpdateInstructorRequest",
]
