"""Profile-based object mapper.

Implements MapperPort with an explicit registry of conversion profiles,
one callable per (source type, destination type) pair. Merge-mapping is
generic over dataclasses and needs no registration.
"""

import dataclasses
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from techcareer.core.models import (
    CreateEventRequest,
    CreateInstructorRequest,
    Event,
    EventResponse,
    Instructor,
    InstructorResponse,
)
from techcareer.core.ports import MapperPort

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Fields never written by map_onto.
PROTECTED_FIELDS = frozenset({"id"})


class ProfileMapper(MapperPort):
    """Mapper backed by registered conversion profiles."""

    def __init__(self) -> None:
        self._profiles: dict[tuple[type, type], Callable[[Any], Any]] = {}

    def register(
        self,
        source_type: type,
        destination_type: type[T],
        converter: Callable[[Any], T],
    ) -> None:
        """Register the converter used to map ``source_type`` to ``destination_type``.

        Registering the same pair twice replaces the earlier converter.
        """
        self._profiles[(source_type, destination_type)] = converter

    def map(self, source: Any, destination_type: type[T]) -> T:
        """Convert ``source`` to a new ``destination_type`` instance.

        Raises:
            LookupError: If no profile is registered for the pair of types.
        """
        converter = self._profiles.get((type(source), destination_type))
        if converter is None:
            raise LookupError(
                f"No mapping registered from {type(source).__name__} "
                f"to {destination_type.__name__}"
            )
        return converter(source)

    def map_onto(self, source: Any, destination: T) -> T:
        """Copy the non-None dataclass fields of ``source`` onto ``destination``.

        Only fields that exist on the destination are copied; ``id`` is
        never overwritten. A dataclass destination is validated on a copy
        first, so a rejected merge leaves it untouched.

        Raises:
            TypeError: If ``source`` is not a dataclass instance.
            ValueError: If the merged values fail the destination's validation.
        """
        if not dataclasses.is_dataclass(source) or isinstance(source, type):
            raise TypeError(
                f"map_onto requires a dataclass source, got {type(source).__name__}"
            )

        changes = {}
        for source_field in dataclasses.fields(source):
            name = source_field.name
            if name in PROTECTED_FIELDS or not hasattr(destination, name):
                continue
            value = getattr(source, name)
            if value is None:
                continue
            changes[name] = value

        if dataclasses.is_dataclass(destination):
            # Runs __post_init__ on the merged values
            dataclasses.replace(destination, **changes)

        for name, value in changes.items():
            setattr(destination, name, value)

        return destination


# ============================================================================
# Default profiles
# ============================================================================


def _event_from_create(request: CreateEventRequest) -> Event:
    return Event(
        title=request.title,
        description=request.description,
        image_url=request.image_url,
        participation_text=request.participation_text,
        category_id=request.category_id,
    )


def _event_response(event: Event) -> EventResponse:
    return EventResponse(
        id=event.id,
        title=event.title,
        description=event.description,
        image_url=event.image_url,
        participation_text=event.participation_text,
        category_id=event.category_id,
        category_name=event.category.name if event.category is not None else None,
    )


def _instructor_from_create(request: CreateInstructorRequest) -> Instructor:
    return Instructor(name=request.name, about=request.about)


def _instructor_response(instructor: Instructor) -> InstructorResponse:
    return InstructorResponse(
        id=instructor.id,
        name=instructor.name,
        about=instructor.about,
    )


def build_default_mapper() -> ProfileMapper:
    """Create a ProfileMapper with the event and instructor profiles registered."""
    mapper = ProfileMapper()
    mapper.register(CreateEventRequest, Event, _event_from_create)
    mapper.register(Event, EventResponse, _event_response)
    mapper.register(CreateInstructorRequest, Instructor, _instructor_from_create)
    mapper.register(Instructor, InstructorResponse, _instructor_response)
    logger.debug("Default mapping profiles registered")
    return mapper
