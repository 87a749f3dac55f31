"""Business rules: invariant checks that run before a service proceeds.

Both checks ignore soft-deleted records: their title or name can be reused,
and a soft-deleted record is reported as not found.
"""

import logging
from uuid import UUID

from .errors import ConflictError, NotFoundError
from .messages import EventMessages, InstructorMessages
from .models import Event, Instructor
from .ports import (
    EventRepositoryPort,
    EventRulesPort,
    InstructorRepositoryPort,
    InstructorRulesPort,
)

logger = logging.getLogger(__name__)


class EventBusinessRules(EventRulesPort):
    """Event invariants checked against the event repository."""

    def __init__(self, repository: EventRepositoryPort):
        self.repository = repository

    async def event_must_exist(self, event_id: UUID) -> Event:
        event = await self.repository.get_by_id(event_id, include=True)
        if event is None:
            logger.warning(
                f"Event {event_id} not found", extra={"event_id": str(event_id)}
            )
            raise NotFoundError(EventMessages.EVENT_NOT_FOUND)
        return event

    async def event_title_must_be_unique(self, title: str) -> None:
        taken = await self.repository.any(lambda event: event.title == title)
        if taken:
            logger.warning(
                f"Event title already in use: {title!r}", extra={"title": title}
            )
            raise ConflictError(EventMessages.EVENT_TITLE_MUST_BE_UNIQUE)


class InstructorBusinessRules(InstructorRulesPort):
    """Instructor invariants checked against the instructor repository."""

    def __init__(self, repository: InstructorRepositoryPort):
        self.repository = repository

    async def instructor_must_exist(self, instructor_id: UUID) -> Instructor:
        instructor = await self.repository.get_by_id(instructor_id)
        if instructor is None:
            logger.warning(
                f"Instructor {instructor_id} not found",
                extra={"instructor_id": str(instructor_id)},
            )
            raise NotFoundError(InstructorMessages.INSTRUCTOR_NOT_FOUND)
        return instructor

    async def instructor_name_must_be_unique(self, name: str) -> None:
        taken = await self.repository.any(
            lambda instructor: instructor.name == name
        )
        if taken:
            logger.warning(
                f"Instructor name already in use: {name!r}",
                extra={"instructor_name": name},
            )
            raise ConflictError(InstructorMessages.INSTRUCTOR_NAME_MUST_BE_UNIQUE)
