"""Event service: implements EventServicePort.

Orchestrates business rule checks, DTO/entity mapping and repository calls
for events. Rule violations propagate unchanged to the caller; the service
adds no retry or recovery of its own.
"""

import logging
from uuid import UUID

from .messages import EventMessages
from .models import CreateEventRequest, Event, EventResponse, UpdateEventRequest
from .ports import (
    EventRepositoryPort,
    EventRulesPort,
    EventServicePort,
    MapperPort,
    OrderBy,
    Predicate,
)

logger = logging.getLogger(__name__)


class EventService(EventServicePort):
    """Core implementation of EventServicePort."""

    def __init__(
        self,
        repository: EventRepositoryPort,
        mapper: MapperPort,
        rules: EventRulesPort,
    ):
        """Initialize the event service.

        Args:
            repository: EventRepositoryPort implementation for persistence.
            mapper: MapperPort implementation for entity/DTO conversion.
            rules: EventRulesPort implementation for invariant checks.
        """
        self.repository = repository
        self.mapper = mapper
        self.rules = rules

    async def add(self, create_request: CreateEventRequest) -> EventResponse:
        """Create an event.

        Args:
            create_request: Client-supplied event fields.

        Returns:
            EventResponse for the persisted event.

        Raises:
            ConflictError: If the title is already taken. Nothing is persisted.
            Exception: If mapping or persistence fails.
        """
        await self.rules.event_title_must_be_unique(create_request.title)

        event = self.mapper.map(create_request, Event)
        added = await self.repository.add(event)

        logger.info(
            f"Event {added.id} created",
            extra={"event_id": str(added.id), "title": added.title},
        )

        return self.mapper.map(added, EventResponse)

    async def get_by_id(self, event_id: UUID) -> EventResponse:
        """Retrieve an event.

        Raises:
            NotFoundError: If the event doesn't exist.
        """
        event = await self.rules.event_must_exist(event_id)

        logger.debug(
            f"Retrieved event {event_id}", extra={"event_id": str(event_id)}
        )

        return self.mapper.map(event, EventResponse)

    async def update(
        self, event_id: UUID, update_request: UpdateEventRequest
    ) -> EventResponse:
        """Merge the supplied fields onto an existing event.

        Args:
            event_id: Id of the event to update.
            update_request: Fields to overwrite; None fields are kept.

        Returns:
            EventResponse for the updated event.

        Raises:
            NotFoundError: If the event doesn't exist.
            Exception: If mapping or persistence fails.
        """
        event = await self.rules.event_must_exist(event_id)

        event = self.mapper.map_onto(update_request, event)
        updated = await self.repository.update(event)

        logger.info(
            f"Event {event_id} updated",
            extra={"event_id": str(event_id), "title": updated.title},
        )

        return self.mapper.map(updated, EventResponse)

    async def delete(self, event_id: UUID, permanent: bool = False) -> str:
        """Delete an event.

        Args:
            event_id: Id of the event to delete.
            permanent: Remove the record instead of soft-deleting it.

        Returns:
            EventMessages.EVENT_DELETED.

        Raises:
            NotFoundError: If the event doesn't exist.
        """
        event = await self.rules.event_must_exist(event_id)

        await self.repository.delete(event, permanent)

        logger.info(
            f"Event {event_id} deleted",
            extra={"event_id": str(event_id), "permanent": permanent},
        )

        return EventMessages.EVENT_DELETED

    async def get_list(
        self,
        predicate: Predicate | None = None,
        order_by: OrderBy | None = None,
        include: bool = False,
        with_deleted: bool = False,
        enable_tracking: bool = True,
    ) -> list[EventResponse]:
        """List events.

        All options are passed through to the repository unmodified and
        each returned event is mapped individually, preserving order.
        """
        events = await self.repository.get_list(
            predicate=predicate,
            order_by=order_by,
            include=include,
            with_deleted=with_deleted,
            enable_tracking=enable_tracking,
        )

        logger.debug("Listed events", extra={"count": len(events)})

        return [self.mapper.map(event, EventResponse) for event in events]
