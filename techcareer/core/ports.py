"""Port interfaces for the TechCareer service tier.

These abstract base classes define the boundaries between core
domain logic and external adapters. Implementations live in the
adapters/ package; tests substitute the fakes in tests/fakes/.

Port Interface Categories:

1. **Driven Ports** (core calls out to adapters)
   - RepositoryPort: Generic async CRUD over a persistence store
   - MapperPort: Entity <-> DTO mapping, including merge-mapping
   - EventRulesPort / InstructorRulesPort: Business invariant checks

2. **Driving Ports** (adapters/external systems call into core)
   - EventServicePort: Event management operations
   - InstructorServicePort: Instructor management operations
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from typing import Any, Generic, TypeAlias, TypeVar
from uuid import UUID

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

TEntity = TypeVar("TEntity")
TId = TypeVar("TId")
T = TypeVar("T")

Predicate: TypeAlias = Callable[[Any], bool]
OrderBy: TypeAlias = Callable[[Iterable[Any]], Iterable[Any]]


# ============================================================================
# DRIVEN PORTS (Core calls out to adapters)
# ============================================================================


class RepositoryPort(ABC, Generic[TEntity, TId]):
    """Port for persisting and querying entities of one type.

    Adapters implementing this port must handle:
    - Soft deletion (records marked deleted are hidden unless asked for)
    - Audit timestamps (created/updated/deleted)
    - Loading related records when ``include`` is requested
    - Cancellation: every method is a coroutine and must stay cancellable
      at its I/O awaits
    """

    @abstractmethod
    async def add(self, entity: TEntity) -> TEntity:
        """Persist a new entity.

        Args:
            entity: Entity to insert. Its id has already been assigned.

        Returns:
            The persisted entity.

        Raises:
            ConflictError: If a unique column is already taken.
            Exception: If the store is unavailable.
        """

    @abstractmethod
    async def update(self, entity: TEntity) -> TEntity:
        """Persist all fields of an existing entity.

        Returns:
            The persisted entity.

        Raises:
            Exception: If the entity doesn't exist or the store is unavailable.
        """

    @abstractmethod
    async def delete(self, entity: TEntity, permanent: bool = False) -> TEntity:
        """Delete an entity.

        Args:
            entity: Entity to delete.
            permanent: If False (default) the record is soft-deleted and
                remains in storage; if True it is removed.

        Returns:
            The deleted entity.
        """

    @abstractmethod
    async def get_list(
        self,
        predicate: Predicate | None = None,
        order_by: OrderBy | None = None,
        include: bool = False,
        with_deleted: bool = False,
        enable_tracking: bool = True,
    ) -> list[TEntity]:
        """Retrieve entities matching a filter.

        Args:
            predicate: Keep only entities for which this returns True.
                If None, keep all.
            order_by: Function that receives the filtered entities and
                returns them ordered. If None, insertion order is kept.
            include: Load related records (e.g. an event's category).
            with_deleted: Also return soft-deleted entities.
            enable_tracking: Record returned entities in the adapter's
                identity map.

        Returns:
            List of entities in the order produced by ``order_by``.
            Empty list if nothing matches.
        """

    @abstractmethod
    async def get_by_id(
        self, entity_id: TId, include: bool = False, with_deleted: bool = False
    ) -> TEntity | None:
        """Retrieve one entity by id.

        Returns:
            The entity, or None if absent (or soft-deleted and
            ``with_deleted`` is False).
        """

    @abstractmethod
    async def any(self, predicate: Predicate, with_deleted: bool = False) -> bool:
        """Return True if at least one entity matches ``predicate``."""


class CategoryRepositoryPort(RepositoryPort[Category, int]):
    """Repository of event categories."""


class EventRepositoryPort(RepositoryPort[Event, UUID]):
    """Repository of events."""


class InstructorRepositoryPort(RepositoryPort[Instructor, UUID]):
    """Repository of instructors."""


class MapperPort(ABC):
    """Port for mapping between entities and DTOs."""

    @abstractmethod
    def map(self, source: Any, destination_type: type[T]) -> T:
        """Create a new ``destination_type`` instance from ``source``.

        Raises:
            LookupError: If no mapping is registered for the pair of types.
        """

    @abstractmethod
    def map_onto(self, source: Any, destination: T) -> T:
        """Merge ``source`` onto an existing ``destination`` in place.

        Fields supplied by the source (not None) overwrite the destination's;
        all other destination fields are retained. Identifiers are never
        overwritten.

        Returns:
            The same ``destination`` instance.
        """


class EventRulesPort(ABC):
    """Invariant checks for events."""

    @abstractmethod
    async def event_must_exist(self, event_id: UUID) -> Event:
        """Return the event, or raise NotFoundError."""

    @abstractmethod
    async def event_title_must_be_unique(self, title: str) -> None:
        """Raise ConflictError if another event already uses ``title``."""


class InstructorRulesPort(ABC):
    """Invariant checks for instructors."""

    @abstractmethod
    async def instructor_must_exist(self, instructor_id: UUID) -> Instructor:
        """Return the instructor, or raise NotFoundError."""

    @abstractmethod
    async def instructor_name_must_be_unique(self, name: str) -> None:
        """Raise ConflictError if another instructor already uses ``name``."""


# ============================================================================
# DRIVING PORTS (Adapters/external systems call into core)
# ============================================================================


class EventServicePort(ABC):
    """Port for event management.

    Implementations live in the core (event_service.py). The CLI adapter
    calls these methods.
    """

    @abstractmethod
    async def add(self, create_request: CreateEventRequest) -> EventResponse:
        """Create an event.

        Raises:
            ConflictError: If the title is already taken.
        """

    @abstractmethod
    async def get_by_id(self, event_id: UUID) -> EventResponse:
        """Retrieve an event.

        Raises:
            NotFoundError: If the event doesn't exist.
        """

    @abstractmethod
    async def update(
        self, event_id: UUID, update_request: UpdateEventRequest
    ) -> EventResponse:
        """Merge the supplied fields onto an existing event.

        Raises:
            NotFoundError: If the event doesn't exist.
        """

    @abstractmethod
    async def delete(self, event_id: UUID, permanent: bool = False) -> str:
        """Delete an event and return the confirmation message.

        Raises:
            NotFoundError: If the event doesn't exist.
        """

    @abstractmethod
    async def get_list(
        self,
        predicate: Predicate | None = None,
        order_by: OrderBy | None = None,
        include: bool = False,
        with_deleted: bool = False,
        enable_tracking: bool = True,
    ) -> list[EventResponse]:
        """List events; options are passed through to the repository."""


class InstructorServicePort(ABC):
    """Port for instructor management."""

    @abstractmethod
    async def add(self, create_request: CreateInstructorRequest) -> InstructorResponse:
        """Create an instructor.

        Raises:
            ConflictError: If the name is already taken.
        """

    @abstractmethod
    async def get_by_id(self, instructor_id: UUID) -> InstructorResponse:
        """Retrieve an instructor.

        Raises:
            NotFoundError: If the instructor doesn't exist.
        """

    @abstractmethod
    async def update(
        self, instructor_id: UUID, update_request: UpdateInstructorRequest
    ) -> InstructorResponse:
        """Merge the supplied fields onto an existing instructor.

        Raises:
            NotFoundError: If the instructor doesn't exist.
        """

    @abstractmethod
    async def delete(self, instructor_id: UUID, permanent: bool = False) -> str:
        """Delete an instructor and return the confirmation message.

        Raises:
            NotFoundError: If the instructor doesn't exist.
        """

    @abstractmethod
    async def get_list(
        self,
        predicate: Predicate | None = None,
        order_by: OrderBy | None = None,
        include: bool = False,
        with_deleted: bool = False,
        enable_tracking: bool = True,
    ) -> list[InstructorResponse]:
        """List instructors; options are passed through to the repository."""
