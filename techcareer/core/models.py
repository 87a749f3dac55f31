"""Domain models for the TechCareer service tier.

Entities are mutable dataclasses owned by the repositories. Request and
response DTOs are frozen dataclasses exchanged at the service boundary.
All models use only Python standard library types, ensuring zero external
dependencies in the core domain.
"""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4


def _require_text(value: str, name: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{name} must be a non-empty string")


@dataclass
class Category:
    """An event category. Its name is shown on event responses."""

    id: int
    name: str

    def __post_init__(self) -> None:
        _require_text(self.name, "name")


@dataclass
class Event:
    """A persisted event.

    The title is unique across all events. ``category`` is only populated
    when the repository is asked to include related records.

    Note: This dataclass is intentionally mutable so that update requests can
    be merged onto an existing record before it is persisted.
    """

    title: str
    description: str
    image_url: str
    participation_text: str
    category_id: int
    id: UUID = field(default_factory=uuid4)
    category: Category | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate event invariants on creation or deserialization."""
        _require_text(self.title, "title")

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


@dataclass
class Instructor:
    """A persisted instructor. The name is unique across all instructors."""

    name: str
    about: str
    id: UUID = field(default_factory=uuid4)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate instructor invariants on creation or deserialization."""
        _require_text(self.name, "name")

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


# ============================================================================
# Event DTOs
# ============================================================================


@dataclass(frozen=True)
class CreateEventRequest:
    """Fields a client supplies to create an event."""

    title: str
    description: str
    image_url: str
    participation_text: str
    category_id: int


@dataclass(frozen=True)
class UpdateEventRequest:
    """Fields a client supplies to update an event.

    ``None`` means "not supplied": the stored value is kept.
    """

    id: UUID
    title: str | None = None
    description: str | None = None
    image_url: str | None = None
    participation_text: str | None = None
    category_id: int | None = None


@dataclass(frozen=True)
class EventResponse:
    """Read-only projection of an event."""

    id: UUID
    title: str
    description: str
    image_url: str
    participation_text: str
    category_id: int | None = None
    category_name: str | None = None  # only set when the category was loaded


# ============================================================================
# Instructor DTOs
# ============================================================================


@dataclass(frozen=True)
class CreateInstructorRequest:
    """Fields a client supplies to create an instructor."""

    name: str
    about: str


@dataclass(frozen=True)
class UpdateInstructorRequest:
    """Fields a client supplies to update an instructor."""

    id: UUID
    name: str | None = None
    about: str | None = None


@dataclass(frozen=True)
class InstructorResponse:
    """Read-only projection of an instructor."""

    id: UUID
    name: str
    about: str
