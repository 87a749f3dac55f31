"""Unit tests for the business rules against the fake repositories."""

from datetime import UTC, datetime
from uuid import uuid4

import pytest

from techcareer.core.errors import BusinessError, ConflictError, NotFoundError
from techcareer.core.messages import EventMessages, InstructorMessages
from techcareer.core.models import Event, Instructor
from techcareer.core.rules import EventBusinessRules, InstructorBusinessRules
from techcareer.tests.fakes import FakeEventRepository, FakeInstructorRepository


def _event(title: str = "Test Event") -> Event:
    return Event(
        title=title,
        description="d",
        image_url="i.jpg",
        participation_text="p",
        category_id=1,
    )


@pytest.mark.asyncio
class TestEventBusinessRules:
    async def test_event_must_exist_returns_event(self) -> None:
        repository = FakeEventRepository()
        event = _event()
        repository.seed(event)

        assert await EventBusinessRules(repository).event_must_exist(event.id) is event

    async def test_event_must_exist_raises_for_missing(self) -> None:
        rules = EventBusinessRules(FakeEventRepository())

        with pytest.raises(NotFoundError) as exc_info:
            await rules.event_must_exist(uuid4())

        assert exc_info.value.message == EventMessages.EVENT_NOT_FOUND
        assert isinstance(exc_info.value, BusinessError)

    async def test_soft_deleted_event_is_not_found(self) -> None:
        repository = FakeEventRepository()
        event = _event()
        event.deleted_at = datetime.now(UTC)
        repository.seed(event)

        with pytest.raises(NotFoundError):
            await EventBusinessRules(repository).event_must_exist(event.id)

    async def test_unique_title_passes(self) -> None:
        repository = FakeEventRepository()
        repository.seed(_event("Existing"))

        await EventBusinessRules(repository).event_title_must_be_unique("New")

    async def test_duplicate_title_raises_conflict(self) -> None:
        repository = FakeEventRepository()
        repository.seed(_event("Existing"))

        with pytest.raises(ConflictError, match="Title must be unique"):
            await EventBusinessRules(repository).event_title_must_be_unique("Existing")

    async def test_title_of_soft_deleted_event_can_be_reused(self) -> None:
        repository = FakeEventRepository()
        event = _event("Archived")
        event.deleted_at = datetime.now(UTC)
        repository.seed(event)

        await EventBusinessRules(repository).event_title_must_be_unique("Archived")

        assert repository.any_calls == [False]


@pytest.mark.asyncio
class TestInstructorBusinessRules:
    async def test_instructor_must_exist_returns_instructor(self) -> None:
        repository = FakeInstructorRepository()
        instructor = Instructor(name="Ada", about="")
        repository.seed(instructor)

        rules = InstructorBusinessRules(repository)

        assert await rules.instructor_must_exist(instructor.id) is instructor

    async def test_instructor_must_exist_raises_for_missing(self) -> None:
        rules = InstructorBusinessRules(FakeInstructorRepository())

        with pytest.raises(NotFoundError, match=InstructorMessages.INSTRUCTOR_NOT_FOUND):
            await rules.instructor_must_exist(uuid4())

    async def test_duplicate_name_raises_conflict(self) -> None:
        repository = FakeInstructorRepository()
        repository.seed(Instructor(name="Ada", about=""))

        with pytest.raises(ConflictError, match="Name must be unique"):
            await InstructorBusinessRules(repository).instructor_name_must_be_unique("Ada")

    async def test_name_of_soft_deleted_instructor_can_be_reused(self) -> None:
        repository = FakeInstructorRepository()
        instructor = Instructor(name="Ada", about="")
        instructor.deleted_at = datetime.now(UTC)
        repository.seed(instructor)

        await InstructorBusinessRules(repository).instructor_name_must_be_unique("Ada")

    async def test_name_uniqueness_is_case_sensitive(self) -> None:
        repository = FakeInstructorRepository()
        repository.seed(Instructor(name="Ada", about=""))

        await InstructorBusinessRules(repository).instructor_name_must_be_unique("ada")
