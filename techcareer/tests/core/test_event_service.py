"""Unit tests for EventService.

Tests verify that the service runs the business rule first, maps between
DTOs and entities, makes a single repository call and propagates rule
violations unchanged.
"""

import asyncio
from operator import attrgetter
from uuid import uuid4

import pytest

from techcareer.core.errors import BusinessError, ConflictError, NotFoundError
from techcareer.core.event_service import EventService
from techcareer.core.messages import EventMessages
from techcareer.core.models import (
    Category,
    CreateEventRequest,
    Event,
    EventResponse,
    UpdateEventRequest,
)
from techcareer.tests.fakes import FakeEventRepository, FakeEventRules, FakeMapper

# ============================================================================
# Test Fixtures
# ============================================================================


@pytest.fixture
def repository() -> FakeEventRepository:
    return FakeEventRepository()


@pytest.fixture
def mapper() -> FakeMapper:
    return FakeMapper()


@pytest.fixture
def rules() -> FakeEventRules:
    return FakeEventRules()


@pytest.fixture
def service(
    repository: FakeEventRepository, mapper: FakeMapper, rules: FakeEventRules
) -> EventService:
    return EventService(repository=repository, mapper=mapper, rules=rules)


@pytest.fixture
def create_request() -> CreateEventRequest:
    return CreateEventRequest(
        title="Test Event",
        description="Test Description",
        image_url="TestImage.jpg",
        participation_text="Participation Text",
        category_id=1,
    )


@pytest.fixture
def event() -> Event:
    return Event(
        title="Test Event",
        description="Test Description",
        image_url="TestImage.jpg",
        participation_text="Participation Text",
        category_id=1,
        category=Category(id=1, name="Test Category"),
    )


def _response_for(event: Event) -> EventResponse:
    return EventResponse(
        id=event.id,
        title=event.title,
        description=event.description,
        image_url=event.image_url,
        participation_text=event.participation_text,
        category_id=event.category_id,
        category_name="Test Category",
    )


# ============================================================================
# add
# ============================================================================


@pytest.mark.asyncio
class TestAdd:
    async def test_add_returns_mapped_response(
        self,
        service: EventService,
        repository: FakeEventRepository,
        mapper: FakeMapper,
        rules: FakeEventRules,
        create_request: CreateEventRequest,
        event: Event,
    ) -> None:
        """A unique title is persisted and the mapped entity is returned."""
        expected = _response_for(event)
        mapper.when_map(create_request, Event, event)
        mapper.when_map(event, EventResponse, expected)

        result = await service.add(create_request)

        assert result == expected
        assert result.title == "Test Event"
        assert result.category_name == "Test Category"
        assert rules.title_unique_calls == ["Test Event"]
        assert repository.added == [event]

    async def test_add_duplicate_title_raises_conflict(
        self,
        service: EventService,
        repository: FakeEventRepository,
        mapper: FakeMapper,
        rules: FakeEventRules,
        create_request: CreateEventRequest,
    ) -> None:
        """A duplicate title fails before anything is mapped or persisted."""
        rules.taken_titles.add("Test Event")

        with pytest.raises(ConflictError, match="Title must be unique"):
            await service.add(create_request)

        assert repository.call_count == 0
        assert mapper.map_calls == []

    async def test_add_propagates_rule_error_unchanged(
        self,
        service: EventService,
        rules: FakeEventRules,
        create_request: CreateEventRequest,
    ) -> None:
        """The exact error instance raised by the rule reaches the caller."""
        error = BusinessError("Error occurred while adding event: Title must be unique")
        rules.error = error

        with pytest.raises(BusinessError) as exc_info:
            await service.add(create_request)

        assert exc_info.value is error

    async def test_add_propagates_repository_failure(
        self,
        service: EventService,
        repository: FakeEventRepository,
        create_request: CreateEventRequest,
    ) -> None:
        repository.should_fail = True

        with pytest.raises(RuntimeError, match="Repository operation failed"):
            await service.add(create_request)

    async def test_add_maps_persisted_entity(
        self,
        service: EventService,
        mapper: FakeMapper,
        create_request: CreateEventRequest,
    ) -> None:
        """Without canned results the response mirrors the created entity."""
        result = await service.add(create_request)

        (persisted,) = mapper.calls_to(EventResponse)
        assert result.id == persisted.id
        assert result.title == create_request.title
        assert result.description == create_request.description
        assert result.image_url == create_request.image_url
        assert result.participation_text == create_request.participation_text


# ============================================================================
# get_by_id
# ============================================================================


@pytest.mark.asyncio
class TestGetById:
    async def test_get_by_id_returns_event(
        self,
        service: EventService,
        mapper: FakeMapper,
        rules: FakeEventRules,
        event: Event,
    ) -> None:
        expected = _response_for(event)
        rules.add_existing(event)
        mapper.when_map(event, EventResponse, expected)

        result = await service.get_by_id(event.id)

        assert result.id == event.id
        assert result.title == "Test Event"
        assert rules.must_exist_calls == [event.id]

    async def test_get_by_id_missing_raises_not_found(
        self, service: EventService, mapper: FakeMapper
    ) -> None:
        """A missing id fails and the mapper is never called."""
        with pytest.raises(NotFoundError, match=EventMessages.EVENT_NOT_FOUND):
            await service.get_by_id(uuid4())

        assert mapper.map_calls == []


# ============================================================================
# update
# ============================================================================


@pytest.mark.asyncio
class TestUpdate:
    async def test_update_event_successfully(
        self,
        service: EventService,
        repository: FakeEventRepository,
        mapper: FakeMapper,
        rules: FakeEventRules,
    ) -> None:
        """One rule check, one merge-map, one persistence call, one response map."""
        existing = Event(
            title="Old Event",
            description="Old Description",
            image_url="OldImage.jpg",
            participation_text="Old Participation Text",
            category_id=1,
        )
        update_request = UpdateEventRequest(
            id=existing.id,
            title="Updated Event",
            description="Updated Description",
            image_url="UpdatedImage.jpg",
            participation_text="Updated Participation Text",
        )
        rules.add_existing(existing)

        result = await service.update(existing.id, update_request)

        assert result.title == "Updated Event"
        assert result.description == "Updated Description"
        assert result.image_url == "UpdatedImage.jpg"
        assert result.participation_text == "Updated Participation Text"

        assert rules.must_exist_calls == [existing.id]
        assert mapper.map_onto_calls == [(update_request, existing)]
        assert len(repository.updated) == 1
        assert repository.updated[0].id == existing.id
        assert repository.updated[0].title == "Updated Event"
        assert mapper.calls_to(EventResponse) == [existing]

    async def test_update_keeps_fields_not_supplied(
        self,
        service: EventService,
        rules: FakeEventRules,
        event: Event,
    ) -> None:
        rules.add_existing(event)

        result = await service.update(
            event.id, UpdateEventRequest(id=event.id, title="Renamed")
        )

        assert result.title == "Renamed"
        assert result.description == "Test Description"
        assert result.image_url == "TestImage.jpg"
        assert result.participation_text == "Participation Text"
        assert result.category_id == 1

    async def test_update_persists_entity_returned_by_merge(
        self,
        service: EventService,
        repository: FakeEventRepository,
        mapper: FakeMapper,
        rules: FakeEventRules,
        event: Event,
    ) -> None:
        merged = Event(
            id=event.id,
            title="Merged",
            description="d",
            image_url="i",
            participation_text="p",
            category_id=2,
        )
        update_request = UpdateEventRequest(id=event.id, title="Merged")
        rules.add_existing(event)
        mapper.when_map_onto(update_request, event, merged)

        await service.update(event.id, update_request)

        assert repository.updated == [merged]

    async def test_update_missing_event_raises_not_found(
        self,
        service: EventService,
        repository: FakeEventRepository,
        mapper: FakeMapper,
    ) -> None:
        event_id = uuid4()

        with pytest.raises(NotFoundError):
            await service.update(event_id, UpdateEventRequest(id=event_id, title="x"))

        assert mapper.map_onto_calls == []
        assert repository.call_count == 0


# ============================================================================
# delete
# ============================================================================


@pytest.mark.asyncio
class TestDelete:
    async def test_delete_returns_confirmation_message(
        self,
        service: EventService,
        repository: FakeEventRepository,
        rules: FakeEventRules,
        event: Event,
    ) -> None:
        rules.add_existing(event)

        result = await service.delete(event.id)

        assert result == EventMessages.EVENT_DELETED
        assert rules.must_exist_calls == [event.id]
        assert repository.deleted == [(event, False)]

    async def test_delete_permanent_is_passed_to_repository(
        self,
        service: EventService,
        repository: FakeEventRepository,
        rules: FakeEventRules,
        event: Event,
    ) -> None:
        rules.add_existing(event)

        await service.delete(event.id, permanent=True)

        assert repository.deleted == [(event, True)]

    async def test_delete_missing_event_raises_not_found(
        self, service: EventService, repository: FakeEventRepository
    ) -> None:
        with pytest.raises(NotFoundError):
            await service.delete(uuid4())

        assert repository.deleted == []


# ============================================================================
# get_list
# ============================================================================


@pytest.mark.asyncio
class TestGetList:
    async def test_get_list_returns_events_in_repository_order(
        self, service: EventService, repository: FakeEventRepository
    ) -> None:
        events = [
            Event(title="Event 2", description="", image_url="", participation_text="", category_id=1),
            Event(title="Event 1", description="", image_url="", participation_text="", category_id=1),
        ]
        repository.list_result = events

        result = await service.get_list()

        assert [r.title for r in result] == ["Event 2", "Event 1"]
        assert [r.id for r in result] == [e.id for e in events]

    async def test_get_list_passes_defaults_to_repository(
        self, service: EventService, repository: FakeEventRepository
    ) -> None:
        await service.get_list()

        assert repository.get_list_calls == [
            {
                "predicate": None,
                "order_by": None,
                "include": False,
                "with_deleted": False,
                "enable_tracking": True,
            }
        ]

    async def test_get_list_passes_options_unmodified(
        self, service: EventService, repository: FakeEventRepository
    ) -> None:
        def predicate(event: Event) -> bool:
            return event.category_id == 1

        def order_by(events):
            return sorted(events, key=attrgetter("title"))

        await service.get_list(
            predicate=predicate,
            order_by=order_by,
            include=True,
            with_deleted=True,
            enable_tracking=False,
        )

        (call,) = repository.get_list_calls
        assert call["predicate"] is predicate
        assert call["order_by"] is order_by
        assert call["include"] is True
        assert call["with_deleted"] is True
        assert call["enable_tracking"] is False

    async def test_get_list_maps_each_event(
        self, service: EventService, repository: FakeEventRepository, mapper: FakeMapper
    ) -> None:
        events = [
            Event(title=f"Event {i}", description="", image_url="", participation_text="", category_id=1)
            for i in range(3)
        ]
        repository.list_result = events

        await service.get_list()

        assert mapper.calls_to(EventResponse) == events

    async def test_get_list_empty_returns_empty_list(
        self, service: EventService
    ) -> None:
        assert await service.get_list() == []

    async def test_get_list_cancellation_reaches_repository(
        self, service: EventService, repository: FakeEventRepository
    ) -> None:
        """Cancelling the caller interrupts the pending repository call."""
        repository.delay = 10.0

        task = asyncio.create_task(service.get_list())
        await asyncio.sleep(0.01)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert len(repository.get_list_calls) == 1
